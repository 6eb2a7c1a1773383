import unittest

from schemas.portfolio_analysis import FundHolding
from services.portfolio.portfolio_analyzer import (
    InvalidPortfolioError,
    analyze_portfolio,
    analyze_portfolio_detailed,
    coerce_funds,
)


def _fund(name, amount, *holdings):
    return {
        "name": name,
        "amount": amount,
        "holdings": [{"company": c, "sector": s, "weight": w} for c, s, w in holdings],
    }


EMPTY_DETAILED = {
    "totalFunds": 0,
    "totalInvestment": 0,
    "overlappingShares": [],
    "overlappingSectors": [],
    "diversificationScore": 0,
    "potentialSectors": [],
    "fundRecommendations": [],
}


class TestAnalyzePortfolio(unittest.TestCase):
    def test_empty_portfolio_returns_zeroed_analysis(self):
        result = analyze_portfolio([], "Conservative")
        self.assertEqual(result.totalInvestment, 0)
        self.assertEqual(result.sectorDistribution, [])
        self.assertEqual(result.companyExposure, [])
        self.assertEqual(result.sectorExposure, {})
        self.assertEqual(result.overlapWarnings, [])
        self.assertEqual(result.warnings, [])
        self.assertEqual(result.riskProfile, "Conservative")

    def test_none_funds_is_empty(self):
        self.assertEqual(analyze_portfolio(None).totalInvestment, 0)

    def test_zero_amount_funds_are_treated_as_empty(self):
        result = analyze_portfolio([_fund("A", 0, ("X", "IT", 50))])
        self.assertEqual(result.sectorExposure, {})
        self.assertEqual(result.warnings, [])

    def test_sector_percentages_sum_to_hundred_for_fully_invested_funds(self):
        funds = [
            _fund("A", 30000, ("X", "IT", 40), ("Y", "Banking", 35), ("Z", "FMCG", 25)),
            _fund("B", 70000, ("X", "IT", 20), ("W", "Energy", 50), ("V", "Pharma", 30)),
        ]
        result = analyze_portfolio(funds)
        self.assertAlmostEqual(sum(result.sectorExposure.values()), 100.0, delta=0.5)
        self.assertAlmostEqual(sum(s.value for s in result.sectorDistribution), 100.0, delta=0.5)
        self.assertEqual(result.totalInvestment, 100000)

    def test_distribution_sorted_descending(self):
        funds = [_fund("A", 1000, ("X", "IT", 10), ("Y", "Banking", 60), ("Z", "FMCG", 30))]
        result = analyze_portfolio(funds)
        self.assertEqual([s.name for s in result.sectorDistribution], ["Banking", "FMCG", "IT"])
        self.assertEqual([c.name for c in result.companyExposure], ["Y", "Z", "X"])
        self.assertEqual(result.sectorDistribution[0].value, 60.0)
        self.assertEqual(result.companyExposure[0].exposure, 60.0)

    def test_sector_exposure_keeps_first_appearance_order(self):
        funds = [_fund("A", 1000, ("X", "IT", 10), ("Y", "Banking", 60))]
        result = analyze_portfolio(funds)
        self.assertEqual(list(result.sectorExposure), ["IT", "Banking"])

    def test_full_overlap_generates_all_warning_kinds(self):
        funds = [
            _fund("Fund A", 50000, ("X", "Tech", 100)),
            _fund("Fund B", 50000, ("X", "Tech", 100)),
        ]
        result = analyze_portfolio(funds)

        self.assertEqual(len(result.overlapWarnings), 1)
        self.assertEqual(result.overlapWarnings[0].company, "X")
        self.assertEqual(result.overlapWarnings[0].fundCount, 2)
        self.assertEqual(result.overlapWarnings[0].exposure, 100.0)

        self.assertEqual([w.type for w in result.warnings], ["sector", "overlap", "diversification"])
        self.assertEqual(
            result.warnings[0].message,
            "Tech sector represents 100.0% of your portfolio, which exceeds the recommended 40% "
            "for balanced investors.",
        )
        self.assertEqual(
            result.warnings[1].message,
            "X appears in 2 funds with 100% total exposure, reducing diversification benefits.",
        )
        self.assertEqual(
            result.warnings[2].message,
            "Your portfolio spans only 1 sectors. Consider adding funds in other sectors for "
            "better diversification.",
        )

    def test_overlap_warnings_keep_first_appearance_order(self):
        funds = [
            _fund("F1", 100, ("A", "S1", 10), ("B", "S2", 10)),
            _fund("F2", 100, ("B", "S2", 5), ("A", "S1", 5)),
            _fund("F3", 100, ("B", "S2", 5)),
        ]
        result = analyze_portfolio(funds)
        self.assertEqual([o.company for o in result.overlapWarnings], ["A", "B"])

    def test_unknown_risk_profile_resolves_to_balanced(self):
        funds = [_fund("A", 100, ("X", "IT", 45), ("Y", "B", 55))]
        result = analyze_portfolio(funds, "Reckless")
        self.assertEqual(result.riskProfile, "Balanced")

    def test_repeated_calls_are_identical(self):
        funds = [
            _fund("A", 12345.67, ("X", "IT", 33.3), ("Y", "Banking", 41.2)),
            _fund("B", 9876.54, ("X", "IT", 12.5), ("Z", "Energy", 60)),
        ]
        self.assertEqual(analyze_portfolio(funds).to_dict(), analyze_portfolio(funds).to_dict())
        self.assertEqual(
            analyze_portfolio_detailed(funds).to_dict(),
            analyze_portfolio_detailed(funds).to_dict(),
        )

    def test_invalid_record_raises(self):
        with self.assertRaises(InvalidPortfolioError):
            analyze_portfolio([_fund("A", -5, ("X", "IT", 10))])
        with self.assertRaises(InvalidPortfolioError):
            analyze_portfolio([{"name": "A", "amount": 100, "holdings": [{"company": "X", "weight": 10}]}])
        with self.assertRaises(InvalidPortfolioError):
            analyze_portfolio([_fund("A", 100, ("X", "IT", 150))])

    def test_coerce_accepts_models_and_mappings(self):
        model = FundHolding(name="A", amount=10, holdings=[])
        out = coerce_funds([model, {"name": "B", "amount": 5}])
        self.assertIs(out[0], model)
        self.assertEqual(out[1].name, "B")
        self.assertEqual(out[1].holdings, [])


class TestAnalyzePortfolioDetailed(unittest.TestCase):
    def test_empty_portfolio_has_exact_empty_shape(self):
        self.assertEqual(analyze_portfolio_detailed([]).to_dict(), EMPTY_DETAILED)
        self.assertEqual(analyze_portfolio_detailed(None).to_dict(), EMPTY_DETAILED)

    def test_funds_with_nothing_invested_keep_fund_count(self):
        result = analyze_portfolio_detailed([_fund("A", 0, ("X", "IT", 10)), _fund("B", 0)])
        self.assertEqual(result.to_dict(), {**EMPTY_DETAILED, "totalFunds": 2})

    def test_no_overlap(self):
        funds = [
            _fund("X", 100, ("A", "S1", 50), ("B", "S2", 50)),
            _fund("Y", 100, ("C", "S3", 50), ("D", "S4", 50)),
        ]
        result = analyze_portfolio_detailed(funds)
        self.assertEqual(result.overlappingShares, [])
        self.assertEqual(result.overlappingSectors, [])
        self.assertEqual(result.uniqueSectors, 4)
        self.assertEqual(result.uniqueShares, 4)

        score = result.score
        self.assertEqual(score.sectorDiversity, 12)
        self.assertEqual(score.shareDiversity, 5)
        self.assertEqual(score.concentrationScore, 23)
        self.assertEqual(score.overall, 40)
        self.assertEqual(score.assessment.level, "Fair")

    def test_full_overlap(self):
        funds = [
            _fund("Fund A", 50000, ("X", "Tech", 100)),
            _fund("Fund B", 50000, ("X", "Tech", 100)),
        ]
        result = analyze_portfolio_detailed(funds)

        self.assertEqual(len(result.overlappingShares), 1)
        share = result.overlappingShares[0]
        self.assertEqual(share.company, "X")
        self.assertEqual(share.numberOfFunds, 2)
        self.assertEqual(share.funds, ["Fund A", "Fund B"])
        self.assertEqual(share.totalExposurePercent, 100.0)
        self.assertEqual(share.averageWeight, 100.0)
        self.assertEqual([d.exposure for d in share.fundDetails], [50000.0, 50000.0])

        self.assertEqual(result.overlappingSectors[0].sector, "Tech")
        self.assertEqual(result.score.concentrationScore, 0)
        self.assertEqual(result.score.overall, 4)
        self.assertEqual(result.score.assessment.level, "Poor")

    def test_overlapping_shares_sorted_by_fund_count(self):
        funds = [
            _fund("F1", 100, ("A", "S1", 10), ("B", "S2", 10)),
            _fund("F2", 100, ("B", "S2", 5), ("A", "S1", 5)),
            _fund("F3", 100, ("B", "S2", 5)),
        ]
        result = analyze_portfolio_detailed(funds)
        self.assertEqual([s.company for s in result.overlappingShares], ["B", "A"])
        self.assertEqual(result.overlappingShares[0].numberOfFunds, 3)

    def test_company_held_twice_in_one_fund_counts_once(self):
        single = analyze_portfolio_detailed([_fund("F1", 100, ("A", "S1", 10), ("A", "S1", 5))])
        self.assertEqual(single.overlappingShares, [])

        funds = [
            _fund("F1", 100, ("A", "S1", 10), ("A", "S1", 5)),
            _fund("F2", 100, ("A", "S1", 10)),
        ]
        share = analyze_portfolio_detailed(funds).overlappingShares[0]
        self.assertEqual(share.numberOfFunds, 2)
        self.assertEqual(share.funds, ["F1", "F2"])
        self.assertEqual(len(share.fundDetails), 3)
        self.assertEqual(share.averageWeight, 8.33)
        self.assertEqual(share.totalExposurePercent, 12.5)

    def test_potential_sectors_and_recommendations(self):
        funds = [_fund("A", 100, ("X", "Banking", 50), ("Y", "Financial Services", 50))]
        result = analyze_portfolio_detailed(funds)
        names = [p.sector for p in result.potentialSectors]
        self.assertNotIn("Banking", names)
        self.assertNotIn("Financial Services", names)
        self.assertEqual(len(names), 18)
        self.assertEqual(names[0], "Information Technology")

        self.assertEqual(len(result.fundRecommendations), 5)
        self.assertEqual(
            [r.sector for r in result.fundRecommendations],
            names[:5],
        )

    def test_adding_a_fund_with_the_same_company_grows_the_overlap(self):
        base = [
            _fund("F1", 1000, ("A", "S1", 20), ("B", "S2", 80)),
            _fund("F2", 1000, ("A", "S1", 10), ("C", "S3", 90)),
        ]
        more = base + [_fund("F3", 500, ("A", "S1", 40), ("D", "S4", 60))]

        before = analyze_portfolio_detailed(base).overlappingShares[0]
        after = analyze_portfolio_detailed(more).overlappingShares[0]
        self.assertEqual(after.company, "A")
        self.assertEqual(after.numberOfFunds, before.numberOfFunds + 1)
        self.assertGreaterEqual(
            sum(d.exposure for d in after.fundDetails),
            sum(d.exposure for d in before.fundDetails),
        )

    def test_adding_a_new_sector_never_lowers_sector_diversity(self):
        base = [_fund("A", 100, ("X", "IT", 50), ("Y", "Banking", 50))]
        more = base + [_fund("B", 100, ("Z", "Energy", 100))]
        self.assertGreaterEqual(
            analyze_portfolio_detailed(more).score.sectorDiversity,
            analyze_portfolio_detailed(base).score.sectorDiversity,
        )


if __name__ == "__main__":
    unittest.main()
