# services/ai/json_helpers.py
import json
import re
import unicodedata
from typing import Any, Dict

# Optional markers a prompt may ask the model to wrap its JSON in
S = "<<<AI_JSON_START>>>"
E = "<<<AI_JSON_END>>>"

_TRAILING_COMMA = re.compile(r",(\s*[}\]])")
_OUTER_OBJECT = re.compile(r"\{[\s\S]*\}")


def clean_control_chars(s: str) -> str:
    return "".join(ch for ch in s if ch in "\n\t" or unicodedata.category(ch)[0] != "C")


def strip_code_fences(s: str) -> str:
    s = s.strip()
    if s.startswith("```"):
        s = s.split("\n", 1)[1] if "\n" in s else ""
    if s.endswith("```"):
        s = s[:-3]
    return s.strip()


def _loads_lenient(text: str) -> Any:
    try:
        return json.loads(text)
    except json.JSONDecodeError:
        pass
    # trailing commas before '}' or ']'
    text2 = _TRAILING_COMMA.sub(r"\1", text)
    try:
        return json.loads(text2)
    except json.JSONDecodeError:
        # prose around the object: keep the outermost {...}
        m = _OUTER_OBJECT.search(text2)
        if not m:
            raise
        return json.loads(m.group(0))


def extract_json_object(text: Any) -> Dict[str, Any]:
    """
    Parse a JSON object out of raw model output.

    Handles sentinels, code fences, control characters, trailing commas,
    surrounding prose and double-encoded JSON strings. Raises ValueError
    (json.JSONDecodeError is a subclass) when no object can be recovered.
    """
    if isinstance(text, dict):
        return text
    if text is None:
        raise ValueError("Empty LLM response (None)")
    if not isinstance(text, str):
        text = str(text)
    if S in text and E in text:
        text = text.split(S, 1)[1].split(E, 1)[0]

    text = strip_code_fences(clean_control_chars(text))
    if not text:
        raise ValueError("Empty LLM response (blank)")

    obj = _loads_lenient(text)
    # models sometimes double-encode JSON as a string
    if isinstance(obj, str):
        obj = _loads_lenient(obj)
    if not isinstance(obj, dict):
        raise ValueError("Expected a JSON object")
    return obj
