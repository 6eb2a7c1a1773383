# main.py
import os

from dotenv import load_dotenv

load_dotenv()

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from config.logging_config import configure_logging
from middleware.request_logging import RequestLoggingMiddleware
from routers.ai_routes import router as ai_router
from routers.funds_routes import router as funds_router
from routers.portfolio_routes import router as portfolio_router

configure_logging()

app = FastAPI(title="Fund Overlap Analyzer")

origins = [
    o.strip()
    for o in (os.getenv("CORS_ORIGINS") or "http://localhost:3000,http://localhost:5173").split(",")
    if o.strip()
]

app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["*"],
)
app.add_middleware(RequestLoggingMiddleware)

# Include routers
app.include_router(funds_router, prefix="/api/funds")
app.include_router(portfolio_router, prefix="/api/portfolio")
app.include_router(ai_router, prefix="/api/ai")


@app.get("/health")
def health() -> dict:
    return {"status": "ok"}
