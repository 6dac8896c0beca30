"""
Central configuration - reads from .env file.

Only the outer layers (visual identification, carbon scoring, HTTP API) need
an API key. The scraping core reads nothing but USER_AGENT from here.
"""
import os
from dotenv import load_dotenv

load_dotenv()

# ── Generative model (Google Gemini) ──────────────────────────────────────────
# Used for product identification, the ingredient fallback and carbon scoring.
# Not read at import time by anything else - missing key only fails on first use.
GOOGLE_API_KEY: str | None = os.getenv("GOOGLE_API_KEY") or os.getenv("GEMINI_API_KEY")
GEMINI_MODEL: str          = os.getenv("GEMINI_MODEL", "gemini-2.0-flash")

# ── Scraping ──────────────────────────────────────────────────────────────────
# Some retailers reject requests without a browser identity, so every source
# is fetched with the same desktop Chrome User-Agent.
USER_AGENT: str = os.getenv(
    "USER_AGENT",
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/91.0.4472.124 Safari/537.36",
)

# Deadline wrapped around the whole source walk by the analyzer.
# The scraper itself never times out; 0 disables the deadline.
SCRAPE_DEADLINE_SECONDS: float = float(os.getenv("SCRAPE_DEADLINE_SECONDS", "60"))

# ── HTTP API ──────────────────────────────────────────────────────────────────
API_HOST: str = os.getenv("API_HOST", "0.0.0.0")
API_PORT: int = int(os.getenv("API_PORT", "5000"))

# Upper bound on a decoded / downloaded product photo
MAX_IMAGE_BYTES: int = int(os.getenv("MAX_IMAGE_BYTES", str(10 * 1024 * 1024)))

LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()
