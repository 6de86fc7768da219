"""Centralised runtime configuration loaded from environment variables."""

import os

# Empty → in-process MemoryStore
REDIS_URL: str = os.getenv("REDIS_URL", "")

SIMILARITY_THRESHOLD: float = float(os.getenv("SIMILARITY_THRESHOLD", "85"))
CLOSE_MATCH_THRESHOLD: float = float(os.getenv("CLOSE_MATCH_THRESHOLD", "70"))
TOP_N_RESULTS: int = int(os.getenv("TOP_N_RESULTS", "10"))

SESSION_TTL_SECONDS: int = int(os.getenv("SESSION_TTL_SECONDS", str(24 * 60 * 60)))
PROMPT_TTL_SECONDS: int = int(os.getenv("PROMPT_TTL_SECONDS", str(30 * 24 * 60 * 60)))

STORE_MAX_RETRIES: int = int(os.getenv("STORE_MAX_RETRIES", "2"))
STORE_RETRY_DELAY_MS: int = int(os.getenv("STORE_RETRY_DELAY_MS", "100"))

MIN_GUESS_LENGTH: int = int(os.getenv("MIN_GUESS_LENGTH", "1"))
MAX_GUESS_LENGTH: int = int(os.getenv("MAX_GUESS_LENGTH", "100"))

GAME_SESSION_TTL_SECONDS: int = int(os.getenv("GAME_SESSION_TTL_SECONDS", str(60 * 60)))
