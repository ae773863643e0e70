# env vars + constants
import os

APP_ENV = os.getenv("APP_ENV", "development")
HOST = os.getenv("HOST", "0.0.0.0")
PORT = int(os.getenv("PORT", "8000"))

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
LOG_FILE = os.getenv("LOG_FILE", "")

# Cooldown between two accepted votes from the same browser
VOTE_COOLDOWN_MS = int(os.getenv("VOTE_COOLDOWN_MS", "60000"))
COOLDOWN_COOKIE = os.getenv("COOLDOWN_COOKIE", "lastVotedAt")
COOKIE_SECURE = APP_ENV == "production"

SUPABASE_URL = os.getenv("SUPABASE_URL", "").rstrip("/")
SUPABASE_ANON_KEY = os.getenv("SUPABASE_ANON_KEY", "")
SUPABASE_TIMEOUT = float(os.getenv("SUPABASE_TIMEOUT", "5.0"))
VOTES_TABLE = os.getenv("VOTES_TABLE", "votes")
INCREMENT_FUNCTION = os.getenv("INCREMENT_FUNCTION", "increment_vote")

STORE_BACKEND = os.getenv("STORE_BACKEND", "supabase" if SUPABASE_URL else "memory").lower()
