import os
from dotenv import load_dotenv
from loguru import logger

load_dotenv()

def _get_env(key: str, default: str | None = None) -> str:
    val = os.getenv(key, default)
    if val is None:
        raise RuntimeError(f"Missing required env var: {key}")
    return val

def _get_bool(key: str, default: str) -> bool:
    return _get_env(key, default).strip().lower() in ("1", "true", "yes")

APP_ENV = _get_env("APP_ENV", "local")
DATABASE_URL = _get_env("DATABASE_URL", "sqlite:///./data/campuslease.db")
LOG_LEVEL = _get_env("LOG_LEVEL", "INFO")
LOG_FILE = _get_env("LOG_FILE", "logs/app.log")
PORT = int(_get_env("PORT", "3001"))

# --------------------------------------------------
# AUTH
# --------------------------------------------------

JWT_SECRET = _get_env("JWT_SECRET", "dev-secret")
JWT_ALGORITHM = "HS256"
JWT_EXPIRES_DAYS = int(_get_env("JWT_EXPIRES_DAYS", "7"))

USER_COOKIE = "campuslease_token"
ADMIN_COOKIE = "campuslease_admin"

ADMIN_EMAIL = _get_env("ADMIN_EMAIL", "admin@campuslease.com")
ADMIN_PASSWORD = _get_env("ADMIN_PASSWORD", "change-me-admin")

# --------------------------------------------------
# CORS / COOKIES
# --------------------------------------------------

FRONTEND_URL = _get_env("FRONTEND_URL", "")
CORS_ORIGINS = [entry.strip() for entry in FRONTEND_URL.split(",") if entry.strip()]

COOKIE_SECURE = _get_bool("COOKIE_SECURE", "false") or bool(
    FRONTEND_URL
    and "localhost" not in FRONTEND_URL
    and "127.0.0.1" not in FRONTEND_URL
)
COOKIE_SAMESITE = "none" if COOKIE_SECURE else "lax"

# --------------------------------------------------
# STARTUP
# --------------------------------------------------

SEED_EXAMPLE_LISTINGS = _get_bool("SEED_EXAMPLE_LISTINGS", "true")

logger.debug(
    f"Config loaded: APP_ENV={APP_ENV}, DATABASE_URL={DATABASE_URL}, "
    f"LOG_LEVEL={LOG_LEVEL}, COOKIE_SECURE={COOKIE_SECURE}"
)
