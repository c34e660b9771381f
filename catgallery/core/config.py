import os

from dotenv import load_dotenv
from sqlalchemy.engine import URL


load_dotenv()


def _get_bool(value: str | None, default: bool = False) -> bool:
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}

APP_ENV = os.getenv("APP_ENV", "development")
PORT = int(os.getenv("PORT", "3000"))

DATABASE_URL = os.getenv("DATABASE_URL")
DB_DRIVER = os.getenv("DB_DRIVER", "postgresql")
DB_USER = os.getenv("DB_USER")
DB_PASSWORD = os.getenv("DB_PASSWORD")
DB_HOST = os.getenv("DB_HOST")
DB_NAME = os.getenv("DB_NAME")
SQLITE_FALLBACK_URL = "sqlite:///./catgallery.db"

SESSION_SECRET = os.getenv("SESSION_SECRET", "change-me")
SESSION_ALGORITHM = os.getenv("SESSION_ALGORITHM", "HS256")
SESSION_TTL_SECONDS = int(os.getenv("SESSION_TTL_SECONDS", "3600"))
SESSION_COOKIE_NAME = os.getenv("SESSION_COOKIE_NAME", "catgallery.sid")
SESSION_COOKIE_SECURE = _get_bool(os.getenv("SESSION_COOKIE_SECURE"), default=False)

PASSWORD_HASH_ROUNDS = int(os.getenv("PASSWORD_HASH_ROUNDS", "10"))


def build_database_url(
    database_url: str | None = DATABASE_URL,
    driver: str = DB_DRIVER,
    user: str | None = DB_USER,
    password: str | None = DB_PASSWORD,
    host: str | None = DB_HOST,
    name: str | None = DB_NAME,
) -> str | URL:
    """Resolve the store location: explicit URL, then composed parts, then SQLite."""
    if database_url:
        return database_url
    if host:
        return URL.create(
            drivername=driver,
            username=user,
            password=password,
            host=host,
            database=name,
        )
    return SQLITE_FALLBACK_URL


def validate_runtime_config() -> None:
    if APP_ENV.lower() == "production" and SESSION_SECRET == "change-me":
        raise RuntimeError("SESSION_SECRET must be set in production.")
