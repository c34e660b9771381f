from dataclasses import dataclass
from pathlib import Path

from fastapi.templating import Jinja2Templates
from sqlalchemy.engine import URL, Engine
from sqlalchemy.orm import sessionmaker

from catgallery.auth.sessions import SessionStore
from catgallery.core import config
from catgallery.database import make_engine, make_session_factory

PACKAGE_DIR = Path(__file__).resolve().parent.parent
TEMPLATES_DIR = PACKAGE_DIR / "templates"
STATIC_DIR = PACKAGE_DIR / "static"


@dataclass
class AppContext:
    """Handles shared by every request: the stores, templates and session settings."""
    engine: Engine
    session_factory: sessionmaker
    sessions: SessionStore
    templates: Jinja2Templates
    session_secret: str
    session_ttl_seconds: int
    session_cookie_name: str
    session_cookie_secure: bool


def build_context(
    database_url: str | URL | None = None,
    engine: Engine | None = None,
    session_secret: str | None = None,
    session_ttl_seconds: int | None = None,
) -> AppContext:
    engine = engine or make_engine(database_url or config.build_database_url())
    session_factory = make_session_factory(engine)
    ttl = session_ttl_seconds or config.SESSION_TTL_SECONDS
    return AppContext(
        engine=engine,
        session_factory=session_factory,
        sessions=SessionStore(session_factory, ttl_seconds=ttl),
        templates=Jinja2Templates(directory=str(TEMPLATES_DIR)),
        session_secret=session_secret or config.SESSION_SECRET,
        session_ttl_seconds=ttl,
        session_cookie_name=config.SESSION_COOKIE_NAME,
        session_cookie_secure=config.SESSION_COOKIE_SECURE,
    )
