from sqlalchemy import create_engine
from sqlalchemy.engine import URL, Engine
from sqlalchemy.orm import declarative_base, sessionmaker


Base = declarative_base()


def make_engine(database_url: str | URL) -> Engine:
    url = database_url if isinstance(database_url, URL) else str(database_url)
    if str(url).startswith("sqlite"):
        # request handlers run in FastAPI's threadpool
        return create_engine(url, connect_args={"check_same_thread": False})
    return create_engine(url, pool_pre_ping=True)


def make_session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(
        autocommit=False,
        autoflush=False,
        expire_on_commit=False,
        bind=engine,
    )


def init_schema(engine: Engine) -> None:
    # model modules register their tables on Base.metadata when imported
    from catgallery.models import session, user  # noqa: F401

    Base.metadata.create_all(bind=engine)
