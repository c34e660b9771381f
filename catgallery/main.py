import logging

import uvicorn
from fastapi import FastAPI, Request, status
from fastapi.exception_handlers import http_exception_handler
from fastapi.responses import PlainTextResponse, RedirectResponse
from fastapi.staticfiles import StaticFiles
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from catgallery.auth.dependencies import get_context
from catgallery.core import config
from catgallery.core.context import STATIC_DIR, build_context
from catgallery.core.errors import AuthorizationError, ConflictError, StoreError
from catgallery.database import init_schema
from catgallery.routes import admin_routes, auth_routes, page_routes

logger = logging.getLogger(__name__)


def create_app(
    database_url: str | None = None,
    engine: Engine | None = None,
    session_secret: str | None = None,
    session_ttl_seconds: int | None = None,
) -> FastAPI:
    config.validate_runtime_config()

    context = build_context(
        database_url=database_url,
        engine=engine,
        session_secret=session_secret,
        session_ttl_seconds=session_ttl_seconds,
    )

    app = FastAPI()
    app.state.context = context

    @app.on_event('startup')
    def initialize_database() -> None:
        try:
            init_schema(context.engine)
            context.sessions.purge_expired()
        except (SQLAlchemyError, StoreError):
            logger.exception('Database initialization failed. Check DATABASE_URL or the DB_* settings.')

    @app.exception_handler(AuthorizationError)
    async def authorization_error_handler(request: Request, exc: AuthorizationError):
        if exc.redirect_to:
            return RedirectResponse(url=exc.redirect_to, status_code=status.HTTP_302_FOUND)
        return PlainTextResponse('Not authorized', status_code=status.HTTP_403_FORBIDDEN)

    @app.exception_handler(StoreError)
    async def store_error_handler(request: Request, exc: StoreError):
        if isinstance(exc, ConflictError):
            logger.warning('Store conflict on %s: %s', request.url.path, exc)
            status_code = status.HTTP_409_CONFLICT
        else:
            logger.error('Store failure on %s', request.url.path, exc_info=exc)
            status_code = status.HTTP_503_SERVICE_UNAVAILABLE
        return get_context(request).templates.TemplateResponse(
            request,
            'error.html',
            {'message': str(exc)},
            status_code=status_code,
        )

    @app.exception_handler(StarletteHTTPException)
    async def not_found_handler(request: Request, exc: StarletteHTTPException):
        # Unrouted methods count as unmatched too.
        if exc.status_code not in (status.HTTP_404_NOT_FOUND, status.HTTP_405_METHOD_NOT_ALLOWED):
            return await http_exception_handler(request, exc)
        return get_context(request).templates.TemplateResponse(
            request,
            '404.html',
            {},
            status_code=status.HTTP_404_NOT_FOUND,
        )

    app.mount('/static', StaticFiles(directory=str(STATIC_DIR), check_dir=False), name='static')
    app.include_router(page_routes.router)
    app.include_router(auth_routes.router)
    app.include_router(admin_routes.router)

    return app


app = create_app()


if __name__ == '__main__':
    logging.basicConfig(level=logging.INFO)
    uvicorn.run(app, host='0.0.0.0', port=config.PORT)
