import logging

import jwt
from fastapi import Depends, Request, Response

from catgallery.auth import session_cookie
from catgallery.core.context import AppContext
from catgallery.core.errors import AuthorizationError, StoreError
from catgallery.models.user import Role

logger = logging.getLogger(__name__)


def get_context(request: Request) -> AppContext:
    return request.app.state.context


def get_db(context: AppContext = Depends(get_context)):
    db = context.session_factory()
    try:
        yield db
    finally:
        db.close()


def get_session_id(request: Request, context: AppContext = Depends(get_context)) -> str | None:
    token = request.cookies.get(context.session_cookie_name)
    if not token:
        return None
    try:
        return session_cookie.decode_session_id(token, context.session_secret)
    except jwt.InvalidTokenError as exc:
        logger.debug('Ignoring invalid session cookie: %s', exc)
        return None


def get_session_user(
    session_id: str | None = Depends(get_session_id),
    context: AppContext = Depends(get_context),
) -> dict | None:
    if session_id is None:
        return None
    data = context.sessions.get(session_id)
    if not data:
        return None
    return data.get('user')


def require_member(user: dict | None = Depends(get_session_user)) -> dict:
    if user is None:
        raise AuthorizationError(redirect_to='/')
    return user


def require_admin_page(user: dict | None = Depends(get_session_user)) -> dict:
    if user is None:
        raise AuthorizationError(redirect_to='/login')
    if user.get('role') != Role.ADMIN.value:
        raise AuthorizationError()
    return user


def require_admin(user: dict | None = Depends(get_session_user)) -> dict:
    if user is None or user.get('role') != Role.ADMIN.value:
        raise AuthorizationError()
    return user


def establish_session(
    response: Response,
    context: AppContext,
    user: dict,
    previous_session_id: str | None = None,
) -> str:
    """Start a fresh session holding ``user`` and point the cookie at it.

    Any session the browser already carried is destroyed first, so a cookie
    planted before login never becomes an authenticated session.
    """
    if previous_session_id is not None:
        try:
            context.sessions.destroy(previous_session_id)
        except StoreError:
            logger.exception('Error destroying previous session')
    session_id = context.sessions.create({'user': user})
    response.set_cookie(
        key=context.session_cookie_name,
        value=session_cookie.encode_session_id(session_id, context.session_secret),
        httponly=True,
        samesite='lax',
        secure=context.session_cookie_secure,
    )
    return session_id


def end_session(response: Response, context: AppContext, session_id: str | None) -> None:
    """Destroy the session record and clear the cookie. Failures are logged, never raised."""
    response.delete_cookie(key=context.session_cookie_name)
    if session_id is None:
        return
    try:
        context.sessions.destroy(session_id)
    except StoreError:
        logger.exception('Error destroying session')
