from datetime import datetime, timezone

import jwt

from catgallery.core import config


def encode_session_id(session_id: str, secret: str) -> str:
    # No exp claim: the server record owns expiry and slides it on every read.
    payload = {"sid": session_id, "iat": datetime.now(timezone.utc)}
    return jwt.encode(payload, secret, algorithm=config.SESSION_ALGORITHM)


def decode_session_id(token: str, secret: str) -> str:
    payload = jwt.decode(token, secret, algorithms=[config.SESSION_ALGORITHM])
    session_id = payload.get("sid")
    if not session_id:
        raise jwt.InvalidTokenError("Cookie carries no session id")
    return session_id
