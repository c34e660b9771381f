"""Server-side session storage.

Sessions live in the ``sessions`` table next to the users. The browser only
holds the opaque id (see ``session_cookie``); everything else, including the
user snapshot taken at login, stays here until logout or expiry.
"""

import logging
import secrets
from datetime import datetime, timedelta, timezone
from typing import Callable

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker

from catgallery.core.errors import StoreError
from catgallery.models.session import SessionRecord

logger = logging.getLogger(__name__)


def utcnow() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


class SessionStore:
    """Creates, reads and destroys session records with a fixed TTL.

    Expiry is idle time: every successful ``get`` pushes ``expires_at`` a full
    TTL past the read. Expired records read back as ``None`` and are deleted
    on the spot; ``purge_expired`` clears the rest.
    """

    def __init__(
        self,
        session_factory: sessionmaker,
        ttl_seconds: int,
        clock: Callable[[], datetime] = utcnow,
    ):
        self.session_factory = session_factory
        self.ttl = timedelta(seconds=ttl_seconds)
        self.clock = clock

    def create(self, data: dict) -> str:
        session_id = secrets.token_urlsafe(32)
        db = self.session_factory()
        try:
            db.add(SessionRecord(id=session_id, data=data, expires_at=self.clock() + self.ttl))
            db.commit()
        except SQLAlchemyError as exc:
            db.rollback()
            raise StoreError("Could not create session.") from exc
        finally:
            db.close()
        return session_id

    def get(self, session_id: str) -> dict | None:
        db = self.session_factory()
        try:
            record = db.get(SessionRecord, session_id)
            if record is None:
                return None
            now = self.clock()
            if record.expires_at <= now:
                db.delete(record)
                db.commit()
                return None
            record.expires_at = now + self.ttl
            data = dict(record.data or {})
            db.commit()
            return data
        except SQLAlchemyError as exc:
            db.rollback()
            raise StoreError("Could not read session.") from exc
        finally:
            db.close()

    def destroy(self, session_id: str) -> None:
        db = self.session_factory()
        try:
            db.query(SessionRecord).filter(SessionRecord.id == session_id).delete(synchronize_session=False)
            db.commit()
        except SQLAlchemyError as exc:
            db.rollback()
            raise StoreError("Could not destroy session.") from exc
        finally:
            db.close()

    def purge_expired(self) -> int:
        db = self.session_factory()
        try:
            removed = db.query(SessionRecord).filter(SessionRecord.expires_at <= self.clock()).delete(
                synchronize_session=False,
            )
            db.commit()
        except SQLAlchemyError as exc:
            db.rollback()
            raise StoreError("Could not purge sessions.") from exc
        finally:
            db.close()
        if removed:
            logger.info('Purged %s expired sessions', removed)
        return removed
