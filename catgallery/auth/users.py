import logging

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from catgallery.core.errors import ConflictError, StoreError
from catgallery.models.user import Role, User

logger = logging.getLogger(__name__)


def create_user(db: Session, name: str, email: str, hashed_password: str) -> User:
    user = User(name=name, email=email, hashed_password=hashed_password, role=Role.USER.value)
    try:
        db.add(user)
        db.commit()
        db.refresh(user)
    except IntegrityError as exc:
        db.rollback()
        raise ConflictError('A user with this email already exists.') from exc
    except SQLAlchemyError as exc:
        db.rollback()
        raise StoreError('Could not create user.') from exc

    logger.info('Created user %s (%s)', user.id, user.email)
    return user


def find_user_by_email(db: Session, email: str) -> User | None:
    try:
        return db.query(User).filter(User.email == email).first()
    except SQLAlchemyError as exc:
        raise StoreError('Could not look up user.') from exc


def list_users(db: Session) -> list[User]:
    try:
        return db.query(User).order_by(User.id.asc()).all()
    except SQLAlchemyError as exc:
        raise StoreError('Could not list users.') from exc


def set_role(db: Session, user_id: int, role: Role) -> int:
    """Set a user's role. Returns the number of rows changed; 0 when the id is unknown."""
    try:
        updated = db.query(User).filter(User.id == user_id).update(
            {User.role: role.value},
            synchronize_session=False,
        )
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        raise StoreError('Could not update user role.') from exc

    logger.info('Set role of user %s to %s (%s row(s) changed)', user_id, role.value, updated)
    return updated
