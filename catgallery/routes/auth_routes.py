import logging

from email_validator import EmailNotValidError, validate_email
from fastapi import APIRouter, Depends, Form, Request, status
from fastapi.responses import RedirectResponse
from pydantic import BaseModel, field_validator
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.orm import Session

from catgallery.auth import users
from catgallery.auth.dependencies import end_session, establish_session, get_context, get_db, get_session_id
from catgallery.auth.passwords import hash_password, verify_password
from catgallery.core.context import AppContext
from catgallery.core.errors import AuthError, ValidationError

router = APIRouter(tags=['auth'])

logger = logging.getLogger(__name__)

NAME_MIN_LENGTH = 2
NAME_MAX_LENGTH = 30
PASSWORD_MIN_LENGTH = 5
PASSWORD_MAX_LENGTH = 50
MISSING_SIGNUP_FIELDS_MESSAGE = 'Please fill in all fields.'
MISSING_LOGIN_FIELDS_MESSAGE = 'Please enter both email and password.'


def _check_email(value: str) -> str:
    try:
        validate_email(value, check_deliverability=False)
    except EmailNotValidError as exc:
        raise ValueError('Email must be a valid email address.') from exc
    return value


def _check_password(value: str) -> str:
    if not PASSWORD_MIN_LENGTH <= len(value) <= PASSWORD_MAX_LENGTH:
        raise ValueError(
            f'Password must be between {PASSWORD_MIN_LENGTH} and {PASSWORD_MAX_LENGTH} characters long.'
        )
    return value


class SignupForm(BaseModel):
    name: str
    email: str
    password: str

    @field_validator('name')
    @classmethod
    def validate_name(cls, value: str) -> str:
        if not (value.isascii() and value.isalnum()):
            raise ValueError('Name must only contain letters and numbers.')
        if not NAME_MIN_LENGTH <= len(value) <= NAME_MAX_LENGTH:
            raise ValueError(f'Name must be between {NAME_MIN_LENGTH} and {NAME_MAX_LENGTH} characters long.')
        return value

    @field_validator('email')
    @classmethod
    def validate_email_address(cls, value: str) -> str:
        return _check_email(value)

    @field_validator('password')
    @classmethod
    def validate_password(cls, value: str) -> str:
        return _check_password(value)


class LoginForm(BaseModel):
    email: str
    password: str

    @field_validator('email')
    @classmethod
    def validate_email_address(cls, value: str) -> str:
        return _check_email(value)

    @field_validator('password')
    @classmethod
    def validate_password(cls, value: str) -> str:
        return _check_password(value)


def first_error_message(exc: PydanticValidationError) -> str:
    error = exc.errors()[0]
    cause = error.get('ctx', {}).get('error')
    return str(cause) if cause else error['msg']


def parse_signup_form(name: str | None, email: str | None, password: str | None) -> SignupForm:
    if not name or not email or not password:
        raise ValidationError(MISSING_SIGNUP_FIELDS_MESSAGE)
    try:
        return SignupForm(name=name, email=email, password=password)
    except PydanticValidationError as exc:
        raise ValidationError(first_error_message(exc)) from exc


def parse_login_form(email: str | None, password: str | None) -> LoginForm:
    if not email or not password:
        raise ValidationError(MISSING_LOGIN_FIELDS_MESSAGE)
    try:
        return LoginForm(email=email, password=password)
    except PydanticValidationError as exc:
        raise ValidationError(first_error_message(exc)) from exc


def authenticate(db: Session, email: str, password: str) -> dict:
    """Return the session snapshot for matching credentials.

    Unknown email and wrong password raise the same ``AuthError`` so the
    response never reveals whether an account exists.
    """
    user = users.find_user_by_email(db, email)
    if user is None or not verify_password(password, user.hashed_password):
        logger.warning('Failed login for %s', email)
        raise AuthError()

    return {'id': user.id, 'name': user.name, 'email': user.email, 'role': user.role}


@router.get('/signup')
def signup_form(request: Request, context: AppContext = Depends(get_context)):
    return context.templates.TemplateResponse(request, 'signup.html', {'error': None})


@router.post('/signup')
def signup(
    request: Request,
    name: str | None = Form(default=None),
    email: str | None = Form(default=None),
    password: str | None = Form(default=None),
    session_id: str | None = Depends(get_session_id),
    context: AppContext = Depends(get_context),
    db: Session = Depends(get_db),
):
    try:
        data = parse_signup_form(name, email, password)
    except ValidationError as exc:
        return context.templates.TemplateResponse(request, 'signup.html', {'error': exc.message})

    user = users.create_user(db, data.name, data.email, hash_password(data.password))

    response = RedirectResponse(url='/members', status_code=status.HTTP_302_FOUND)
    establish_session(response, context, {'name': user.name}, previous_session_id=session_id)
    return response


@router.get('/login')
def login_form(request: Request, context: AppContext = Depends(get_context)):
    return context.templates.TemplateResponse(request, 'login.html', {'error': None})


@router.post('/login')
def login(
    request: Request,
    email: str | None = Form(default=None),
    password: str | None = Form(default=None),
    session_id: str | None = Depends(get_session_id),
    context: AppContext = Depends(get_context),
    db: Session = Depends(get_db),
):
    try:
        data = parse_login_form(email, password)
        session_user = authenticate(db, data.email, data.password)
    except (ValidationError, AuthError) as exc:
        return context.templates.TemplateResponse(request, 'login.html', {'error': exc.message})

    logger.info('User %s logged in with role %s', session_user['id'], session_user['role'])
    response = RedirectResponse(url='/members', status_code=status.HTTP_302_FOUND)
    establish_session(response, context, session_user, previous_session_id=session_id)
    return response


@router.get('/logout')
def logout(
    session_id: str | None = Depends(get_session_id),
    context: AppContext = Depends(get_context),
):
    response = RedirectResponse(url='/', status_code=status.HTTP_302_FOUND)
    end_session(response, context, session_id)
    return response
