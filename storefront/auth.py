import logging
from datetime import datetime, timedelta, timezone
from typing import Optional

from fastapi import APIRouter, Depends, Request, Response
from jose import jwt, JWTError
from passlib.context import CryptContext
from passlib.exc import UnknownHashError

from .config import Settings
from .errors import ConflictError, InvalidInput, ServiceUnavailable, Unauthenticated
from .models import User
from .ratelimit import rate_limit
from .schemas import AuthResponse, LoginRequest, MeResponse, SignupRequest, SuccessResponse, UserOut
from .stores import Stores, get_stores

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/auth", tags=["auth"])

# Argon2 for new hashes; bcrypt stays in the context so older hashes still verify
pwd_context = CryptContext(schemes=["argon2", "bcrypt"], deprecated="auto")

MIN_PASSWORD_LENGTH = 6


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_password_hash(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    try:
        return pwd_context.verify(plain_password, hashed_password)
    except (UnknownHashError, ValueError):
        # unrecognised or corrupted hash counts as a failed login, not a 500
        return False


def create_access_token(user: User, settings: Settings) -> str:
    expire = datetime.now(timezone.utc) + timedelta(minutes=settings.access_token_expire_minutes)
    to_encode = {"sub": str(user.id), "email": user.email, "name": user.name, "exp": expire}
    return jwt.encode(to_encode, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def decode_access_token(token: str, settings: Settings) -> Optional[dict]:
    try:
        return jwt.decode(token, settings.jwt_secret, algorithms=[settings.jwt_algorithm])
    except JWTError:
        return None


def token_from_request(request: Request, cookie_name: str) -> Optional[str]:
    """Bearer header first, then the auth cookie."""
    auth = request.headers.get("Authorization")
    if auth and auth.lower().startswith("bearer "):
        return auth.split(None, 1)[1].strip()
    return request.cookies.get(cookie_name)


async def get_optional_user(
    request: Request,
    stores: Stores = Depends(get_stores),
    settings: Settings = Depends(get_settings),
) -> Optional[User]:
    """Resolve the caller or return None. Invalid tokens count as anonymous."""
    token = token_from_request(request, settings.auth_cookie_name)
    if not token:
        return None
    payload = decode_access_token(token, settings)
    if payload is None:
        return None
    try:
        user_id = int(payload.get("sub"))
    except (TypeError, ValueError):
        return None
    return await stores.users.get(user_id)


async def get_current_user(user: Optional[User] = Depends(get_optional_user)) -> User:
    if user is None:
        raise Unauthenticated()
    return user


def _issue_session(response: Response, user: User, settings: Settings) -> AuthResponse:
    access_token = create_access_token(user, settings)
    response.set_cookie(
        settings.auth_cookie_name,
        access_token,
        max_age=settings.access_token_expire_minutes * 60,
        path="/",
        httponly=True,
        samesite="lax",
        secure=settings.cookie_secure,
    )
    return AuthResponse(user=UserOut.model_validate(user), access_token=access_token)


@router.post("/signup", response_model=AuthResponse, dependencies=[Depends(rate_limit("auth"))])
async def signup(
    payload: SignupRequest,
    response: Response,
    stores: Stores = Depends(get_stores),
    settings: Settings = Depends(get_settings),
):
    name = payload.name.strip()
    if not payload.password or not name:
        raise InvalidInput("Email, password and name are required")
    if len(payload.password) < MIN_PASSWORD_LENGTH:
        raise InvalidInput(f"Password must be at least {MIN_PASSWORD_LENGTH} characters")

    if await stores.users.find_by_email(payload.email) is not None:
        raise InvalidInput("Email already registered")

    try:
        password_hash = get_password_hash(payload.password)
    except Exception:
        # hashing backend missing or broken inside the container
        logger.exception("Password hashing failed")
        raise ServiceUnavailable("Authentication service temporarily unavailable")

    try:
        user = await stores.users.create(email=payload.email, password_hash=password_hash, name=name)
    except ConflictError:
        raise InvalidInput("Email already registered")

    logger.info("User signed up", extra={"user_id": user.id})
    return _issue_session(response, user, settings)


@router.post("/login", response_model=AuthResponse, dependencies=[Depends(rate_limit("auth"))])
async def login(
    payload: LoginRequest,
    response: Response,
    stores: Stores = Depends(get_stores),
    settings: Settings = Depends(get_settings),
):
    if not payload.email or not payload.password:
        raise InvalidInput("Email and password are required")

    user = await stores.users.find_by_email(payload.email)
    if user is None or not verify_password(payload.password, user.password_hash):
        raise Unauthenticated("Invalid email or password")

    return _issue_session(response, user, settings)


@router.post("/logout", response_model=SuccessResponse)
async def logout(response: Response, settings: Settings = Depends(get_settings)):
    response.delete_cookie(settings.auth_cookie_name, path="/")
    return SuccessResponse()


@router.get("/me", response_model=MeResponse)
async def me(user: Optional[User] = Depends(get_optional_user)):
    return MeResponse(user=UserOut.model_validate(user) if user is not None else None)
