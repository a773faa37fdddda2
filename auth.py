"""Authentication service and authorization dependencies.

Passwords are stored as salted one-way hashes. Tokens are JWTs carrying the
user's email and role, valid for ``ACCESS_TOKEN_EXPIRE_MINUTES`` (two hours
by default) and signed with ``SECRET_KEY``.
"""
import logging
import os
from datetime import datetime, timedelta, timezone
from typing import Optional, Tuple

from dotenv import load_dotenv
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt
from passlib.context import CryptContext

import models
from database import db_dependency
from exceptions import (DuplicateEmailError, InvalidEmailError, InvalidPasswordError,
                        InvalidTokenError)
from repositories import UserRepository
from schemas import UserCreate

load_dotenv()

logger = logging.getLogger("blog_api.auth")

SECRET_KEY = os.getenv("SECRET_KEY")
ALGORITHM = os.getenv("ALGORITHM", "HS256")
ACCESS_TOKEN_EXPIRE_MINUTES = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", "120"))

if not SECRET_KEY:
    raise ValueError("SECRET_KEY environment variable not set!")

pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")

bearer_scheme = HTTPBearer(auto_error=False)


def hash_password(password: str) -> str:
    """Hash a plain text password using the configured password hashing context"""
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify if a plain text password matches its hashed version"""
    return pwd_context.verify(plain_password, hashed_password)


def register_user_no_duplicate(db,
                               data: UserCreate,
                               role: models.UserRole = models.UserRole.NORMAL) -> models.User:
    """Create a user unless the email is already registered"""
    repository = UserRepository(db)
    if repository.get_by_email(data.email):
        logger.warning("Registration refused, email %s already in use", data.email)
        raise DuplicateEmailError("This email is already in use")
    return repository.create(name=data.name,
                             email=data.email,
                             password_hash=hash_password(data.password),
                             photo=data.photo,
                             role=role)


def create_access_token(user: models.User, expires_delta: Optional[timedelta] = None) -> str:
    """Create a signed JWT embedding the user's email and role"""
    now = datetime.now(timezone.utc)
    expire = now + (expires_delta or timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES))
    to_encode = {
        "sub": user.email,
        "email": user.email,
        "role": user.role.value,
        "iat": now,
        "exp": expire,
    }
    return jwt.encode(to_encode, SECRET_KEY, algorithm=ALGORITHM)


def decode_access_token(token: str) -> dict:
    """Verify signature and expiry of a token and return its claims"""
    try:
        payload = jwt.decode(token, SECRET_KEY, algorithms=[ALGORITHM])
    except JWTError as e:
        raise InvalidTokenError("Invalid token") from e
    if payload.get("email") is None or payload.get("role") is None:
        raise InvalidTokenError("Invalid token")
    return payload


def login(db, email: str, password: str) -> Tuple[models.User, str]:
    """Authenticate a user by email and password, returning the user and a new token"""
    user = UserRepository(db).get_by_email(email)
    if not user:
        logger.info("Login failed, unknown email %s", email)
        raise InvalidEmailError("Invalid email")
    if not verify_password(password, user.password_hash):
        logger.info("Login failed, wrong password for %s", email)
        raise InvalidPasswordError("Invalid password")
    logger.info("User %s logged in", email)
    return user, create_access_token(user)


def get_current_user(db: db_dependency,
                     credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme)
                     ) -> models.User:
    """Retrieve the currently authenticated user from the bearer token"""
    if credentials is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED,
                            detail="Not authenticated",
                            headers={"WWW-Authenticate": "Bearer"})
    try:
        payload = decode_access_token(credentials.credentials)
    except InvalidTokenError as e:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED,
                            detail=e.message,
                            headers={"WWW-Authenticate": "Bearer"})

    user = UserRepository(db).get_by_email(payload["email"])
    if not user:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="User not found")
    return user


def require_roles(*roles: models.UserRole):
    """Build a dependency that only lets users with one of the given roles through"""
    allowed = frozenset(roles)

    def dependency(current_user: models.User = Depends(get_current_user)) -> models.User:
        if current_user.role not in allowed:
            logger.warning("User %s with role %s denied", current_user.email, current_user.role.value)
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Insufficient privileges")
        return current_user

    return dependency


def is_admin(user: models.User) -> bool:
    return user.role == models.UserRole.ADMINISTRADOR


def check_ownership_or_admin(user: models.User, owner_id: int):
    """Verify if the current user is the owner of a resource or an admin"""
    if user.id != owner_id and not is_admin(user):
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Not allowed")


require_admin = require_roles(models.UserRole.ADMINISTRADOR)
require_member = require_roles(models.UserRole.NORMAL, models.UserRole.ADMINISTRADOR)
