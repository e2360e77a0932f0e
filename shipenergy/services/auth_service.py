from datetime import datetime, timedelta, timezone

import bcrypt
from jose import JWTError, jwt
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from shipenergy.config import settings
from shipenergy.models.user import User


def hash_password(password: str) -> str:
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return bcrypt.checkpw(plain_password.encode("utf-8"), hashed_password.encode("utf-8"))


def issue_access_token(user: User) -> str:
    expire = datetime.now(timezone.utc) + timedelta(minutes=settings.access_token_expire_minutes)
    return jwt.encode(
        {"sub": str(user.id), "exp": expire}, settings.secret_key, algorithm=settings.algorithm
    )


def user_id_from_token(token: str) -> int | None:
    """Return the user id in a valid token, or None if it is expired or forged."""
    try:
        payload = jwt.decode(token, settings.secret_key, algorithms=[settings.algorithm])
    except JWTError:
        return None
    subject = payload.get("sub")
    return int(subject) if subject is not None else None


async def find_user(
    db: AsyncSession, *, email: str | None = None, username: str | None = None
) -> User | None:
    query = select(User)
    if email is not None:
        query = query.where(User.email == email)
    if username is not None:
        query = query.where(User.username == username)
    result = await db.execute(query)
    return result.scalar_one_or_none()


async def register_user(
    db: AsyncSession, email: str, username: str, password: str, is_admin: bool = False
) -> User:
    """Create a user account.  Admins can only be created from code, never via the API."""
    user = User(
        email=email,
        username=username,
        hashed_password=hash_password(password),
        is_admin=is_admin,
    )
    db.add(user)
    await db.flush()
    return user


async def authenticate(db: AsyncSession, email: str, password: str) -> User | None:
    user = await find_user(db, email=email)
    if user is None or not verify_password(password, user.hashed_password):
        return None
    return user
