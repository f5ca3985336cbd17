# storefront/api/auth.py
from datetime import datetime, timedelta, timezone
from typing import Annotated

import jwt
from jwt import PyJWTError
from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from storefront.domain.errors import Unauthorized
from storefront.domain.schemas import Principal
from storefront.utils.settings import JWT_ALGORITHM, JWT_SECRET_KEY
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

bearer = HTTPBearer(auto_error=False)


def create_access_token(user_id: int, name: str = "", role: str = "user", expires_minutes: int = 60) -> str:
    """Token issuing lives with the identity provider; used by tooling and tests."""
    payload = {
        "id": user_id,
        "name": name,
        "role": role,
        "exp": datetime.now(timezone.utc) + timedelta(minutes=expires_minutes),
    }
    return jwt.encode(payload, JWT_SECRET_KEY, algorithm=JWT_ALGORITHM)


def verify_token(token: str) -> Principal:
    try:
        payload = jwt.decode(token, JWT_SECRET_KEY, algorithms=[JWT_ALGORITHM])
    except PyJWTError as e:
        logger.warning(f"JWT decode error: {e}")
        raise Unauthorized("Token is not valid")

    user_id = payload.get("id")
    if user_id is None:
        raise Unauthorized("User ID not found in token")

    role = payload.get("role", "user")
    return Principal(id=int(user_id), name=payload.get("name", ""), role="admin" if role == "admin" else "user")


def get_current_user(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(bearer)],
) -> Principal:
    if credentials is None or credentials.scheme.lower() != "bearer":
        raise Unauthorized("No token, authorization denied")
    return verify_token(credentials.credentials)


CurrentUser = Annotated[Principal, Depends(get_current_user)]
