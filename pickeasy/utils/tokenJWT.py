# pickeasy/utils/tokenJWT.py
from datetime import datetime, timedelta, timezone
from typing import Callable, Optional

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt
from pydantic import ValidationError as PydanticValidationError

from pickeasy.config import Settings
from pickeasy.errors import AuthenticationError, AuthorizationError
from pickeasy.models.users import User
from pickeasy.schemas.user import TokenIdentity

# auto_error=False so a missing header is reported as 401 by require_user, not 403
bearer_scheme = HTTPBearer(auto_error=False)


# Generate a new JWT access token for a user
def create_access_token(user: User, settings: Settings, expires_delta: Optional[timedelta] = None) -> str:
    expire = datetime.now(timezone.utc) + (
        expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    )
    to_encode = {
        "sub": user.id,
        "username": user.username,
        "firstName": user.first_name,
        "lastName": user.last_name,
        "isRestaurantStaff": bool(user.is_restaurant_staff),
        "exp": expire,
    }
    return jwt.encode(to_encode, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)


def decode_access_token(token: str, settings: Settings) -> TokenIdentity:
    try:
        payload = jwt.decode(token, settings.JWT_SECRET, algorithms=[settings.JWT_ALGORITHM])
        return TokenIdentity.model_validate(payload)
    except (JWTError, PydanticValidationError):
        raise AuthenticationError()


# Resolve the identity carried by the bearer token
def require_user(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> TokenIdentity:
    if credentials is None or not credentials.credentials:
        raise AuthenticationError()
    return decode_access_token(credentials.credentials, request.app.state.settings)


# Dependency factory for role checks over the resolved identity
def role_required(predicate: Callable[[TokenIdentity], bool], message: str):
    def _checker(current_user: TokenIdentity = Depends(require_user)) -> TokenIdentity:
        if not predicate(current_user):
            raise AuthorizationError(message)
        return current_user
    return _checker


require_restaurant_staff = role_required(
    lambda user: user.is_restaurant_staff, "User is not a restaurant staff"
)
require_customer = role_required(
    lambda user: not user.is_restaurant_staff, "User is not a customer"
)
