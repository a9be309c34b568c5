# pickeasy/controllers/users.py
from typing import Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from pickeasy.config import Settings
from pickeasy.errors import AuthenticationError, ConflictError
from pickeasy.models.users import User
from pickeasy.schemas import user as schemas
from pickeasy.utils.audit import AUDIT_FAIL, AUDIT_SUCCESS, write_log
from pickeasy.utils.hashing import get_password_hash, verify_password
from pickeasy.utils.tokenJWT import create_access_token


def _find_user(db: Session, username: str, is_restaurant_staff: bool) -> Optional[User]:
    return (
        db.query(User)
        .filter(User.username == username, User.is_restaurant_staff == is_restaurant_staff)
        .first()
    )


# Register a new customer or staff account and sign it in
def sign_up(db: Session, settings: Settings, payload: schemas.UserSignUp, ip: Optional[str] = None) -> schemas.Token:
    if _find_user(db, payload.username, payload.is_restaurant_staff):
        write_log(db, user_id=None, action="SIGNUP", resource="users", status=AUDIT_FAIL, ip=ip,
                  meta={"username": payload.username, "reason": "Username exists"})
        raise ConflictError("Username already taken")

    user = User(
        first_name=payload.first_name,
        last_name=payload.last_name,
        username=payload.username,
        password_hash=get_password_hash(payload.password),
        is_restaurant_staff=payload.is_restaurant_staff,
    )
    db.add(user)
    try:
        db.commit()
    except IntegrityError:
        # Lost a race with a concurrent sign-up for the same username
        db.rollback()
        raise ConflictError("Username already taken")
    db.refresh(user)

    write_log(db, user_id=user.id, action="SIGNUP", resource="users", status=AUDIT_SUCCESS, ip=ip,
              meta={"username": user.username, "isRestaurantStaff": user.is_restaurant_staff})

    return schemas.Token(access_token=create_access_token(user, settings))


# Authenticate credentials within the requested role namespace
def sign_in(db: Session, settings: Settings, payload: schemas.UserSignIn, ip: Optional[str] = None) -> schemas.Token:
    user = _find_user(db, payload.username, payload.is_restaurant_staff)

    if not user or not verify_password(payload.password, user.password_hash):
        write_log(db, user_id=(user.id if user else None), action="SIGNIN", resource="users",
                  status=AUDIT_FAIL, ip=ip, meta={"username": payload.username})
        raise AuthenticationError("Invalid credentials")

    write_log(db, user_id=user.id, action="SIGNIN", resource="users", status=AUDIT_SUCCESS, ip=ip,
              meta={"username": user.username})

    return schemas.Token(access_token=create_access_token(user, settings))


# Issue a fresh token for an identity whose account still exists
def retrieve_new_jwt(db: Session, settings: Settings, identity: schemas.TokenIdentity, ip: Optional[str] = None) -> schemas.Token:
    user = db.get(User, identity.id)
    if user is None:
        raise AuthenticationError()

    write_log(db, user_id=user.id, action="TOKEN_REFRESH", resource="users", status=AUDIT_SUCCESS, ip=ip)
    return schemas.Token(access_token=create_access_token(user, settings))
