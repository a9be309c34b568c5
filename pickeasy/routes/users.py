# pickeasy/routes/users.py
from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.orm import Session

from pickeasy.controllers import users as user_controller
from pickeasy.database import get_db
from pickeasy.schemas import user as schemas
from pickeasy.utils.tokenJWT import require_user
from pickeasy.validation import body, validate_request

router = APIRouter(prefix="/users", tags=["Users"])


def _username():
    return body("username").trim().is_alphanumeric().is_length(min=3, max=20).escape()


def _password():
    return body("password", hide_value=True).trim().is_length(min=8, max=20).escape()


SIGN_UP_RULES = validate_request(
    body("firstName").trim().is_alpha().is_length(min=1, max=20).escape(),
    body("lastName").trim().is_alpha().is_length(min=1, max=20).escape(),
    body("isRestaurantStaff").to_boolean(strict=True),
    _username(),
    _password(),
)

SIGN_IN_RULES = validate_request(
    body("isRestaurantStaff").to_boolean(strict=True),
    _username(),
    _password(),
)


def _client_ip(request: Request):
    return request.client.host if request.client else None


@router.post("/signup", response_model=schemas.Token, status_code=status.HTTP_201_CREATED)
def sign_up(request: Request, fields: dict = Depends(SIGN_UP_RULES), db: Session = Depends(get_db)):
    return user_controller.sign_up(
        db, request.app.state.settings, schemas.UserSignUp.model_validate(fields), ip=_client_ip(request)
    )


@router.post("/signin", response_model=schemas.Token)
def sign_in(request: Request, fields: dict = Depends(SIGN_IN_RULES), db: Session = Depends(get_db)):
    return user_controller.sign_in(
        db, request.app.state.settings, schemas.UserSignIn.model_validate(fields), ip=_client_ip(request)
    )


@router.get("/retrieve-new-jwt", response_model=schemas.Token)
def retrieve_new_jwt(
    request: Request,
    current_user: schemas.TokenIdentity = Depends(require_user),
    db: Session = Depends(get_db),
):
    return user_controller.retrieve_new_jwt(db, request.app.state.settings, current_user, ip=_client_ip(request))
