from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


# Camel-case request payload after the validation chain has sanitized it
class UserSignIn(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    is_restaurant_staff: bool = Field(False, alias="isRestaurantStaff")
    username: str
    password: str


class UserSignUp(UserSignIn):
    first_name: str = Field(alias="firstName")
    last_name: str = Field(alias="lastName")


# Schema for JWT authentication token response
class Token(BaseModel):
    access_token: str
    token_type: str = "bearer"


# Identity decoded from a bearer token
class TokenIdentity(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(alias="sub")
    username: str
    first_name: Optional[str] = Field(None, alias="firstName")
    last_name: Optional[str] = Field(None, alias="lastName")
    is_restaurant_staff: bool = Field(False, alias="isRestaurantStaff")
