# pickeasy/routes/restaurants.py
from pathlib import Path
from typing import Optional

from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.orm import Session

from pickeasy.controllers import restaurants as restaurant_controller
from pickeasy.database import get_db
from pickeasy.models.restaurant import CUISINES
from pickeasy.schemas import restaurant as schemas
from pickeasy.schemas.user import TokenIdentity
from pickeasy.utils.tokenJWT import require_restaurant_staff
from pickeasy.utils.uploads import StoredUpload, single_upload
from pickeasy.validation import body, param, validate_request

router = APIRouter(prefix="/restaurants", tags=["Restaurants"])

restaurant_image = single_upload("restaurantImage")


def _restaurant_fields():
    return [
        body("restaurantName").trim().is_length(min=1, max=30).escape(),
        body("restaurantDescription").trim().is_length(min=1, max=250).escape(),
        body("restaurantCost").exists(check_null=True).to_int().is_int(min=1, max=4),
        body("restaurantCuisine").is_in(CUISINES),
    ]


CREATE_RULES = validate_request(*_restaurant_fields())

UPDATE_RULES = validate_request(
    param("id").exists(check_null=True, check_falsy=True).trim().is_object_id().escape(),
    *_restaurant_fields(),
)


# Dependencies resolve in declaration order: auth + role, upload, then field validation
@router.post("", response_model=schemas.RestaurantOut, status_code=status.HTTP_201_CREATED)
def create_restaurant(
    request: Request,
    current_user: TokenIdentity = Depends(require_restaurant_staff),
    image: Optional[StoredUpload] = Depends(restaurant_image),
    fields: dict = Depends(CREATE_RULES),
    db: Session = Depends(get_db),
):
    return restaurant_controller.create_restaurant(
        db,
        current_user,
        schemas.RestaurantIn.model_validate(fields),
        image=image,
        ip=request.client.host if request.client else None,
    )


@router.patch("/{id}", response_model=schemas.RestaurantOut)
def update_restaurant(
    request: Request,
    current_user: TokenIdentity = Depends(require_restaurant_staff),
    image: Optional[StoredUpload] = Depends(restaurant_image),
    fields: dict = Depends(UPDATE_RULES),
    db: Session = Depends(get_db),
):
    restaurant_id = fields.pop("id")
    return restaurant_controller.update_restaurant(
        db,
        current_user,
        restaurant_id,
        schemas.RestaurantIn.model_validate(fields),
        image=image,
        upload_dir=Path(request.app.state.settings.UPLOAD_DIR),
        ip=request.client.host if request.client else None,
    )
