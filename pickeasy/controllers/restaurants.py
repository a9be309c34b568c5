# pickeasy/controllers/restaurants.py
import logging
from pathlib import Path
from typing import Optional

from sqlalchemy.orm import Session

from pickeasy.errors import AuthorizationError, NotFoundError
from pickeasy.models.restaurant import Restaurant
from pickeasy.schemas import restaurant as schemas
from pickeasy.schemas.user import TokenIdentity
from pickeasy.utils.audit import AUDIT_FAIL, AUDIT_SUCCESS, write_log
from pickeasy.utils.uploads import StoredUpload, remove_upload

logger = logging.getLogger(__name__)

UPLOADS_URL_PREFIX = "/uploads/"


def to_out(restaurant: Restaurant) -> schemas.RestaurantOut:
    fields = list(schemas.RestaurantOut.model_fields.keys())
    data = {f: getattr(restaurant, f) for f in fields if hasattr(restaurant, f)}
    if restaurant.restaurant_image:
        data["restaurant_image"] = UPLOADS_URL_PREFIX + restaurant.restaurant_image
    return schemas.RestaurantOut.model_validate(data)


def create_restaurant(
    db: Session,
    owner: TokenIdentity,
    payload: schemas.RestaurantIn,
    image: Optional[StoredUpload] = None,
    ip: Optional[str] = None,
) -> schemas.RestaurantOut:
    restaurant = Restaurant(
        owner_id=owner.id,
        restaurant_name=payload.restaurant_name,
        restaurant_description=payload.restaurant_description,
        restaurant_cost=payload.restaurant_cost,
        restaurant_cuisine=payload.restaurant_cuisine,
        restaurant_image=image.filename if image else None,
    )
    db.add(restaurant)
    db.commit()
    db.refresh(restaurant)

    write_log(db, user_id=owner.id, action="RESTAURANT_CREATE", resource="restaurants",
              status=AUDIT_SUCCESS, ip=ip, meta={"id": restaurant.id, "name": restaurant.restaurant_name})

    return to_out(restaurant)


def update_restaurant(
    db: Session,
    owner: TokenIdentity,
    restaurant_id: str,
    payload: schemas.RestaurantIn,
    image: Optional[StoredUpload] = None,
    upload_dir: Optional[Path] = None,
    ip: Optional[str] = None,
) -> schemas.RestaurantOut:
    restaurant = db.get(Restaurant, restaurant_id)
    if restaurant is None:
        raise NotFoundError("Restaurant not found")
    if restaurant.owner_id != owner.id:
        write_log(db, user_id=owner.id, action="RESTAURANT_UPDATE", resource="restaurants",
                  status=AUDIT_FAIL, ip=ip, meta={"id": restaurant_id, "reason": "Not owner"})
        raise AuthorizationError("User does not own this restaurant")

    for key, value in payload.model_dump().items():
        setattr(restaurant, key, value)

    old_image = None
    if image is not None:
        old_image = restaurant.restaurant_image
        restaurant.restaurant_image = image.filename

    db.commit()
    db.refresh(restaurant)

    # Drop the replaced file only once the new reference is committed
    if old_image and upload_dir is not None:
        logger.info("Removing replaced image %s for restaurant %s", old_image, restaurant.id)
        remove_upload(upload_dir / old_image)

    write_log(db, user_id=owner.id, action="RESTAURANT_UPDATE", resource="restaurants",
              status=AUDIT_SUCCESS, ip=ip, meta={"id": restaurant.id})

    return to_out(restaurant)
