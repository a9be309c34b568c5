from typing import Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


# Base configuration: snake_case attributes, camelCase on the wire
class CamelBase(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


# Sanitized restaurant fields shared by create and update
class RestaurantIn(CamelBase):
    restaurant_name: str
    restaurant_description: str
    restaurant_cost: int
    restaurant_cuisine: str


class RestaurantOut(CamelBase):
    id: str
    owner_id: str
    restaurant_name: str
    restaurant_description: str
    restaurant_cost: int
    restaurant_cuisine: str
    # Public URL of the uploaded image, if any
    restaurant_image: Optional[str] = None
