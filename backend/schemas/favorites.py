from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel
from typing import Optional
from datetime import datetime
from .cocktails import CocktailRecipe
from .colors import Color


class FavoriteRead(BaseModel):
    id: int
    user_id: str
    cocktail_id: int
    created_at: Optional[datetime] = None
    cocktail: Optional[CocktailRecipe] = None
    color: Optional[Color] = None


class FavoriteColorUpdate(BaseModel):
    # Exactly one of the two must be given; colorId / colorName also accepted
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    color_id: Optional[int] = None
    color_name: Optional[str] = None


class FavoriteToggleResult(BaseModel):
    cocktail_id: int
    added: bool


class FavoriteCheck(BaseModel):
    cocktail_id: int
    is_favorite: bool


class FavoriteCount(BaseModel):
    count: int


class MostFavorited(BaseModel):
    cocktail_id: int
    cocktail_name: Optional[str] = None
    count: int
