from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel
from typing import Dict, List, Optional
from datetime import datetime
from .cocktail_ingredient import CocktailIngredient, CocktailIngredientInput
from .colors import Color


class CocktailRecipe(BaseModel):
    id: int
    name: str
    description: Optional[str] = None
    category: Optional[str] = None
    glass_type: Optional[str] = None
    preparation_method: Optional[str] = None
    image_url: Optional[str] = None
    alcoholic: bool = True
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    ingredients: List[CocktailIngredient] = []


class CocktailRecipeCreate(BaseModel):
    name: Optional[str] = None
    description: Optional[str] = None
    category: Optional[str] = None
    glass_type: Optional[str] = None
    preparation_method: Optional[str] = None
    image_url: Optional[str] = None
    alcoholic: Optional[bool] = None
    ingredients: List[CocktailIngredientInput] = Field(default_factory=list)


class CocktailRecipeUpdate(BaseModel):
    # Only non-null fields are applied; composition has its own endpoints
    name: Optional[str] = None
    description: Optional[str] = None
    category: Optional[str] = None
    glass_type: Optional[str] = None
    preparation_method: Optional[str] = None
    image_url: Optional[str] = None
    alcoholic: Optional[bool] = None


class CocktailWithFavoriteInfo(BaseModel):
    cocktail: CocktailRecipe
    is_favorite: bool
    favorite_color: Optional[Color] = None


class IdGapsReport(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    existing_ids: List[int]
    missing_ids: List[int]
    total_cocktails: int
    max_id: int
    next_available_id: int


class CocktailStats(BaseModel):
    total_cocktails: int
    alcoholic: int
    non_alcoholic: int
    top_categories: Dict[str, int]
    last_created: Optional[CocktailRecipe] = None
    last_updated: Optional[CocktailRecipe] = None
