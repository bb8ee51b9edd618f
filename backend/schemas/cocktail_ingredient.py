from pydantic import BaseModel, Field
from typing import List, Optional


class CocktailIngredient(BaseModel):
    """One composition line as shown under its cocktail"""
    id: int
    ingredient_id: int
    ingredient_name: Optional[str] = None
    quantity: str


# Schema for an ingredient line in a cocktail request; missing ingredients are auto-created
class CocktailIngredientInput(BaseModel):
    name: Optional[str] = None
    quantity: Optional[str] = None
    category: Optional[str] = None  # used only when the ingredient gets created
    unit: Optional[str] = None  # used only when the ingredient gets created


class CocktailIngredientsAdd(BaseModel):
    ingredients: List[CocktailIngredientInput] = Field(default_factory=list)


class CocktailIngredientUpdate(BaseModel):
    quantity: Optional[str] = None
