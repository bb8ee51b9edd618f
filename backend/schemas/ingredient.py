from pydantic import BaseModel
from typing import Optional
from datetime import datetime


class Ingredient(BaseModel):
    id: int
    name: str
    category: Optional[str] = None
    unit: Optional[str] = None
    description: Optional[str] = None
    created_at: Optional[datetime] = None


class IngredientCreate(BaseModel):
    # Ids are store-generated; a caller-supplied one must not collide
    id: Optional[int] = None
    name: Optional[str] = None
    category: Optional[str] = None
    unit: Optional[str] = None
    description: Optional[str] = None


class IngredientUpdate(BaseModel):
    name: Optional[str] = None
    category: Optional[str] = None
    unit: Optional[str] = None
    description: Optional[str] = None


class IngredientFindOrCreate(BaseModel):
    name: Optional[str] = None
    category: Optional[str] = None
    unit: Optional[str] = None
