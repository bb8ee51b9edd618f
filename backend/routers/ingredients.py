from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Dict, List

from core.auth import Principal, current_admin, current_user
from core.pagination import page_params
from db.database import get_async_session
from schemas.ingredient import Ingredient, IngredientCreate, IngredientFindOrCreate, IngredientUpdate
from schemas.pagination import Page, PageParams
from services.ingredients import IngredientCatalog

router = APIRouter()


@router.get("", response_model=Page[Ingredient])
async def get_ingredients(
    params: PageParams = Depends(page_params),
    db: AsyncSession = Depends(get_async_session),
):
    """Get ingredients, one page at a time"""
    return await IngredientCatalog(db).list_page(params)


@router.get("/search", response_model=Page[Ingredient])
async def search_ingredients(
    name: str = Query("", description="Case-insensitive part of the name"),
    params: PageParams = Depends(page_params),
    db: AsyncSession = Depends(get_async_session),
):
    return await IngredientCatalog(db).search_page(name, params)


@router.get("/grouped-by-category", response_model=Dict[str, List[Ingredient]])
async def get_ingredients_grouped(db: AsyncSession = Depends(get_async_session)):
    groups = await IngredientCatalog(db).grouped_by_category()
    return {category: [i.to_schema for i in items] for category, items in groups.items()}


@router.get("/category/{category}", response_model=List[Ingredient])
async def get_ingredients_by_category(category: str, db: AsyncSession = Depends(get_async_session)):
    ingredients = await IngredientCatalog(db).list_by_category(category)
    return [ingredient.to_schema for ingredient in ingredients]


@router.get("/{ingredient_id}", response_model=Ingredient)
async def get_ingredient(ingredient_id: int, db: AsyncSession = Depends(get_async_session)):
    """Get an ingredient by ID"""
    ingredient = await IngredientCatalog(db).get(ingredient_id)
    return ingredient.to_schema


@router.post("", response_model=Ingredient, status_code=status.HTTP_201_CREATED)
async def create_ingredient(
    ingredient: IngredientCreate,
    principal: Principal = Depends(current_user),
    db: AsyncSession = Depends(get_async_session),
):
    """Create a new ingredient; names are unique regardless of case"""
    created = await IngredientCatalog(db).create(ingredient)
    return created.to_schema


@router.post("/find-or-create", response_model=Ingredient)
async def find_or_create_ingredient(
    ingredient: IngredientFindOrCreate,
    principal: Principal = Depends(current_user),
    db: AsyncSession = Depends(get_async_session),
):
    found = await IngredientCatalog(db).find_or_create(ingredient.name, ingredient.category, ingredient.unit)
    return found.to_schema


@router.put("/{ingredient_id}", response_model=Ingredient)
async def update_ingredient(
    ingredient_id: int,
    ingredient: IngredientUpdate,
    principal: Principal = Depends(current_user),
    db: AsyncSession = Depends(get_async_session),
):
    """Update an existing ingredient"""
    updated = await IngredientCatalog(db).update(ingredient_id, ingredient)
    return updated.to_schema


@router.delete("/{ingredient_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_ingredient(
    ingredient_id: int,
    principal: Principal = Depends(current_admin),
    db: AsyncSession = Depends(get_async_session),
):
    """Delete an ingredient that no cocktail uses"""
    await IngredientCatalog(db).delete(ingredient_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
