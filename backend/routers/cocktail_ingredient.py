from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from core.auth import Principal, current_user
from db.database import get_async_session
from schemas.cocktail_ingredient import CocktailIngredientsAdd, CocktailIngredientUpdate
from schemas.cocktails import CocktailRecipe
from services.cocktails import CocktailCatalog

router = APIRouter()


@router.post("/cocktails/{cocktail_id}/ingredients", response_model=CocktailRecipe)
async def add_cocktail_ingredients(
    cocktail_id: int,
    payload: CocktailIngredientsAdd,
    principal: Principal = Depends(current_user),
    db: AsyncSession = Depends(get_async_session),
):
    """Attach ingredients to a cocktail, creating unknown ingredients.
    An ingredient that is already attached gets its quantity replaced."""
    cocktail = await CocktailCatalog(db).add_composition_lines(cocktail_id, payload.ingredients)
    return cocktail.to_schema


@router.delete("/cocktails/{cocktail_id}/ingredients/by-id/{ingredient_id}", response_model=CocktailRecipe)
async def remove_cocktail_ingredient_by_id(
    cocktail_id: int,
    ingredient_id: int,
    principal: Principal = Depends(current_user),
    db: AsyncSession = Depends(get_async_session),
):
    cocktail = await CocktailCatalog(db).remove_composition_line_by_id(cocktail_id, ingredient_id)
    return cocktail.to_schema


@router.delete("/cocktails/{cocktail_id}/ingredients/{ingredient_name}", response_model=CocktailRecipe)
async def remove_cocktail_ingredient(
    cocktail_id: int,
    ingredient_name: str,
    principal: Principal = Depends(current_user),
    db: AsyncSession = Depends(get_async_session),
):
    """Detach an ingredient by its exact name; the ingredient itself is kept"""
    cocktail = await CocktailCatalog(db).remove_composition_line(cocktail_id, ingredient_name)
    return cocktail.to_schema


@router.patch("/cocktails/{cocktail_id}/ingredients/{ingredient_id}", response_model=CocktailRecipe)
async def update_cocktail_ingredient_quantity(
    cocktail_id: int,
    ingredient_id: int,
    payload: CocktailIngredientUpdate,
    principal: Principal = Depends(current_user),
    db: AsyncSession = Depends(get_async_session),
):
    """Change the quantity of one ingredient line"""
    cocktail = await CocktailCatalog(db).update_composition_quantity(cocktail_id, ingredient_id, payload.quantity)
    return cocktail.to_schema
