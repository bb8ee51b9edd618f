from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List

from core.auth import Principal, current_admin, current_user
from core.pagination import page_params
from db.database import get_async_session
from schemas.cocktails import (
    CocktailRecipe,
    CocktailRecipeCreate,
    CocktailRecipeUpdate,
    CocktailStats,
    CocktailWithFavoriteInfo,
    IdGapsReport,
)
from schemas.pagination import Page, PageParams
from services.cocktails import CocktailCatalog

router = APIRouter()


@router.get("/public/cocktails", response_model=Page[CocktailRecipe])
async def get_cocktails_page(
    params: PageParams = Depends(page_params),
    db: AsyncSession = Depends(get_async_session),
):
    """Paginated cocktail list, no identity needed"""
    return await CocktailCatalog(db).list_page(params)


@router.get("/cocktails", response_model=List[CocktailRecipe])
async def get_cocktails(db: AsyncSession = Depends(get_async_session)):
    """Get all cocktail recipes"""
    cocktails = await CocktailCatalog(db).list_all()
    return [cocktail.to_schema for cocktail in cocktails]


@router.get("/cocktails/search", response_model=Page[CocktailRecipe])
async def search_cocktails(
    name: str = Query("", description="Case-insensitive part of the name"),
    params: PageParams = Depends(page_params),
    db: AsyncSession = Depends(get_async_session),
):
    return await CocktailCatalog(db).search_page(name, params)


@router.get("/cocktails/category/{category}", response_model=Page[CocktailRecipe])
async def get_cocktails_by_category(
    category: str,
    params: PageParams = Depends(page_params),
    db: AsyncSession = Depends(get_async_session),
):
    return await CocktailCatalog(db).list_by_category_page(category, params)


@router.get("/cocktails/alcoholic", response_model=List[CocktailRecipe])
async def get_cocktails_by_alcoholic(
    value: bool = Query(True),
    db: AsyncSession = Depends(get_async_session),
):
    cocktails = await CocktailCatalog(db).list_by_alcoholic(value)
    return [cocktail.to_schema for cocktail in cocktails]


@router.get("/cocktails/with-favorites", response_model=Page[CocktailWithFavoriteInfo])
async def get_cocktails_with_favorites(
    params: PageParams = Depends(page_params),
    principal: Principal = Depends(current_user),
    db: AsyncSession = Depends(get_async_session),
):
    """Cocktails flagged with the caller's favorites"""
    return await CocktailCatalog(db).list_page_with_favorites(principal.user_id, params)


@router.get("/cocktails/{cocktail_id}", response_model=CocktailRecipe)
async def get_cocktail_recipe(cocktail_id: int, db: AsyncSession = Depends(get_async_session)):
    """Get a single cocktail recipe by ID"""
    cocktail = await CocktailCatalog(db).get(cocktail_id)
    return cocktail.to_schema


@router.post("/cocktails", response_model=CocktailRecipe, status_code=status.HTTP_201_CREATED)
async def create_cocktail_recipe(
    cocktail: CocktailRecipeCreate,
    principal: Principal = Depends(current_user),
    db: AsyncSession = Depends(get_async_session),
):
    """Create a new cocktail recipe; unknown ingredients are created on the fly"""
    created = await CocktailCatalog(db).create(cocktail)
    return created.to_schema


@router.put("/cocktails/{cocktail_id}", response_model=CocktailRecipe)
async def update_cocktail_recipe(
    cocktail_id: int,
    cocktail: CocktailRecipeUpdate,
    principal: Principal = Depends(current_user),
    db: AsyncSession = Depends(get_async_session),
):
    """Update the attributes of a cocktail; ingredients are not touched"""
    updated = await CocktailCatalog(db).update_attributes(cocktail_id, cocktail)
    return updated.to_schema


@router.delete("/admin/cocktails/{cocktail_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_cocktail_recipe(
    cocktail_id: int,
    principal: Principal = Depends(current_admin),
    db: AsyncSession = Depends(get_async_session),
):
    """Delete a cocktail along with its ingredient lines and favorites"""
    await CocktailCatalog(db).delete(cocktail_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/admin/cocktails/gaps", response_model=IdGapsReport)
async def get_cocktail_id_gaps(
    principal: Principal = Depends(current_admin),
    db: AsyncSession = Depends(get_async_session),
):
    return await CocktailCatalog(db).id_gaps_report()


@router.get("/admin/stats", response_model=CocktailStats)
async def get_cocktail_stats(
    principal: Principal = Depends(current_admin),
    db: AsyncSession = Depends(get_async_session),
):
    return await CocktailCatalog(db).stats()
