from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List, Optional

from core.auth import Principal, current_user
from db.database import get_async_session
from schemas.favorites import (
    FavoriteCheck,
    FavoriteColorUpdate,
    FavoriteCount,
    FavoriteRead,
    FavoriteToggleResult,
    MostFavorited,
)
from services.favorites import FavoritesRegistry

router = APIRouter()


@router.get("", response_model=List[FavoriteRead])
async def get_favorites(
    principal: Principal = Depends(current_user),
    db: AsyncSession = Depends(get_async_session),
):
    """Favorites of the caller, oldest first"""
    favorites = await FavoritesRegistry(db).list(principal.user_id)
    return [favorite.to_schema for favorite in favorites]


@router.delete("", response_model=FavoriteCount)
async def clear_favorites(
    principal: Principal = Depends(current_user),
    db: AsyncSession = Depends(get_async_session),
):
    """Remove every favorite of the caller and report how many were removed"""
    removed = await FavoritesRegistry(db).clear(principal.user_id)
    return {"count": removed}


@router.get("/count", response_model=FavoriteCount)
async def count_favorites(
    principal: Principal = Depends(current_user),
    db: AsyncSession = Depends(get_async_session),
):
    return {"count": await FavoritesRegistry(db).count(principal.user_id)}


@router.get("/most-favorited", response_model=List[MostFavorited])
async def get_most_favorited(
    limit: Optional[int] = Query(None, ge=1, description="Top N only; all by default"),
    principal: Principal = Depends(current_user),
    db: AsyncSession = Depends(get_async_session),
):
    rows = await FavoritesRegistry(db).most_favorited(limit)
    return [
        {"cocktail_id": cocktail_id, "cocktail_name": name, "count": count}
        for cocktail_id, name, count in rows
    ]


@router.get("/check/{cocktail_id}", response_model=FavoriteCheck)
async def check_favorite(
    cocktail_id: int,
    principal: Principal = Depends(current_user),
    db: AsyncSession = Depends(get_async_session),
):
    is_favorite = await FavoritesRegistry(db).is_favorite(principal.user_id, cocktail_id)
    return {"cocktail_id": cocktail_id, "is_favorite": is_favorite}


@router.put("/toggle/{cocktail_id}", response_model=FavoriteToggleResult)
async def toggle_favorite(
    cocktail_id: int,
    principal: Principal = Depends(current_user),
    db: AsyncSession = Depends(get_async_session),
):
    added = await FavoritesRegistry(db).toggle(principal.user_id, cocktail_id)
    return {"cocktail_id": cocktail_id, "added": added}


@router.post("/{cocktail_id}", response_model=FavoriteRead, status_code=status.HTTP_201_CREATED)
async def add_favorite(
    cocktail_id: int,
    principal: Principal = Depends(current_user),
    db: AsyncSession = Depends(get_async_session),
):
    favorite = await FavoritesRegistry(db).add(principal.user_id, cocktail_id)
    return favorite.to_schema


@router.delete("/{cocktail_id}", status_code=status.HTTP_204_NO_CONTENT)
async def remove_favorite(
    cocktail_id: int,
    principal: Principal = Depends(current_user),
    db: AsyncSession = Depends(get_async_session),
):
    await FavoritesRegistry(db).remove(principal.user_id, cocktail_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.patch("/{cocktail_id}/color", response_model=FavoriteRead)
async def set_favorite_color(
    cocktail_id: int,
    payload: FavoriteColorUpdate,
    principal: Principal = Depends(current_user),
    db: AsyncSession = Depends(get_async_session),
):
    """Pin a color on a favorite, by color id or by color name"""
    favorite = await FavoritesRegistry(db).set_color(
        principal.user_id, cocktail_id, color_id=payload.color_id, color_name=payload.color_name
    )
    return favorite.to_schema
