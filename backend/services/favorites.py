"""Per-user favorites with an optional display color."""
import logging
from typing import List, Optional, Tuple

from sqlalchemy import delete, func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from core.errors import Conflict, InvalidInput, NotFound
from db.database import (
    CocktailIngredient as CocktailIngredientModel,
    CocktailRecipe as CocktailRecipeModel,
    Color as ColorModel,
    Favorite as FavoriteModel,
)

logger = logging.getLogger(__name__)


def _with_cocktail_and_color():
    return (
        selectinload(FavoriteModel.cocktail)
        .selectinload(CocktailRecipeModel.cocktail_ingredients)
        .selectinload(CocktailIngredientModel.ingredient),
        selectinload(FavoriteModel.color),
    )


class FavoritesRegistry:
    def __init__(self, session: AsyncSession):
        self._session = session

    async def _find(self, user_id: str, cocktail_id: int) -> Optional[FavoriteModel]:
        result = await self._session.execute(
            select(FavoriteModel)
            .options(*_with_cocktail_and_color())
            .where(FavoriteModel.user_id == user_id, FavoriteModel.cocktail_id == cocktail_id)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def _get_favorite(self, user_id: str, cocktail_id: int) -> FavoriteModel:
        favorite = await self._find(user_id, cocktail_id)
        if favorite is None:
            raise NotFound(f"Cocktail {cocktail_id} is not in the favorites of user {user_id}")
        return favorite

    async def list(self, user_id: str) -> List[FavoriteModel]:
        result = await self._session.execute(
            select(FavoriteModel)
            .options(*_with_cocktail_and_color())
            .where(FavoriteModel.user_id == user_id)
            .order_by(FavoriteModel.created_at, FavoriteModel.id)
            .execution_options(populate_existing=True)
        )
        return list(result.scalars().all())

    async def is_favorite(self, user_id: str, cocktail_id: int) -> bool:
        found = await self._session.scalar(
            select(FavoriteModel.id).where(
                FavoriteModel.user_id == user_id, FavoriteModel.cocktail_id == cocktail_id
            )
        )
        return found is not None

    async def count(self, user_id: str) -> int:
        return int(
            await self._session.scalar(
                select(func.count(FavoriteModel.id)).where(FavoriteModel.user_id == user_id)
            )
            or 0
        )

    async def most_favorited(self, limit: Optional[int] = None) -> List[Tuple[int, str, int]]:
        """(cocktail_id, cocktail_name, count), most popular first. Every favorited cocktail unless ``limit`` is given."""
        cnt = func.count(FavoriteModel.id)
        stmt = (
            select(FavoriteModel.cocktail_id, CocktailRecipeModel.name, cnt)
            .join(CocktailRecipeModel, CocktailRecipeModel.id == FavoriteModel.cocktail_id)
            .group_by(FavoriteModel.cocktail_id, CocktailRecipeModel.name)
            .order_by(cnt.desc(), FavoriteModel.cocktail_id.asc())
        )
        if limit is not None:
            stmt = stmt.limit(limit)
        result = await self._session.execute(stmt)
        return [(cocktail_id, name, int(n)) for cocktail_id, name, n in result.all()]

    async def add(self, user_id: str, cocktail_id: int) -> FavoriteModel:
        exists = await self._session.scalar(
            select(CocktailRecipeModel.id).where(CocktailRecipeModel.id == cocktail_id)
        )
        if exists is None:
            raise NotFound(f"Cocktail with id {cocktail_id} not found")
        if await self.is_favorite(user_id, cocktail_id):
            raise Conflict(f"Cocktail {cocktail_id} is already a favorite")

        favorite = FavoriteModel(user_id=user_id, cocktail_id=cocktail_id)
        self._session.add(favorite)
        try:
            await self._session.commit()
        except IntegrityError:
            await self._session.rollback()
            raise Conflict(f"Cocktail {cocktail_id} is already a favorite")
        logger.info("User %s added cocktail %s to favorites", user_id, cocktail_id)
        return await self._get_favorite(user_id, cocktail_id)

    async def remove(self, user_id: str, cocktail_id: int) -> None:
        favorite = await self._get_favorite(user_id, cocktail_id)
        try:
            await self._session.delete(favorite)
            await self._session.commit()
        except Exception:
            await self._session.rollback()
            raise
        logger.info("User %s removed cocktail %s from favorites", user_id, cocktail_id)

    async def toggle(self, user_id: str, cocktail_id: int) -> bool:
        """Add when absent, remove when present. Returns True when it was added."""
        if await self.is_favorite(user_id, cocktail_id):
            await self.remove(user_id, cocktail_id)
            return False
        await self.add(user_id, cocktail_id)
        return True

    async def clear(self, user_id: str) -> int:
        try:
            result = await self._session.execute(delete(FavoriteModel).where(FavoriteModel.user_id == user_id))
            await self._session.commit()
        except Exception:
            await self._session.rollback()
            raise
        logger.info("Cleared %s favorite(s) of user %s", result.rowcount, user_id)
        return result.rowcount

    async def set_color(
        self,
        user_id: str,
        cocktail_id: int,
        color_id: Optional[int] = None,
        color_name: Optional[str] = None,
    ) -> FavoriteModel:
        if (color_id is None) == (color_name is None):
            raise InvalidInput("Provide exactly one of color_id or color_name")

        favorite = await self._get_favorite(user_id, cocktail_id)
        if color_id is not None:
            color = await self._session.get(ColorModel, color_id)
            missing = f"Color with id {color_id} not found"
        else:
            color = await self._session.scalar(select(ColorModel).where(ColorModel.name == color_name))
            missing = f"Color '{color_name}' not found"
        if color is None:
            raise NotFound(missing)

        favorite.color_id = color.id
        try:
            await self._session.commit()
        except Exception:
            await self._session.rollback()
            raise
        return await self._get_favorite(user_id, cocktail_id)
