"""Ingredient catalog: identity, case-insensitive uniqueness and find-or-create."""
import logging
from collections import OrderedDict
from typing import Dict, List, Optional

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from core.errors import Conflict, InvalidInput, NotFound
from db.database import CocktailIngredient as CocktailIngredientModel, Ingredient as IngredientModel
from db.ingredient import DEFAULT_INGREDIENT_CATEGORY, DEFAULT_INGREDIENT_UNIT, normalize_name
from schemas.ingredient import IngredientCreate, IngredientUpdate
from schemas.pagination import Page, PageParams
from services.paging import fetch_page

logger = logging.getLogger(__name__)

SORTABLE = {
    "id": IngredientModel.id,
    "name": IngredientModel.name_key,
    "category": IngredientModel.category,
    "unit": IngredientModel.unit,
    "created_at": IngredientModel.created_at,
}


def _required_name(name: Optional[str]) -> str:
    clean = (name or "").strip()
    if not clean:
        raise InvalidInput("Ingredient name is required")
    return clean


class IngredientCatalog:
    def __init__(self, session: AsyncSession):
        self._session = session

    # ------------------------------------------------------------------ reads

    async def get(self, ingredient_id: int) -> IngredientModel:
        ingredient = await self._session.get(IngredientModel, ingredient_id)
        if ingredient is None:
            raise NotFound(f"Ingredient with id {ingredient_id} not found")
        return ingredient

    async def get_by_name(self, name: str) -> Optional[IngredientModel]:
        """Case-insensitive exact lookup"""
        result = await self._session.execute(
            select(IngredientModel).where(IngredientModel.name_key == normalize_name(name))
        )
        return result.scalar_one_or_none()

    async def list_all(self) -> List[IngredientModel]:
        result = await self._session.execute(select(IngredientModel).order_by(IngredientModel.name_key))
        return list(result.scalars().all())

    async def list_by_category(self, category: str) -> List[IngredientModel]:
        result = await self._session.execute(
            select(IngredientModel)
            .where(IngredientModel.category == category)
            .order_by(IngredientModel.name_key)
        )
        return list(result.scalars().all())

    async def search(self, name: str) -> List[IngredientModel]:
        result = await self._session.execute(
            select(IngredientModel)
            .where(IngredientModel.name_key.contains(normalize_name(name), autoescape=True))
            .order_by(IngredientModel.name_key)
        )
        return list(result.scalars().all())

    async def list_page(self, params: PageParams) -> Page:
        rows, total = await fetch_page(self._session, select(IngredientModel), params, SORTABLE)
        return Page.build([r.to_schema for r in rows], params, total)

    async def search_page(self, name: str, params: PageParams) -> Page:
        stmt = select(IngredientModel).where(
            IngredientModel.name_key.contains(normalize_name(name), autoescape=True)
        )
        rows, total = await fetch_page(self._session, stmt, params, SORTABLE)
        return Page.build([r.to_schema for r in rows], params, total)

    async def grouped_by_category(self) -> Dict[str, List[IngredientModel]]:
        groups: Dict[str, List[IngredientModel]] = OrderedDict()
        result = await self._session.execute(
            select(IngredientModel).order_by(IngredientModel.category, IngredientModel.name_key)
        )
        for ingredient in result.scalars().all():
            groups.setdefault(ingredient.category or DEFAULT_INGREDIENT_CATEGORY, []).append(ingredient)
        return groups

    async def all_ids(self) -> List[int]:
        result = await self._session.execute(select(IngredientModel.id).order_by(IngredientModel.id))
        return list(result.scalars().all())

    async def count(self) -> int:
        return int(await self._session.scalar(select(func.count(IngredientModel.id))) or 0)

    async def usage_count(self, ingredient_id: int) -> int:
        """Number of composition rows pointing at the ingredient"""
        return int(
            await self._session.scalar(
                select(func.count(CocktailIngredientModel.id)).where(
                    CocktailIngredientModel.ingredient_id == ingredient_id
                )
            )
            or 0
        )

    # ----------------------------------------------------------------- writes

    async def resolve(
        self,
        name: Optional[str],
        category: Optional[str] = None,
        unit: Optional[str] = None,
    ) -> IngredientModel:
        """Find the ingredient by name or insert it, without committing.

        The insert runs in a SAVEPOINT so that losing a race against another
        writer only discards the duplicate row, not the caller's unit of work.
        """
        clean = _required_name(name)
        existing = await self.get_by_name(clean)
        if existing is not None:
            return existing

        ingredient = IngredientModel(
            category=category or DEFAULT_INGREDIENT_CATEGORY,
            unit=unit or DEFAULT_INGREDIENT_UNIT,
        )
        ingredient.rename(clean)
        try:
            async with self._session.begin_nested():
                self._session.add(ingredient)
        except IntegrityError:
            logger.debug("Ingredient %r created concurrently, re-reading", clean)
            existing = await self.get_by_name(clean)
            if existing is None:
                raise
            return existing

        logger.info("Auto-created ingredient %r (id=%s)", ingredient.name, ingredient.id)
        return ingredient

    async def find_or_create(
        self,
        name: Optional[str],
        category: Optional[str] = None,
        unit: Optional[str] = None,
    ) -> IngredientModel:
        try:
            ingredient = await self.resolve(name, category, unit)
            await self._session.commit()
        except Exception:
            await self._session.rollback()
            raise
        return ingredient

    async def create(self, payload: IngredientCreate) -> IngredientModel:
        name = _required_name(payload.name)
        if payload.id is not None and await self._session.get(IngredientModel, payload.id) is not None:
            raise Conflict(f"Ingredient with id {payload.id} already exists")
        if await self.get_by_name(name) is not None:
            raise Conflict(f"Ingredient '{name}' already exists")

        ingredient = IngredientModel(
            category=payload.category or DEFAULT_INGREDIENT_CATEGORY,
            unit=payload.unit or DEFAULT_INGREDIENT_UNIT,
            description=payload.description,
        )
        ingredient.rename(name)
        self._session.add(ingredient)
        try:
            await self._session.commit()
        except IntegrityError:
            await self._session.rollback()
            logger.warning("Lost insert race for ingredient %r", name)
            raise Conflict(f"Ingredient '{name}' already exists")
        await self._session.refresh(ingredient)
        logger.info("Created ingredient %r (id=%s)", ingredient.name, ingredient.id)
        return ingredient

    async def update(self, ingredient_id: int, payload: IngredientUpdate) -> IngredientModel:
        """Overwrite every editable field, nulls included"""
        ingredient = await self.get(ingredient_id)
        name = _required_name(payload.name)
        clash = await self.get_by_name(name)
        if clash is not None and clash.id != ingredient.id:
            raise Conflict(f"Ingredient '{name}' already exists")

        ingredient.rename(name)
        ingredient.category = payload.category
        ingredient.unit = payload.unit
        ingredient.description = payload.description
        try:
            await self._session.commit()
        except IntegrityError:
            await self._session.rollback()
            raise Conflict(f"Ingredient '{name}' already exists")
        await self._session.refresh(ingredient)
        return ingredient

    async def delete(self, ingredient_id: int) -> None:
        ingredient = await self.get(ingredient_id)
        used_by = await self.usage_count(ingredient_id)
        if used_by:
            logger.warning("Refusing to delete ingredient %s used by %s cocktail(s)", ingredient_id, used_by)
            raise Conflict(
                f"Ingredient '{ingredient.name}' is used by {used_by} cocktail(s); remove it from them first"
            )
        try:
            await self._session.delete(ingredient)
            await self._session.commit()
        except Exception:
            await self._session.rollback()
            raise
        logger.info("Deleted ingredient %s", ingredient_id)
