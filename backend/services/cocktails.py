"""Cocktail catalog and the composition relation between cocktails and ingredients.

Composition rows are only ever changed through the dedicated line
operations; ``update_attributes`` never touches them. Adding an ingredient
that is already part of the cocktail overwrites that line's quantity rather
than creating a second row (the table is unique on cocktail + ingredient).
"""
import logging
from typing import Dict, List, Optional, Sequence

from sqlalchemy import delete, func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from core.errors import Conflict, InvalidInput, NotFound
from db.cocktail_recipe import (
    DEFAULT_CATEGORY,
    DEFAULT_DESCRIPTION,
    DEFAULT_GLASS_TYPE,
    DEFAULT_PREPARATION_METHOD,
)
from db.database import (
    CocktailIngredient as CocktailIngredientModel,
    CocktailRecipe as CocktailRecipeModel,
    Favorite as FavoriteModel,
    Ingredient as IngredientModel,
)
from schemas.cocktail_ingredient import CocktailIngredientInput
from schemas.cocktails import CocktailRecipeCreate, CocktailRecipeUpdate
from schemas.pagination import Page, PageParams
from services.ingredients import IngredientCatalog
from services.paging import fetch_page

logger = logging.getLogger(__name__)

SORTABLE = {
    "id": CocktailRecipeModel.id,
    "name": CocktailRecipeModel.name,
    "category": CocktailRecipeModel.category,
    "glass_type": CocktailRecipeModel.glass_type,
    "alcoholic": CocktailRecipeModel.alcoholic,
    "created_at": CocktailRecipeModel.created_at,
    "updated_at": CocktailRecipeModel.updated_at,
}

TOP_CATEGORIES_LIMIT = 5


def _with_composition():
    return selectinload(CocktailRecipeModel.cocktail_ingredients).selectinload(CocktailIngredientModel.ingredient)


def _blank(value: Optional[str]) -> bool:
    return value is None or not value.strip()


def _or_default(value: Optional[str], default: str) -> str:
    return default if _blank(value) else value


def _validate_lines(lines: Sequence[CocktailIngredientInput]) -> None:
    for line in lines:
        if _blank(line.name):
            raise InvalidInput("Ingredient name is required for every composition line")
        if _blank(line.quantity):
            raise InvalidInput(f"Quantity is required for ingredient '{line.name.strip()}'")


class CocktailCatalog:
    def __init__(self, session: AsyncSession, ingredients: Optional[IngredientCatalog] = None):
        self._session = session
        self._ingredients = ingredients or IngredientCatalog(session)

    # ------------------------------------------------------------------ reads

    async def _load(self, cocktail_id: int) -> Optional[CocktailRecipeModel]:
        result = await self._session.execute(
            select(CocktailRecipeModel)
            .options(_with_composition())
            .where(CocktailRecipeModel.id == cocktail_id)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def get(self, cocktail_id: int) -> CocktailRecipeModel:
        cocktail = await self._load(cocktail_id)
        if cocktail is None:
            raise NotFound(f"Cocktail with id {cocktail_id} not found")
        return cocktail

    async def get_by_name(self, name: str) -> Optional[CocktailRecipeModel]:
        """Exact, case-sensitive lookup"""
        result = await self._session.execute(
            select(CocktailRecipeModel)
            .options(_with_composition())
            .where(CocktailRecipeModel.name == name)
        )
        return result.scalar_one_or_none()

    async def exists_by_name(self, name: str) -> bool:
        found = await self._session.scalar(
            select(CocktailRecipeModel.id).where(CocktailRecipeModel.name == name)
        )
        return found is not None

    async def _list(self, *conditions) -> List[CocktailRecipeModel]:
        result = await self._session.execute(
            select(CocktailRecipeModel)
            .options(_with_composition())
            .where(*conditions)
            .order_by(CocktailRecipeModel.name)
        )
        return list(result.scalars().all())

    async def list_all(self) -> List[CocktailRecipeModel]:
        return await self._list()

    async def list_by_category(self, category: str) -> List[CocktailRecipeModel]:
        return await self._list(CocktailRecipeModel.category == category)

    async def list_by_alcoholic(self, alcoholic: bool) -> List[CocktailRecipeModel]:
        return await self._list(CocktailRecipeModel.alcoholic == alcoholic)

    async def search(self, name: str) -> List[CocktailRecipeModel]:
        """Substring match with case folded by the database on both sides.
        SQLite only folds ASCII letters; Postgres folds the full alphabet."""
        return await self._list(
            CocktailRecipeModel.name.icontains(name or "", autoescape=True)
        )

    async def _page(self, params: PageParams, *conditions) -> Page:
        stmt = select(CocktailRecipeModel).where(*conditions)
        rows, total = await fetch_page(self._session, stmt, params, SORTABLE, options=[_with_composition()])
        return Page.build([r.to_schema for r in rows], params, total)

    async def list_page(self, params: PageParams) -> Page:
        return await self._page(params)

    async def list_by_category_page(self, category: str, params: PageParams) -> Page:
        return await self._page(params, CocktailRecipeModel.category == category)

    async def search_page(self, name: str, params: PageParams) -> Page:
        return await self._page(
            params,
            CocktailRecipeModel.name.icontains(name or "", autoescape=True),
        )

    async def list_page_with_favorites(self, user_id: str, params: PageParams) -> Page:
        """Page of cocktails, each flagged with the caller's favorite state and color"""
        rows, total = await fetch_page(
            self._session, select(CocktailRecipeModel), params, SORTABLE, options=[_with_composition()]
        )
        result = await self._session.execute(
            select(FavoriteModel)
            .options(selectinload(FavoriteModel.color))
            .where(
                FavoriteModel.user_id == user_id,
                FavoriteModel.cocktail_id.in_([c.id for c in rows]),
            )
        )
        by_cocktail = {f.cocktail_id: f for f in result.scalars().all()}

        items = []
        for cocktail in rows:
            favorite = by_cocktail.get(cocktail.id)
            items.append({
                "cocktail": cocktail.to_schema,
                "is_favorite": favorite is not None,
                "favorite_color": favorite.color.to_schema if favorite is not None and favorite.color else None,
            })
        return Page.build(items, params, total)

    async def count(self) -> int:
        return int(await self._session.scalar(select(func.count(CocktailRecipeModel.id))) or 0)

    async def all_ids(self) -> List[int]:
        result = await self._session.execute(select(CocktailRecipeModel.id).order_by(CocktailRecipeModel.id))
        return list(result.scalars().all())

    async def id_gaps_report(self) -> Dict:
        """Holes in the id sequence and the id the sequence would hand out next.

        Only meaningful because ids come from an increasing integer sequence.
        """
        existing = await self.all_ids()
        max_id = existing[-1] if existing else 0
        present = set(existing)
        missing = [i for i in range(1, max_id + 1) if i not in present]
        return {
            "existing_ids": existing,
            "missing_ids": missing,
            "total_cocktails": len(existing),
            "max_id": max_id,
            "next_available_id": max_id + 1,
        }

    async def stats(self) -> Dict:
        total = await self.count()
        alcoholic = int(
            await self._session.scalar(
                select(func.count(CocktailRecipeModel.id)).where(CocktailRecipeModel.alcoholic.is_(True))
            )
            or 0
        )

        cnt = func.count(CocktailRecipeModel.id)
        rows = await self._session.execute(
            select(CocktailRecipeModel.category, cnt)
            .where(CocktailRecipeModel.category.is_not(None), func.trim(CocktailRecipeModel.category) != "")
            .group_by(CocktailRecipeModel.category)
            .order_by(cnt.desc(), CocktailRecipeModel.category.asc())
            .limit(TOP_CATEGORIES_LIMIT)
        )
        top_categories = {category: int(n) for category, n in rows.all()}

        async def latest(column):
            res = await self._session.execute(
                select(CocktailRecipeModel)
                .options(_with_composition())
                .order_by(column.desc(), CocktailRecipeModel.id.desc())
                .limit(1)
            )
            found = res.scalar_one_or_none()
            return found.to_schema if found else None

        return {
            "total_cocktails": total,
            "alcoholic": alcoholic,
            "non_alcoholic": total - alcoholic,
            "top_categories": top_categories,
            "last_created": await latest(CocktailRecipeModel.created_at),
            "last_updated": await latest(CocktailRecipeModel.updated_at),
        }

    # ----------------------------------------------------------------- writes

    async def _resolve_lines(self, lines: Sequence[CocktailIngredientInput]):
        """Find-or-create every ingredient before anything is attached"""
        resolved = []
        for line in lines:
            ingredient = await self._ingredients.resolve(line.name, line.category, line.unit)
            resolved.append((ingredient, line.quantity.strip()))
        return resolved

    @staticmethod
    def _attach(cocktail: CocktailRecipeModel, ingredient: IngredientModel, quantity: str) -> None:
        line = cocktail.line_for(ingredient.id)
        if line is not None:
            line.quantity = quantity
            return
        cocktail.cocktail_ingredients.append(
            CocktailIngredientModel(ingredient_id=ingredient.id, ingredient=ingredient, quantity=quantity)
        )

    async def _commit(self, conflict_message: str) -> None:
        try:
            await self._session.commit()
        except IntegrityError:
            await self._session.rollback()
            logger.warning("Integrity violation: %s", conflict_message)
            raise Conflict(conflict_message)

    async def create(self, payload: CocktailRecipeCreate) -> CocktailRecipeModel:
        """Create the cocktail and all its composition lines in one unit of work."""
        if _blank(payload.name):
            raise InvalidInput("Cocktail name is required")
        if not payload.ingredients:
            raise InvalidInput("A cocktail needs at least one ingredient")
        _validate_lines(payload.ingredients)

        name = payload.name.strip()
        if await self.exists_by_name(name):
            raise Conflict(f"A cocktail named '{name}' already exists")

        try:
            resolved = await self._resolve_lines(payload.ingredients)
            cocktail = CocktailRecipeModel(
                name=name,
                description=_or_default(payload.description, DEFAULT_DESCRIPTION),
                category=_or_default(payload.category, DEFAULT_CATEGORY),
                glass_type=_or_default(payload.glass_type, DEFAULT_GLASS_TYPE),
                preparation_method=_or_default(payload.preparation_method, DEFAULT_PREPARATION_METHOD),
                image_url=payload.image_url,
                alcoholic=True if payload.alcoholic is None else payload.alcoholic,
                cocktail_ingredients=[],
            )
            for ingredient, quantity in resolved:
                self._attach(cocktail, ingredient, quantity)
            self._session.add(cocktail)
        except Exception:
            await self._session.rollback()
            raise
        await self._commit(f"A cocktail named '{name}' already exists")

        logger.info(
            "Created cocktail %r (id=%s) with %s ingredient(s)",
            cocktail.name, cocktail.id, len(cocktail.cocktail_ingredients),
        )
        return await self.get(cocktail.id)

    async def update_attributes(self, cocktail_id: int, payload: CocktailRecipeUpdate) -> CocktailRecipeModel:
        """Apply the non-null fields of ``payload``; composition is left alone."""
        cocktail = await self.get(cocktail_id)

        data = payload.model_dump(exclude_none=True)
        if "name" in data:
            name = data["name"].strip()
            if not name:
                raise InvalidInput("Cocktail name cannot be blank")
            if name != cocktail.name and await self.exists_by_name(name):
                raise Conflict(f"A cocktail named '{name}' already exists")
            data["name"] = name
        for field, value in data.items():
            setattr(cocktail, field, value)
        cocktail.touch()

        await self._commit(f"A cocktail named '{cocktail.name}' already exists")
        return await self.get(cocktail_id)

    async def add_composition_lines(
        self, cocktail_id: int, lines: Sequence[CocktailIngredientInput]
    ) -> CocktailRecipeModel:
        cocktail = await self.get(cocktail_id)
        if not lines:
            raise InvalidInput("The ingredient list cannot be empty")
        _validate_lines(lines)

        try:
            resolved = await self._resolve_lines(lines)
            for ingredient, quantity in resolved:
                self._attach(cocktail, ingredient, quantity)
            cocktail.touch()
        except Exception:
            await self._session.rollback()
            raise
        await self._commit(f"Cocktail {cocktail_id} was modified concurrently")

        logger.info("Added %s ingredient line(s) to cocktail %s", len(lines), cocktail_id)
        return await self.get(cocktail_id)

    async def _remove_line(self, cocktail: CocktailRecipeModel, line: CocktailIngredientModel) -> CocktailRecipeModel:
        # Only the join row goes; the ingredient stays in the catalog
        cocktail.cocktail_ingredients.remove(line)
        cocktail.touch()
        try:
            await self._session.commit()
        except Exception:
            await self._session.rollback()
            raise
        logger.info("Removed ingredient %s from cocktail %s", line.ingredient_id, cocktail.id)
        return await self.get(cocktail.id)

    async def remove_composition_line(self, cocktail_id: int, ingredient_name: str) -> CocktailRecipeModel:
        """Detach an ingredient by its exact (case-sensitive) name"""
        cocktail = await self.get(cocktail_id)
        line = next(
            (ci for ci in cocktail.cocktail_ingredients if ci.ingredient.name == ingredient_name),
            None,
        )
        if line is None:
            raise NotFound(f"Ingredient '{ingredient_name}' is not part of cocktail {cocktail_id}")
        return await self._remove_line(cocktail, line)

    async def remove_composition_line_by_id(self, cocktail_id: int, ingredient_id: int) -> CocktailRecipeModel:
        cocktail = await self.get(cocktail_id)
        line = cocktail.line_for(ingredient_id)
        if line is None:
            raise NotFound(f"Ingredient with id {ingredient_id} is not part of cocktail {cocktail_id}")
        return await self._remove_line(cocktail, line)

    async def update_composition_quantity(
        self, cocktail_id: int, ingredient_id: int, quantity: Optional[str]
    ) -> CocktailRecipeModel:
        if _blank(quantity):
            raise InvalidInput("quantity is required")
        cocktail = await self.get(cocktail_id)
        line = cocktail.line_for(ingredient_id)
        if line is None:
            raise NotFound(f"Ingredient with id {ingredient_id} is not part of cocktail {cocktail_id}")

        line.quantity = quantity.strip()
        cocktail.touch()
        try:
            await self._session.commit()
        except Exception:
            await self._session.rollback()
            raise
        return await self.get(cocktail_id)

    async def delete(self, cocktail_id: int) -> None:
        """Delete the cocktail, its composition rows and every favorite pointing at it"""
        cocktail = await self.get(cocktail_id)
        try:
            removed = await self._session.execute(
                delete(FavoriteModel).where(FavoriteModel.cocktail_id == cocktail_id)
            )
            await self._session.delete(cocktail)
            await self._session.commit()
        except Exception:
            await self._session.rollback()
            raise
        logger.info("Deleted cocktail %s (and %s favorite(s))", cocktail_id, removed.rowcount)
