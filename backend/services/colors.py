"""Color palette used to tag favorites."""
import logging
import re
from typing import List, Optional

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from core.errors import Conflict, InvalidInput, NotFound
from db.database import Color as ColorModel, Favorite as FavoriteModel
from schemas.colors import ColorCreate

logger = logging.getLogger(__name__)

HEX_CODE = re.compile(r"^#[0-9A-Fa-f]{6}$")


class ColorPalette:
    def __init__(self, session: AsyncSession):
        self._session = session

    async def get_all(self) -> List[ColorModel]:
        result = await self._session.execute(select(ColorModel).order_by(ColorModel.name))
        return list(result.scalars().all())

    async def get(self, color_id: int) -> ColorModel:
        color = await self._session.get(ColorModel, color_id)
        if color is None:
            raise NotFound(f"Color with id {color_id} not found")
        return color

    async def get_by_name(self, name: str) -> Optional[ColorModel]:
        result = await self._session.execute(select(ColorModel).where(ColorModel.name == name))
        return result.scalar_one_or_none()

    async def create(self, payload: ColorCreate) -> ColorModel:
        name = (payload.name or "").strip()
        if not name:
            raise InvalidInput("Color name is required")
        hex_code = (payload.hex_code or "").strip()
        if not HEX_CODE.match(hex_code):
            raise InvalidInput(f"'{payload.hex_code}' is not a #RRGGBB color")
        hex_code = hex_code.upper()

        if await self.get_by_name(name) is not None:
            raise Conflict(f"Color '{name}' already exists")
        clash = await self._session.scalar(select(ColorModel.id).where(ColorModel.hex_code == hex_code))
        if clash is not None:
            raise Conflict(f"Color with hex code {hex_code} already exists")

        color = ColorModel(name=name, hex_code=hex_code, description=payload.description)
        self._session.add(color)
        try:
            await self._session.commit()
        except IntegrityError:
            await self._session.rollback()
            raise Conflict(f"Color '{name}' or hex code {hex_code} already exists")
        await self._session.refresh(color)
        logger.info("Created color %r %s (id=%s)", color.name, color.hex_code, color.id)
        return color

    async def delete(self, color_id: int) -> None:
        """Remove the color; favorites that used it keep existing without a color"""
        color = await self.get(color_id)
        try:
            detached = await self._session.execute(
                update(FavoriteModel).where(FavoriteModel.color_id == color_id).values(color_id=None)
            )
            await self._session.delete(color)
            await self._session.commit()
        except Exception:
            await self._session.rollback()
            raise
        logger.info("Deleted color %s, detached from %s favorite(s)", color_id, detached.rowcount)
