from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List

from core.auth import Principal, current_admin
from db.database import get_async_session
from schemas.colors import Color, ColorCreate
from services.colors import ColorPalette

router = APIRouter()


@router.get("/public/colors", response_model=List[Color])
async def get_colors(db: AsyncSession = Depends(get_async_session)):
    """Get all colors, sorted by name"""
    colors = await ColorPalette(db).get_all()
    return [color.to_schema for color in colors]


@router.get("/public/colors/{color_id}", response_model=Color)
async def get_color(color_id: int, db: AsyncSession = Depends(get_async_session)):
    color = await ColorPalette(db).get(color_id)
    return color.to_schema


@router.post("/admin/colors", response_model=Color, status_code=status.HTTP_201_CREATED)
async def create_color(
    color: ColorCreate,
    principal: Principal = Depends(current_admin),
    db: AsyncSession = Depends(get_async_session),
):
    created = await ColorPalette(db).create(color)
    return created.to_schema


@router.delete("/admin/colors/{color_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_color(
    color_id: int,
    principal: Principal = Depends(current_admin),
    db: AsyncSession = Depends(get_async_session),
):
    """Delete a color; favorites using it lose their color"""
    await ColorPalette(db).delete(color_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
