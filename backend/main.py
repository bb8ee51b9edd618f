import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from core.config import settings
from core.errors import CatalogError
from db.database import create_db_and_tables
from routers.cocktail_ingredient import router as cocktail_ingredient_router
from routers.cocktails import router as cocktails_router
from routers.colors import router as colors_router
from routers.favorites import router as favorites_router
from routers.ingredients import router as ingredients_router

logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    await create_db_and_tables()
    logger.info("Database tables ready")
    yield


app = FastAPI(
    title="Cocktail Catalog API",
    description="API for managing cocktails, their ingredients and users' favorites",
    version="0.1.0",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)


@app.exception_handler(CatalogError)
async def catalog_error_handler(request: Request, exc: CatalogError):
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})


# Cocktail routes (public list, catalog, admin reports)
app.include_router(cocktails_router, prefix="/api", tags=["cocktails"])
app.include_router(cocktail_ingredient_router, prefix="/api", tags=["cocktail-ingredients"])
app.include_router(ingredients_router, prefix="/api/ingredients", tags=["ingredients"])
app.include_router(favorites_router, prefix="/api/favorites", tags=["favorites"])
app.include_router(colors_router, prefix="/api", tags=["colors"])

if __name__ == "__main__":
    uvicorn.run("main:app", host="0.0.0.0", port=8000, reload=True)
