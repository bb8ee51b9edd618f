from sqlalchemy import Boolean, Column, DateTime, Integer, String, Text
from sqlalchemy.orm import relationship
from .database import Base, utcnow

DEFAULT_DESCRIPTION = "Un buonissimo cocktail"
DEFAULT_CATEGORY = "Altro"
DEFAULT_GLASS_TYPE = "Bicchiere standard"
DEFAULT_PREPARATION_METHOD = "Mescolare"


class CocktailRecipe(Base):
    """CocktailRecipe model - recipes with unique name and a composition of ingredients with quantities"""
    __tablename__ = "cocktail_recipes"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(100), nullable=False, unique=True, index=True)
    description = Column(Text, nullable=True)
    category = Column(String(50), nullable=True, index=True)
    glass_type = Column(String(50), nullable=True)
    preparation_method = Column(Text, nullable=True)
    image_url = Column(String(255), nullable=True)
    alcoholic = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)

    # Relationship through association object to access ingredients with quantities
    cocktail_ingredients = relationship(
        "CocktailIngredient",
        back_populates="cocktail",
        cascade="all, delete-orphan",
        order_by="CocktailIngredient.id",
    )

    def touch(self) -> None:
        self.updated_at = utcnow()

    def line_for(self, ingredient_id: int):
        return next(
            (ci for ci in self.cocktail_ingredients if ci.ingredient_id == ingredient_id),
            None,
        )

    # Property to convert model to schema dictionary
    @property
    def to_schema(self):
        """Convert CocktailRecipe model to schema dictionary format.
        Composition goes out as a flat list; ingredients never point back to cocktails."""
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "category": self.category,
            "glass_type": self.glass_type,
            "preparation_method": self.preparation_method,
            "image_url": self.image_url,
            "alcoholic": self.alcoholic,
            "created_at": self.created_at,
            "updated_at": self.updated_at,
            "ingredients": [ci.to_schema for ci in self.cocktail_ingredients],
        }
