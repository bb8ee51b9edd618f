from sqlalchemy import Column, DateTime, Integer, String, Text
from sqlalchemy.orm import relationship
from .database import Base, utcnow

DEFAULT_INGREDIENT_CATEGORY = "Altro"
DEFAULT_INGREDIENT_UNIT = "pezzi"


def normalize_name(name: str) -> str:
    """Key used for case-insensitive ingredient uniqueness"""
    return (name or "").strip().lower()


class Ingredient(Base):
    """Ingredient model - reusable ingredients shared by many cocktails"""
    __tablename__ = "ingredients"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(100), nullable=False)
    # Lower-cased copy of name; the unique index makes find-or-create race safe
    name_key = Column(String(100), nullable=False, unique=True, index=True)
    category = Column(String(50), nullable=True, default=DEFAULT_INGREDIENT_CATEGORY)
    unit = Column(String(30), nullable=True, default=DEFAULT_INGREDIENT_UNIT)
    description = Column(Text, nullable=True)
    created_at = Column(DateTime, default=utcnow, nullable=False)

    # Reverse side of the composition; never serialized
    cocktail_ingredients = relationship("CocktailIngredient", back_populates="ingredient", passive_deletes=True)

    def rename(self, name: str) -> None:
        self.name = name.strip()
        self.name_key = normalize_name(name)

    @property
    def to_schema(self):
        """Convert Ingredient model to schema dictionary format"""
        return {
            "id": self.id,
            "name": self.name,
            "category": self.category,
            "unit": self.unit,
            "description": self.description,
            "created_at": self.created_at,
        }
