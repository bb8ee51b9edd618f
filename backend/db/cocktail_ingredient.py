from sqlalchemy import Column, Integer, ForeignKey, String, UniqueConstraint
from sqlalchemy.orm import relationship
from .database import Base


class CocktailIngredient(Base):
    """Association object for many-to-many relationship between CocktailRecipe and Ingredient
    Stores the quantity of each ingredient in each recipe ("50ml", "1 pezzo")"""
    __tablename__ = "cocktail_ingredients"
    __table_args__ = (
        UniqueConstraint("cocktail_id", "ingredient_id", name="uq_cocktail_ingredient"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    cocktail_id = Column(Integer, ForeignKey('cocktail_recipes.id', ondelete='CASCADE'), nullable=False, index=True)
    ingredient_id = Column(Integer, ForeignKey('ingredients.id', ondelete='RESTRICT'), nullable=False, index=True)
    quantity = Column(String(50), nullable=False)

    # Relationships to access the related objects
    cocktail = relationship("CocktailRecipe", back_populates="cocktail_ingredients")
    ingredient = relationship("Ingredient", back_populates="cocktail_ingredients")

    @property
    def to_schema(self):
        """Flat projection used under the owning cocktail"""
        return {
            "id": self.id,
            "ingredient_id": self.ingredient_id,
            "ingredient_name": self.ingredient.name if self.ingredient else None,
            "quantity": self.quantity,
        }
