from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.orm import relationship
from .database import Base, utcnow


class Favorite(Base):
    """A user's bookmark of a cocktail.

    user_id is the subject claim of the identity provider, not a local foreign key.
    """
    __tablename__ = "favorites"
    __table_args__ = (
        UniqueConstraint("user_id", "cocktail_id", name="uq_favorite_user_cocktail"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(String(255), nullable=False, index=True)
    cocktail_id = Column(Integer, ForeignKey("cocktail_recipes.id", ondelete="CASCADE"), nullable=False, index=True)
    color_id = Column(Integer, ForeignKey("colors.id", ondelete="SET NULL"), nullable=True, index=True)
    created_at = Column(DateTime, default=utcnow, nullable=False)

    cocktail = relationship("CocktailRecipe")
    color = relationship("Color")

    @property
    def to_schema(self):
        return {
            "id": self.id,
            "user_id": self.user_id,
            "cocktail_id": self.cocktail_id,
            "created_at": self.created_at,
            "cocktail": self.cocktail.to_schema if self.cocktail else None,
            "color": self.color.to_schema if self.color else None,
        }
