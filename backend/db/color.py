from sqlalchemy import Column, DateTime, Integer, String, Text
from .database import Base, utcnow


class Color(Base):
    """Display color a user can pin on one of their favorites"""
    __tablename__ = "colors"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(50), nullable=False, unique=True, index=True)
    hex_code = Column(String(7), nullable=False, unique=True)  # '#RRGGBB'
    description = Column(Text, nullable=True)
    created_at = Column(DateTime, default=utcnow, nullable=False)

    @property
    def to_schema(self):
        return {
            "id": self.id,
            "name": self.name,
            "hex_code": self.hex_code,
            "description": self.description,
            "created_at": self.created_at,
        }
