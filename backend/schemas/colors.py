from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime


class Color(BaseModel):
    id: int
    name: str
    hex_code: str
    description: Optional[str] = None
    created_at: Optional[datetime] = None


class ColorCreate(BaseModel):
    # Missing values are reported by the service as 400
    name: Optional[str] = None
    hex_code: Optional[str] = Field(None, examples=["#DC143C"])
    description: Optional[str] = None
