from pydantic import BaseModel
from typing import Optional


class MenuItemRead(BaseModel):
    id: int
    name: str
    category: Optional[str] = None
    price: int

    class Config:
        from_attributes = True
