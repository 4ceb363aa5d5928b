from sqlalchemy import CheckConstraint, Column, Integer, String, DateTime, func
from ..db.base import Base


class MenuItem(Base):
    __tablename__ = "menu_items"
    __table_args__ = (
        CheckConstraint("price >= 0", name="ck_menu_items_price_non_negative"),
    )

    id = Column(Integer, primary_key=True)
    name = Column(String(128), nullable=False)
    category = Column(String(64), nullable=True)  # напитки, еда, десерт и т.д.
    price = Column(Integer, nullable=False)  # в минимальных единицах валюты
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
