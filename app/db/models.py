"""ORM models for tags (restaurant categories) and the products mapped to them.

Both tables carry a `name_key` column holding the case-folded name. Lookups
filter on it and the unique constraint sits on it, so "Japonês" and
"JAPONÊS" collide in the database exactly as they do in Python.
"""
from __future__ import annotations

import datetime

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import declarative_base, relationship

from config.constants import NAME_MAX_LENGTH

Base = declarative_base()


def normalize_name(name: str) -> str:
    """Key used for case-insensitive equality and uniqueness."""
    return " ".join(name.split()).casefold()


def _utcnow() -> datetime.datetime:
    return datetime.datetime.now(datetime.timezone.utc)


class Category(Base):
    __tablename__ = "tags"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(NAME_MAX_LENGTH), nullable=False)
    name_key = Column(String(NAME_MAX_LENGTH), nullable=False, unique=True, index=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow, onupdate=_utcnow)

    products = relationship("Product", back_populates="category")

    def __repr__(self) -> str:
        return f"Category(id={self.id!r}, name={self.name!r})"


class Product(Base):
    __tablename__ = "products"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(NAME_MAX_LENGTH), nullable=False)
    name_key = Column(String(NAME_MAX_LENGTH), nullable=False, unique=True, index=True)
    # Tags referenced by a product are never deleted, so no cascade here
    tag_id = Column(Integer, ForeignKey("tags.id"), nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow, onupdate=_utcnow)

    category = relationship("Category", back_populates="products", lazy="joined")

    def __repr__(self) -> str:
        return f"Product(id={self.id!r}, name={self.name!r}, tag_id={self.tag_id!r})"


__all__ = ["Base", "Category", "Product", "normalize_name"]
