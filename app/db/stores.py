"""Keyed-by-name stores for tags and products.

Name comparisons go through `normalize_name`, the same key the unique
constraints are declared on. Creating a record that already exists raises
StoreConflictError; `get_or_create` absorbs that conflict by re-reading the
row that won the race.
"""
from __future__ import annotations

import datetime
from typing import List, Optional, Tuple

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError

from config.constants import NAME_MAX_LENGTH
from config.exceptions import StoreConflictError, StoreUnavailableError, TagNotFoundError
from db.db_connector import DBConnector
from db.models import Category, Product, normalize_name
from utils.logging import get_logger

logger = get_logger(__name__)


def _clean_name(name: str) -> str:
    cleaned = " ".join((name or "").split())
    if not cleaned:
        raise ValueError("Name must not be empty")
    if len(cleaned) > NAME_MAX_LENGTH:
        raise ValueError(f"Name longer than {NAME_MAX_LENGTH} characters: '{cleaned[:20]}...'")
    return cleaned


class CategoryStore:
    """Tags (restaurant categories), unique by case-insensitive name."""

    def __init__(self, connector: DBConnector):
        self.connector = connector

    def find_by_name(self, name: str) -> Optional[Category]:
        key = normalize_name(name or "")
        if not key:
            return None
        with self.connector.session_scope() as session:
            return session.scalars(
                select(Category).where(Category.name_key == key)
            ).first()

    def find_by_id(self, category_id: int) -> Optional[Category]:
        with self.connector.session_scope() as session:
            return session.get(Category, category_id)

    def list_all(self) -> List[Category]:
        with self.connector.session_scope() as session:
            return list(session.scalars(select(Category).order_by(Category.name)))

    def create(self, name: str) -> Category:
        cleaned = _clean_name(name)
        category = Category(name=cleaned, name_key=normalize_name(cleaned))
        try:
            with self.connector.session_scope() as session:
                session.add(category)
                session.flush()
        except IntegrityError as exc:
            logger.info("Tag '%s' already exists (concurrent create)", cleaned)
            raise StoreConflictError("Tag", cleaned) from exc
        logger.info("Created tag id=%s name='%s'", category.id, category.name)
        return category

    def get_or_create(self, name: str) -> Tuple[Category, bool]:
        """Return (tag, created). A lost create race yields the winner's row."""
        existing = self.find_by_name(name)
        if existing is not None:
            return existing, False
        try:
            return self.create(name), True
        except StoreConflictError:
            winner = self.find_by_name(name)
            if winner is None:
                raise StoreUnavailableError(
                    f"Tag '{name}' reported as duplicate but could not be re-read"
                )
            logger.debug("Reusing tag id=%s after conflict on '%s'", winner.id, name)
            return winner, False

    def rename(self, category_id: int, new_name: str) -> Category:
        cleaned = _clean_name(new_name)
        try:
            with self.connector.session_scope() as session:
                category = session.get(Category, category_id)
                if category is None:
                    raise TagNotFoundError(category_id)
                category.name = cleaned
                category.name_key = normalize_name(cleaned)
                category.updated_at = datetime.datetime.now(datetime.timezone.utc)
                session.flush()
        except IntegrityError as exc:
            raise StoreConflictError("Tag", cleaned) from exc
        logger.info("Renamed tag id=%s to '%s'", category.id, category.name)
        return category


class ProductStore:
    """Canonical dishes, each attached to exactly one tag."""

    def __init__(self, connector: DBConnector):
        self.connector = connector

    def find_by_name(self, name: str) -> Optional[Product]:
        key = normalize_name(name or "")
        if not key:
            return None
        with self.connector.session_scope() as session:
            return session.scalars(
                select(Product).where(Product.name_key == key)
            ).first()

    def find_by_id(self, product_id: int) -> Optional[Product]:
        with self.connector.session_scope() as session:
            return session.get(Product, product_id)

    def list_all(self) -> List[Product]:
        with self.connector.session_scope() as session:
            return list(session.scalars(select(Product).order_by(Product.name)))

    def create(self, name: str, category_id: int) -> Product:
        """Insert a product bound to an existing tag in one transaction."""
        cleaned = _clean_name(name)
        try:
            with self.connector.session_scope() as session:
                category = session.get(Category, category_id)
                if category is None:
                    raise TagNotFoundError(category_id)
                product = Product(
                    name=cleaned,
                    name_key=normalize_name(cleaned),
                    tag_id=category.id,
                    category=category,
                )
                session.add(product)
                session.flush()
        except IntegrityError as exc:
            if self.find_by_name(cleaned) is None:
                raise StoreUnavailableError(
                    f"Integrity violation creating product '{cleaned}': {exc}"
                ) from exc
            logger.info("Product '%s' already exists (concurrent create)", cleaned)
            raise StoreConflictError("Product", cleaned) from exc
        logger.info(
            "Created product id=%s name='%s' tag_id=%s", product.id, product.name, product.tag_id
        )
        return product

    def get_or_create(self, name: str, category_id: int) -> Tuple[Product, bool]:
        """Return (product, created). A lost create race yields the winner's row,
        which may point at a different tag than `category_id`."""
        existing = self.find_by_name(name)
        if existing is not None:
            return existing, False
        try:
            return self.create(name, category_id), True
        except StoreConflictError:
            winner = self.find_by_name(name)
            if winner is None:
                raise StoreUnavailableError(
                    f"Product '{name}' reported as duplicate but could not be re-read"
                )
            logger.debug(
                "Reusing product id=%s (tag_id=%s) after conflict on '%s'",
                winner.id,
                winner.tag_id,
                name,
            )
            return winner, False


__all__ = ["CategoryStore", "ProductStore"]
