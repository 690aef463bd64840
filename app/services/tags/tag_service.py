"""Tag management used by the admin side of the catalogue."""
from __future__ import annotations

from typing import List, Optional

from config.exceptions import DuplicateTagError, StoreConflictError
from db.models import Category, normalize_name
from db.stores import CategoryStore
from utils.logging import get_logger

logger = get_logger(__name__)


class TagService:
    def __init__(self, categories: CategoryStore):
        self.categories = categories

    def get_by_id(self, tag_id: int) -> Optional[Category]:
        return self.categories.find_by_id(tag_id)

    def get_by_name(self, name: str) -> Optional[Category]:
        return self.categories.find_by_name(name)

    def list_all(self) -> List[Category]:
        return self.categories.list_all()

    def create(self, name: str) -> Category:
        """Create a tag; raises DuplicateTagError if the name is taken."""
        if self.categories.find_by_name(name) is not None:
            raise DuplicateTagError(name)
        try:
            return self.categories.create(name)
        except StoreConflictError as e:
            raise DuplicateTagError(name) from e

    def rename(self, tag_id: int, new_name: str) -> Category:
        """Rename a tag. Changing only the casing of its own name is allowed.

        Raises:
            TagNotFoundError: no tag with `tag_id`.
            DuplicateTagError: another tag already uses `new_name`.
        """
        other = self.categories.find_by_name(new_name)
        if other is not None and other.id != tag_id:
            raise DuplicateTagError(new_name)
        try:
            category = self.categories.rename(tag_id, new_name)
        except StoreConflictError as e:
            raise DuplicateTagError(new_name) from e
        logger.debug("Tag %s now keyed as %r", tag_id, normalize_name(category.name))
        return category


__all__ = ["TagService"]
