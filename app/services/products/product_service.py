"""Product catalogue: canonical dishes and the tag each one belongs to."""
from __future__ import annotations

from typing import List, Optional

from config.exceptions import DuplicateProductError, StoreConflictError, TagNotFoundError
from db.models import Product
from db.stores import CategoryStore, ProductStore
from utils.logging import get_logger

logger = get_logger(__name__)


class ProductService:
    def __init__(self, products: ProductStore, categories: CategoryStore):
        self.products = products
        self.categories = categories

    def get_by_id(self, product_id: int) -> Optional[Product]:
        return self.products.find_by_id(product_id)

    def get_by_name(self, name: str) -> Optional[Product]:
        return self.products.find_by_name(name)

    def list_all(self) -> List[Product]:
        """Every product ordered by name, with its tag loaded."""
        return self.products.list_all()

    def create(self, name: str, tag_id: int) -> Product:
        """Register a dish under an existing tag.

        Raises:
            TagNotFoundError: no tag with `tag_id`.
            DuplicateProductError: a product with that name (any casing) exists.
        """
        if self.categories.find_by_id(tag_id) is None:
            raise TagNotFoundError(tag_id)
        if self.products.find_by_name(name) is not None:
            raise DuplicateProductError(name)
        try:
            product = self.products.create(name, tag_id)
        except StoreConflictError as e:
            raise DuplicateProductError(name) from e
        logger.debug("Product %s filed under tag %s", product.id, product.tag_id)
        return product


__all__ = ["ProductService"]
