"""Free-text craving -> tag id resolution.

Pipeline (each step short-circuits):
    1. term already names a tag          -> that tag
    2. oracle: which dish is this?        -> not food / suggestion / dish name
    3. dish already stored as a product   -> the product's tag
    4. oracle: which establishment type?  -> single-token tag name
    5. find-or-create tag, then product   -> the product's tag

No locks and no in-process cache: the stores' unique constraints are the only
guard against concurrent resolutions of the same novel dish.
"""
from __future__ import annotations

import random
from typing import Optional, Protocol

from config.exceptions import PipelineError
from db.stores import CategoryStore, ProductStore
from services.llm.prompt_builder import PromptBuilder
from services.llm.response_parser import parse_category_answer, parse_dish_answer
from services.resolution.outcomes import (
    Failed,
    NotFound,
    NotFoundReason,
    ResolutionOutcome,
    ResolutionSource,
    Resolved,
    classify_error,
)
from utils.logging import get_logger

logger = get_logger(__name__)


class InferenceClient(Protocol):
    def send(self, system_message: str, user_text: str) -> str: ...


class TagResolver:
    def __init__(
        self,
        client: InferenceClient,
        categories: CategoryStore,
        products: ProductStore,
        prompt_builder: Optional[PromptBuilder] = None,
        rng: Optional[random.Random] = None,
    ):
        self.client = client
        self.categories = categories
        self.products = products
        self.prompt_builder = prompt_builder or PromptBuilder()
        self.rng = rng or random.Random()

    def resolve_tag(self, term: str) -> ResolutionOutcome:
        """Resolve `term` to a tag id.

        Never raises for pipeline failures: oracle and store errors come
        back as Failed(kind=...), "not food" as NotFound.
        """
        try:
            return self._resolve(term)
        except PipelineError as e:
            kind = classify_error(e)
            logger.error("Resolution of %r failed (%s): %s", term, kind.value, e)
            return Failed(kind=kind, message=str(e), error=e)

    def get_or_add_tag(self, term: str) -> Optional[int]:
        """Tag id for `term`, or None when it is not food.

        Unlike resolve_tag, failures are raised as the original PipelineError.
        """
        outcome = self.resolve_tag(term)
        if isinstance(outcome, Resolved):
            return outcome.category_id
        if isinstance(outcome, NotFound):
            return None
        raise outcome.error or PipelineError(outcome.message)

    # -------------------- Pipeline steps -------------------- #

    def _resolve(self, term: str) -> ResolutionOutcome:
        if not term or not term.strip():
            logger.debug("Blank term; skipping oracle")
            return NotFound(NotFoundReason.BLANK_INPUT)
        term = term.strip()

        # 1. Direct tag hit
        category = self.categories.find_by_name(term)
        if category is not None:
            logger.info("Term %r matched tag id=%s directly", term, category.id)
            return Resolved(category.id, ResolutionSource.CATEGORY)

        # 2. Dish classification
        answer = parse_dish_answer(
            self.client.send(self.prompt_builder.build_dish_prompt(), term)
        )
        if answer.is_not_food:
            logger.info("Oracle: %r is not food", term)
            return NotFound(NotFoundReason.NOT_FOOD)
        if answer.is_suggestion:
            return self._suggest()
        dish = answer.dish
        logger.debug("Oracle identified dish %r for term %r", dish, term)

        # 3. Product cache hit
        product = self.products.find_by_name(dish)
        if product is not None:
            logger.info("Dish %r known as product id=%s (tag id=%s)", dish, product.id, product.tag_id)
            return Resolved(product.tag_id, ResolutionSource.PRODUCT, dish=product.name)

        # 4. Category classification
        category_name = parse_category_answer(
            self.client.send(self.prompt_builder.build_category_prompt(), dish)
        )
        logger.debug("Oracle placed dish %r in tag %r", dish, category_name)

        # 5. Find-or-create
        category, category_created = self.categories.get_or_create(category_name)
        product, product_created = self.products.get_or_create(dish, category.id)
        logger.info(
            "Dish %r -> tag id=%s '%s' (tag %s, product %s)",
            dish,
            product.tag_id,
            category.name,
            "created" if category_created else "reused",
            "created" if product_created else "reused",
        )
        source = ResolutionSource.CREATED if product_created else ResolutionSource.PRODUCT
        return Resolved(product.tag_id, source, dish=product.name)

    def _suggest(self) -> ResolutionOutcome:
        """Uniform random pick over every stored tag."""
        categories = self.categories.list_all()
        if not categories:
            logger.info("Suggestion requested but no tags exist yet")
            return NotFound(NotFoundReason.NO_CATEGORIES)
        choice = self.rng.choice(categories)
        logger.info("Suggesting tag id=%s '%s' of %d", choice.id, choice.name, len(categories))
        return Resolved(choice.id, ResolutionSource.SUGGESTION)


__all__ = ["InferenceClient", "TagResolver"]
