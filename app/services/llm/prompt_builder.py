from __future__ import annotations

from config.constants import (
    CATEGORY_SYSTEM_MESSAGE,
    DISH_SYSTEM_MESSAGE,
    PROMPT_VERSION,
    OracleSignal,
)


class PromptBuilder:
    """Builds the two system instructions sent to the oracle."""

    version = PROMPT_VERSION

    def __init__(
        self,
        dish_template: str = DISH_SYSTEM_MESSAGE,
        category_template: str = CATEGORY_SYSTEM_MESSAGE,
    ):
        self.dish_template = dish_template
        self.category_template = category_template

    # -------------------- Dish classification -------------------- #

    def build_dish_prompt(self) -> str:
        """Instruction: answer with the dish name, the suggest signal, or the
        not-food signal."""
        return self.dish_template.format(
            suggest=OracleSignal.SUGGEST.value,
            not_food=OracleSignal.NOT_FOOD.value,
        )

    # -------------------- Category classification -------------------- #

    def build_category_prompt(self) -> str:
        """Instruction: answer with the establishment type serving a dish."""
        return self.category_template.format(not_food=OracleSignal.NOT_FOOD.value)


__all__ = ["PromptBuilder"]
