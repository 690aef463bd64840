"""Oracle (LLM) services.

Exports:
	PerplexityClient: Thin wrapper around the Perplexity chat completion endpoint.
	PromptBuilder: Builds the dish and category system instructions.
	parse_dish_answer / parse_category_answer: Turn raw answers into names or signals.
	first_token: Single-token normalisation used for category answers.
"""

from .perplexity_client import PerplexityClient
from .prompt_builder import PromptBuilder
from .response_parser import (
	DishAnswer,
	first_token,
	parse_category_answer,
	parse_dish_answer,
)

__all__ = [
	"PerplexityClient",
	"PromptBuilder",
	"DishAnswer",
	"first_token",
	"parse_category_answer",
	"parse_dish_answer",
]
