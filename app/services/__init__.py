"""Tag resolution services.

Exports:
    PerplexityClient: Thin wrapper around the Perplexity chat completion endpoint.
    PromptBuilder: Builds the dish and category system instructions.
    TagResolver: Craving text -> tag id pipeline.
    TagService: Tag lookup, creation and renaming.
    ProductService: Product lookup and creation under an existing tag.
"""

from .llm.perplexity_client import PerplexityClient
from .llm.prompt_builder import PromptBuilder
from .products.product_service import ProductService
from .resolution.tag_resolver import TagResolver
from .tags.tag_service import TagService

__all__ = [
    "PerplexityClient",
    "ProductService",
    "PromptBuilder",
    "TagResolver",
    "TagService",
]
