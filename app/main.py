"""
Tag Resolver - turns free-text cravings into restaurant tags.

Usage:
    python app/main.py "quero comer sushi" "hoje queria um taco"
    python app/main.py --init-db
    python app/main.py --list-tags
    python app/main.py --seed-tag Japonês --seed-tag Pizzaria

Behaviour:
- Terms that already name a tag never reach the oracle
- Dishes seen before reuse their stored tag (no second oracle call)
- New dishes/tags are created once; re-running is idempotent
"""
from __future__ import annotations

import argparse
import os
import random
import time
from dataclasses import dataclass, field
from typing import List, Optional

from dotenv import load_dotenv

from config.constants import DEFAULT_DATABASE_URL
from config.exceptions import DuplicateTagError, PipelineError
from db.db_connector import DBConnector
from db.stores import CategoryStore, ProductStore
from services import PerplexityClient, PromptBuilder, TagResolver, TagService
from services.resolution import Failed, NotFound, Resolved
from utils.logging import get_logger, init_logging
from utils.console import console


# -------------------- Configuration -------------------- #
@dataclass
class ResolverConfig:
    database_url: str = field(default_factory=lambda: os.getenv("DATABASE_URL", DEFAULT_DATABASE_URL))
    seed: Optional[int] = None


# -------------------- Setup -------------------- #
init_logging("resolver")
logger = get_logger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Resolve cravings to restaurant tags.")
    parser.add_argument("terms", nargs="*", help="Free-text inputs, e.g. 'quero comer sushi'")
    parser.add_argument("--init-db", action="store_true",
                        help="Create the tags/products tables if missing")
    parser.add_argument("--list-tags", action="store_true", help="Print every stored tag")
    parser.add_argument("--seed-tag", action="append", default=[], metavar="NAME",
                        help="Create a tag before resolving (repeatable)")
    parser.add_argument("--seed", type=int, default=None,
                        help="Random seed for suggestion picks")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """
    Run the resolver CLI.

    Returns exit code.
    """
    try:
        load_dotenv()
        args = build_parser().parse_args(argv)
        cfg = ResolverConfig(seed=args.seed)
        return run_resolver(cfg, args.terms, args.seed_tag, args.list_tags, init_db=args.init_db)

    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        console.interrupted()
        return 130
    except PipelineError as e:
        logger.error("Pipeline error: %s", e)
        console.error("Pipeline Error", str(e))
        console.pipeline_finished(success=False)
        return 1
    except Exception as e:
        logger.exception("Unexpected error: %s", e)
        console.error("Unexpected Error", str(e))
        console.pipeline_finished(success=False)
        return 1


def run_resolver(
    cfg: ResolverConfig,
    terms: List[str],
    seed_tags: List[str],
    list_tags: bool,
    init_db: bool = False,
) -> int:
    connector = DBConnector(cfg.database_url)
    if init_db:
        connector.create_schema()
        console.success("Database initialized", cfg.database_url)
    elif not connector.has_schema():
        logger.info("No schema found at %s, creating it", cfg.database_url)
        connector.create_schema()
    categories = CategoryStore(connector)
    products = ProductStore(connector)
    tag_service = TagService(categories)

    for name in seed_tags:
        try:
            tag = tag_service.create(name)
            console.success("Tag created", f"{tag.id}  {tag.name}")
        except DuplicateTagError as e:
            console.warning("Tag skipped", str(e))

    if terms:
        client = PerplexityClient.from_env()
        if client is None:
            raise PipelineError("Perplexity not configured (missing PERPLEXITY_API_KEY)")
        logger.info("Perplexity client initialized: model=%s", client.model)

        resolver = TagResolver(
            client=client,
            categories=categories,
            products=products,
            prompt_builder=PromptBuilder(),
            rng=random.Random(cfg.seed),
        )
        console.start("Tag Resolver", f"Database: {cfg.database_url}")
        console.resolution_start(len(terms))

        failures = 0
        for term in terms:
            started = time.time()
            outcome = resolver.resolve_tag(term)
            elapsed = time.time() - started
            if isinstance(outcome, Resolved):
                tag = tag_service.get_by_id(outcome.category_id)
                label = tag.name if tag is not None else "?"
                dish = f", dish '{outcome.dish}'" if outcome.dish else ""
                console.resolution(
                    term, "Resolved",
                    f"tag {outcome.category_id} '{label}' ({outcome.source.value}{dish})",
                    elapsed,
                )
            elif isinstance(outcome, NotFound):
                console.resolution(term, "Not found", outcome.reason.value, elapsed)
            elif isinstance(outcome, Failed):
                failures += 1
                console.resolution(term, "Failed", f"{outcome.kind.value}: {outcome.message}", elapsed)
        console.summary()
        if failures:
            console.pipeline_finished(success=False)
            return 1

    if list_tags:
        console.tag_table([(t.id, t.name) for t in tag_service.list_all()])

    console.pipeline_finished(success=True)
    return 0


if __name__ == "__main__":
    exit(main())
