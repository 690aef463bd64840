import os
import tempfile
from pathlib import Path

# Keep per-run log files out of the working tree
os.environ.setdefault("LOG_DIR", str(Path(tempfile.gettempdir()) / "tag-resolver-test-logs"))

import pytest

from db.db_connector import DBConnector
from db.stores import CategoryStore, ProductStore
from services.llm.prompt_builder import PromptBuilder


class FakeOracle:
    """Scripted stand-in for PerplexityClient.

    `dishes` maps user input -> dish answer, `categories` maps dish ->
    category answer. An Exception value is raised instead of returned.
    """

    def __init__(self, dishes=None, categories=None):
        self.dishes = dict(dishes or {})
        self.categories = dict(categories or {})
        self.calls = []
        self._dish_prompt = PromptBuilder().build_dish_prompt()

    def send(self, system_message, user_text):
        kind = "dish" if system_message == self._dish_prompt else "category"
        self.calls.append((kind, user_text))
        table = self.dishes if kind == "dish" else self.categories
        if user_text not in table:
            raise AssertionError(f"Unexpected {kind} request for {user_text!r}")
        answer = table[user_text]
        if isinstance(answer, Exception):
            raise answer
        return answer

    def calls_of(self, kind):
        return [text for k, text in self.calls if k == kind]


@pytest.fixture
def connector(tmp_path):
    """Fresh SQLite database per test, schema created."""
    conn = DBConnector(f"sqlite:///{tmp_path / 'tags.db'}")
    conn.create_schema()
    yield conn
    conn.dispose()


@pytest.fixture
def categories(connector):
    return CategoryStore(connector)


@pytest.fixture
def products(connector):
    return ProductStore(connector)
