from __future__ import annotations

import os
from enum import Enum
from pathlib import Path
from typing import Optional


def get_int_env(key: str, default: Optional[int] = None) -> Optional[int]:
    raw = os.getenv(key)
    if raw is None:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def get_float_env(key: str, default: Optional[float] = None) -> Optional[float]:
    raw = os.getenv(key)
    if raw is None:
        return default
    try:
        return float(raw)
    except ValueError:
        return default


DATA_DIR = Path("data")

# --------------- Persistence ---------------
DEFAULT_DATABASE_URL = f"sqlite:///{DATA_DIR / 'tags.db'}"
NAME_MAX_LENGTH = 100  # Column width for tag and product names

# --------------- Inference (Perplexity) ---------------
PERPLEXITY_DEFAULT_URL = "https://api.perplexity.ai/chat/completions"
PERPLEXITY_DEFAULT_MODEL = "sonar"

# Remote latency is unpredictable; never wait forever on the oracle
INFERENCE_TIMEOUT = get_float_env("INFERENCE_TIMEOUT", 30.0)
INFERENCE_MAX_RETRIES = get_int_env("INFERENCE_MAX_RETRIES", 2)
INFERENCE_BACKOFF = get_float_env("INFERENCE_BACKOFF", 1.0)


class OracleSignal(str, Enum):
    """Literal answers the oracle is told to emit instead of a name.

    The prompt text and the response parser both read these values, so a
    wording change happens in one place.
    """

    NOT_FOOD = "nulo"
    SUGGEST = "sugestao"


# --------------- Prompts ---------------
PROMPT_VERSION = "2"

DISH_SYSTEM_MESSAGE = (
    "Você é um assistente que consegue identificar o que é pedido com base em "
    "uma entrada do usuário. "
    "Exemplos: 'Quero comer sushi' = 'Sushi'; 'Hoje queria um taco' = 'Taco'; "
    "'Estou com vontade comer uma pizza de queijo' = 'Pizza'. "
    "Responda SOMENTE com a palavra do prato ou comida, exatamente assim, "
    "sem explicações, sem texto extra. "
    "Caso o usuário peça uma sugestão ou não saiba o que comer "
    "(ex: 'me surpreenda', 'sei lá, sugere algo'), responda '{suggest}'. "
    "E caso você compreenda que a entrada não é uma comida, "
    "seu retorno será '{not_food}'."
)

CATEGORY_SYSTEM_MESSAGE = (
    "Você é um assistente que responde APENAS com o tipo de estabelecimento "
    "que serve a comida mencionada. "
    "Exemplos: 'Sushi' ou 'Temaki' = 'Japonês'; 'Guacamole' = 'Mexicano'; "
    "'Pizza' = 'Pizzaria'; 'Esfiha' = 'Esfiharia'. "
    "Se o produto inserido for um doce, o retorno deve ser 'Doceria'. "
    "Responda SOMENTE com a palavra do tipo de estabelecimento, exatamente "
    "assim, sem explicações, sem texto extra. "
    "E caso você compreenda que a entrada não é uma comida, "
    "seu retorno será '{not_food}'. "
    "É um produto servido em qual tipo de restaurante?"
)


__all__ = [
    "DATA_DIR",
    "DEFAULT_DATABASE_URL",
    "NAME_MAX_LENGTH",
    "get_int_env",
    "get_float_env",
    # Inference
    "PERPLEXITY_DEFAULT_URL",
    "PERPLEXITY_DEFAULT_MODEL",
    "INFERENCE_TIMEOUT",
    "INFERENCE_MAX_RETRIES",
    "INFERENCE_BACKOFF",
    "OracleSignal",
    # Prompts
    "PROMPT_VERSION",
    "DISH_SYSTEM_MESSAGE",
    "CATEGORY_SYSTEM_MESSAGE",
]
