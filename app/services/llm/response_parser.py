"""Normalisation of raw oracle answers.

The oracle is asked for a bare name, but answers still arrive quoted,
with a trailing period, or spread over several lines. Everything that
turns raw text into a name or a protocol signal lives here.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from config.constants import NAME_MAX_LENGTH, OracleSignal
from config.exceptions import InferenceProtocolError

# Stripped from both ends of an answer; letters and digits are never touched
_EDGE_PUNCTUATION = "\"'`´‘’“”«».,;:!?()[]{}*_-"


def strip_edge_punctuation(text: str) -> str:
    return text.strip().strip(_EDGE_PUNCTUATION).strip()


def first_token(text: Optional[str]) -> str:
    """Return the first whitespace-delimited token, without edge punctuation.

    "  Japonês\\nServe sushi" -> "Japonês"
    "'Pizzaria'."             -> "Pizzaria"
    "..."                     -> ""
    """
    if not text:
        return ""
    tokens = text.split()
    for token in tokens:
        cleaned = strip_edge_punctuation(token)
        if cleaned:
            return cleaned
    return ""


def match_signal(text: Optional[str]) -> Optional[OracleSignal]:
    """Map an answer to a protocol signal, or None for a genuine name."""
    if not text:
        return None
    candidate = strip_edge_punctuation(text).casefold()
    for signal in OracleSignal:
        if candidate == signal.value.casefold():
            return signal
    return None


@dataclass(frozen=True)
class DishAnswer:
    dish: Optional[str] = None
    signal: Optional[OracleSignal] = None

    @property
    def is_not_food(self) -> bool:
        return self.signal is OracleSignal.NOT_FOOD

    @property
    def is_suggestion(self) -> bool:
        return self.signal is OracleSignal.SUGGEST


def parse_dish_answer(text: Optional[str]) -> DishAnswer:
    """Interpret the dish-classification answer.

    Multi-word dish names are kept whole. An empty answer is a protocol
    error, not a "not food" outcome.
    """
    signal = match_signal(text)
    if signal is not None:
        return DishAnswer(signal=signal)
    dish = " ".join(strip_edge_punctuation(text or "").split())
    if not dish:
        raise InferenceProtocolError("Oracle returned an empty dish answer")
    if len(dish) > NAME_MAX_LENGTH:
        raise InferenceProtocolError(f"Oracle dish answer too long ({len(dish)} chars)")
    return DishAnswer(dish=dish)


def parse_category_answer(text: Optional[str]) -> str:
    """Interpret the category-classification answer as a single-token name.

    By the time this runs the input is known to be food, so an empty answer
    or the not-food signal is a protocol error.
    """
    name = first_token(text)
    signal = match_signal(name)
    if signal is not None:
        raise InferenceProtocolError(
            f"Oracle returned signal '{signal.value}' where a category was expected"
        )
    if not name:
        raise InferenceProtocolError("Oracle returned an empty category answer")
    if len(name) > NAME_MAX_LENGTH:
        raise InferenceProtocolError(f"Oracle category answer too long ({len(name)} chars)")
    return name


__all__ = [
    "DishAnswer",
    "first_token",
    "match_signal",
    "parse_category_answer",
    "parse_dish_answer",
    "strip_edge_punctuation",
]
