"""
Turns raw inference API payloads into a sentiment label and a keyword list.

Both functions raise MalformedPayloadError rather than guessing when the
payload does not look like model output; the caller decides what a bad
payload means for the request.
"""

from enum import Enum
from typing import Any, Iterable, List, Optional, Tuple


class Sentiment(str, Enum):
    POSITIVE = "POSITIVE"
    NEGATIVE = "NEGATIVE"
    NEUTRAL = "NEUTRAL"


# NER categories kept as keywords: person, organization, location, misc
ALLOWED_ENTITY_GROUPS = {"PER", "ORG", "LOC", "MISC"}

_LABEL_ALIASES = {
    "POSITIVE": Sentiment.POSITIVE,
    "POS": Sentiment.POSITIVE,
    "NEGATIVE": Sentiment.NEGATIVE,
    "NEG": Sentiment.NEGATIVE,
    "NEUTRAL": Sentiment.NEUTRAL,
    "NEU": Sentiment.NEUTRAL,
}


class MalformedPayloadError(ValueError):
    """Model output did not have the expected shape."""


def _as_score(value: Any) -> Optional[float]:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    return float(value)


def select_sentiment(payload: Any, confidence_threshold: float = 0.0) -> Tuple[Sentiment, float]:
    """
    Pick the highest-scoring label from a text-classification payload.

    Accepts ``[[{"label", "score"}, ...]]`` (one list per input) as well as
    the flat ``[{"label", "score"}, ...]`` form. A winner that does not
    beat ``confidence_threshold`` is reported as NEUTRAL with its score.

    Raises:
        MalformedPayloadError: empty payload, missing fields, unknown label
    """
    if isinstance(payload, dict) and "error" in payload:
        raise MalformedPayloadError(f"model returned an error: {payload['error']}")
    if not isinstance(payload, list) or not payload:
        raise MalformedPayloadError("expected a non-empty list of label scores")

    candidates = payload[0] if isinstance(payload[0], list) else payload
    if not candidates:
        raise MalformedPayloadError("no label scores returned")

    best_label, best_score = None, None
    for item in candidates:
        if not isinstance(item, dict):
            raise MalformedPayloadError("label score is not an object")
        label, score = item.get("label"), _as_score(item.get("score"))
        if not isinstance(label, str) or score is None:
            raise MalformedPayloadError("label score without label or numeric score")
        if best_score is None or score > best_score:
            best_label, best_score = label, score

    sentiment = _LABEL_ALIASES.get(best_label.strip().upper())
    if sentiment is None:
        raise MalformedPayloadError(f"unknown sentiment label {best_label!r}")

    if best_score <= confidence_threshold:
        return Sentiment.NEUTRAL, best_score
    return sentiment, best_score


def _entity_group(entity: dict) -> Optional[str]:
    group = entity.get("entity_group")
    if group is None:
        # Ungrouped token output: "B-PER", "I-LOC", ...
        tag = entity.get("entity")
        if not isinstance(tag, str):
            return None
        group = tag.split("-", 1)[-1]
    return group.upper() if isinstance(group, str) else None


def select_keywords(payload: Any, min_score: float = 0.0) -> List[str]:
    """
    Keywords from a token-classification payload.

    Keeps PER/ORG/LOC/MISC entities, drops ``##`` sub-word fragments and
    entities scoring below ``min_score`` (entities without a score are
    kept), trims whitespace and deduplicates in first-seen order.

    Raises:
        MalformedPayloadError: payload is not a list of entities
    """
    if isinstance(payload, dict) and "error" in payload:
        raise MalformedPayloadError(f"model returned an error: {payload['error']}")
    if not isinstance(payload, list):
        raise MalformedPayloadError("expected a list of entities")

    return dedupe(
        word.strip()
        for word in (
            _keyword_from_entity(entity, min_score)
            for entity in payload
        )
        if word
    )


def _keyword_from_entity(entity: Any, min_score: float) -> Optional[str]:
    if not isinstance(entity, dict):
        return None
    if _entity_group(entity) not in ALLOWED_ENTITY_GROUPS:
        return None

    word = entity.get("word")
    if not isinstance(word, str) or word.startswith("##"):
        return None

    score = _as_score(entity.get("score"))
    if score is not None and score < min_score:
        return None
    return word


def dedupe(words: Iterable[str]) -> List[str]:
    """Drop empties and repeats, keeping the first occurrence's position."""
    seen = set()
    result = []
    for word in words:
        if word and word not in seen:
            seen.add(word)
            result.append(word)
    return result
