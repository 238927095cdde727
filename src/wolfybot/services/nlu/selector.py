from __future__ import annotations

from typing import Iterable, Optional, Tuple

from .models import NluEntity

ENTITY_CONFIDENCE_THRESHOLD = 0.5


def select_best_entity(
    candidates: Iterable[Tuple[str, NluEntity]],
    threshold: float = ENTITY_CONFIDENCE_THRESHOLD,
) -> Tuple[Optional[str], Optional[NluEntity]]:
    """
    Pick the candidate with the highest confidence strictly above ``threshold``.

    Comparisons are strict on both sides, so an entity sitting exactly on the
    threshold is ignored and on equal confidence the first one seen is kept.
    """
    best_label: Optional[str] = None
    best: Optional[NluEntity] = None
    for label, entity in candidates:
        confidence = entity.confidence
        if confidence > threshold and (best is None or confidence > best.confidence):
            best_label, best = label, entity
    return best_label, best


__all__ = ["ENTITY_CONFIDENCE_THRESHOLD", "select_best_entity"]
