from __future__ import annotations

from typing import Any, Dict, Iterator, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field


class NluEntity(BaseModel):
    """One scored extraction returned by the NLU service."""

    model_config = ConfigDict(extra="allow")

    confidence: float = 0.0
    value: Any = None
    body: Optional[str] = None
    name: Optional[str] = None
    role: Optional[str] = None


class NluResponse(BaseModel):
    model_config = ConfigDict(extra="allow")

    text: str = ""
    msg_id: Optional[str] = None
    entities: Dict[str, List[NluEntity]] = Field(default_factory=dict)
    traits: Dict[str, List[NluEntity]] = Field(default_factory=dict)

    def candidates(self) -> Iterator[Tuple[str, NluEntity]]:
        """Yield ``(label, entity)`` pairs in response order, entities before traits."""
        for section in (self.entities, self.traits):
            for key, items in section.items():
                label = entity_label(key)
                for entity in items:
                    yield label, entity


def entity_label(key: str) -> str:
    """
    Map a response key to the label used for dispatch:

      - "wolfram_search_query:wolfram_search_query" -> "wolfram_search_query"
      - "wit$greetings"                             -> "greetings"
      - "greetings"                                 -> "greetings"
    """
    label = key.split(":", 1)[0]
    if label.startswith("wit$"):
        label = label[len("wit$"):]
    return label


__all__ = ["NluEntity", "NluResponse", "entity_label"]
