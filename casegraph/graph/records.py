"""Node and edge snapshot records.

The presentation layer hands the analysis core plain snapshots of the
case graph: node records (people, organisations, accounts...) and edge
records (typed relationships between them). Payloads arrive camelCase
from the web client (``sourceId``, ``targetId``) but snake_case mappings
and ready-made records are accepted too.

Coercion is lenient: a mapping without the identifying keys is skipped
and counted, never raised, because snapshots may be stale.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Iterable, Mapping, Union

logger = logging.getLogger(__name__)


def _missing(value: Any) -> bool:
    # 0 is a valid JSON id
    return value is None or value == ""


@dataclass(frozen=True)
class NodeRecord:
    """An entity on the case graph (read-only input)."""
    id: str
    label: str = ""
    type: str = "CUSTOM"

    def __post_init__(self) -> None:
        object.__setattr__(self, "id", str(self.id))

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "NodeRecord":
        node_id = data.get("id")
        if _missing(node_id):
            raise KeyError("node record has no id")
        return cls(
            id=str(node_id),
            label=str(data.get("label") or ""),
            type=str(data.get("type") or "CUSTOM"),
        )


@dataclass(frozen=True)
class EdgeRecord:
    """A typed relationship between two node records."""
    id: str
    source_id: str
    target_id: str
    type: str = "ASSOCIATE"
    label: str | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "id", str(self.id))
        object.__setattr__(self, "source_id", str(self.source_id))
        object.__setattr__(self, "target_id", str(self.target_id))

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "EdgeRecord":
        edge_id = data.get("id")
        source = data.get("sourceId", data.get("source_id"))
        target = data.get("targetId", data.get("target_id"))
        if _missing(edge_id) or _missing(source) or _missing(target):
            raise KeyError("edge record needs id, sourceId and targetId")
        label = data.get("label")
        return cls(
            id=str(edge_id),
            source_id=str(source),
            target_id=str(target),
            type=str(data.get("type") or "ASSOCIATE"),
            label=str(label) if label is not None else None,
        )


NodeLike = Union[NodeRecord, Mapping[str, Any]]
EdgeLike = Union[EdgeRecord, Mapping[str, Any]]


def coerce_nodes(nodes: Iterable[NodeLike]) -> tuple[list[NodeRecord], int]:
    """Normalise node input to records.

    Returns the records plus the number of unusable entries skipped.
    """
    records: list[NodeRecord] = []
    skipped = 0
    for node in nodes:
        if isinstance(node, NodeRecord):
            records.append(node)
            continue
        try:
            records.append(NodeRecord.from_dict(node))
        except (KeyError, AttributeError):
            skipped += 1
    if skipped:
        logger.debug("Skipped %d node record(s) without an id", skipped)
    return records, skipped


def coerce_edges(edges: Iterable[EdgeLike]) -> tuple[list[EdgeRecord], int]:
    """Normalise edge input to records.

    Returns the records plus the number of unusable entries skipped.
    """
    records: list[EdgeRecord] = []
    skipped = 0
    for edge in edges:
        if isinstance(edge, EdgeRecord):
            records.append(edge)
            continue
        try:
            records.append(EdgeRecord.from_dict(edge))
        except (KeyError, AttributeError):
            skipped += 1
    if skipped:
        logger.debug("Skipped %d edge record(s) missing id or endpoints", skipped)
    return records, skipped
