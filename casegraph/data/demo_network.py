"""Demo case graph for first-use experience.

A small trafficking case in the snapshot shape the canvas produces:
one boss, a lieutenant, two couriers, a front company with its bank
account and truck, an operational phone line, a warehouse and the
seizure that exposed it.

**All names, numbers and places are entirely fictional.**
"""

from __future__ import annotations

from typing import Any

_DEMO_NODES: list[dict[str, Any]] = [
    {"id": "boss", "label": "Marco Valdivia", "type": "PERSON"},
    {"id": "lieutenant", "label": "Tomas Rivera", "type": "PERSON"},
    {"id": "courier-1", "label": "Irene Salas", "type": "PERSON"},
    {"id": "courier-2", "label": "Pablo Nunez", "type": "PERSON"},
    {"id": "front-co", "label": "Northern Freight Ltd", "type": "ORGANIZATION"},
    {"id": "account", "label": "Acct. 0099-1123-45", "type": "BANK_ACCOUNT"},
    {"id": "phone", "label": "+00 555 0142", "type": "PHONE"},
    {"id": "truck", "label": "Pickup KX-4471", "type": "VEHICLE"},
    {"id": "warehouse", "label": "Warehouse Route 9 Km 212", "type": "ADDRESS"},
    {"id": "seizure", "label": "Seizure 15-Jan", "type": "EVENT"},
]

_DEMO_EDGES: list[dict[str, Any]] = [
    {"id": "e1", "sourceId": "boss", "targetId": "lieutenant",
     "type": "ASSOCIATE", "label": "Direct subordinate"},
    {"id": "e2", "sourceId": "boss", "targetId": "courier-1",
     "type": "ASSOCIATE", "label": "Recruited"},
    {"id": "e3", "sourceId": "lieutenant", "targetId": "courier-2",
     "type": "ASSOCIATE", "label": "Coordinates shipments"},
    {"id": "e4", "sourceId": "boss", "targetId": "front-co",
     "type": "OWNERSHIP", "label": "Majority partner"},
    {"id": "e5", "sourceId": "boss", "targetId": "account",
     "type": "OWNERSHIP", "label": "Account holder"},
    {"id": "e6", "sourceId": "front-co", "targetId": "account",
     "type": "TRANSACTION", "label": "Suspicious deposits"},
    {"id": "e7", "sourceId": "lieutenant", "targetId": "phone",
     "type": "COMMUNICATION", "label": "Operational line"},
    {"id": "e8", "sourceId": "phone", "targetId": "courier-2",
     "type": "COMMUNICATION", "label": "47 calls in December"},
    {"id": "e9", "sourceId": "front-co", "targetId": "truck",
     "type": "OWNERSHIP", "label": "Registered vehicle"},
    {"id": "e10", "sourceId": "truck", "targetId": "warehouse",
     "type": "LOCATION", "label": "Seen at location"},
    {"id": "e11", "sourceId": "courier-2", "targetId": "warehouse",
     "type": "LOCATION", "label": "Surveillance confirms presence"},
    {"id": "e12", "sourceId": "seizure", "targetId": "truck",
     "type": "TEMPORAL", "label": "Stopped with cargo"},
]


def get_demo_snapshot() -> dict[str, list[dict[str, Any]]]:
    """Return a fresh copy of the demo snapshot (``nodes`` and ``edges``)."""
    return {
        "nodes": [dict(n) for n in _DEMO_NODES],
        "edges": [dict(e) for e in _DEMO_EDGES],
    }
