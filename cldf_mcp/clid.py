"""
CLID parsing and entity type resolution.

A CLID looks like ``clid:v1:route:550e8400-e29b-41d4-a716-446655440000``.
Parsing never raises; callers get ``None`` back for anything malformed.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass
from enum import Enum
import re
from typing import Any

CLID_NAMESPACE = "clid"
_VERSION_RE = re.compile(r"^v\d+$")


class EntityType(str, Enum):
    ROUTE = "route"
    LOCATION = "location"
    SECTOR = "sector"
    CLIMB = "climb"
    SESSION = "session"
    UNKNOWN = "unknown"


KNOWN_TYPES = frozenset(t.value for t in EntityType if t is not EntityType.UNKNOWN)


@dataclass(frozen=True)
class Clid:
    version: str
    type: str
    uuid: str


def parse_clid(value: str | None) -> Clid | None:
    """Parse a CLID string. Returns None if it is not well formed."""
    if not value:
        return None

    parts = value.split(":", 3)
    if len(parts) < 4:
        return None

    namespace, version, entity_type, uid = parts
    if namespace != CLID_NAMESPACE:
        return None
    if not _VERSION_RE.match(version):
        return None
    if not entity_type or not uid:
        return None

    return Clid(version=version, type=entity_type, uuid=uid)


def _has(fields: Mapping[str, Any], key: str) -> bool:
    # Presence test: an explicit null still counts
    return key in fields


# Ordered: first match wins.
ENTITY_RULES: list[tuple[Callable[[Mapping[str, Any]], bool], EntityType]] = [
    (lambda f: _has(f, "routeType"), EntityType.ROUTE),
    (lambda f: _has(f, "isIndoor") and bool(f.get("coordinates")), EntityType.LOCATION),
    (
        lambda f: _has(f, "locationId") and bool(f.get("name")) and not f.get("routeType"),
        EntityType.SECTOR,
    ),
    (lambda f: _has(f, "finishType"), EntityType.CLIMB),
    (lambda f: _has(f, "date") and _has(f, "startTime"), EntityType.SESSION),
]


def classify_fields(fields: Mapping[str, Any] | None) -> EntityType:
    """Guess an entity's type from the fields it carries."""
    if not fields:
        return EntityType.UNKNOWN
    for matches, entity_type in ENTITY_RULES:
        if matches(fields):
            return entity_type
    return EntityType.UNKNOWN


def resolve_entity_type(
    clid: str | None, fields: Mapping[str, Any] | None = None
) -> EntityType:
    """
    Resolve the entity type for a record.

    When a CLID is given it alone decides the answer, even if it fails to
    parse. Field heuristics are only used when there is no CLID at all.
    """
    if clid is not None:
        parsed = parse_clid(clid)
        if parsed is None or parsed.type not in KNOWN_TYPES:
            return EntityType.UNKNOWN
        return EntityType(parsed.type)
    return classify_fields(fields)
