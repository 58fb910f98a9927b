"""Entity kinds that can be mutated offline, and where each one lives.

Every kind maps to a remote endpoint (the PostgREST table name) and a local
cache table in the offline SQLite database. Both names happen to match for
the current schema, but callers always go through the registry.
"""

from dataclasses import dataclass
from enum import Enum


class EntityKind(str, Enum):
    LANDS = "lands"
    PRODUCTIONS = "productions"
    ACTIVITIES = "activities"

    @classmethod
    def parse(cls, value) -> "EntityKind":
        """Accept an EntityKind or its string name; reject anything else."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            valid = ", ".join(k.value for k in cls)
            raise ValueError(
                f"Unknown entity kind {value!r} (expected one of: {valid})"
            ) from None


@dataclass(frozen=True)
class EntitySpec:
    kind: EntityKind
    remote_table: str
    local_table: str
    # Cached fields that can be filtered on locally
    index_fields: tuple = ()


ENTITY_REGISTRY: dict[EntityKind, EntitySpec] = {
    EntityKind.LANDS: EntitySpec(
        EntityKind.LANDS, "lands", "lands", ("user_id",),
    ),
    EntityKind.PRODUCTIONS: EntitySpec(
        EntityKind.PRODUCTIONS, "productions", "productions",
        ("land_id", "user_id"),
    ),
    EntityKind.ACTIVITIES: EntitySpec(
        EntityKind.ACTIVITIES, "activities", "activities",
        ("production_id", "user_id"),
    ),
}


def spec_for(kind) -> EntitySpec:
    """Look up the registry entry for a kind (or its string name)."""
    return ENTITY_REGISTRY[EntityKind.parse(kind)]
