"""Data models for the offline cache and the planning engine."""

import json
from dataclasses import dataclass, field, fields
from datetime import date, datetime
from typing import Optional, Union

from rindang.sync.entities import EntityKind

DateLike = Union[date, datetime, str, None]


def _known_fields(cls, row: dict) -> dict:
    """Keep only the keys that map onto dataclass fields."""
    names = {f.name for f in fields(cls)}
    return {k: v for k, v in row.items() if k in names}


@dataclass
class Land:
    id: str = ""
    name: str = ""
    area_m2: float = 0.0
    address: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    status: str = "active"
    commodities: list = field(default_factory=list)
    user_id: Optional[str] = None

    @classmethod
    def from_dict(cls, row: dict) -> "Land":
        return cls(**_known_fields(cls, row))


@dataclass
class Production:
    id: str = ""
    land_id: Optional[str] = None
    commodity: str = ""
    planting_date: DateLike = None
    estimated_harvest_date: DateLike = None
    harvest_date: DateLike = None
    status: str = "planted"  # planted, growing, harvested
    seed_count: int = 0
    harvest_yield_kg: Optional[float] = None
    selling_price_per_kg: Optional[float] = None
    total_cost: Optional[float] = None
    notes: Optional[str] = None
    user_id: Optional[str] = None

    @classmethod
    def from_dict(cls, row: dict) -> "Production":
        return cls(**_known_fields(cls, row))

    @property
    def is_harvested(self) -> bool:
        return self.status == "harvested"


@dataclass
class Activity:
    id: str = ""
    land_id: Optional[str] = None
    production_id: Optional[str] = None
    activity_type: str = ""
    activity_date: DateLike = None
    notes: Optional[str] = None
    user_id: Optional[str] = None

    @classmethod
    def from_dict(cls, row: dict) -> "Activity":
        return cls(**_known_fields(cls, row))


@dataclass
class SyncQueueItem:
    id: Optional[int] = None
    table: EntityKind = EntityKind.PRODUCTIONS
    operation: str = "create"  # create, update, delete
    record_id: str = ""
    data: dict = field(default_factory=dict)
    retry_count: int = 0
    last_error: Optional[str] = None
    enqueued_at: float = 0.0  # epoch milliseconds

    @classmethod
    def from_row(cls, row) -> "SyncQueueItem":
        """Build from a sqlite3.Row of the sync_queue table."""
        try:
            data = json.loads(row["data"]) if row["data"] else {}
        except (json.JSONDecodeError, TypeError):
            data = {}
        return cls(
            id=row["id"],
            table=EntityKind.parse(row["table_name"]),
            operation=row["operation"],
            record_id=row["record_id"],
            data=data,
            retry_count=row["retry_count"],
            last_error=row["last_error"],
            enqueued_at=row["enqueued_at"],
        )
