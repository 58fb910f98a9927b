"""Seed the offline cache with realistic mock data for development and demos.

Creates:
  - 3 lands for one demo farmer
  - 7 productions, two pairs of which overlap on the same land
  - a handful of field activities

Rows are cached as already-synced server data; nothing is queued.

Run:
    python -m execution.seed_mock_data          (from project root)
    python execution/seed_mock_data.py          (direct)
"""

import os
import sys

# Ensure project src is on the path
_ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
sys.path.insert(0, os.path.join(_ROOT, "src"))

from rindang.config import Config
from rindang.database.connection import DatabaseConnection
from rindang.database.repository import OfflineRepository
from rindang.database.schema import initialize_database

FARMER_ID = "farmer-demo"

LANDS = [
    {"id": "land-north", "name": "North Terrace", "area_m2": 2500,
     "commodities": ["Padi"], "user_id": FARMER_ID},
    {"id": "land-river", "name": "Riverside Plot", "area_m2": 1800,
     "commodities": ["Jagung", "Cabai"], "user_id": FARMER_ID},
    {"id": "land-hill", "name": "Hillside Garden", "area_m2": 900,
     "commodities": ["Tomat"], "user_id": FARMER_ID},
]

PRODUCTIONS = [
    # North Terrace: two rice cycles touching on 2024-04-15
    {"id": "prod-1", "land_id": "land-north", "commodity": "Padi",
     "planting_date": "2024-01-10", "harvest_date": "2024-04-15",
     "status": "harvested", "seed_count": 4000, "harvest_yield_kg": 1650},
    {"id": "prod-2", "land_id": "land-north", "commodity": "Padi",
     "planting_date": "2024-04-15", "estimated_harvest_date": "2024-07-30",
     "status": "growing", "seed_count": 4000},
    # Riverside: corn overlapping chili
    {"id": "prod-3", "land_id": "land-river", "commodity": "Jagung",
     "planting_date": "2024-02-01", "estimated_harvest_date": "2024-05-20",
     "status": "growing", "seed_count": 1200},
    {"id": "prod-4", "land_id": "land-river", "commodity": "Cabai",
     "planting_date": "2024-05-01", "estimated_harvest_date": "2024-09-01",
     "status": "planted", "seed_count": 600},
    {"id": "prod-5", "land_id": "land-river", "commodity": "Jagung",
     "planting_date": "2024-09-15", "estimated_harvest_date": "2025-01-10",
     "status": "planted", "seed_count": 1200},
    # Hillside: back-to-back tomatoes, no overlap
    {"id": "prod-6", "land_id": "land-hill", "commodity": "Tomat",
     "planting_date": "2024-03-01", "harvest_date": "2024-05-31",
     "status": "harvested", "seed_count": 300, "harvest_yield_kg": 420},
    {"id": "prod-7", "land_id": "land-hill", "commodity": "Tomat",
     "planting_date": "2024-06-01", "status": "planted", "seed_count": 300},
]

ACTIVITIES = [
    {"id": "act-1", "land_id": "land-north", "production_id": "prod-2",
     "activity_type": "fertilizing", "activity_date": "2024-05-10"},
    {"id": "act-2", "land_id": "land-river", "production_id": "prod-3",
     "activity_type": "watering", "activity_date": "2024-03-02"},
    {"id": "act-3", "land_id": "land-hill", "production_id": "prod-6",
     "activity_type": "harvesting", "activity_date": "2024-05-31"},
]


def seed(repo: OfflineRepository):
    """Populate the offline cache with mock data."""
    repo.cache_lands(LANDS)
    repo.cache_productions(PRODUCTIONS)
    repo.cache_activities(ACTIVITIES)
    print(f"Seeded {len(LANDS)} lands, {len(PRODUCTIONS)} productions, "
          f"{len(ACTIVITIES)} activities")


if __name__ == "__main__":
    db = DatabaseConnection(Config.DATABASE_PATH)
    initialize_database(db)
    seed(OfflineRepository(db))
