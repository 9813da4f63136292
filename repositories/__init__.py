"""
Repository layer for data access abstraction.
"""

from repositories.base_repository import BaseRepository
from repositories.duty_repository import DutyRepository
from repositories.interfaces import DutyStoreError, IDutyRepository
from repositories.json_duty_repository import JsonDutyRepository

__all__ = [
    "BaseRepository",
    "DutyRepository",
    "JsonDutyRepository",
    "DutyStoreError",
    "IDutyRepository",
]
