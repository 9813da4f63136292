"""
Abstract repository interfaces for data access.

These interfaces define the contracts implemented by concrete repositories.
"""

from abc import ABC, abstractmethod

from domain.models.duty import DutyRecord


class DutyStoreError(RuntimeError):
    """The duty store could not be read or written."""


class IDutyRepository(ABC):
    """Whole-record access to persisted duty counts (read-modify-write)."""

    @abstractmethod
    def load(self) -> DutyRecord:
        """
        Read the full record.

        Returns an empty record when nothing has been stored yet.

        Raises:
            DutyStoreError: If the store is unreadable or corrupt
        """

    @abstractmethod
    def save(self, record: DutyRecord) -> None:
        """
        Replace the stored record.

        Raises:
            DutyStoreError: If the store cannot be written
        """
