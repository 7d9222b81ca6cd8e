"""Persistence collaborators for Delphi studies."""

from .types import (
    BACKUP_VERSION,
    BackupData,
    DelphiItem,
    ItemResponse,
    Study,
)
from .protocol import DataStore
from .local import LocalDataStore

__all__ = [
    "BACKUP_VERSION",
    "BackupData",
    "DataStore",
    "DelphiItem",
    "ItemResponse",
    "LocalDataStore",
    "Study",
]
