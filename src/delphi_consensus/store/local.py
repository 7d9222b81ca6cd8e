"""Local JSON-file data store.

Keeps all records in memory behind a lock and persists them as a single JSON
backup document. Suitable for single-researcher studies and tests.
"""

import dataclasses
import json
import logging
import threading
import uuid
from pathlib import Path
from typing import Any, Dict, List, Optional, TypeVar

from ..consensus.types import ConsensusConfig
from ..errors import BackupVersionError, RecordNotFoundError
from ..unified_config import UnifiedConfig, configure_logging, get_config
from .types import BACKUP_VERSION, BackupData, DelphiItem, ItemResponse, Study, utc_now_iso

logger = logging.getLogger(__name__)

R = TypeVar("R", Study, DelphiItem, ItemResponse)


def _major(version: str) -> str:
    return version.split(".", 1)[0]


class LocalDataStore:
    """In-memory data store with optional JSON persistence.

    Args:
        path: JSON file to load from and save to. None keeps data in memory only.
        autosave: Save after every write when a path is set.
        defaults: Consensus settings for studies created without explicit ones.
            None uses the built-in defaults (IQR rule, scale 1-9).
    """

    def __init__(
        self,
        path: Optional[Path] = None,
        autosave: bool = False,
        defaults: Optional[ConsensusConfig] = None,
    ):
        self.path = Path(path) if path is not None else None
        self.autosave = autosave
        self.defaults = defaults or ConsensusConfig()
        self._lock = threading.RLock()
        self._studies: Dict[str, Study] = {}
        self._items: Dict[str, DelphiItem] = {}
        self._responses: Dict[str, ItemResponse] = {}

        if self.path is not None and self.path.exists():
            self.load()

    @classmethod
    def from_config(cls, config: Optional[UnifiedConfig] = None) -> "LocalDataStore":
        """Open the store described by a unified configuration.

        Uses storage.path and storage.autosave, takes new-study defaults from
        the consensus section and applies the configured logging level.

        Args:
            config: Configuration to use. None loads the global configuration.
        """
        config = config or get_config()
        configure_logging(config)
        return cls(
            path=Path(config.storage.path).expanduser(),
            autosave=config.storage.autosave,
            defaults=config.consensus.to_consensus_config(),
        )

    # -------------------------------------------------------------------------
    # Internal helpers
    # -------------------------------------------------------------------------

    @staticmethod
    def _new_id() -> str:
        return str(uuid.uuid4())

    @staticmethod
    def _get(table: Dict[str, R], kind: str, record_id: str) -> R:
        try:
            return table[record_id]
        except KeyError:
            raise RecordNotFoundError(kind, record_id) from None

    @staticmethod
    def _replace(record: R, updates: Dict[str, Any]) -> R:
        updates = {k: v for k, v in updates.items() if k not in ("id", "created_at")}
        return dataclasses.replace(record, **updates)

    def _written(self) -> None:
        if self.autosave and self.path is not None:
            self.save()

    # -------------------------------------------------------------------------
    # Studies
    # -------------------------------------------------------------------------

    def get_study(self, study_id: str) -> Study:
        with self._lock:
            return self._get(self._studies, "study", study_id)

    def list_studies(self) -> List[Study]:
        with self._lock:
            return sorted(self._studies.values(), key=lambda s: s.created_at)

    def create_study(self, title: str, **settings: Any) -> Study:
        """Create a study; consensus settings not given come from self.defaults."""
        settings = {**self.defaults.to_study_settings(), **settings}
        study = Study(id=self._new_id(), title=title, created_at=utc_now_iso(), **settings)
        with self._lock:
            self._studies[study.id] = study
            self._written()
        logger.debug(f"Created study {study.id}")
        return study

    def update_study(self, study_id: str, **updates: Any) -> Study:
        with self._lock:
            study = self._replace(self._get(self._studies, "study", study_id), updates)
            self._studies[study_id] = study
            self._written()
        return study

    # -------------------------------------------------------------------------
    # Delphi items
    # -------------------------------------------------------------------------

    def list_items(
        self,
        study_id: str,
        round_number: Optional[int] = None,
        status: Optional[str] = None,
    ) -> List[DelphiItem]:
        with self._lock:
            items = [
                item
                for item in self._items.values()
                if item.study_id == study_id
                and (round_number is None or item.round_number == round_number)
                and (status is None or item.status == status)
            ]
        return sorted(items, key=lambda i: (i.item_number, i.created_at))

    def create_item(self, study_id: str, item_text: str, **fields: Any) -> DelphiItem:
        with self._lock:
            self._get(self._studies, "study", study_id)
            item = DelphiItem(
                id=self._new_id(),
                study_id=study_id,
                item_text=item_text,
                created_at=utc_now_iso(),
                **fields,
            )
            self._items[item.id] = item
            self._written()
        return item

    def update_item(self, item_id: str, **updates: Any) -> DelphiItem:
        with self._lock:
            item = self._replace(self._get(self._items, "item", item_id), updates)
            self._items[item_id] = item
            self._written()
        return item

    # -------------------------------------------------------------------------
    # Responses
    # -------------------------------------------------------------------------

    def list_responses(
        self,
        item_id: str,
        round_number: Optional[int] = None,
    ) -> List[ItemResponse]:
        with self._lock:
            responses = [
                r
                for r in self._responses.values()
                if r.item_id == item_id
                and (round_number is None or r.round_number == round_number)
            ]
        return sorted(responses, key=lambda r: r.created_at)

    def create_response(
        self,
        item_id: str,
        participant_id: str,
        **fields: Any,
    ) -> ItemResponse:
        with self._lock:
            self._get(self._items, "item", item_id)
            response = ItemResponse(
                id=self._new_id(),
                item_id=item_id,
                participant_id=participant_id,
                created_at=utc_now_iso(),
                **fields,
            )
            self._responses[response.id] = response
            self._written()
        return response

    def update_response(self, response_id: str, **updates: Any) -> ItemResponse:
        with self._lock:
            response = self._replace(
                self._get(self._responses, "response", response_id), updates
            )
            self._responses[response_id] = response
            self._written()
        return response

    # -------------------------------------------------------------------------
    # Backup & restore
    # -------------------------------------------------------------------------

    def export_data(self) -> BackupData:
        with self._lock:
            return BackupData(
                version=BACKUP_VERSION,
                exported_at=utc_now_iso(),
                studies=list(self._studies.values()),
                items=list(self._items.values()),
                responses=list(self._responses.values()),
            )

    def import_data(self, backup: BackupData) -> None:
        """Replace all data with the contents of a backup.

        Raises:
            BackupVersionError: If the backup's major version differs
        """
        if _major(backup.version) != _major(BACKUP_VERSION):
            raise BackupVersionError(
                f"backup version {backup.version} is incompatible with {BACKUP_VERSION}"
            )

        with self._lock:
            self._studies = {s.id: s for s in backup.studies}
            self._items = {i.id: i for i in backup.items}
            self._responses = {r.id: r for r in backup.responses}
            self._written()

        logger.debug(
            f"Imported {len(backup.studies)} studies, {len(backup.items)} items, "
            f"{len(backup.responses)} responses"
        )

    def save(self, path: Optional[Path] = None) -> Path:
        """Write all data to a JSON file.

        Creates parent directories if they don't exist.
        """
        target = Path(path) if path is not None else self.path
        if target is None:
            raise ValueError("no path configured for LocalDataStore.save()")

        target.parent.mkdir(parents=True, exist_ok=True)
        payload = self.export_data().to_dict()

        tmp_path = target.with_suffix(target.suffix + ".tmp")
        with open(tmp_path, "w", encoding="utf-8") as f:
            json.dump(payload, f, indent=2, default=str)
        tmp_path.replace(target)

        logger.debug(f"Saved data store to {target}")
        return target

    def load(self, path: Optional[Path] = None) -> None:
        """Replace all data with the contents of a JSON file."""
        source = Path(path) if path is not None else self.path
        if source is None:
            raise ValueError("no path configured for LocalDataStore.load()")

        with open(source, "r", encoding="utf-8") as f:
            payload = json.load(f)

        backup = BackupData.from_dict(payload)
        autosave, self.autosave = self.autosave, False
        try:
            self.import_data(backup)
        finally:
            self.autosave = autosave
        logger.debug(f"Loaded data store from {source}")
