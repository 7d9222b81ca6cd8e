"""DataStore protocol.

The operations the round orchestrator and results export need from a
persistence backend. Backends are passed explicitly to callers; there is no
global storage-mode switch.
"""

from typing import Any, List, Optional, Protocol, runtime_checkable

from .types import BackupData, DelphiItem, ItemResponse, Study


@runtime_checkable
class DataStore(Protocol):
    """Persistence backend for studies, items and responses."""

    # Studies
    def get_study(self, study_id: str) -> Study: ...

    def list_studies(self) -> List[Study]: ...

    def create_study(self, title: str, **settings: Any) -> Study: ...

    def update_study(self, study_id: str, **updates: Any) -> Study: ...

    # Delphi items
    def list_items(
        self,
        study_id: str,
        round_number: Optional[int] = None,
        status: Optional[str] = None,
    ) -> List[DelphiItem]: ...

    def create_item(self, study_id: str, item_text: str, **fields: Any) -> DelphiItem: ...

    def update_item(self, item_id: str, **updates: Any) -> DelphiItem: ...

    # Responses
    def list_responses(
        self,
        item_id: str,
        round_number: Optional[int] = None,
    ) -> List[ItemResponse]: ...

    def create_response(
        self,
        item_id: str,
        participant_id: str,
        **fields: Any,
    ) -> ItemResponse: ...

    def update_response(self, response_id: str, **updates: Any) -> ItemResponse: ...

    # Backup & restore
    def export_data(self) -> BackupData: ...

    def import_data(self, backup: BackupData) -> None: ...
