"""Exception types for the Delphi consensus toolkit.

The consensus engine itself raises none of these; they belong to the
validation, storage and orchestration layers around it.
"""


class DelphiError(Exception):
    """Base class for Delphi consensus errors."""


class InvalidStudySettingsError(DelphiError, ValueError):
    """Study consensus settings are unusable (e.g. likert_max <= likert_min)."""


class RecordNotFoundError(DelphiError, KeyError):
    """A study, item or response id does not exist in the data store."""

    def __init__(self, kind: str, record_id: str):
        self.kind = kind
        self.record_id = record_id
        super().__init__(f"{kind} '{record_id}' not found")

    def __str__(self) -> str:
        return self.args[0]


class BackupVersionError(DelphiError, ValueError):
    """A backup was written by an incompatible schema version."""
