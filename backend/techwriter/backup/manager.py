"""Backup Manager — whole-store JSON export and transactional import.

Design:
- export_all() serializes all six collections plus the theme and
  last-backup preferences into one document
- export_to_file() writes ``<app>-backup-<YYYY-MM-DD>.json`` to the backup
  directory, and _rotate() keeps the newest ``max_backups`` files
- validate_import() checks structure only and never touches the store
- import_all() asks every confirmation first, then clears and reloads
  all collections inside one transaction

Document layout:
    {
      "version": "2.0",
      "exportDate": "2025-01-06T09:00:00+00:00",
      "appVersion": "1.0.0",
      "data": {"timeBlocks": [...], "projects": [...], "teams": [...],
               "activeTimers": [...], "weeklySummaries": [...], "preferences": [...]},
      "localStorageData": {"theme": "dark", "lastBackupDate": "..."}
    }
"""

from __future__ import annotations

import json
import logging
from collections.abc import Callable
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic import ValidationError as PydanticValidationError
from pydantic.alias_generators import to_camel

from techwriter.config import Settings
from techwriter.config import settings as default_settings
from techwriter.db.data_migrations import migrate_time_blocks, teams_for_names
from techwriter.db.store import CLEAR_ORDER, LOAD_ORDER, Store
from techwriter.exceptions import PartialImportFailure, ValidationError
from techwriter.models import ActiveTimer, Preference, Project, Team, TimeBlock, WeeklySummary
from techwriter.models.base import normalize_timestamps
from techwriter.models.preference import LAST_BACKUP_KEY, THEME_KEY
from techwriter.models.vocabulary import calculate_maintenance_status
from techwriter.notifications import LoggingNotifier, Notifier, deny_all

logger = logging.getLogger(__name__)

# Documents older than this predate the team collection
TEAMS_FORMAT_VERSION = (2,)  # parse_version("2.0")

COLLECTION_MODELS = {
    "teams": Team,
    "projects": Project,
    "time_blocks": TimeBlock,
    "active_timers": ActiveTimer,
    "weekly_summaries": WeeklySummary,
    "preferences": Preference,
}

LOCAL_STORAGE_KEYS = (THEME_KEY, LAST_BACKUP_KEY)

OVERWRITE_PROMPT = "This will replace all existing data. Are you sure you want to continue?"


def parse_version(value: str) -> tuple[int, ...]:
    """``"2.1"`` → ``(2, 1)``. Raises ValueError for anything else.

    Trailing zero parts are dropped, so ``2``, ``"2.0"`` and ``"2.0.0"``
    compare equal.
    """
    parts = [int(part) for part in str(value).strip().split(".")]
    while parts and parts[-1] == 0:
        parts.pop()
    return tuple(parts)


# ------------------------------------------------------------------
# Document schema
# ------------------------------------------------------------------


class BackupData(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="allow")

    time_blocks: list[dict[str, Any]]
    projects: list[dict[str, Any]]
    teams: list[dict[str, Any]] = Field(default_factory=list)
    active_timers: list[dict[str, Any]] = Field(default_factory=list)
    weekly_summaries: list[dict[str, Any]] = Field(default_factory=list)
    preferences: list[dict[str, Any]] = Field(default_factory=list)

    @field_validator("teams", "active_timers", "weekly_summaries", "preferences", mode="before")
    @classmethod
    def _missing_as_empty(cls, v):
        return [] if v is None else v


class BackupDocument(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="allow")

    version: str
    export_date: str
    app_version: str | None = None
    data: BackupData
    local_storage_data: dict[str, Any] = Field(default_factory=dict)

    @field_validator("version", mode="before")
    @classmethod
    def _version_as_text(cls, v):
        # Hand-edited files sometimes carry the version as a number
        if isinstance(v, (int, float)) and not isinstance(v, bool):
            return str(v)
        return v

    @field_validator("version")
    @classmethod
    def _version_is_dotted(cls, v: str) -> str:
        parse_version(v)
        return v

    @field_validator("local_storage_data", mode="before")
    @classmethod
    def _null_local_storage(cls, v):
        return {} if v is None else v

    @property
    def format_version(self) -> tuple[int, ...]:
        return parse_version(self.version)

    def records(self, collection: str) -> list[dict[str, Any]]:
        return getattr(self.data, collection)

    def stats(self) -> dict[str, int]:
        return {name: len(self.records(name)) for name in LOAD_ORDER}


class ImportValidation(BaseModel):
    valid: bool
    error: str | None = None
    stats: dict[str, int] = Field(default_factory=dict)
    format_version: str | None = None
    newer_than_supported: bool = False


class ImportResult(BaseModel):
    imported: bool
    counts: dict[str, int] = Field(default_factory=dict)
    teams_synthesized: int = 0
    active_timers_restored: bool = False


# ------------------------------------------------------------------
# Manager
# ------------------------------------------------------------------


class BackupManager:
    """Exports the store to JSON backup files and restores it from them."""

    def __init__(
        self,
        store: Store,
        backup_dir: str | Path | None = None,
        max_backups: int | None = None,
        config: Settings | None = None,
        notifier: Notifier | None = None,
        confirm: Callable[[str], bool] = deny_all,
    ) -> None:
        self.store = store
        self.config = config or default_settings
        self.backup_dir = Path(backup_dir or self.config.backup_dir)
        self.max_backups = max_backups if max_backups is not None else self.config.max_backups
        self.notifier: Notifier = notifier or LoggingNotifier()
        self.confirm = confirm

    # ------------------------------------------------------------------
    # Export
    # ------------------------------------------------------------------

    def export_all(self) -> dict[str, Any]:
        """Serialize every collection into one backup document."""
        data = {
            to_camel(name): [record.to_wire() for record in self.store.collection(name).all()]
            for name in LOAD_ORDER
        }
        local_storage = {}
        for key in LOCAL_STORAGE_KEYS:
            value = self.store.preferences.get_value(key)
            if value is not None:
                local_storage[key] = value

        return {
            "version": self.config.export_format_version,
            "exportDate": self.store.clock.now().isoformat(),
            "appVersion": self.config.app_version,
            "data": data,
            "localStorageData": local_storage,
        }

    def export_to_file(self) -> Path:
        """Write a backup file and record the backup date. Returns the file path."""
        try:
            document = self.export_all()
            now = self.store.clock.now()
            self.backup_dir.mkdir(parents=True, exist_ok=True)
            path = self.backup_dir / f"{self.config.app_name}-backup-{now:%Y-%m-%d}.json"
            path.write_text(json.dumps(document, indent=2, ensure_ascii=False), encoding="utf-8")
            self.store.preferences.set_value(LAST_BACKUP_KEY, now.isoformat())
            self._rotate()
        except Exception as e:
            self.notifier.notify("error", f"Export failed: {e}")
            raise

        counts = {name: len(document["data"][to_camel(name)]) for name in LOAD_ORDER}
        logger.info("Backup written to %s (%s)", path, counts)
        self.notifier.notify("success", "Data exported successfully!")
        return path

    def _rotate(self) -> None:
        """Remove oldest backup files beyond max_backups."""
        backups = self.list_backups()
        for old_backup in backups[self.max_backups:]:
            old_backup.unlink(missing_ok=True)
            logger.info("Rotated out old backup %s", old_backup.name)

    def list_backups(self) -> list[Path]:
        """Backup files sorted by name (newest first)."""
        if not self.backup_dir.exists():
            return []
        return sorted(
            self.backup_dir.glob(f"{self.config.app_name}-backup-*.json"),
            key=lambda p: p.name,
            reverse=True,
        )

    # ------------------------------------------------------------------
    # Import
    # ------------------------------------------------------------------

    def validate_import(self, source: str | bytes | Path | dict) -> ImportValidation:
        """Check that ``source`` is a usable backup document. Never mutates the store."""
        try:
            document = self._parse(source)
        except ValidationError as e:
            return ImportValidation(valid=False, error=str(e))

        supported = parse_version(self.config.max_supported_format_version)
        return ImportValidation(
            valid=True,
            stats=document.stats(),
            format_version=document.version,
            newer_than_supported=document.format_version > supported,
        )

    def import_all(
        self,
        source: str | bytes | Path | dict,
        confirm: Callable[[str], bool] | None = None,
        restore_active_timers: bool | None = None,
    ) -> ImportResult:
        """Replace the whole store with the contents of a backup document.

        All questions are asked before anything is written: overwrite,
        then the newer-format warning, then (if the backup holds running
        timers and ``restore_active_timers`` is None) whether to restore
        them. Restored timers always come back paused.

        Raises:
            ValidationError: If the document is malformed. The store is untouched.
            PartialImportFailure: If loading failed. The transaction is rolled back.
        """
        confirm = confirm or self.confirm
        try:
            document = self._parse(source)
        except ValidationError as e:
            self.notifier.notify("error", f"Import failed: {e}")
            raise

        if not confirm(OVERWRITE_PROMPT):
            logger.info("Import cancelled by user")
            return ImportResult(imported=False)

        supported = parse_version(self.config.max_supported_format_version)
        if document.format_version > supported:
            logger.warning(
                "Backup format %s is newer than supported %s",
                document.version, self.config.max_supported_format_version,
            )
            if not confirm(
                f"This backup was created with a newer format (v{document.version}). "
                "Some data may not import correctly. Continue?"
            ):
                return ImportResult(imported=False)

        timers = document.records("active_timers")
        restore = False
        if timers:
            restore = restore_active_timers
            if restore is None:
                restore = confirm(
                    f"This backup contains {len(timers)} active timer(s). "
                    "Restore them? They will be paused."
                )

        try:
            result = self._load(document, restore_timers=bool(restore))
        except PartialImportFailure:
            self.notifier.notify("error", "Import failed. Your existing data was kept.")
            raise

        self.store.notify(*CLEAR_ORDER)
        # Records from older backups may predate the cached project fields
        migrate_time_blocks(self.store)
        logger.info("Import complete: %s", result.counts)
        self.notifier.notify("success", "Data imported successfully!")
        return result

    def _load(self, document: BackupDocument, restore_timers: bool) -> ImportResult:
        now = self.store.clock.now()
        legacy = document.format_version < TEAMS_FORMAT_VERSION

        with self.store.session() as session:
            try:
                records = {name: self._build(name, document, now) for name in LOAD_ORDER}
                if not restore_timers:
                    records["active_timers"] = []
                for timer in records["active_timers"]:
                    timer.status = "paused"
                records["preferences"] = self._merge_preferences(
                    records["preferences"], document.local_storage_data
                )

                self.store.clear_all_in(session)

                synthesized = 0
                if legacy and not records["teams"]:
                    names = [p.team for p in records["projects"] if p.team]
                    records["teams"] = teams_for_names(session, names, now, include_defaults=True)
                    synthesized = len(records["teams"])

                for name in LOAD_ORDER:
                    session.add_all(records[name])
                    session.flush()
                session.commit()
            except Exception as e:
                session.rollback()
                logger.error("Import rolled back: %s", e, exc_info=True)
                raise PartialImportFailure(e) from e

        return ImportResult(
            imported=True,
            counts={name: len(records[name]) for name in LOAD_ORDER},
            teams_synthesized=synthesized,
            active_timers_restored=restore_timers and bool(records["active_timers"]),
        )

    def _build(self, collection: str, document: BackupDocument, now) -> list:
        model = COLLECTION_MODELS[collection]
        built = []
        for raw in document.records(collection):
            record = model.from_wire(raw)
            normalize_timestamps(record)
            if isinstance(record, Project):
                record.maintenance_status = calculate_maintenance_status(record.last_updated, now)
            built.append(record)
        return built

    def _merge_preferences(
        self,
        preferences: list[Preference],
        local_storage: dict[str, Any],
    ) -> list[Preference]:
        # Later entries win; keys are the primary key
        merged = {pref.key: pref for pref in preferences}
        for key in LOCAL_STORAGE_KEYS:
            if local_storage.get(key) is not None:
                merged[key] = Preference(key=key, value=local_storage[key])
        return list(merged.values())

    def _parse(self, source: str | bytes | Path | dict) -> BackupDocument:
        """Read and structurally validate a backup document.

        Raises:
            ValidationError: On unreadable input, bad JSON or a bad structure.
        """
        if isinstance(source, dict):
            raw = source
        else:
            if isinstance(source, Path):
                try:
                    source = source.read_text(encoding="utf-8")
                except OSError as e:
                    raise ValidationError(f"Cannot read backup file: {e}") from e
            try:
                raw = json.loads(source)
            except (ValueError, TypeError) as e:
                raise ValidationError(f"Invalid JSON: {e}") from e

        if not isinstance(raw, dict):
            raise ValidationError("Invalid backup file format")
        try:
            return BackupDocument.model_validate(raw)
        except PydanticValidationError as e:
            problems = "; ".join(
                f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in e.errors()
            )
            raise ValidationError(f"Invalid backup file format: {problems}") from e
