"""Whole-dataset backup and restore as JSON."""

import json
import logging
import re
from datetime import date, datetime, timezone

from pydantic import Field
from pydantic import ValidationError as PydanticValidationError

from brewbindr_core.exceptions import BackupError
from brewbindr_core.models import (
    BrewbindrModel,
    BrewLogEntry,
    LibraryIngredient,
    Recipe,
    TastingNote,
)

logger = logging.getLogger(__name__)

BACKUP_VERSION = 1


class Backup(BrewbindrModel):
    """Everything a user has: recipes, brew logs, tasting notes and library."""

    version: int = BACKUP_VERSION
    export_date: str = Field(
        default_factory=lambda: datetime.now(timezone.utc).isoformat(),
        alias="exportDate",
    )
    recipes: list[Recipe] = Field(default_factory=list)
    brew_logs: list[BrewLogEntry] = Field(default_factory=list, alias="brewLogs")
    tasting_notes: list[TastingNote] = Field(default_factory=list, alias="tastingNotes")
    library: list[LibraryIngredient] = Field(default_factory=list)


def create_backup(
    recipes: list[Recipe] | None = None,
    brew_logs: list[BrewLogEntry] | None = None,
    tasting_notes: list[TastingNote] | None = None,
    library: list[LibraryIngredient] | None = None,
) -> Backup:
    """Snapshot the given collections, stamped with the current time."""
    return Backup(
        recipes=list(recipes or []),
        brew_logs=list(brew_logs or []),
        tasting_notes=list(tasting_notes or []),
        library=list(library or []),
    )


def dump_backup(backup: Backup) -> str:
    """Serialise a backup as pretty-printed JSON."""
    return json.dumps(backup.to_dict(), indent=2, ensure_ascii=False)


def load_backup(text: str | bytes) -> Backup:
    """
    Parse backup JSON.

    Sections missing from the file come back as empty lists; the caller
    decides whether that means "clear" or "leave alone".

    Raises:
        BackupError: If the text is not JSON, not an object, or a
            record fails validation
    """
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise BackupError(f"Backup is not valid JSON: {e}") from e

    if not isinstance(data, dict):
        raise BackupError("Backup must be a JSON object")

    try:
        backup = Backup.model_validate(data)
    except PydanticValidationError as e:
        raise BackupError(f"Backup contains invalid records: {e}") from e

    logger.info(
        "Loaded backup v%d: %d recipes, %d brew logs, %d tasting notes, %d library entries",
        backup.version,
        len(backup.recipes),
        len(backup.brew_logs),
        len(backup.tasting_notes),
        len(backup.library),
    )
    return backup


def present_sections(text: str | bytes) -> set[str]:
    """Which top-level collections a backup file actually contains."""
    data = json.loads(text)
    if not isinstance(data, dict):
        return set()
    aliases = {"recipes": "recipes", "brewLogs": "brew_logs", "tastingNotes": "tasting_notes", "library": "library"}
    return {field for key, field in aliases.items() if key in data}


def backup_filename(day: date | None = None) -> str:
    """Download name for a backup, e.g. ``brewbindr-backup-2024-05-01.json``."""
    day = day or date.today()
    return f"brewbindr-backup-{day.isoformat()}.json"


def recipe_filename(recipe: Recipe) -> str:
    """Download name for a recipe's BeerXML export."""
    return re.sub(r"\s+", "-", recipe.name).lower() + ".xml"
