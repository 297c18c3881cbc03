"""JSON workspace persistence for the MCP server."""

import logging
from pathlib import Path

from brewbindr_core.backup import Backup, create_backup, dump_backup, load_backup
from brewbindr_core.models import BrewLogEntry, LibraryIngredient, Recipe, TastingNote

logger = logging.getLogger(__name__)


class WorkspaceStore:
    """
    Recipes, brew logs, tasting notes and library in one JSON file.

    The file uses the backup format, so a workspace can be restored
    from (or exported as) a backup without conversion.
    """

    def __init__(self, path: Path):
        self.path = Path(path)

    def load(self) -> Backup:
        """Read the workspace; a missing file is an empty workspace."""
        if not self.path.exists():
            return create_backup()
        return load_backup(self.path.read_text(encoding="utf-8"))

    def save(self, backup: Backup) -> None:
        """Write the workspace, replacing the file in one step."""
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        tmp_path.write_text(dump_backup(backup), encoding="utf-8")
        tmp_path.replace(self.path)
        logger.debug("Saved workspace to %s", self.path)

    def _update(self, **sections) -> None:
        current = self.load()
        self.save(current.model_copy(update=sections))

    def list_recipes(self) -> list[Recipe]:
        return self.load().recipes

    def save_recipes(self, recipes: list[Recipe]) -> None:
        self._update(recipes=list(recipes))

    def list_library(self) -> list[LibraryIngredient]:
        return self.load().library

    def save_library(self, library: list[LibraryIngredient]) -> None:
        self._update(library=list(library))

    def list_brew_logs(self) -> list[BrewLogEntry]:
        return self.load().brew_logs

    def list_tasting_notes(self) -> list[TastingNote]:
        return self.load().tasting_notes

    def restore(self, backup: Backup, sections: set[str]) -> None:
        """Replace only the given sections with the backup's contents."""
        self._update(**{section: getattr(backup, section) for section in sections})
        logger.info("Restored %s from backup", ", ".join(sorted(sections)) or "nothing")
