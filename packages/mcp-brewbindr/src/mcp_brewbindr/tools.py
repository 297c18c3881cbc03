"""MCP tool definitions for brewbindr."""

import logging

from fastmcp import FastMCP

from brewbindr_core.backup import backup_filename, dump_backup, load_backup, present_sections, recipe_filename
from brewbindr_core.calculations import calculate_priming_sugar, calculate_recipe_stats, srm_to_hex
from brewbindr_core.exceptions import BrewbindrError
from brewbindr_core.exporter import library_to_beerxml, recipe_to_beerxml
from brewbindr_core.formatting import format_brew_value, unit_label
from brewbindr_core.matching import find_recipe, search_library as search_library_entries
from brewbindr_core.models import Recipe
from brewbindr_core.parser import ImportResult, parse_beerxml
from brewbindr_core.reconciliation import ImportSession, ImportState

from mcp_brewbindr.client import BeerXMLClient
from mcp_brewbindr.config import get_config
from mcp_brewbindr.store import WorkspaceStore

logger = logging.getLogger(__name__)

# Pending import between import_* and resolve_import_conflict calls
_session: ImportSession | None = None


def _get_store() -> WorkspaceStore:
    """Get the configured workspace store."""
    return WorkspaceStore(get_config().data_path)


def _get_session() -> ImportSession:
    """The paused session if one is waiting, otherwise a fresh one over the workspace."""
    global _session
    if _session is None or _session.conflict is None:
        store = _get_store()
        _session = ImportSession(store.list_recipes(), store.list_library())
    return _session


def _persist(state: ImportState) -> None:
    store = _get_store()
    backup = store.load()
    store.save(backup.model_copy(update={"recipes": state.recipes, "library": state.library}))


def _status(state: ImportState) -> dict:
    result = {
        "status": state.status.value,
        "outcome": state.outcome.value if state.outcome else None,
        "committed": state.committed,
        "skipped": state.skipped,
        "remaining": len(state.queue),
    }
    if state.failure_reason:
        result["error"] = state.failure_reason
    if state.conflict:
        result["conflict"] = {
            "incoming": state.conflict.incoming.to_dict(),
            "existing": state.conflict.existing.to_dict(),
            "actions": ["cancel", "skip", "overwrite", "copy"],
        }
    return result


def _summary(recipe: Recipe) -> dict:
    stats = calculate_recipe_stats(recipe)
    return {
        "id": recipe.id,
        "name": recipe.name,
        "type": recipe.type.value,
        "style": recipe.style.name if recipe.style else None,
        "batch_size_liters": round(recipe.batch_size_liters, 2),
        "og": round(stats.og, 3),
        "ibu": stats.ibu,
        "abv": round(stats.abv, 1),
    }


def _start_import(result: ImportResult) -> dict:
    """Run a parsed document through a fresh import session."""
    try:
        session = _get_session()
        session.begin_parse()
        state = session.start(result)
        _persist(state)
    except BrewbindrError as e:
        return {"error": str(e)}
    return _status(state)


def register_tools(mcp: FastMCP) -> None:
    """Register all brewbindr MCP tools."""

    @mcp.tool()
    def import_beerxml(xml_text: str) -> dict:
        """
        Import recipes and library ingredients from BeerXML text.

        Args:
            xml_text: Contents of a BeerXML file

        Duplicate recipes are skipped. A duplicate library ingredient pauses
        the import; answer with resolve_import_conflict.
        """
        return _start_import(parse_beerxml(xml_text))

    @mcp.tool()
    def import_beerxml_batch(xml_texts: list[str]) -> dict:
        """
        Import several BeerXML documents as one batch.

        Args:
            xml_texts: Contents of each BeerXML file

        All recipes and ingredients share a single queue, so one
        resolve_import_conflict session covers every file.
        """
        result = ImportResult()
        for xml_text in xml_texts:
            result = result.merge(parse_beerxml(xml_text))
        return _start_import(result)

    @mcp.tool()
    async def import_beerxml_url(url: str) -> dict:
        """
        Download a BeerXML file and import it.

        Args:
            url: Address of the BeerXML file

        Uses BREWBINDR_PROXY_URL as a prefix when set.
        """
        try:
            session = _get_session()
            session.begin_fetch()
        except BrewbindrError as e:
            return {"error": str(e)}

        client = BeerXMLClient(get_config())
        try:
            xml_text = await client.fetch(url)
        except BrewbindrError as e:
            return _status(session.fail(str(e)))

        try:
            session.begin_parse()
            state = session.start(parse_beerxml(xml_text))
            _persist(state)
        except BrewbindrError as e:
            return {"error": str(e)}
        return _status(state)

    @mcp.tool()
    def resolve_import_conflict(action: str) -> dict:
        """
        Answer a paused import.

        Args:
            action: cancel (stop the import), skip (drop this item),
                overwrite (replace the existing entry, keeping its id) or
                copy (import under a "(Copy)" name)
        """
        if _session is None:
            return {"error": "No import is in progress"}
        try:
            state = _session.resolve(action.strip().lower())
            _persist(state)
        except ValueError:
            return {"error": f"Unknown action '{action}'. Use cancel, skip, overwrite or copy."}
        except BrewbindrError as e:
            return {"error": str(e)}
        return _status(state)

    @mcp.tool()
    def import_status() -> dict:
        """Show the state of the current or last import."""
        if _session is None:
            return {"status": "idle", "outcome": None, "committed": [], "skipped": [], "remaining": 0}
        return _status(_session.state)

    @mcp.tool()
    def list_recipes(search: str | None = None) -> list[dict]:
        """
        List recipes in the workspace.

        Args:
            search: Search term to filter recipes by name (optional)

        Returns a list of recipe summaries including name, style, OG, IBU, and ABV.
        """
        try:
            recipes = _get_store().list_recipes()
        except BrewbindrError as e:
            return [{"error": str(e)}]
        if search:
            recipes = [r for r in recipes if search.lower() in r.name.lower()]
        return [_summary(r) for r in recipes]

    @mcp.tool()
    def get_recipe(name_or_id: str) -> dict | None:
        """
        Get a specific recipe by name or ID.

        Args:
            name_or_id: Recipe name or unique ID

        Returns full recipe details including all ingredients, or None if not found.
        """
        try:
            recipe = find_recipe(_get_store().list_recipes(), name_or_id)
        except BrewbindrError as e:
            return {"error": str(e)}
        return recipe.to_dict() if recipe else None

    @mcp.tool()
    def recipe_stats(name_or_id: str, alpha_overrides: dict[str, float] | None = None) -> dict:
        """
        Calculate OG, FG, ABV, colour and IBU for a recipe.

        Args:
            name_or_id: Recipe name or unique ID
            alpha_overrides: Measured alpha acid % by hop name (optional)
        """
        try:
            recipe = find_recipe(_get_store().list_recipes(), name_or_id)
        except BrewbindrError as e:
            return {"error": str(e)}
        if not recipe:
            return {"error": f"Recipe '{name_or_id}' not found"}

        config = get_config()
        stats = calculate_recipe_stats(recipe, alpha_overrides)
        return {
            "recipe": recipe.name,
            "og": format_brew_value(stats.og, "gravity", config.language),
            "fg": format_brew_value(stats.fg, "gravity", config.language),
            "abv": f"{format_brew_value(stats.abv, 'abv', config.language)}%",
            "color": (
                f"{format_brew_value(stats.color, 'color', config.language, color_scale=config.color_scale)} "
                f"{unit_label('color', color_scale=config.color_scale)}"
            ),
            "color_hex": srm_to_hex(stats.color),
            "ibu": stats.ibu,
            "raw": stats.model_dump(),
        }

    @mcp.tool()
    def export_recipe_beerxml(name_or_id: str) -> dict:
        """
        Export a recipe as BeerXML.

        Args:
            name_or_id: Recipe name or unique ID

        Returns the suggested filename and the XML text.
        """
        try:
            recipe = find_recipe(_get_store().list_recipes(), name_or_id)
        except BrewbindrError as e:
            return {"error": str(e)}
        if not recipe:
            return {"error": f"Recipe '{name_or_id}' not found"}
        return {"filename": recipe_filename(recipe), "xml": recipe_to_beerxml(recipe)}

    @mcp.tool()
    def export_library_beerxml() -> dict:
        """Export the whole ingredient library as BeerXML."""
        try:
            library = _get_store().list_library()
        except BrewbindrError as e:
            return {"error": str(e)}
        return {"entries": len(library), "xml": library_to_beerxml(library)}

    @mcp.tool()
    def search_library(query: str, ingredient_type: str | None = None, limit: int = 10) -> list[dict]:
        """
        Fuzzy search the ingredient library.

        Args:
            query: Ingredient name (typos allowed)
            ingredient_type: fermentable, hop, culture, misc, style or mash_profile (optional)
            limit: Maximum number of results (default 10)
        """
        try:
            matches = search_library_entries(
                _get_store().list_library(), query, ingredient_type, limit=limit
            )
        except ValueError:
            return [{"error": f"Unknown ingredient type '{ingredient_type}'"}]
        except BrewbindrError as e:
            return [{"error": str(e)}]
        return [{**entry.to_dict(), "confidence": round(score, 2)} for entry, score in matches]

    @mcp.tool()
    def priming_sugar(
        target_co2: float = 2.4,
        volume_liters: float = 20.0,
        temp_c: float = 20.0,
        sugar_type: str = "table_sugar",
    ) -> dict:
        """
        Calculate priming sugar for bottle conditioning.

        Args:
            target_co2: Desired carbonation in volumes CO2 (default 2.4)
            volume_liters: Volume being bottled
            temp_c: Highest temperature after fermentation
            sugar_type: table_sugar, glucose or dme
        """
        grams = calculate_priming_sugar(target_co2, volume_liters, temp_c, sugar_type)
        return {"sugar_type": sugar_type, "grams": grams}

    @mcp.tool()
    def format_value(value: float, kind: str, source_unit: str | None = None) -> dict:
        """
        Format a brewing value using the configured language and units.

        Args:
            value: Raw value (metric unless source_unit says otherwise)
            kind: mass_small, mass_large, volume, temperature, gravity, abv or color
            source_unit: Unit the value is in (optional)
        """
        config = get_config()
        try:
            text = format_brew_value(
                value, kind, config.language, config.units, source_unit, config.color_scale
            )
        except ValueError:
            return {"error": f"Unknown value kind '{kind}'"}
        except BrewbindrError as e:
            return {"error": str(e)}
        return {"text": text, "unit": unit_label(kind, config.units, config.color_scale)}

    @mcp.tool()
    def export_backup() -> dict:
        """Export the whole workspace as backup JSON."""
        try:
            backup = _get_store().load()
        except BrewbindrError as e:
            return {"error": str(e)}
        return {"filename": backup_filename(), "json": dump_backup(backup)}

    @mcp.tool()
    def restore_backup(backup_json: str) -> dict:
        """
        Restore a backup into the workspace.

        Args:
            backup_json: Contents of a brewbindr backup file

        Only the sections present in the file are replaced.
        """
        try:
            backup = load_backup(backup_json)
        except BrewbindrError as e:
            return {"error": str(e)}

        sections = present_sections(backup_json)
        try:
            _get_store().restore(backup, sections)
        except BrewbindrError as e:
            return {"error": str(e)}
        return {
            "success": True,
            "restored": sorted(sections),
            "recipes": len(backup.recipes),
            "library": len(backup.library),
        }
