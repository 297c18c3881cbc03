"""
brewbindr-core: BeerXML interchange and brewing calculations.

Provides recipe and library models, unit normalisation, the OG/FG/ABV/
colour/IBU engine, BeerXML import/export and the import reconciliation
flow used by the brewbindr MCP server.
"""

from brewbindr_core.models import (
    RecipeType,
    HopUse,
    CultureType,
    CultureForm,
    LibraryType,
    SugarType,
    UnitSystem,
    ColorScale,
    Fermentable,
    Hop,
    Culture,
    Misc,
    Recipe,
    LibraryIngredient,
    BrewLogEntry,
    TastingNote,
)
from brewbindr_core.units import (
    normalize_unit,
    to_kilograms,
    to_grams,
    to_liters,
    convert,
    srm_to_ebc,
    ebc_to_srm,
)
from brewbindr_core.calculations import (
    RecipeStats,
    calculate_og,
    calculate_fg,
    calculate_abv,
    calculate_color,
    calculate_ibu,
    calculate_priming_sugar,
    calculate_recipe_stats,
)
from brewbindr_core.formatting import ValueKind, format_brew_value, unit_label
from brewbindr_core.parser import ImportResult, parse_beerxml
from brewbindr_core.exporter import recipe_to_beerxml, library_to_beerxml
from brewbindr_core.library import (
    find_library_entry,
    resolve_or_create,
    link_recipe,
    apply_library_entry,
)
from brewbindr_core.matching import find_recipe, search_library
from brewbindr_core.reconciliation import (
    ConflictChoice,
    ImportOutcome,
    ImportSession,
    ImportState,
    ImportStatus,
    transition,
)
from brewbindr_core.backup import Backup, create_backup, dump_backup, load_backup
from brewbindr_core.exceptions import (
    BrewbindrError,
    UnitConversionError,
    ValidationError,
    ImportFlowError,
    BackupError,
    ConfigurationError,
    FetchError,
)

__version__ = "0.1.0"

__all__ = [
    # Models
    "RecipeType",
    "HopUse",
    "CultureType",
    "CultureForm",
    "LibraryType",
    "SugarType",
    "UnitSystem",
    "ColorScale",
    "Fermentable",
    "Hop",
    "Culture",
    "Misc",
    "Recipe",
    "LibraryIngredient",
    "BrewLogEntry",
    "TastingNote",
    # Units
    "normalize_unit",
    "to_kilograms",
    "to_grams",
    "to_liters",
    "convert",
    "srm_to_ebc",
    "ebc_to_srm",
    # Calculations
    "RecipeStats",
    "calculate_og",
    "calculate_fg",
    "calculate_abv",
    "calculate_color",
    "calculate_ibu",
    "calculate_priming_sugar",
    "calculate_recipe_stats",
    # Formatting
    "ValueKind",
    "format_brew_value",
    "unit_label",
    # BeerXML
    "ImportResult",
    "parse_beerxml",
    "recipe_to_beerxml",
    "library_to_beerxml",
    # Library
    "find_library_entry",
    "resolve_or_create",
    "link_recipe",
    "apply_library_entry",
    # Matching
    "search_library",
    "find_recipe",
    # Reconciliation
    "ConflictChoice",
    "ImportOutcome",
    "ImportSession",
    "ImportState",
    "ImportStatus",
    "transition",
    # Backup
    "Backup",
    "create_backup",
    "dump_backup",
    "load_backup",
    # Exceptions
    "BrewbindrError",
    "UnitConversionError",
    "ValidationError",
    "ImportFlowError",
    "BackupError",
    "ConfigurationError",
    "FetchError",
]
