"""
Exception types for brewbindr-core.

All exceptions inherit from BrewbindrError for easy catching
of any library-related errors. Malformed BeerXML is never an
error: the importer degrades to empty defaults instead.
"""


class BrewbindrError(Exception):
    """Base exception for all brewbindr errors."""

    pass


class UnitConversionError(BrewbindrError):
    """Raised when a unit conversion fails."""

    pass


class ValidationError(BrewbindrError):
    """Raised when a record cannot be coerced into the data model."""

    pass


class ImportFlowError(BrewbindrError):
    """Raised when an import action is not legal in the current state."""

    pass


class BackupError(BrewbindrError):
    """Raised when a backup document cannot be read."""

    pass


class ConfigurationError(BrewbindrError):
    """Raised when configuration is invalid or missing."""

    pass


class FetchError(BrewbindrError):
    """Raised when remote BeerXML cannot be retrieved."""

    pass
