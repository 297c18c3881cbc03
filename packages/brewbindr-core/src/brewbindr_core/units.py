"""
Unit normalisation and conversion for brewing measurements.

Recipe data arrives with inconsistent unit strings ("Kg.", "LB",
"Grams", "L"). `normalize_unit` folds them into a fixed vocabulary;
the `to_*` bridges then convert amounts into whatever unit a formula
is calibrated for. A blank unit means "already canonical".
"""

from enum import Enum

from brewbindr_core.exceptions import UnitConversionError


class CanonicalUnit(str, Enum):
    """Canonical unit tokens produced by the normaliser."""

    KILOGRAMS = "kilograms"
    POUNDS = "pounds"
    GRAMS = "grams"
    OUNCES = "ounces"
    LITERS = "liters"
    GALLONS = "gallons"
    MINUTES = "minutes"
    GRAINS = "grains"


# Conversion constants, keyed by canonical unit
KILOGRAMS_PER: dict[str, float] = {
    CanonicalUnit.KILOGRAMS.value: 1.0,
    CanonicalUnit.POUNDS.value: 0.453592,
    CanonicalUnit.GRAMS.value: 0.001,
    CanonicalUnit.OUNCES.value: 0.0283495,
}

POUNDS_PER: dict[str, float] = {
    CanonicalUnit.POUNDS.value: 1.0,
    CanonicalUnit.KILOGRAMS.value: 2.20462,
    CanonicalUnit.GRAMS.value: 1 / 453.592,
    CanonicalUnit.OUNCES.value: 1 / 16,
}

GRAMS_PER: dict[str, float] = {
    CanonicalUnit.GRAMS.value: 1.0,
    CanonicalUnit.KILOGRAMS.value: 1000.0,
    CanonicalUnit.POUNDS.value: 453.592,
    CanonicalUnit.OUNCES.value: 28.3495,
}

LITERS_PER_GALLON = 3.78541
EBC_PER_SRM = 1.97

MASS_UNITS = frozenset(GRAMS_PER)
VOLUME_UNITS = frozenset({CanonicalUnit.LITERS.value, CanonicalUnit.GALLONS.value})


def normalize_unit(unit: str | None) -> str:
    """
    Fold an arbitrary unit string into the canonical vocabulary.

    Matching is prefix based and order sensitive: "lb" has to be
    recognised before the liters rule, which accepts anything starting
    with "l". Unrecognised strings are returned cleaned but otherwise
    unchanged.

    Args:
        unit: Unit string as found in the data, possibly None

    Returns:
        Canonical unit token, the cleaned input, or "" for no unit

    Example:
        >>> normalize_unit("  Kg. ")
        "kilograms"
        >>> normalize_unit("LB")
        "pounds"
    """
    if not unit:
        return ""
    u = unit.strip().lower()
    if u.startswith("kg") or u.startswith("kilo"):
        return CanonicalUnit.KILOGRAMS.value
    if u.startswith("lb") or u.startswith("pound"):
        return CanonicalUnit.POUNDS.value
    if u in ("g", "gram", "grams"):
        return CanonicalUnit.GRAMS.value
    if u in ("gr", "grain", "grains"):
        return CanonicalUnit.GRAINS.value
    if u.startswith("oz") or u.startswith("ounce"):
        return CanonicalUnit.OUNCES.value
    if u.startswith("l"):
        return CanonicalUnit.LITERS.value
    if u.startswith("gal"):
        return CanonicalUnit.GALLONS.value
    if u.startswith("min"):
        return CanonicalUnit.MINUTES.value
    return u


def _bridge(value: float, unit: str | None, table: dict[str, float]) -> float:
    # Blank or unknown units pass through as already-canonical
    return value * table.get(normalize_unit(unit), 1.0)


def to_kilograms(value: float, unit: str | None) -> float:
    """Convert a mass to kilograms."""
    return _bridge(value, unit, KILOGRAMS_PER)


def to_pounds(value: float, unit: str | None) -> float:
    """Convert a mass to pounds."""
    return _bridge(value, unit, POUNDS_PER)


def to_grams(value: float, unit: str | None) -> float:
    """Convert a mass to grams."""
    return _bridge(value, unit, GRAMS_PER)


def to_liters(value: float, unit: str | None) -> float:
    """Convert a volume to liters."""
    if normalize_unit(unit) == CanonicalUnit.GALLONS.value:
        return value * LITERS_PER_GALLON
    return value


def to_gallons(value: float, unit: str | None) -> float:
    """Convert a volume to US gallons."""
    if normalize_unit(unit) == CanonicalUnit.GALLONS.value:
        return value
    return value / LITERS_PER_GALLON


def convert(value: float, from_unit: str, to_unit: str) -> float:
    """
    Convert between two units of the same dimension.

    Unlike the `to_*` bridges this is strict: both units must be
    recognised mass or volume units.

    Args:
        value: The value to convert
        from_unit: Source unit (any spelling `normalize_unit` accepts)
        to_unit: Target unit

    Returns:
        Converted value

    Raises:
        UnitConversionError: If a unit is unknown or the dimensions differ
    """
    source = normalize_unit(from_unit)
    target = normalize_unit(to_unit)

    if source in MASS_UNITS and target in MASS_UNITS:
        return value * GRAMS_PER[source] / GRAMS_PER[target]
    if source in VOLUME_UNITS and target in VOLUME_UNITS:
        litres = to_liters(value, source)
        if target == CanonicalUnit.GALLONS.value:
            return litres / LITERS_PER_GALLON
        return litres

    raise UnitConversionError(f"Cannot convert {from_unit!r} to {to_unit!r}")


def c_to_f(c: float) -> float:
    """Convert Celsius to Fahrenheit."""
    return c * 9 / 5 + 32


def f_to_c(f: float) -> float:
    """Convert Fahrenheit to Celsius."""
    return (f - 32) * 5 / 9


def srm_to_ebc(srm: float) -> float:
    """
    Convert SRM (Standard Reference Method) to EBC.

    EBC = SRM × 1.97
    """
    return srm * EBC_PER_SRM


def ebc_to_srm(ebc: float) -> float:
    """
    Convert EBC to SRM.

    SRM = EBC / 1.97
    """
    return ebc / EBC_PER_SRM
