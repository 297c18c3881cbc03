"""
Locale-aware display formatting for brewing values.

Calculations always work in metric; this module converts a raw value
into the user's preferred unit system and colour scale and renders it
with the decimal policy for its kind.
"""

import math
from enum import Enum

from babel.numbers import format_decimal

from brewbindr_core.models import ColorScale, UnitSystem
from brewbindr_core.units import (
    CanonicalUnit,
    c_to_f,
    convert,
    f_to_c,
    normalize_unit,
    srm_to_ebc,
)


class ValueKind(str, Enum):
    """Semantic type of a displayed value."""

    MASS_SMALL = "mass_small"  # grams / ounces
    MASS_LARGE = "mass_large"  # kilograms / pounds
    VOLUME = "volume"
    TEMPERATURE = "temperature"
    GRAVITY = "gravity"
    ABV = "abv"
    COLOR = "color"


# Babel patterns: minimum/maximum fraction digits per displayed unit
PATTERNS: dict[str, str] = {
    "grams": "#,##0",
    "ounces": "#,##0.##",
    "kilograms": "#,##0.###",
    "pounds": "#,##0.###",
    "liters": "#,##0.##",
    "gallons": "#,##0.##",
    "temperature": "#,##0.0",
    "gravity": "0.000",
    "abv": "#,##0.0",
    "color": "#,##0.0",
}

METRIC_UNITS: dict[ValueKind, str] = {
    ValueKind.MASS_SMALL: CanonicalUnit.GRAMS.value,
    ValueKind.MASS_LARGE: CanonicalUnit.KILOGRAMS.value,
    ValueKind.VOLUME: CanonicalUnit.LITERS.value,
}

IMPERIAL_UNITS: dict[ValueKind, str] = {
    ValueKind.MASS_SMALL: CanonicalUnit.OUNCES.value,
    ValueKind.MASS_LARGE: CanonicalUnit.POUNDS.value,
    ValueKind.VOLUME: CanonicalUnit.GALLONS.value,
}

UNIT_LABELS: dict[str, str] = {
    "grams": "g",
    "ounces": "oz",
    "kilograms": "kg",
    "pounds": "lb",
    "liters": "L",
    "gallons": "Gal",
}


def babel_locale(language: str) -> str:
    """Map an interface language to a Babel locale."""
    return "en_US" if language == "en" else "nl_NL"


def _target_unit(kind: ValueKind, units: UnitSystem) -> str:
    table = IMPERIAL_UNITS if units == UnitSystem.IMPERIAL else METRIC_UNITS
    return table[kind]


def format_brew_value(
    value: float | None,
    kind: ValueKind | str,
    language: str = "en",
    units: UnitSystem | str = UnitSystem.METRIC,
    source_unit: str | None = None,
    color_scale: ColorScale | str = ColorScale.SRM,
) -> str:
    """
    Render a brewing value for display.

    Args:
        value: Raw value, metric unless ``source_unit`` says otherwise
        kind: What the value measures
        language: Interface language ("en" or "nl")
        units: Preferred unit system
        source_unit: Unit the raw value is in (e.g. "gallons" for an
            imperial batch size, "fahrenheit" for temperature)
        color_scale: Preferred colour scale for colour values

    Returns:
        Formatted number without unit suffix, or "-" when missing

    Example:
        >>> format_brew_value(20, "volume", "en", "imperial")
        "5.28"
    """
    if value is None or (isinstance(value, float) and math.isnan(value)):
        return "-"

    kind = ValueKind(kind)
    units = UnitSystem(units)
    locale = babel_locale(language)

    if kind in METRIC_UNITS:
        target = _target_unit(kind, units)
        source = normalize_unit(source_unit) or METRIC_UNITS[kind]
        shown = convert(value, source, target)
        return format_decimal(shown, format=PATTERNS[target], locale=locale)

    if kind == ValueKind.TEMPERATURE:
        is_fahrenheit = (source_unit or "").strip().lower().startswith("f")
        celsius = f_to_c(value) if is_fahrenheit else value
        shown = c_to_f(celsius) if units == UnitSystem.IMPERIAL else celsius
        return format_decimal(shown, format=PATTERNS["temperature"], locale=locale)

    if kind == ValueKind.COLOR:
        shown = srm_to_ebc(value) if ColorScale(color_scale) == ColorScale.EBC else value
        return format_decimal(shown, format=PATTERNS["color"], locale=locale)

    return format_decimal(value, format=PATTERNS[kind.value], locale=locale)


def unit_label(
    kind: ValueKind | str,
    units: UnitSystem | str = UnitSystem.METRIC,
    color_scale: ColorScale | str = ColorScale.SRM,
) -> str:
    """Short unit suffix shown next to a formatted value."""
    kind = ValueKind(kind)
    units = UnitSystem(units)

    if kind in METRIC_UNITS:
        return UNIT_LABELS[_target_unit(kind, units)]
    if kind == ValueKind.TEMPERATURE:
        return "°F" if units == UnitSystem.IMPERIAL else "°C"
    if kind == ValueKind.COLOR:
        return ColorScale(color_scale).value.upper()
    if kind == ValueKind.ABV:
        return "%"
    return ""
