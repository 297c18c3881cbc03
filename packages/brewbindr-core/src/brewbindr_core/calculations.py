"""
Brewing calculation engine.

Pure functions deriving gravity, alcohol, colour, bitterness and
priming sugar from recipe data. Degenerate input (no ingredients,
zero batch size) always yields finite, non-negative numbers: zero
denominators are replaced with 1 instead of propagating NaN.

Formulas:
- Gravity: extract points per kilogram-liter, scaled by efficiency
- Colour: Morey equation over malt colour units (imperial calibrated)
- Bitterness: Tinseth utilisation
"""

import math
from collections.abc import Mapping, Sequence

from pydantic import BaseModel

from brewbindr_core.models import (
    DEFAULT_ATTENUATION,
    DEFAULT_EFFICIENCY,
    BrewLogEntry,
    Culture,
    Fermentable,
    Hop,
    HopUse,
    Recipe,
    SugarType,
)
from brewbindr_core.units import to_gallons, to_grams, to_kilograms, to_pounds


# Points per pound per gallon -> points per kilogram per liter
PKL_PER_PPG = 8.3454
ABV_FACTOR = 131.25
# Extra ABV per g/L of priming sugar fermented in the bottle
PRIMING_ABV_PER_GRAM_LITER = 0.05

IBU_USES = frozenset({HopUse.BOIL, HopUse.FIRST_WORT, HopUse.WHIRLPOOL})
# Whirlpool additions are modelled as a 10 minute boil at half utilisation.
# A calibration choice, not a published Tinseth variant.
WHIRLPOOL_EQUIVALENT_MINUTES = 10.0
WHIRLPOOL_UTILIZATION_SCALE = 0.5

SUGAR_FACTORS: dict[str, float] = {
    SugarType.TABLE_SUGAR.value: 1.0,
    SugarType.GLUCOSE.value: 1.15,
    SugarType.DME.value: 1.4,
}

SRM_SWATCHES: list[tuple[float, str]] = [
    (2, "#FFE699"),
    (4, "#FFD878"),
    (6, "#FFCA5A"),
    (8, "#FFBF42"),
    (10, "#FBB123"),
    (13, "#F8A600"),
    (17, "#F39C00"),
    (20, "#EA8F00"),
    (24, "#E58500"),
    (29, "#D37200"),
    (35, "#C16100"),
    (40, "#AF5000"),
    (45, "#9A4000"),
    (50, "#823000"),
]
DARKEST_SWATCH = "#241000"


class RecipeStats(BaseModel):
    """Derived statistics for a recipe."""

    og: float
    fg: float
    abv: float
    color: float  # SRM
    ibu: int


def _safe_volume(volume: float) -> float:
    return volume or 1.0


def calculate_og(
    fermentables: Sequence[Fermentable],
    batch_size_liters: float,
    efficiency_pct: float = DEFAULT_EFFICIENCY,
) -> float:
    """
    Estimate original gravity from the grain bill.

    Each fermentable contributes
    ``kg * (potential - 1) * 1000 * 8.3454 * efficiency / liters`` points.

    Args:
        fermentables: Fermentable additions (any mass unit)
        batch_size_liters: Batch volume in liters; 0 is treated as 1
        efficiency_pct: Brewhouse efficiency, 0-100

    Returns:
        Specific gravity, e.g. 1.052
    """
    efficiency = efficiency_pct / 100
    volume = _safe_volume(batch_size_liters)

    total_points = 0.0
    for fermentable in fermentables:
        if fermentable.amount is None:
            continue
        weight_kg = to_kilograms(fermentable.amount.value, fermentable.amount.unit)
        pkl = (fermentable.potential - 1) * 1000 * PKL_PER_PPG
        total_points += weight_kg * pkl * efficiency / volume

    return 1 + total_points / 1000


def average_attenuation(cultures: Sequence[Culture]) -> float:
    """Mean attenuation of all cultures, 75 % when there are none."""
    if not cultures:
        return DEFAULT_ATTENUATION
    return sum(c.attenuation_pct for c in cultures) / len(cultures)


def calculate_fg(og: float, attenuation_pct: float = DEFAULT_ATTENUATION) -> float:
    """Estimate final gravity from original gravity and attenuation."""
    return 1 + (og - 1) * (1 - attenuation_pct / 100)


def calculate_abv(
    og: float | None,
    fg: float | None,
    include_priming: bool = False,
    sugar_grams: float = 0.0,
    volume_liters: float = 1.0,
) -> float:
    """
    Alcohol by volume from the gravity drop.

    Two modes: plain fermentation ABV, or bottle-conditioned ABV which
    adds the alcohol produced by priming sugar in the sealed bottle.

    Args:
        og: Original gravity
        fg: Final gravity
        include_priming: Add the bottle-conditioning correction
        sugar_grams: Priming sugar mass in grams
        volume_liters: Volume the sugar was dosed into

    Returns:
        ABV percentage, 0 when gravities are missing or fg >= og
    """
    if not og or not fg or og <= fg:
        return 0.0

    abv = (og - fg) * ABV_FACTOR
    if include_priming and sugar_grams > 0 and volume_liters > 0:
        abv += sugar_grams / volume_liters * PRIMING_ABV_PER_GRAM_LITER
    return abv


def calculate_color(fermentables: Sequence[Fermentable], batch_size_liters: float) -> float:
    """
    Beer colour in SRM using the Morey equation.

    The equation is calibrated for pounds and gallons, so weights and
    volume are bridged to imperial regardless of the recipe's units.
    """
    volume_gal = _safe_volume(to_gallons(batch_size_liters, "liters"))

    mcu = 0.0
    for fermentable in fermentables:
        if fermentable.amount is None:
            continue
        weight_lb = to_pounds(fermentable.amount.value, fermentable.amount.unit)
        mcu += weight_lb * fermentable.color_srm / volume_gal

    if mcu <= 0:
        return 0.0
    return 1.4922 * mcu ** 0.6859


def _time_factor(minutes: float) -> float:
    return (1 - math.exp(-0.04 * minutes)) / 4.15


def calculate_ibu(
    hops: Sequence[Hop],
    og: float,
    batch_size_liters: float,
    alpha_overrides: Mapping[str, float] | None = None,
) -> int:
    """
    Bitterness in IBU using the Tinseth equation.

    Only boil, first wort and whirlpool additions isomerise; dry hop,
    mash and aroma additions contribute nothing.

    Args:
        hops: Hop additions (any mass unit, time in minutes)
        og: Original gravity of the wort
        batch_size_liters: Batch volume in liters; 0 is treated as 1
        alpha_overrides: Measured alpha acid by hop name, taking
            precedence over the recipe's value

    Returns:
        IBU rounded to the nearest integer
    """
    overrides = alpha_overrides or {}
    volume = _safe_volume(batch_size_liters)
    bigness = 1.65 * 0.000125 ** (og - 1)

    ibu = 0.0
    for hop in hops:
        if hop.amount is None or hop.time is None:
            continue
        if hop.use not in IBU_USES:
            continue

        alpha = overrides[hop.name] if hop.name in overrides else hop.alpha
        weight_g = to_grams(hop.amount.value, hop.amount.unit)

        if hop.use == HopUse.WHIRLPOOL:
            utilization = bigness * _time_factor(WHIRLPOOL_EQUIVALENT_MINUTES) * WHIRLPOOL_UTILIZATION_SCALE
        else:
            utilization = bigness * _time_factor(hop.time.value)

        ibu += alpha * weight_g * utilization * 10 / volume

    return round(ibu)


def calculate_priming_sugar(
    target_co2: float,
    volume_liters: float,
    temp_c: float,
    sugar_type: SugarType | str = SugarType.TABLE_SUGAR,
) -> int:
    """
    Priming sugar needed to carbonate a batch in the bottle.

    Args:
        target_co2: Desired carbonation in volumes of CO2
        volume_liters: Volume being bottled
        temp_c: Highest temperature the beer reached after fermentation
        sugar_type: table_sugar, glucose or dme

    Returns:
        Sugar mass in whole grams
    """
    if not volume_liters or volume_liters <= 0:
        return 0

    residual_co2 = 1.57 * 0.97 ** temp_c
    needed_co2 = max(0.0, target_co2 - residual_co2)
    sugar_g = needed_co2 * 4 * volume_liters

    key = sugar_type.value if isinstance(sugar_type, SugarType) else sugar_type
    sugar_g *= SUGAR_FACTORS.get(key, 1.0)
    return round(sugar_g)


def calculate_recipe_stats(
    recipe: Recipe,
    alpha_overrides: Mapping[str, float] | None = None,
) -> RecipeStats:
    """
    Derive OG, FG, ABV, colour and IBU for a recipe.

    Args:
        recipe: The recipe to analyse
        alpha_overrides: Measured alpha acid per hop name (brew log values)

    Returns:
        RecipeStats with colour in SRM
    """
    batch_l = recipe.batch_size_liters
    efficiency = recipe.efficiency.brewhouse or DEFAULT_EFFICIENCY

    og = calculate_og(recipe.fermentables, batch_l, efficiency)
    fg = calculate_fg(og, average_attenuation(recipe.cultures))

    return RecipeStats(
        og=og,
        fg=fg,
        abv=calculate_abv(og, fg),
        color=calculate_color(recipe.fermentables, batch_l),
        ibu=calculate_ibu(recipe.hops, og, batch_l, alpha_overrides),
    )


def _brew_log_volume(recipe: Recipe, entry: BrewLogEntry) -> float:
    bottling_volume = entry.bottling.bottling_volume if entry.bottling else None
    return bottling_volume or entry.measurements.actual_volume or recipe.batch_size_liters


def brew_log_stats(recipe: Recipe, entry: BrewLogEntry) -> RecipeStats:
    """Recipe statistics recomputed with the log's measured hop alpha."""
    return calculate_recipe_stats(recipe, entry.measurements.measured_alpha)


def brew_log_abv(recipe: Recipe, entry: BrewLogEntry, include_priming: bool) -> float:
    """ABV from the measured gravities of a brewed batch."""
    sugar = entry.bottling.sugar_amount if entry.bottling else None
    return calculate_abv(
        entry.measurements.actual_og,
        entry.measurements.actual_fg,
        include_priming,
        sugar or 0.0,
        _brew_log_volume(recipe, entry),
    )


def brew_log_priming_sugar(recipe: Recipe, entry: BrewLogEntry) -> int:
    """Priming sugar for a batch, 0 when no bottling plan is recorded."""
    if entry.bottling is None:
        return 0
    return calculate_priming_sugar(
        entry.bottling.target_co2,
        _brew_log_volume(recipe, entry),
        entry.measurements.fermentation_temp or 20.0,
        entry.bottling.sugar_type,
    )


def srm_to_hex(srm: float) -> str:
    """Approximate display colour for an SRM value."""
    for upper, swatch in SRM_SWATCHES:
        if srm < upper:
            return swatch
    return DARKEST_SWATCH
