"""
Tests for the brewing calculation engine.
"""

import math

import pytest
from brewbindr_core.calculations import (
    average_attenuation,
    brew_log_abv,
    brew_log_priming_sugar,
    brew_log_stats,
    calculate_abv,
    calculate_color,
    calculate_fg,
    calculate_ibu,
    calculate_og,
    calculate_priming_sugar,
    calculate_recipe_stats,
    srm_to_hex,
)
from brewbindr_core.models import (
    Amount,
    Bottling,
    BrewLogEntry,
    Culture,
    Fermentable,
    Hop,
    HopUse,
    Measurements,
    Potential,
    Recipe,
    SugarType,
    Value,
)


def _fermentable(kg: float, potential: float = 1.037, color: float = 2) -> Fermentable:
    return Fermentable(
        name="Pale",
        amount=Amount(value=kg, unit="kg"),
        yield_=Potential(potential=Value(value=potential)),
        color=Value(value=color),
    )


def _hop(grams: float, alpha: float, minutes: float, use: HopUse = HopUse.BOIL, name: str = "Cascade") -> Hop:
    return Hop(
        name=name,
        amount=Amount(value=grams, unit="g"),
        alpha_acid=Value(value=alpha),
        use=use,
        time=Amount(value=minutes, unit="min"),
    )


def _tinseth(alpha: float, grams: float, minutes: float, og: float, liters: float) -> float:
    bigness = 1.65 * 0.000125 ** (og - 1)
    boil_factor = (1 - math.exp(-0.04 * minutes)) / 4.15
    return alpha * grams * bigness * boil_factor * 10 / liters


class TestOriginalGravity:
    """Tests for OG estimation."""

    def test_single_addition_matches_formula(self):
        og = calculate_og([_fermentable(5)], 20, 75)
        assert og == pytest.approx(1 + (5 * 37 * 8.3454 * 0.75 / 20) / 1000)

    def test_pounds_are_converted(self):
        in_kg = calculate_og([_fermentable(0.453592)], 20, 75)
        f = _fermentable(1)
        f.amount = Amount(value=1, unit="lb")
        assert calculate_og([f], 20, 75) == pytest.approx(in_kg)

    def test_missing_potential_defaults(self):
        f = Fermentable(name="Mystery", amount=Amount(value=5, unit="kg"))
        assert calculate_og([f], 20, 75) == pytest.approx(calculate_og([_fermentable(5)], 20, 75))

    def test_zero_batch_size_is_finite(self):
        og = calculate_og([_fermentable(5)], 0, 75)
        assert math.isfinite(og)
        assert og > 1

    def test_no_fermentables(self):
        assert calculate_og([], 20, 75) == 1.0


class TestFinalGravity:
    """Tests for FG and attenuation."""

    def test_fg(self):
        assert calculate_fg(1.060, 75) == pytest.approx(1.015)

    def test_average_attenuation(self):
        cultures = [Culture(name="A", attenuation=70), Culture(name="B", attenuation=80)]
        assert average_attenuation(cultures) == 75

    def test_no_cultures_defaults_to_75(self):
        assert average_attenuation([]) == 75


class TestABV:
    """Tests for ABV calculation."""

    def test_standard(self):
        assert calculate_abv(1.050, 1.010, False) == pytest.approx(5.25)

    def test_fg_above_og_is_zero(self):
        assert calculate_abv(1.010, 1.050, False) == 0

    def test_missing_gravity_is_zero(self):
        assert calculate_abv(None, 1.010) == 0
        assert calculate_abv(1.050, None) == 0

    def test_priming_correction(self):
        abv = calculate_abv(1.050, 1.010, True, sugar_grams=120, volume_liters=20)
        assert abv == pytest.approx(5.25 + 120 / 20 * 0.05)

    def test_priming_ignored_without_flag(self):
        assert calculate_abv(1.050, 1.010, False, sugar_grams=120, volume_liters=20) == pytest.approx(5.25)


class TestColor:
    """Tests for Morey colour."""

    def test_morey(self):
        color = calculate_color([_fermentable(5, color=3)], 20)
        mcu = (5 * 2.20462) * 3 / (20 / 3.78541)
        assert color == pytest.approx(1.4922 * mcu ** 0.6859)

    def test_no_fermentables(self):
        assert calculate_color([], 20) == 0

    def test_missing_color_defaults_to_2(self):
        f = Fermentable(name="Pale", amount=Amount(value=5, unit="kg"))
        assert calculate_color([f], 20) == pytest.approx(calculate_color([_fermentable(5, color=2)], 20))


class TestIBU:
    """Tests for Tinseth bitterness."""

    def test_boil_addition(self):
        ibu = calculate_ibu([_hop(28, 5.5, 60)], 1.050, 20)
        assert ibu == round(_tinseth(5.5, 28, 60, 1.050, 20))
        assert ibu > 0

    def test_dry_hop_is_zero(self):
        hops = [_hop(500, 15, 60, HopUse.DRY_HOP)]
        assert calculate_ibu(hops, 1.050, 20) == 0

    def test_mash_and_aroma_are_zero(self):
        hops = [_hop(100, 10, 60, HopUse.MASH), _hop(100, 10, 60, HopUse.AROMA)]
        assert calculate_ibu(hops, 1.050, 20) == 0

    def test_first_wort_counts_like_boil(self):
        boil = calculate_ibu([_hop(50, 10, 60)], 1.050, 20)
        fwh = calculate_ibu([_hop(50, 10, 60, HopUse.FIRST_WORT)], 1.050, 20)
        assert fwh == boil

    def test_whirlpool_is_half_a_ten_minute_boil(self):
        ibu = calculate_ibu([_hop(200, 10, 30, HopUse.WHIRLPOOL)], 1.050, 20)
        assert ibu == round(_tinseth(10, 200, 10, 1.050, 20) * 0.5)

    def test_zero_time_is_zero(self):
        assert calculate_ibu([_hop(50, 10, 0)], 1.050, 20) == 0

    def test_flame_out_whirlpool_ignores_time(self):
        at_zero = calculate_ibu([_hop(100, 12, 0, HopUse.WHIRLPOOL)], 1.050, 20)
        at_twenty = calculate_ibu([_hop(100, 12, 20, HopUse.WHIRLPOOL)], 1.050, 20)
        assert at_zero == at_twenty
        assert at_zero > 0

    def test_missing_time_is_skipped(self):
        hop = _hop(100, 12, 0, HopUse.WHIRLPOOL).model_copy(update={"time": None})
        assert calculate_ibu([hop], 1.050, 20) == 0

    def test_alpha_override(self):
        hops = [_hop(28, 5.5, 60)]
        overridden = calculate_ibu(hops, 1.050, 20, {"Cascade": 11.0})
        assert overridden == round(_tinseth(11.0, 28, 60, 1.050, 20))

    def test_override_for_other_hop_ignored(self):
        hops = [_hop(28, 5.5, 60)]
        assert calculate_ibu(hops, 1.050, 20, {"Citra": 14}) == calculate_ibu(hops, 1.050, 20)


class TestPrimingSugar:
    """Tests for priming sugar."""

    def test_table_sugar(self):
        assert calculate_priming_sugar(2.4, 20, 20, "table_sugar") == 124

    def test_glucose_needs_more(self):
        needed = (2.4 - 1.57 * 0.97 ** 20) * 4 * 20
        assert calculate_priming_sugar(2.4, 20, 20, SugarType.GLUCOSE) == round(needed * 1.15)

    def test_dme_needs_most(self):
        needed = (2.4 - 1.57 * 0.97 ** 20) * 4 * 20
        assert calculate_priming_sugar(2.4, 20, 20, SugarType.DME) == round(needed * 1.4)

    def test_already_carbonated(self):
        assert calculate_priming_sugar(0.5, 20, 0, "table_sugar") == 0

    def test_zero_volume(self):
        assert calculate_priming_sugar(2.4, 0, 20) == 0


class TestRecipeStats:
    """Tests for whole-recipe statistics."""

    def test_empty_recipe_is_finite(self):
        stats = calculate_recipe_stats(Recipe(name="Empty"))
        for value in (stats.og, stats.fg, stats.abv, stats.color, stats.ibu):
            assert math.isfinite(value)
            assert value >= 0
        assert stats.og == 1.0
        assert stats.ibu == 0

    def test_zero_batch_size_is_finite(self, pale_ale):
        empty_batch = pale_ale.model_copy(update={"batch_size": Amount(value=0, unit="liters")})
        one_liter = pale_ale.model_copy(update={"batch_size": Amount(value=1, unit="liters")})
        stats = calculate_recipe_stats(empty_batch)
        for value in (stats.og, stats.fg, stats.abv, stats.color, stats.ibu):
            assert math.isfinite(value)
            assert value >= 0
        assert stats.color > 0
        reference = calculate_recipe_stats(one_liter)
        assert stats.og == pytest.approx(reference.og)
        assert stats.ibu == reference.ibu

    def test_pale_ale(self, pale_ale):
        stats = calculate_recipe_stats(pale_ale)
        expected_og = calculate_og(pale_ale.fermentables, 20, 75)
        assert stats.og == pytest.approx(expected_og)
        assert stats.fg == pytest.approx(calculate_fg(expected_og, 81))
        assert stats.abv == pytest.approx((stats.og - stats.fg) * 131.25)
        assert stats.ibu > 0
        assert stats.color > 0

    def test_gallon_batch_matches_liter_batch(self, pale_ale):
        in_gallons = pale_ale.model_copy(update={"batch_size": Amount(value=20 / 3.78541, unit="gal")})
        assert calculate_recipe_stats(in_gallons).og == pytest.approx(calculate_recipe_stats(pale_ale).og)


class TestBrewLog:
    """Tests for brew log derived values."""

    def _entry(self, **kwargs) -> BrewLogEntry:
        return BrewLogEntry(recipe_id="pale01", date="2024-05-01", **kwargs)

    def test_measured_alpha_used(self, pale_ale):
        entry = self._entry(measurements=Measurements(measured_alpha={"Cascade": 11.0}))
        assert brew_log_stats(pale_ale, entry).ibu > calculate_recipe_stats(pale_ale).ibu

    def test_abv_with_priming_uses_bottling_volume(self, pale_ale):
        entry = self._entry(
            measurements=Measurements(actual_og=1.050, actual_fg=1.010, actual_volume=22),
            bottling=Bottling(sugar_amount=100, bottling_volume=18),
        )
        assert brew_log_abv(pale_ale, entry, True) == pytest.approx(5.25 + 100 / 18 * 0.05)

    def test_abv_volume_falls_back_to_batch_size(self, pale_ale):
        entry = self._entry(
            measurements=Measurements(actual_og=1.050, actual_fg=1.010),
            bottling=Bottling(sugar_amount=100),
        )
        assert brew_log_abv(pale_ale, entry, True) == pytest.approx(5.25 + 100 / 20 * 0.05)

    def test_priming_sugar_defaults(self, pale_ale):
        entry = self._entry(bottling=Bottling())
        assert brew_log_priming_sugar(pale_ale, entry) == 124

    def test_no_bottling_plan(self, pale_ale):
        assert brew_log_priming_sugar(pale_ale, self._entry()) == 0


class TestSrmToHex:
    """Tests for display colour swatches."""

    def test_palest(self):
        assert srm_to_hex(1) == "#FFE699"

    def test_boundary_moves_up(self):
        assert srm_to_hex(2) == "#FFD878"

    def test_darkest(self):
        assert srm_to_hex(60) == "#241000"
