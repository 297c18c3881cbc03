"""
Tests for BeerXML export.
"""

import pytest
from lxml import etree

from brewbindr_core.exporter import library_to_beerxml, recipe_to_beerxml, xml_escape
from brewbindr_core.models import (
    Amount,
    HopUse,
    LibraryIngredient,
    LibraryType,
    MashProfile,
    MashStep,
    Recipe,
    RecipeType,
    StyleRef,
)
from brewbindr_core.parser import parse_beerxml


class TestXmlEscape:
    """Tests for free-text escaping."""

    def test_all_five_characters(self):
        assert xml_escape("""& < > " '""") == "&amp; &lt; &gt; &quot; &#x27;"

    def test_none(self):
        assert xml_escape(None) == ""

    def test_ampersand_escaped_once(self):
        assert xml_escape("A&B") == "A&amp;B"


class TestRecipeExport:
    """Tests for recipe_to_beerxml."""

    def test_well_formed_with_special_characters(self, pale_ale):
        recipe = pale_ale.model_copy(update={"name": "Tom & Jerry's <Ale>", "notes": 'Say "cheers"'})
        xml = recipe_to_beerxml(recipe)
        assert "Tom &amp; Jerry&#x27;s &lt;Ale&gt;" in xml
        root = etree.fromstring(xml.encode("utf-8"))
        assert root.find("RECIPE/NAME").text == "Tom & Jerry's <Ale>"
        assert root.find("RECIPE/NOTES").text == 'Say "cheers"'

    def test_recipe_type_label(self, pale_ale):
        xml = recipe_to_beerxml(pale_ale)
        assert "<TYPE>All Grain</TYPE>" in xml
        partial = pale_ale.model_copy(update={"type": RecipeType.PARTIAL_MASH})
        assert "<TYPE>Partial Mash</TYPE>" in recipe_to_beerxml(partial)

    def test_hop_amount_in_kilograms(self, pale_ale):
        xml = recipe_to_beerxml(pale_ale)
        assert "<AMOUNT>0.028</AMOUNT>" in xml

    def test_hop_use_label(self, pale_ale):
        pale_ale.ingredients.hops[0].use = HopUse.FIRST_WORT
        assert "<USE>First Wort</USE>" in recipe_to_beerxml(pale_ale)

    def test_fermentable_amount_from_pounds(self, pale_ale):
        pale_ale.ingredients.fermentables[0].amount = Amount(value=10, unit="lb")
        root = etree.fromstring(recipe_to_beerxml(pale_ale).encode("utf-8"))
        amount = float(root.find("RECIPE/FERMENTABLES/FERMENTABLE/AMOUNT").text)
        assert amount == pytest.approx(4.53592)

    def test_gallon_batch_exported_in_liters(self, pale_ale):
        recipe = pale_ale.model_copy(update={"batch_size": Amount(value=5, unit="gal")})
        root = etree.fromstring(recipe_to_beerxml(recipe).encode("utf-8"))
        assert float(root.find("RECIPE/BATCH_SIZE").text) == pytest.approx(18.92705)

    def test_no_notes_tag_when_empty(self, pale_ale):
        assert "<NOTES>" not in recipe_to_beerxml(pale_ale)


class TestRoundTrip:
    """Export then re-import."""

    def test_structured_fields_survive(self, pale_ale):
        pale_ale.ingredients.hops[0].use = HopUse.WHIRLPOOL
        pale_ale.style = StyleRef(name="American Pale Ale", category="Pale American Ale")
        pale_ale.mash = MashProfile(
            name="Single Infusion",
            steps=[MashStep(name="Saccharification", step_temp=67, step_time=60)],
        )

        imported = parse_beerxml(recipe_to_beerxml(pale_ale)).recipes[0]

        assert imported.name == pale_ale.name
        assert imported.type == pale_ale.type
        assert imported.batch_size_liters == pytest.approx(pale_ale.batch_size_liters)
        assert imported.efficiency.brewhouse == pale_ale.efficiency.brewhouse

        original_f = pale_ale.fermentables[0]
        imported_f = imported.fermentables[0]
        assert imported_f.name == original_f.name
        assert imported_f.amount.value == pytest.approx(original_f.amount.value)
        assert imported_f.potential == pytest.approx(original_f.potential)
        assert imported_f.color_srm == pytest.approx(original_f.color_srm)

        original_h = pale_ale.hops[0]
        imported_h = imported.hops[0]
        assert imported_h.amount.value == pytest.approx(original_h.amount.value)
        assert imported_h.alpha == pytest.approx(original_h.alpha)
        assert imported_h.time.value == pytest.approx(original_h.time.value)
        assert imported_h.use == HopUse.WHIRLPOOL

        assert imported.cultures[0].attenuation == pytest.approx(81)
        assert imported.style.name == "American Pale Ale"
        assert imported.mash.steps[0].step_temp == 67

    def test_round_trip_with_escaped_name(self, pale_ale):
        pale_ale.name = "Fish & Chips Bitter"
        assert parse_beerxml(recipe_to_beerxml(pale_ale)).recipes[0].name == "Fish & Chips Bitter"


class TestLibraryExport:
    """Tests for library_to_beerxml."""

    @pytest.fixture
    def library(self) -> list[LibraryIngredient]:
        return [
            LibraryIngredient(name="Cascade", type=LibraryType.HOP, alpha=5.5, form="pellet"),
            LibraryIngredient(name="Maris Otter", type=LibraryType.FERMENTABLE, color=3, yield_=81),
            LibraryIngredient(name="US-05", type=LibraryType.CULTURE, attenuation=81, form="dry"),
            LibraryIngredient(name="Irish Moss", type=LibraryType.MISC),
            LibraryIngredient(name="Bitter & Twisted", type=LibraryType.STYLE, category="British"),
            LibraryIngredient(
                name="Step Mash",
                type=LibraryType.MASH_PROFILE,
                steps=[MashStep(name="Rest", step_temp=50, step_time=20)],
            ),
        ]

    def test_well_formed(self, library):
        root = etree.fromstring(library_to_beerxml(library).encode("utf-8"))
        assert root.tag == "BREW_LIBRARY"

    def test_misc_defaults(self, library):
        xml = library_to_beerxml(library)
        assert "<TYPE>Other</TYPE>" in xml
        assert "<USE>Boil</USE>" in xml

    def test_reimports_as_global_entries(self, library):
        result = parse_beerxml(library_to_beerxml(library))
        assert result.recipes == []
        assert result.hops[0].alpha == 5.5
        assert result.hops[0].form == "pellet"
        assert result.fermentables[0].yield_ == 81
        assert result.cultures[0].attenuation == 81
        assert result.styles[0].name == "Bitter & Twisted"
        assert result.mashes[0].steps[0].step_temp == 50

    def test_style_and_misc_details_survive(self):
        style = LibraryIngredient(
            name="American IPA",
            type=LibraryType.STYLE,
            category="IPA",
            style_guide="BJCP",
            style_type="ale",
            og_min=1.056,
            og_max=1.070,
            fg_min=1.008,
            fg_max=1.014,
            ibu_min=40,
            ibu_max=70,
            color_min=6,
            color_max=14,
            abv_min=5.5,
            abv_max=7.5,
            profile="Hoppy",
            examples="Bell's Two Hearted",
            notes="Dry finish",
        )
        misc = LibraryIngredient(
            name="Whirlfloc",
            type=LibraryType.MISC,
            misc_type="fining",
            misc_use="boil",
            amount_is_weight=True,
            use_for="Clarity",
        )

        result = parse_beerxml(library_to_beerxml([style, misc]))

        imported = result.styles[0]
        for field in (
            "category", "style_guide", "style_type", "og_min", "og_max", "fg_min", "fg_max",
            "ibu_min", "ibu_max", "color_min", "color_max", "abv_min", "abv_max",
            "profile", "examples", "notes",
        ):
            assert getattr(imported, field) == getattr(style, field), field

        imported_misc = result.miscs[0]
        assert imported_misc.misc_type == "fining"
        assert imported_misc.amount_is_weight is True
        assert imported_misc.use_for == "Clarity"

    def test_empty_library(self):
        root = etree.fromstring(library_to_beerxml([]).encode("utf-8"))
        assert len(root) == 0
