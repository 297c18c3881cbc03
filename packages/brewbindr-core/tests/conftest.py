"""
Shared fixtures for brewbindr-core tests.
"""

import pytest

from brewbindr_core.models import (
    Amount,
    Culture,
    Fermentable,
    Hop,
    HopUse,
    Ingredients,
    LibraryIngredient,
    LibraryType,
    Potential,
    Recipe,
    Value,
)


SAMPLE_BEERXML = """<?xml version="1.0" encoding="ISO-8859-1"?>
<RECIPES>
  <RECIPE>
    <NAME>Burton Ale</NAME>
    <VERSION>1</VERSION>
    <TYPE>All Grain</TYPE>
    <BREWER>Brad Smith</BREWER>
    <BATCH_SIZE>18.93</BATCH_SIZE>
    <BOIL_TIME>60</BOIL_TIME>
    <EFFICIENCY>72.0</EFFICIENCY>
    <STYLE>
      <NAME>English IPA</NAME>
      <CATEGORY>India Pale Ale</CATEGORY>
      <VERSION>1</VERSION>
    </STYLE>
    <HOPS>
      <HOP>
        <NAME>Goldings, East Kent</NAME>
        <VERSION>1</VERSION>
        <ALPHA>5.0</ALPHA>
        <AMOUNT>0.0638</AMOUNT>
        <USE>Boil</USE>
        <TIME>60.0</TIME>
      </HOP>
      <HOP>
        <NAME>Northern Brewer</NAME>
        <VERSION>1</VERSION>
        <ALPHA>7.5</ALPHA>
        <AMOUNT>0.0142</AMOUNT>
        <USE>First Wort</USE>
        <TIME>60.0</TIME>
      </HOP>
    </HOPS>
    <FERMENTABLES>
      <FERMENTABLE>
        <NAME>Pale Malt (2 row) UK</NAME>
        <VERSION>1</VERSION>
        <TYPE>Grain</TYPE>
        <AMOUNT>5.44</AMOUNT>
        <POTENTIAL>1.036</POTENTIAL>
        <COLOR>3.0</COLOR>
      </FERMENTABLE>
      <FERMENTABLE>
        <NAME>Crystal Malt</NAME>
        <VERSION>1</VERSION>
        <TYPE>Grain</TYPE>
        <AMOUNT>0.45</AMOUNT>
        <YIELD>74.0</YIELD>
        <COLOR>60.0</COLOR>
      </FERMENTABLE>
    </FERMENTABLES>
    <MISCS>
      <MISC>
        <NAME>Irish Moss</NAME>
        <VERSION>1</VERSION>
        <TYPE>Fining</TYPE>
        <USE>Boil</USE>
        <TIME>15</TIME>
        <AMOUNT>0.005</AMOUNT>
      </MISC>
    </MISCS>
    <YEASTS>
      <YEAST>
        <NAME>London Ale</NAME>
        <VERSION>1</VERSION>
        <TYPE>Ale</TYPE>
        <FORM>Liquid</FORM>
        <ATTENUATION>73.0</ATTENUATION>
      </YEAST>
    </YEASTS>
    <MASH>
      <NAME>Single Step Infusion</NAME>
      <VERSION>1</VERSION>
      <GRAIN_TEMP>22.0</GRAIN_TEMP>
      <MASH_STEPS>
        <MASH_STEP>
          <NAME>Conversion Step</NAME>
          <VERSION>1</VERSION>
          <TYPE>Infusion</TYPE>
          <STEP_TEMP>68.0</STEP_TEMP>
          <STEP_TIME>60.0</STEP_TIME>
          <INFUSE_AMOUNT>10.0</INFUSE_AMOUNT>
        </MASH_STEP>
      </MASH_STEPS>
    </MASH>
    <EST_OG>1.056</EST_OG>
    <IBU>32.4</IBU>
  </RECIPE>
</RECIPES>
"""


SAMPLE_LIBRARY_XML = """<?xml version="1.0" encoding="UTF-8"?>
<BREW_LIBRARY>
  <HOPS>
    <HOP>
      <NAME>Cascade</NAME>
      <VERSION>1</VERSION>
      <ALPHA>5.5</ALPHA>
      <FORM>Pellet</FORM>
    </HOP>
    <HOP>
      <NAME>Saaz</NAME>
      <VERSION>1</VERSION>
      <ALPHA>3.5</ALPHA>
    </HOP>
  </HOPS>
  <FERMENTABLES>
    <FERMENTABLE>
      <NAME>Maris Otter</NAME>
      <VERSION>1</VERSION>
      <YIELD>81.0</YIELD>
      <COLOR>3.0</COLOR>
    </FERMENTABLE>
  </FERMENTABLES>
  <YEASTS>
    <YEAST>
      <NAME>US-05</NAME>
      <VERSION>1</VERSION>
      <TYPE>Ale</TYPE>
      <FORM>Dry</FORM>
      <ATTENUATION>81</ATTENUATION>
    </YEAST>
  </YEASTS>
  <MISCS>
    <MISC>
      <NAME>Whirlfloc</NAME>
      <VERSION>1</VERSION>
      <TYPE>Fining</TYPE>
      <USE>Boil</USE>
      <AMOUNT_IS_WEIGHT>FALSE</AMOUNT_IS_WEIGHT>
    </MISC>
  </MISCS>
  <STYLES>
    <STYLE>
      <NAME>American Pale Ale</NAME>
      <CATEGORY>Pale American Ale</CATEGORY>
      <OG_MIN>1.045</OG_MIN>
      <OG_MAX>1.060</OG_MAX>
      <IBU_MIN>30</IBU_MIN>
      <IBU_MAX>50</IBU_MAX>
    </STYLE>
  </STYLES>
  <MASHS>
    <MASH>
      <NAME>Step Mash</NAME>
      <VERSION>1</VERSION>
      <MASH_STEPS>
        <MASH_STEP>
          <NAME>Protein Rest</NAME>
          <TYPE>Temperature</TYPE>
          <STEP_TEMP>50</STEP_TEMP>
          <STEP_TIME>20</STEP_TIME>
        </MASH_STEP>
        <MASH_STEP>
          <NAME>Saccharification</NAME>
          <TYPE>Temperature</TYPE>
          <STEP_TEMP>66</STEP_TEMP>
          <STEP_TIME>60</STEP_TIME>
        </MASH_STEP>
      </MASH_STEPS>
    </MASH>
  </MASHS>
</BREW_LIBRARY>
"""


@pytest.fixture
def sample_beerxml() -> str:
    return SAMPLE_BEERXML


@pytest.fixture
def sample_library_xml() -> str:
    return SAMPLE_LIBRARY_XML


@pytest.fixture
def pale_ale() -> Recipe:
    """A simple 20 L all grain recipe."""
    return Recipe(
        id="pale01",
        name="Pale Ale",
        batch_size=Amount(value=20, unit="liters"),
        ingredients=Ingredients(
            fermentables=[
                Fermentable(
                    name="Maris Otter",
                    type="grain",
                    amount=Amount(value=5, unit="kg"),
                    yield_=Potential(potential=Value(value=1.037)),
                    color=Value(value=3),
                ),
            ],
            hops=[
                Hop(
                    name="Cascade",
                    amount=Amount(value=28, unit="g"),
                    alpha_acid=Value(value=5.5),
                    use=HopUse.BOIL,
                    time=Amount(value=60, unit="min"),
                ),
            ],
            cultures=[Culture(name="US-05", attenuation=81)],
        ),
    )


@pytest.fixture
def cascade_entry() -> LibraryIngredient:
    return LibraryIngredient(id="hop001", name="Cascade", type=LibraryType.HOP, alpha=5.5)
