"""
Data models for recipes, library ingredients and brew logs.

All models use Pydantic v2 for validation and serialisation. Field
aliases follow the JSON record shapes the application stores and
backs up (snake_case recipe fields, camelCase references such as
``libraryId``), so ``to_dict()`` output can be fed straight back
into ``model_validate``.
"""

from enum import Enum
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field, field_validator

from brewbindr_core.units import to_liters


DEFAULT_POTENTIAL = 1.037
DEFAULT_COLOR_SRM = 2.0
DEFAULT_ALPHA = 5.0
DEFAULT_ATTENUATION = 75.0
DEFAULT_EFFICIENCY = 75.0


def new_id() -> str:
    """Generate a short random id for recipes and library entries."""
    return uuid4().hex[:9]


# === Enums ===


class RecipeType(str, Enum):
    """Brewing process used by a recipe."""

    EXTRACT = "extract"
    PARTIAL_MASH = "partial_mash"
    ALL_GRAIN = "all_grain"


class HopUse(str, Enum):
    """How a hop is used in the brewing process."""

    BOIL = "boil"
    DRY_HOP = "dry_hop"
    MASH = "mash"
    FIRST_WORT = "first_wort"
    WHIRLPOOL = "whirlpool"
    AROMA = "aroma"


class CultureType(str, Enum):
    """Biological type of a yeast culture."""

    ALE = "ale"
    LAGER = "lager"
    WHEAT = "wheat"
    WINE = "wine"
    CHAMPAGNE = "champagne"


class CultureForm(str, Enum):
    """Physical form of a yeast culture."""

    LIQUID = "liquid"
    DRY = "dry"
    SLANT = "slant"
    CULTURE = "culture"


class MashStepType(str, Enum):
    """Mash step heating method."""

    INFUSION = "infusion"
    TEMPERATURE = "temperature"
    DECOCTION = "decoction"


class LibraryType(str, Enum):
    """Kind of canonical library entry."""

    FERMENTABLE = "fermentable"
    HOP = "hop"
    CULTURE = "culture"
    MISC = "misc"
    STYLE = "style"
    MASH_PROFILE = "mash_profile"


class SugarType(str, Enum):
    """Priming sugar used at bottling."""

    TABLE_SUGAR = "table_sugar"
    GLUCOSE = "glucose"
    DME = "dme"


class BrewStatus(str, Enum):
    """Lifecycle stage of a brewed batch."""

    BREWING = "brewing"
    FERMENTING = "fermenting"
    LAGERING = "lagering"
    BOTTLED = "bottled"


class UnitSystem(str, Enum):
    """User display preference for units."""

    METRIC = "metric"
    IMPERIAL = "imperial"


class ColorScale(str, Enum):
    """User display preference for beer colour."""

    SRM = "srm"
    EBC = "ebc"


# === Base ===


class BrewbindrModel(BaseModel):
    """Base model for all brewbindr records."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    def to_dict(self) -> dict:
        """Serialise to the JSON record shape (aliases, no empty optionals)."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class Amount(BrewbindrModel):
    """A quantity with its unit string as found in the data."""

    value: float = 0.0
    unit: str = ""


class Value(BrewbindrModel):
    """A bare numeric value wrapper."""

    value: float = 0.0


class Potential(BrewbindrModel):
    potential: Value = Field(default_factory=Value)


class Efficiency(BrewbindrModel):
    brewhouse: float = DEFAULT_EFFICIENCY


# === Recipe ingredients ===


class Fermentable(BrewbindrModel):
    """Fermentable addition in a recipe."""

    name: str = ""
    type: str = ""
    amount: Amount | None = None
    yield_: Potential | None = Field(default=None, alias="yield")
    color: Value | None = None
    library_id: str | None = Field(default=None, alias="libraryId")

    @property
    def potential(self) -> float:
        """Yield potential as specific gravity, 1.037 when unknown."""
        if self.yield_ and self.yield_.potential.value:
            return self.yield_.potential.value
        return DEFAULT_POTENTIAL

    @property
    def color_srm(self) -> float:
        """Colour in SRM/Lovibond, 2 when unknown."""
        if self.color and self.color.value:
            return self.color.value
        return DEFAULT_COLOR_SRM


class Hop(BrewbindrModel):
    """Hop addition in a recipe. Amounts are grams unless stated."""

    name: str = ""
    amount: Amount | None = None
    alpha_acid: Value | None = None
    use: HopUse = HopUse.BOIL
    time: Amount | None = None
    library_id: str | None = Field(default=None, alias="libraryId")

    @property
    def alpha(self) -> float:
        """Alpha acid percentage, 5 when unknown."""
        if self.alpha_acid and self.alpha_acid.value:
            return self.alpha_acid.value
        return DEFAULT_ALPHA


class Culture(BrewbindrModel):
    """Yeast culture in a recipe."""

    name: str = ""
    type: CultureType = CultureType.ALE
    form: CultureForm = CultureForm.DRY
    amount: Amount | None = None
    attenuation: float | None = None
    library_id: str | None = Field(default=None, alias="libraryId")

    @property
    def attenuation_pct(self) -> float:
        """Apparent attenuation percentage, 75 when unknown."""
        return self.attenuation or DEFAULT_ATTENUATION


class Misc(BrewbindrModel):
    """Miscellaneous addition. BeerXML's MISC vocabulary is open-ended."""

    name: str = ""
    type: str = ""
    use: str = ""
    amount: Amount | None = None
    time: Amount | None = None
    library_id: str | None = Field(default=None, alias="libraryId")


class Water(BrewbindrModel):
    name: str = ""
    amount: Amount | None = None


class Ingredients(BrewbindrModel):
    fermentables: list[Fermentable] = Field(default_factory=list)
    hops: list[Hop] = Field(default_factory=list)
    cultures: list[Culture] = Field(default_factory=list)
    miscellaneous: list[Misc] = Field(default_factory=list)
    water: list[Water] = Field(default_factory=list)


# === Mash ===


class MashStep(BrewbindrModel):
    """A single mash step. Temperatures in Celsius, times in minutes."""

    name: str = ""
    type: MashStepType = MashStepType.INFUSION
    infuse_amount: float | None = None  # liters
    step_temp: float = 0.0
    step_time: float = 0.0
    ramp_time: float | None = None
    end_temp: float | None = None
    description: str | None = None


class MashProfile(BrewbindrModel):
    name: str = ""
    grain_temp: float | None = None
    notes: str | None = None
    sparge_temp: float | None = None
    ph: float | None = None
    steps: list[MashStep] = Field(default_factory=list)

    @field_validator("steps", mode="before")
    @classmethod
    def wrap_single_step(cls, v):
        """Wrap a single step dict in a list."""
        if isinstance(v, dict):
            return [v]
        return v if v else []


# === Recipe ===


class StyleRef(BrewbindrModel):
    name: str = ""
    category: str | None = None
    library_id: str | None = Field(default=None, alias="libraryId")


class Specifications(BrewbindrModel):
    """Stored target/estimated values, each a single number."""

    og: Value | None = None
    fg: Value | None = None
    abv: Value | None = None
    ibu: Value | None = None
    color: Value | None = None


class Recipe(BrewbindrModel):
    """
    A named brewing formula.

    Batch size carries its own unit (liters or gallons); the calculation
    engine normalises it before use.
    """

    id: str | None = None
    name: str = ""
    type: RecipeType = RecipeType.ALL_GRAIN
    author: str = ""
    notes: str | None = None
    batch_size: Amount = Field(default_factory=lambda: Amount(value=0.0, unit="liters"))
    style: StyleRef | None = None
    ingredients: Ingredients = Field(default_factory=Ingredients)
    mash: MashProfile | None = None
    efficiency: Efficiency = Field(default_factory=Efficiency)
    boil_time: Amount = Field(default_factory=lambda: Amount(value=60.0, unit="minutes"))
    specifications: Specifications | None = None

    @property
    def batch_size_liters(self) -> float:
        """Batch size normalised to liters."""
        return to_liters(self.batch_size.value, self.batch_size.unit)

    @property
    def fermentables(self) -> list[Fermentable]:
        return self.ingredients.fermentables

    @property
    def hops(self) -> list[Hop]:
        return self.ingredients.hops

    @property
    def cultures(self) -> list[Culture]:
        return self.ingredients.cultures


# === Library ===


class LibraryIngredient(BrewbindrModel):
    """
    Canonical, deduplicated library entry of any ingredient kind.

    Styles and mash profiles share this record; only the fields relevant
    to ``type`` are populated. Deduplicated on (lowercased name, type).
    """

    id: str = Field(default_factory=new_id)
    name: str
    type: LibraryType

    # Fermentable
    color: float | None = None
    yield_: float | None = Field(default=None, alias="yield")  # extract yield %

    # Hop
    alpha: float | None = None

    # Culture
    attenuation: float | None = None
    form: str | None = None
    culture_type: str | None = None

    # Misc
    misc_type: str | None = None
    misc_use: str | None = None
    amount_is_weight: bool | None = None
    use_for: str | None = None

    # Style
    category: str | None = None
    style_guide: str | None = None
    style_type: str | None = None
    og_min: float | None = None
    og_max: float | None = None
    fg_min: float | None = None
    fg_max: float | None = None
    ibu_min: float | None = None
    ibu_max: float | None = None
    color_min: float | None = None
    color_max: float | None = None
    abv_min: float | None = None
    abv_max: float | None = None
    profile: str | None = None
    examples: str | None = None

    # Mash profile
    grain_temp: float | None = None
    sparge_temp: float | None = None
    ph: float | None = None
    steps: list[MashStep] | None = None

    notes: str | None = None

    @property
    def dedup_key(self) -> tuple[str, str]:
        return (self.name.lower(), self.type.value)


# === Brew log collaborator records ===


class Measurements(BrewbindrModel):
    """Values measured on brew day, overriding recipe design values."""

    actual_og: float | None = None
    actual_fg: float | None = None
    actual_volume: float | None = None  # liters
    mash_temp: float | None = None
    boil_gravity: float | None = None
    measured_alpha: dict[str, float] | None = None  # hop name -> alpha %
    fermentation_temp: float | None = None


class Bottling(BrewbindrModel):
    date: str | None = None
    target_co2: float = 2.4
    sugar_type: SugarType = SugarType.TABLE_SUGAR
    sugar_amount: float | None = None  # grams
    bottling_volume: float | None = None  # liters


class BrewLogEntry(BrewbindrModel):
    id: str = Field(default_factory=new_id)
    recipe_id: str = Field(alias="recipeId")
    date: str
    brew_date: str | None = Field(default=None, alias="brewDate")
    fermentation_date: str | None = Field(default=None, alias="fermentationDate")
    lagering_date: str | None = Field(default=None, alias="lageringDate")
    status: BrewStatus = BrewStatus.BREWING
    notes: str = ""
    measurements: Measurements = Field(default_factory=Measurements)
    bottling: Bottling | None = None


class TastingNote(BrewbindrModel):
    id: str = Field(default_factory=new_id)
    recipe_id: str = Field(alias="recipeId")
    brew_log_id: str = Field(alias="brewLogId")
    date: str
    appearance: float = 0.0
    aroma: float = 0.0
    flavor: float = 0.0
    mouthfeel: float = 0.0
    overall: float = 0.0
    comments: str = ""
