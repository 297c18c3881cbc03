"""Parser for BeerXML documents."""

import logging
import math
import re

from lxml import etree
from pydantic import BaseModel, Field

from brewbindr_core.models import (
    DEFAULT_ATTENUATION,
    DEFAULT_POTENTIAL,
    Amount,
    Culture,
    CultureForm,
    CultureType,
    Efficiency,
    Fermentable,
    Hop,
    HopUse,
    Ingredients,
    LibraryIngredient,
    LibraryType,
    MashProfile,
    MashStep,
    MashStepType,
    Misc,
    Potential,
    Recipe,
    RecipeType,
    Specifications,
    StyleRef,
    Value,
    new_id,
)

logger = logging.getLogger(__name__)

# Leading number, the way a lenient float parse reads "5.5 kg"
NUMBER_RE = re.compile(r"\s*[-+]?(?:\d+\.?\d*|\.\d+)(?:[eE][-+]?\d+)?")

# Extract potential of pure sucrose above water, used to turn YIELD % into SG
SUCROSE_POINTS = 0.046


class ImportResult(BaseModel):
    """
    Everything found in a BeerXML document.

    ``recipes`` are RECIPE elements; the other lists hold document-global
    declarations (elements outside any RECIPE) in library form.
    """

    recipes: list[Recipe] = Field(default_factory=list)
    fermentables: list[LibraryIngredient] = Field(default_factory=list)
    hops: list[LibraryIngredient] = Field(default_factory=list)
    cultures: list[LibraryIngredient] = Field(default_factory=list)
    miscs: list[LibraryIngredient] = Field(default_factory=list)
    styles: list[LibraryIngredient] = Field(default_factory=list)
    mashes: list[LibraryIngredient] = Field(default_factory=list)
    waters: list[str] = Field(default_factory=list)
    equipments: list[str] = Field(default_factory=list)

    @property
    def library_items(self) -> list[LibraryIngredient]:
        """Global library declarations in import order."""
        return [*self.fermentables, *self.hops, *self.cultures, *self.mashes, *self.styles, *self.miscs]

    @property
    def is_empty(self) -> bool:
        """True when there is nothing that could be imported."""
        return not self.recipes and not self.library_items

    def merge(self, other: "ImportResult") -> "ImportResult":
        """Combine the results of several documents into one batch."""
        return ImportResult(
            recipes=[*self.recipes, *other.recipes],
            fermentables=[*self.fermentables, *other.fermentables],
            hops=[*self.hops, *other.hops],
            cultures=[*self.cultures, *other.cultures],
            miscs=[*self.miscs, *other.miscs],
            styles=[*self.styles, *other.styles],
            mashes=[*self.mashes, *other.mashes],
            waters=[*self.waters, *other.waters],
            equipments=[*self.equipments, *other.equipments],
        )


def fold_token(text: str) -> str:
    """Fold a BeerXML enum label into model vocabulary ("First Wort" -> "first_wort")."""
    return re.sub(r"\s+", "_", text.strip().lower())


def _coerce(text: str, enum_class, default):
    try:
        return enum_class(fold_token(text))
    except ValueError:
        return default


class BeerXMLParser:
    """
    Lenient BeerXML reader.

    Never raises on bad input: unparseable documents give an empty
    result and missing or garbled tags read as "" or 0.
    """

    def _parse_document(self, xml: str | bytes) -> etree._Element | None:
        if isinstance(xml, str):
            # lxml refuses str input carrying an encoding declaration
            content = xml.encode("utf-8")
            parser = etree.XMLParser(recover=True, encoding="utf-8")
        else:
            content = xml
            parser = etree.XMLParser(recover=True)

        if not content.strip():
            return None
        try:
            return etree.fromstring(content, parser=parser)
        except etree.XMLSyntaxError:
            return None

    def _text(self, element: etree._Element | None, tag: str) -> str:
        if element is None:
            return ""
        child = element.find(tag)
        if child is None or child.text is None:
            return ""
        return child.text.strip()

    def _number(self, element: etree._Element | None, tag: str) -> float:
        match = NUMBER_RE.match(self._text(element, tag))
        if not match:
            return 0.0
        value = float(match.group(0))
        # Overflowing exponents ("1e400") read as 0 like any other garbage
        return value if math.isfinite(value) else 0.0

    def _optional_number(self, element: etree._Element | None, tag: str) -> float | None:
        return self._number(element, tag) or None

    def _potential(self, element: etree._Element) -> float:
        potential = self._number(element, "POTENTIAL")
        if potential:
            return potential
        yield_pct = self._number(element, "YIELD")
        if yield_pct:
            return 1 + yield_pct / 100 * SUCROSE_POINTS
        return DEFAULT_POTENTIAL

    def _yield_pct(self, element: etree._Element) -> float | None:
        yield_pct = self._number(element, "YIELD")
        if yield_pct:
            return yield_pct
        potential = self._number(element, "POTENTIAL")
        if potential:
            return round((potential - 1) / SUCROSE_POINTS * 100)
        return None

    # === Shared pieces ===

    def _parse_mash_steps(self, mash_elem: etree._Element) -> list[MashStep]:
        steps = []
        for step_elem in mash_elem.iter("MASH_STEP"):
            steps.append(MashStep(
                name=self._text(step_elem, "NAME"),
                type=_coerce(self._text(step_elem, "TYPE"), MashStepType, MashStepType.INFUSION),
                step_temp=self._number(step_elem, "STEP_TEMP"),
                step_time=self._number(step_elem, "STEP_TIME"),
                infuse_amount=self._optional_number(step_elem, "INFUSE_AMOUNT"),
                ramp_time=self._optional_number(step_elem, "RAMP_TIME"),
                end_temp=self._optional_number(step_elem, "END_TEMP"),
                description=self._text(step_elem, "DESCRIPTION") or None,
            ))
        return steps

    def _parse_mash(self, mash_elem: etree._Element) -> MashProfile:
        return MashProfile(
            name=self._text(mash_elem, "NAME"),
            grain_temp=self._number(mash_elem, "GRAIN_TEMP"),
            sparge_temp=self._number(mash_elem, "SPARGE_TEMP"),
            ph=self._number(mash_elem, "PH"),
            notes=self._text(mash_elem, "NOTES"),
            steps=self._parse_mash_steps(mash_elem),
        )

    # === Recipe scoped ===

    def _parse_recipe(self, recipe_elem: etree._Element) -> Recipe:
        fermentables = [
            Fermentable(
                name=self._text(f, "NAME"),
                type=fold_token(self._text(f, "TYPE")),
                amount=Amount(value=self._number(f, "AMOUNT"), unit="kilograms"),
                yield_=Potential(potential=Value(value=self._potential(f))),
                color=Value(value=self._number(f, "COLOR")),
            )
            for f in recipe_elem.iter("FERMENTABLE")
        ]

        # BeerXML states hop and misc amounts in kilograms
        hops = [
            Hop(
                name=self._text(h, "NAME"),
                amount=Amount(value=self._number(h, "AMOUNT") * 1000, unit="grams"),
                alpha_acid=Value(value=self._number(h, "ALPHA")),
                use=_coerce(self._text(h, "USE"), HopUse, HopUse.BOIL),
                time=Amount(value=self._number(h, "TIME"), unit="minutes"),
            )
            for h in recipe_elem.iter("HOP")
        ]

        miscs = [
            Misc(
                name=self._text(m, "NAME"),
                type=fold_token(self._text(m, "TYPE")),
                use=fold_token(self._text(m, "USE")),
                amount=Amount(value=self._number(m, "AMOUNT") * 1000, unit="grams"),
                time=Amount(value=self._number(m, "TIME"), unit="minutes"),
            )
            for m in recipe_elem.iter("MISC")
        ]

        cultures = [
            Culture(
                name=self._text(y, "NAME"),
                type=_coerce(self._text(y, "TYPE"), CultureType, CultureType.ALE),
                form=_coerce(self._text(y, "FORM"), CultureForm, CultureForm.DRY),
                attenuation=self._number(y, "ATTENUATION") or DEFAULT_ATTENUATION,
            )
            for y in recipe_elem.iter("YEAST")
        ]

        style = None
        style_elem = next(recipe_elem.iter("STYLE"), None)
        if style_elem is not None:
            style = StyleRef(
                name=self._text(style_elem, "NAME"),
                category=self._text(style_elem, "CATEGORY"),
            )

        mash = None
        mash_elem = next(recipe_elem.iter("MASH"), None)
        if mash_elem is not None:
            mash = self._parse_mash(mash_elem)

        return Recipe(
            id=new_id(),
            name=self._text(recipe_elem, "NAME"),
            type=_coerce(self._text(recipe_elem, "TYPE"), RecipeType, RecipeType.ALL_GRAIN),
            author=self._text(recipe_elem, "BREWER"),
            notes=self._text(recipe_elem, "NOTES"),
            batch_size=Amount(value=self._number(recipe_elem, "BATCH_SIZE"), unit="liters"),
            efficiency=Efficiency(brewhouse=self._number(recipe_elem, "EFFICIENCY")),
            boil_time=Amount(value=self._number(recipe_elem, "BOIL_TIME"), unit="minutes"),
            ingredients=Ingredients(
                fermentables=fermentables,
                hops=hops,
                cultures=cultures,
                miscellaneous=miscs,
            ),
            style=style,
            mash=mash,
            specifications=Specifications(
                og=Value(value=self._number(recipe_elem, "EST_OG")),
                fg=Value(value=self._number(recipe_elem, "EST_FG")),
                abv=Value(value=self._number(recipe_elem, "EST_ABV")),
                ibu=Value(value=self._number(recipe_elem, "IBU")),
                color=Value(value=self._number(recipe_elem, "EST_COLOR")),
            ),
        )

    # === Document global ===

    def _global_fermentable(self, elem: etree._Element) -> LibraryIngredient:
        return LibraryIngredient(
            name=self._text(elem, "NAME"),
            type=LibraryType.FERMENTABLE,
            color=self._number(elem, "COLOR"),
            yield_=self._yield_pct(elem),
            notes=self._text(elem, "NOTES") or None,
        )

    def _global_hop(self, elem: etree._Element) -> LibraryIngredient:
        return LibraryIngredient(
            name=self._text(elem, "NAME"),
            type=LibraryType.HOP,
            alpha=self._number(elem, "ALPHA"),
            form=fold_token(self._text(elem, "FORM")) or None,
            notes=self._text(elem, "NOTES") or None,
        )

    def _global_culture(self, elem: etree._Element) -> LibraryIngredient:
        return LibraryIngredient(
            name=self._text(elem, "NAME"),
            type=LibraryType.CULTURE,
            culture_type=fold_token(self._text(elem, "TYPE")) or None,
            form=fold_token(self._text(elem, "FORM")) or None,
            attenuation=self._optional_number(elem, "ATTENUATION"),
            notes=self._text(elem, "NOTES") or None,
        )

    def _global_misc(self, elem: etree._Element) -> LibraryIngredient:
        amount_is_weight = self._text(elem, "AMOUNT_IS_WEIGHT")
        return LibraryIngredient(
            name=self._text(elem, "NAME"),
            type=LibraryType.MISC,
            misc_type=fold_token(self._text(elem, "TYPE")),
            misc_use=fold_token(self._text(elem, "USE")),
            amount_is_weight=amount_is_weight.upper() == "TRUE" if amount_is_weight else None,
            use_for=self._text(elem, "USE_FOR") or None,
            notes=self._text(elem, "NOTES") or None,
        )

    def _global_style(self, elem: etree._Element) -> LibraryIngredient:
        return LibraryIngredient(
            name=self._text(elem, "NAME"),
            type=LibraryType.STYLE,
            category=self._text(elem, "CATEGORY"),
            style_guide=self._text(elem, "STYLE_GUIDE") or None,
            style_type=fold_token(self._text(elem, "TYPE")) or None,
            og_min=self._number(elem, "OG_MIN"),
            og_max=self._number(elem, "OG_MAX"),
            fg_min=self._number(elem, "FG_MIN"),
            fg_max=self._number(elem, "FG_MAX"),
            ibu_min=self._number(elem, "IBU_MIN"),
            ibu_max=self._number(elem, "IBU_MAX"),
            color_min=self._number(elem, "COLOR_MIN"),
            color_max=self._number(elem, "COLOR_MAX"),
            abv_min=self._number(elem, "ABV_MIN"),
            abv_max=self._number(elem, "ABV_MAX"),
            profile=self._text(elem, "PROFILE") or None,
            examples=self._text(elem, "EXAMPLES") or None,
            notes=self._text(elem, "NOTES") or None,
        )

    def _global_mash(self, elem: etree._Element) -> LibraryIngredient:
        mash = self._parse_mash(elem)
        return LibraryIngredient(
            name=mash.name,
            type=LibraryType.MASH_PROFILE,
            steps=mash.steps,
            grain_temp=mash.grain_temp,
            sparge_temp=mash.sparge_temp,
            ph=mash.ph,
            notes=mash.notes,
        )

    def parse(self, xml: str | bytes) -> ImportResult:
        """
        Parse a BeerXML document.

        Two passes: RECIPE subtrees are collected first, and every
        ingredient, style or mash element outside them is treated as a
        document-global library declaration.

        Args:
            xml: BeerXML text (str or raw bytes)

        Returns:
            ImportResult; check ``is_empty`` for "nothing found"
        """
        root = self._parse_document(xml)
        if root is None:
            logger.debug("BeerXML document could not be parsed")
            return ImportResult()

        recipe_elems = list(root.iter("RECIPE"))
        scoped: set[etree._Element] = set()
        for recipe_elem in recipe_elems:
            scoped.update(recipe_elem.iter())

        def global_elements(tag: str) -> list[etree._Element]:
            return [e for e in root.iter(tag) if e not in scoped]

        result = ImportResult(
            recipes=[self._parse_recipe(r) for r in recipe_elems],
            fermentables=[self._global_fermentable(e) for e in global_elements("FERMENTABLE")],
            hops=[self._global_hop(e) for e in global_elements("HOP")],
            cultures=[self._global_culture(e) for e in global_elements("YEAST")],
            miscs=[self._global_misc(e) for e in global_elements("MISC")],
            styles=[self._global_style(e) for e in global_elements("STYLE")],
            mashes=[self._global_mash(e) for e in global_elements("MASH")],
            waters=[self._text(e, "NAME") for e in global_elements("WATER")],
            equipments=[self._text(e, "NAME") for e in global_elements("EQUIPMENT")],
        )
        logger.debug(
            "Parsed BeerXML: %d recipes, %d library declarations",
            len(result.recipes),
            len(result.library_items),
        )
        return result


def parse_beerxml(xml: str | bytes) -> ImportResult:
    """Parse a BeerXML document with a default parser."""
    return BeerXMLParser().parse(xml)
