"""BeerXML export for recipes and the ingredient library."""

import html
from collections.abc import Iterable
from typing import Any

from brewbindr_core.models import LibraryIngredient, LibraryType, Recipe, RecipeType
from brewbindr_core.units import to_grams, to_kilograms


XML_HEADER = '<?xml version="1.0" encoding="UTF-8"?>'

# BeerXML spells recipe types in title case; not recoverable by case folding
RECIPE_TYPE_LABELS: dict[RecipeType, str] = {
    RecipeType.ALL_GRAIN: "All Grain",
    RecipeType.EXTRACT: "Extract",
    RecipeType.PARTIAL_MASH: "Partial Mash",
}


def xml_escape(text: str | None) -> str:
    """Escape text for XML."""
    if not text:
        return ""
    return html.escape(text)


def _num(value: float | None) -> str:
    """Render a number without float noise (5.0 -> "5", 0.0283 -> "0.0283")."""
    if value is None:
        return "0"
    return f"{value:.10g}"


def _title(token: str | None) -> str | None:
    """Turn a model token back into a BeerXML label ("first_wort" -> "First Wort")."""
    if not token:
        return None
    return token.replace("_", " ").title()


def _label(token: str | None) -> str:
    return xml_escape(_title(token))


def _tag(indent: int, tag: str, value: str) -> str:
    return f"{'  ' * indent}<{tag}>{value}</{tag}>"


def _optional_tags(indent: int, fields: Iterable[tuple[str, Any]]) -> list[str]:
    """Tags for the fields that hold a value, skipping None and empty text."""
    lines = []
    for tag, value in fields:
        if value is None or value == "":
            continue
        if isinstance(value, bool):
            text = "TRUE" if value else "FALSE"
        elif isinstance(value, (int, float)):
            text = _num(value)
        else:
            text = xml_escape(value)
        lines.append(_tag(indent, tag, text))
    return lines


def _mash_lines(mash, indent: int) -> list[str]:
    pad = "  " * indent
    lines = [
        f"{pad}<MASH>",
        _tag(indent + 1, "NAME", xml_escape(mash.name)),
        _tag(indent + 1, "VERSION", "1"),
    ]
    if mash.grain_temp:
        lines.append(_tag(indent + 1, "GRAIN_TEMP", _num(mash.grain_temp)))
    if mash.sparge_temp:
        lines.append(_tag(indent + 1, "SPARGE_TEMP", _num(mash.sparge_temp)))
    if mash.ph:
        lines.append(_tag(indent + 1, "PH", _num(mash.ph)))
    if mash.notes:
        lines.append(_tag(indent + 1, "NOTES", xml_escape(mash.notes)))
    lines.append(f"{pad}  <MASH_STEPS>")
    for step in mash.steps or []:
        lines.extend([
            f"{pad}    <MASH_STEP>",
            _tag(indent + 3, "NAME", xml_escape(step.name)),
            _tag(indent + 3, "VERSION", "1"),
            _tag(indent + 3, "TYPE", _label(step.type.value)),
            _tag(indent + 3, "STEP_TEMP", _num(step.step_temp)),
            _tag(indent + 3, "STEP_TIME", _num(step.step_time)),
        ])
        if step.infuse_amount:
            lines.append(_tag(indent + 3, "INFUSE_AMOUNT", _num(step.infuse_amount)))
        if step.ramp_time:
            lines.append(_tag(indent + 3, "RAMP_TIME", _num(step.ramp_time)))
        if step.end_temp:
            lines.append(_tag(indent + 3, "END_TEMP", _num(step.end_temp)))
        if step.description:
            lines.append(_tag(indent + 3, "DESCRIPTION", xml_escape(step.description)))
        lines.append(f"{pad}    </MASH_STEP>")
    lines.append(f"{pad}  </MASH_STEPS>")
    lines.append(f"{pad}</MASH>")
    return lines


def recipe_to_beerxml(recipe: Recipe) -> str:
    """
    Serialise a recipe as a BeerXML document.

    Hop and misc amounts are stored in grams but BeerXML states them
    in kilograms, so they are divided by 1000 on the way out.

    Args:
        recipe: Recipe to export

    Returns:
        BeerXML text with a single RECIPE
    """
    lines = [
        XML_HEADER,
        "<RECIPES>",
        "  <RECIPE>",
        _tag(2, "NAME", xml_escape(recipe.name)),
        _tag(2, "VERSION", "1"),
        _tag(2, "TYPE", RECIPE_TYPE_LABELS[recipe.type]),
    ]

    if recipe.style:
        lines.extend([
            "    <STYLE>",
            _tag(3, "NAME", xml_escape(recipe.style.name)),
            _tag(3, "CATEGORY", xml_escape(recipe.style.category)),
            _tag(3, "VERSION", "1"),
            "    </STYLE>",
        ])

    lines.append(_tag(2, "BREWER", xml_escape(recipe.author or "brewbindr")))
    if recipe.notes:
        lines.append(_tag(2, "NOTES", xml_escape(recipe.notes)))
    lines.extend([
        _tag(2, "BATCH_SIZE", _num(recipe.batch_size_liters)),
        _tag(2, "BOIL_TIME", _num(recipe.boil_time.value)),
        _tag(2, "EFFICIENCY", _num(recipe.efficiency.brewhouse)),
    ])

    lines.append("    <FERMENTABLES>")
    for f in recipe.fermentables:
        lines.extend([
            "      <FERMENTABLE>",
            _tag(4, "NAME", xml_escape(f.name)),
            _tag(4, "VERSION", "1"),
            _tag(4, "TYPE", _label(f.type)),
            _tag(4, "AMOUNT", _num(to_kilograms(f.amount.value, f.amount.unit) if f.amount else 0)),
            _tag(4, "POTENTIAL", _num(f.potential)),
            _tag(4, "COLOR", _num(f.color.value if f.color else 0)),
            "      </FERMENTABLE>",
        ])
    lines.append("    </FERMENTABLES>")

    lines.append("    <HOPS>")
    for h in recipe.hops:
        lines.extend([
            "      <HOP>",
            _tag(4, "NAME", xml_escape(h.name)),
            _tag(4, "VERSION", "1"),
            _tag(4, "ALPHA", _num(h.alpha_acid.value if h.alpha_acid else 0)),
            _tag(4, "AMOUNT", _num(to_grams(h.amount.value, h.amount.unit) / 1000 if h.amount else 0)),
            _tag(4, "USE", _label(h.use.value)),
            _tag(4, "TIME", _num(h.time.value if h.time else 0)),
            "      </HOP>",
        ])
    lines.append("    </HOPS>")

    lines.append("    <YEASTS>")
    for c in recipe.cultures:
        lines.extend([
            "      <YEAST>",
            _tag(4, "NAME", xml_escape(c.name)),
            _tag(4, "VERSION", "1"),
            _tag(4, "TYPE", _label(c.type.value)),
            _tag(4, "FORM", _label(c.form.value)),
            _tag(4, "ATTENUATION", _num(c.attenuation_pct)),
            "      </YEAST>",
        ])
    lines.append("    </YEASTS>")

    miscs = recipe.ingredients.miscellaneous
    if miscs:
        lines.append("    <MISCELLANEOUS>")
        for m in miscs:
            lines.extend([
                "      <MISC>",
                _tag(4, "NAME", xml_escape(m.name)),
                _tag(4, "VERSION", "1"),
                _tag(4, "AMOUNT", _num(to_grams(m.amount.value, m.amount.unit) / 1000 if m.amount else 0)),
                _tag(4, "TYPE", _label(m.type)),
                _tag(4, "USE", _label(m.use)),
                _tag(4, "TIME", _num(m.time.value if m.time else 0)),
                "      </MISC>",
            ])
        lines.append("    </MISCELLANEOUS>")

    if recipe.mash:
        lines.extend(_mash_lines(recipe.mash, 2))

    specs = recipe.specifications
    if specs:
        for tag, value in (
            ("EST_OG", specs.og),
            ("EST_FG", specs.fg),
            ("EST_ABV", specs.abv),
            ("IBU", specs.ibu),
            ("EST_COLOR", specs.color),
        ):
            if value is not None:
                lines.append(_tag(2, tag, _num(value.value)))

    lines.extend(["  </RECIPE>", "</RECIPES>"])
    return "\n".join(lines)


def library_to_beerxml(ingredients: Iterable[LibraryIngredient]) -> str:
    """
    Serialise library entries as a BREW_LIBRARY document.

    Entries are grouped by kind: fermentables, hops, yeasts, miscs,
    styles, then mash profiles. Every field the importer reads is
    written, so the library survives an export/import cycle.
    """
    by_type: dict[LibraryType, list[LibraryIngredient]] = {t: [] for t in LibraryType}
    for item in ingredients:
        by_type[item.type].append(item)

    lines = [XML_HEADER, "<BREW_LIBRARY>"]

    for f in by_type[LibraryType.FERMENTABLE]:
        lines.extend([
            "  <FERMENTABLE>",
            _tag(2, "NAME", xml_escape(f.name)),
            _tag(2, "COLOR", _num(f.color)),
            _tag(2, "YIELD", _num(f.yield_)),
            *_optional_tags(2, [("NOTES", f.notes)]),
            "  </FERMENTABLE>",
        ])

    for h in by_type[LibraryType.HOP]:
        lines.extend([
            "  <HOP>",
            _tag(2, "NAME", xml_escape(h.name)),
            _tag(2, "ALPHA", _num(h.alpha)),
            *_optional_tags(2, [("FORM", _title(h.form)), ("NOTES", h.notes)]),
            "  </HOP>",
        ])

    for y in by_type[LibraryType.CULTURE]:
        lines.extend([
            "  <YEAST>",
            _tag(2, "NAME", xml_escape(y.name)),
            _tag(2, "TYPE", _label(y.culture_type or "ale")),
            _tag(2, "FORM", _label(y.form or "dry")),
            _tag(2, "ATTENUATION", _num(y.attenuation)),
            *_optional_tags(2, [("NOTES", y.notes)]),
            "  </YEAST>",
        ])

    for m in by_type[LibraryType.MISC]:
        lines.extend([
            "  <MISC>",
            _tag(2, "NAME", xml_escape(m.name)),
            _tag(2, "TYPE", _label(m.misc_type or "other")),
            _tag(2, "USE", _label(m.misc_use or "boil")),
            *_optional_tags(2, [
                ("AMOUNT_IS_WEIGHT", m.amount_is_weight),
                ("USE_FOR", m.use_for),
                ("NOTES", m.notes),
            ]),
            "  </MISC>",
        ])

    for s in by_type[LibraryType.STYLE]:
        lines.extend([
            "  <STYLE>",
            _tag(2, "NAME", xml_escape(s.name)),
            _tag(2, "CATEGORY", xml_escape(s.category)),
            *_optional_tags(2, [
                ("STYLE_GUIDE", s.style_guide),
                ("TYPE", _title(s.style_type)),
                ("OG_MIN", s.og_min),
                ("OG_MAX", s.og_max),
                ("FG_MIN", s.fg_min),
                ("FG_MAX", s.fg_max),
                ("IBU_MIN", s.ibu_min),
                ("IBU_MAX", s.ibu_max),
                ("COLOR_MIN", s.color_min),
                ("COLOR_MAX", s.color_max),
                ("ABV_MIN", s.abv_min),
                ("ABV_MAX", s.abv_max),
                ("PROFILE", s.profile),
                ("EXAMPLES", s.examples),
                ("NOTES", s.notes),
            ]),
            "  </STYLE>",
        ])

    for mash in by_type[LibraryType.MASH_PROFILE]:
        lines.extend(_mash_lines(mash, 1))

    lines.append("</BREW_LIBRARY>")
    return "\n".join(lines)
