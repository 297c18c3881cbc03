"""
Canonical ingredient library: lookup and linking.

Recipes carry their own inline ingredient values; each fermentable, hop
and culture additionally points at a library entry through
``library_id``. Linking a recipe resolves those references and creates
library entries on the spot for ingredients the library has never seen.
"""

import logging
from collections.abc import Mapping
from typing import Any

from brewbindr_core.exceptions import ValidationError
from brewbindr_core.models import (
    DEFAULT_ALPHA,
    DEFAULT_ATTENUATION,
    DEFAULT_COLOR_SRM,
    DEFAULT_EFFICIENCY,
    CultureForm,
    CultureType,
    LibraryIngredient,
    LibraryType,
    MashProfile,
    Potential,
    Recipe,
    StyleRef,
    Value,
    new_id,
)
from brewbindr_core.parser import SUCROSE_POINTS

logger = logging.getLogger(__name__)


def find_library_entry(
    library: list[LibraryIngredient],
    name: str,
    ingredient_type: LibraryType | str,
) -> LibraryIngredient | None:
    """Exact, case-insensitive lookup on (name, type)."""
    key = (name.lower(), LibraryType(ingredient_type).value)
    for entry in library:
        if entry.dedup_key == key:
            return entry
    return None


def resolve_or_create(
    library: list[LibraryIngredient],
    name: str,
    ingredient_type: LibraryType | str,
    defaults: Mapping[str, Any] | None = None,
) -> str:
    """
    Return the id of the library entry for ``name``, creating it if needed.

    The library list is mutated in place: when no entry matches, a new
    one built from ``defaults`` is appended with a fresh id. Existing
    entries are never modified.

    Args:
        library: Library to search and extend
        name: Ingredient name (matched case-insensitively)
        ingredient_type: Library kind the name must match
        defaults: Field values for a newly created entry

    Returns:
        Id of the existing or newly created entry
    """
    existing = find_library_entry(library, name, ingredient_type)
    if existing is not None:
        return existing.id

    entry = LibraryIngredient(
        id=new_id(),
        name=name,
        type=LibraryType(ingredient_type),
        **dict(defaults or {}),
    )
    library.append(entry)
    logger.info("Created library %s '%s' (%s)", entry.type.value, entry.name, entry.id)
    return entry.id


def potential_to_yield(potential: float | None) -> float:
    """Extract yield percent from a specific-gravity potential, 75 when unknown."""
    if not potential:
        return DEFAULT_EFFICIENCY
    return round((potential - 1) / SUCROSE_POINTS * 100)


def yield_to_potential(yield_pct: float) -> float:
    """Specific-gravity potential from an extract yield percent."""
    return 1 + yield_pct / 100 * SUCROSE_POINTS


def link_recipe(recipe: Recipe, library: list[LibraryIngredient]) -> Recipe:
    """
    Resolve every fermentable, hop and culture against the library.

    Returns a copy of the recipe with ``library_id`` filled in. Missing
    library entries are created (and appended to ``library``) from the
    recipe's inline values.
    """
    linked = recipe.model_copy(deep=True)

    for fermentable in linked.fermentables:
        potential = fermentable.yield_.potential.value if fermentable.yield_ else None
        fermentable.library_id = resolve_or_create(
            library,
            fermentable.name,
            LibraryType.FERMENTABLE,
            {
                "color": (fermentable.color.value if fermentable.color else None) or DEFAULT_COLOR_SRM,
                "yield_": potential_to_yield(potential),
            },
        )

    for hop in linked.hops:
        alpha = hop.alpha_acid.value if hop.alpha_acid else None
        hop.library_id = resolve_or_create(
            library,
            hop.name,
            LibraryType.HOP,
            {"alpha": alpha or DEFAULT_ALPHA},
        )

    for culture in linked.cultures:
        culture.library_id = resolve_or_create(
            library,
            culture.name,
            LibraryType.CULTURE,
            {
                "attenuation": culture.attenuation or DEFAULT_ATTENUATION,
                "form": culture.form.value if culture.form else CultureForm.DRY.value,
                "culture_type": culture.type.value,
            },
        )

    return linked


def _slot(items: list, index: int, kind: str):
    if not 0 <= index < len(items):
        raise ValidationError(f"No {kind} at position {index} (recipe has {len(items)})")
    return items[index]


def apply_library_entry(
    recipe: Recipe,
    kind: LibraryType | str,
    index: int,
    entry: LibraryIngredient,
) -> Recipe:
    """
    Copy a library entry's values into one slot of a recipe.

    Used when the user picks an ingredient from the library while editing.
    The values are copied at that moment; later library edits do not
    propagate.

    Args:
        recipe: Recipe to update (not modified)
        kind: Which ingredient list the slot is in; style and mash
            profile have a single slot and ignore ``index``
        index: Position within the ingredient list
        entry: Library entry to apply

    Returns:
        Updated copy of the recipe

    Raises:
        ValidationError: If the slot does not exist or the entry is
            of a different kind
    """
    kind = LibraryType(kind)
    if entry.type != kind:
        raise ValidationError(f"Cannot apply a {entry.type.value} entry to a {kind.value} slot")

    updated = recipe.model_copy(deep=True)
    ingredients = updated.ingredients

    if kind == LibraryType.FERMENTABLE:
        fermentable = _slot(ingredients.fermentables, index, "fermentable")
        fermentable.name = entry.name
        fermentable.library_id = entry.id
        fermentable.color = Value(value=entry.color or DEFAULT_COLOR_SRM)
        fermentable.yield_ = Potential(
            potential=Value(value=yield_to_potential(entry.yield_ or DEFAULT_EFFICIENCY))
        )

    elif kind == LibraryType.HOP:
        hop = _slot(ingredients.hops, index, "hop")
        hop.name = entry.name
        hop.library_id = entry.id
        hop.alpha_acid = Value(value=entry.alpha or DEFAULT_ALPHA)

    elif kind == LibraryType.CULTURE:
        culture = _slot(ingredients.cultures, index, "culture")
        culture.name = entry.name
        culture.library_id = entry.id
        culture.attenuation = entry.attenuation or DEFAULT_ATTENUATION
        if entry.form in {form.value for form in CultureForm}:
            culture.form = CultureForm(entry.form)
        if entry.culture_type in {ctype.value for ctype in CultureType}:
            culture.type = CultureType(entry.culture_type)

    elif kind == LibraryType.MISC:
        misc = _slot(ingredients.miscellaneous, index, "misc")
        misc.name = entry.name
        misc.library_id = entry.id
        misc.type = entry.misc_type or misc.type
        misc.use = entry.misc_use or misc.use

    elif kind == LibraryType.STYLE:
        updated.style = StyleRef(name=entry.name, category=entry.category, library_id=entry.id)

    elif kind == LibraryType.MASH_PROFILE:
        updated.mash = MashProfile(
            name=entry.name,
            grain_temp=entry.grain_temp,
            sparge_temp=entry.sparge_temp,
            ph=entry.ph,
            notes=entry.notes,
            steps=[step.model_copy() for step in entry.steps or []],
        )

    return updated

