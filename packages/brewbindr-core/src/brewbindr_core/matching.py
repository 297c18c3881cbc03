"""
Name lookup for recipes and library entries.

Brewers type ingredient and recipe names loosely ("casade", "Otter
Maris"), so lookups score names with RapidFuzz ``token_sort_ratio``
after RapidFuzz's default normalisation (case and punctuation folded).
Confidences are reported on a 0-1 scale.
"""

from collections.abc import Sequence

from rapidfuzz import fuzz, process, utils

from brewbindr_core.models import LibraryIngredient, LibraryType, Recipe


def search_library(
    library: Sequence[LibraryIngredient],
    query: str,
    ingredient_type: LibraryType | str | None = None,
    threshold: float = 0.6,
    limit: int = 10,
) -> list[tuple[LibraryIngredient, float]]:
    """
    Fuzzy search the library by name.

    Entries are keyed by position, so a fermentable and a misc that
    share a name ("Honey") are both returned.

    Args:
        library: Entries to search
        query: Name to look for (typos and word order tolerated)
        ingredient_type: Restrict to one kind
        threshold: Minimum confidence, 0-1
        limit: Maximum number of results

    Returns:
        (entry, confidence) pairs, best first

    Raises:
        ValueError: If ingredient_type is not a library kind
    """
    wanted = LibraryType(ingredient_type) if ingredient_type is not None else None
    if not query or not query.strip():
        return []

    names = {
        index: entry.name
        for index, entry in enumerate(library)
        if wanted is None or entry.type == wanted
    }
    results = process.extract(
        query,
        names,
        scorer=fuzz.token_sort_ratio,
        processor=utils.default_process,
        score_cutoff=threshold * 100,
        limit=limit,
    )
    return [(library[index], score / 100) for _, score, index in results]


def find_recipe(
    recipes: Sequence[Recipe],
    name_or_id: str,
    threshold: float = 0.8,
) -> Recipe | None:
    """
    Find a recipe by id, exact name or closest name.

    Exact id and case-insensitive name matches win over fuzzy ones.
    """
    lowered = name_or_id.strip().lower()
    for recipe in recipes:
        if recipe.id == name_or_id or recipe.name.lower() == lowered:
            return recipe

    if not lowered:
        return None
    match = process.extractOne(
        name_or_id,
        [recipe.name for recipe in recipes],
        scorer=fuzz.token_sort_ratio,
        processor=utils.default_process,
        score_cutoff=threshold * 100,
    )
    return recipes[match[2]] if match else None
