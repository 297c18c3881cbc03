"""
Abstract protocols for collaborators the core talks to.

The core never assumes how (or whether) records are persisted, nor how
recipe drafts are generated; it only consumes these contracts.
"""

from abc import abstractmethod
from typing import Protocol, runtime_checkable

from brewbindr_core.library import link_recipe
from brewbindr_core.models import LibraryIngredient, Recipe, TastingNote, new_id


@runtime_checkable
class RecipeStore(Protocol):
    """
    Protocol for persistence/sync backends.

    Implemented by: the MCP server's JSON workspace
    """

    @abstractmethod
    def list_recipes(self) -> list[Recipe]:
        """Return all stored recipes."""
        ...

    @abstractmethod
    def save_recipes(self, recipes: list[Recipe]) -> None:
        """
        Replace the stored recipes.

        Args:
            recipes: Complete recipe collection
        """
        ...

    @abstractmethod
    def list_library(self) -> list[LibraryIngredient]:
        """Return all library entries."""
        ...

    @abstractmethod
    def save_library(self, library: list[LibraryIngredient]) -> None:
        """
        Replace the stored library.

        Args:
            library: Complete library collection
        """
        ...


@runtime_checkable
class RecipeDraftGenerator(Protocol):
    """Protocol for text-generation services that draft recipes and critiques."""

    @abstractmethod
    async def generate_recipe(self, prompt: str) -> Recipe:
        """
        Draft a recipe from a free-text description.

        Args:
            prompt: What the user wants to brew

        Returns:
            Unlinked recipe draft
        """
        ...

    @abstractmethod
    async def critique_tasting(self, note: TastingNote, recipe: Recipe) -> str:
        """Free-text feedback on a tasting note in the context of its recipe."""
        ...


def accept_recipe_draft(draft: Recipe, library: list[LibraryIngredient]) -> Recipe:
    """
    Turn a generated draft into a storable recipe.

    Drafts go through the same library linking as imported recipes, so
    unknown ingredients are added to ``library``.
    """
    recipe = link_recipe(draft, library)
    if not recipe.id:
        recipe = recipe.model_copy(update={"id": new_id()})
    return recipe
