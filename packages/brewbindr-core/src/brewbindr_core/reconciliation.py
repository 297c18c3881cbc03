"""
Import reconciliation state machine.

An import turns a parsed BeerXML batch into a queue of pending items
that are committed strictly one at a time, because each commit can
change the outcome of later duplicate checks. Recipes that already
exist by name are skipped silently; library entries that already exist
by (name, type) pause the queue until the caller picks a resolution.

The machine is a pure function ``transition(state, action) -> state``.
``ImportSession`` wraps it for callers that want a mutable object.
"""

import logging
from enum import Enum
from typing import Literal, Union

from pydantic import BaseModel, ConfigDict, Field

from brewbindr_core.exceptions import ImportFlowError
from brewbindr_core.library import find_library_entry, link_recipe
from brewbindr_core.models import LibraryIngredient, Recipe, new_id
from brewbindr_core.parser import ImportResult

logger = logging.getLogger(__name__)


class ImportStatus(str, Enum):
    IDLE = "idle"
    FETCHING = "fetching"
    PARSING = "parsing"
    RESOLVING = "resolving"


class ImportOutcome(str, Enum):
    """How the last import ended."""

    COMPLETED = "completed"
    CANCELLED = "cancelled"
    FAILED = "failed"
    NOTHING_TO_IMPORT = "nothing_to_import"


class ConflictChoice(str, Enum):
    """Ways to resolve a duplicate library entry."""

    CANCEL = "cancel"
    SKIP = "skip"
    OVERWRITE = "overwrite"
    COPY = "copy"


class QueueItem(BaseModel):
    """One pending import: either a recipe or a library entry."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["recipe", "library"]
    recipe: Recipe | None = None
    ingredient: LibraryIngredient | None = None

    @property
    def name(self) -> str:
        return self.recipe.name if self.recipe is not None else self.ingredient.name


class Conflict(BaseModel):
    """A library entry waiting for a resolution choice."""

    model_config = ConfigDict(frozen=True)

    incoming: LibraryIngredient
    existing: LibraryIngredient


class ImportState(BaseModel):
    """Snapshot of the reconciliation flow. Never mutated; transitions copy."""

    model_config = ConfigDict(frozen=True)

    status: ImportStatus = ImportStatus.IDLE
    queue: list[QueueItem] = Field(default_factory=list)
    recipes: list[Recipe] = Field(default_factory=list)
    library: list[LibraryIngredient] = Field(default_factory=list)
    conflict: Conflict | None = None
    outcome: ImportOutcome | None = None
    failure_reason: str | None = None
    committed: list[str] = Field(default_factory=list)
    skipped: list[str] = Field(default_factory=list)


# === Actions ===


class BeginFetch(BaseModel):
    """A remote document is being downloaded."""

    model_config = ConfigDict(frozen=True)
    kind: Literal["begin_fetch"] = "begin_fetch"


class BeginParse(BaseModel):
    """Document text is available and being parsed."""

    model_config = ConfigDict(frozen=True)
    kind: Literal["begin_parse"] = "begin_parse"


class Start(BaseModel):
    """Parsed batch ready to reconcile."""

    model_config = ConfigDict(frozen=True)
    kind: Literal["start"] = "start"
    result: ImportResult


class Resolve(BaseModel):
    """Caller's answer to a pending conflict."""

    model_config = ConfigDict(frozen=True)
    kind: Literal["resolve"] = "resolve"
    choice: ConflictChoice


class Fail(BaseModel):
    """Fetching or parsing failed before anything was queued."""

    model_config = ConfigDict(frozen=True)
    kind: Literal["fail"] = "fail"
    reason: str


ImportAction = Union[BeginFetch, BeginParse, Start, Resolve, Fail]


def build_queue(result: ImportResult) -> list[QueueItem]:
    """Queue recipes first, then global library declarations."""
    queue = [QueueItem(kind="recipe", recipe=recipe) for recipe in result.recipes]
    queue.extend(QueueItem(kind="library", ingredient=item) for item in result.library_items)
    return queue


def copy_name(library: list[LibraryIngredient], entry: LibraryIngredient) -> str:
    """First free "<name> (Copy)", "<name> (Copy 2)", ... for the entry's type."""
    candidate = f"{entry.name} (Copy)"
    counter = 2
    while find_library_entry(library, candidate, entry.type) is not None:
        candidate = f"{entry.name} (Copy {counter})"
        counter += 1
    return candidate


def _recipe_exists(recipes: list[Recipe], name: str) -> bool:
    lowered = name.lower()
    return any(recipe.name.lower() == lowered for recipe in recipes)


def _drain(
    state: ImportState,
    queue: list[QueueItem],
    recipes: list[Recipe],
    library: list[LibraryIngredient],
    committed: list[str],
    skipped: list[str],
) -> ImportState:
    """Commit queue items until it empties or a library duplicate pauses it."""
    while queue:
        item = queue[0]

        if item.kind == "recipe":
            if _recipe_exists(recipes, item.recipe.name):
                logger.info("Skipping duplicate recipe '%s'", item.recipe.name)
                skipped.append(item.name)
            else:
                recipe = link_recipe(item.recipe, library)
                if not recipe.id:
                    recipe = recipe.model_copy(update={"id": new_id()})
                recipes.append(recipe)
                committed.append(item.name)
                logger.info("Imported recipe '%s'", recipe.name)
            queue.pop(0)
            continue

        existing = find_library_entry(library, item.ingredient.name, item.ingredient.type)
        if existing is not None:
            logger.info(
                "Library %s '%s' already exists, waiting for resolution",
                item.ingredient.type.value,
                item.ingredient.name,
            )
            return state.model_copy(update={
                "status": ImportStatus.RESOLVING,
                "queue": queue,
                "recipes": recipes,
                "library": library,
                "conflict": Conflict(incoming=item.ingredient, existing=existing),
                "committed": committed,
                "skipped": skipped,
            })

        library.append(item.ingredient.model_copy(update={"id": new_id()}))
        committed.append(item.name)
        logger.info("Imported library %s '%s'", item.ingredient.type.value, item.ingredient.name)
        queue.pop(0)

    return state.model_copy(update={
        "status": ImportStatus.IDLE,
        "queue": [],
        "recipes": recipes,
        "library": library,
        "conflict": None,
        "outcome": ImportOutcome.COMPLETED,
        "committed": committed,
        "skipped": skipped,
    })


def _resolve(state: ImportState, choice: ConflictChoice) -> ImportState:
    conflict = state.conflict
    queue = list(state.queue)
    recipes = list(state.recipes)
    library = list(state.library)
    committed = list(state.committed)
    skipped = list(state.skipped)

    if choice == ConflictChoice.CANCEL:
        logger.info("Import cancelled with %d item(s) left in the queue", len(queue))
        return state.model_copy(update={
            "status": ImportStatus.IDLE,
            "queue": [],
            "conflict": None,
            "outcome": ImportOutcome.CANCELLED,
            "skipped": skipped + [item.name for item in queue],
        })

    queue.pop(0)
    incoming = conflict.incoming

    if choice == ConflictChoice.SKIP:
        skipped.append(incoming.name)

    elif choice == ConflictChoice.OVERWRITE:
        position = next(i for i, entry in enumerate(library) if entry.id == conflict.existing.id)
        library[position] = incoming.model_copy(update={"id": conflict.existing.id})
        committed.append(incoming.name)
        logger.info("Overwrote library %s '%s'", incoming.type.value, incoming.name)

    elif choice == ConflictChoice.COPY:
        name = copy_name(library, incoming)
        library.append(incoming.model_copy(update={"id": new_id(), "name": name}))
        committed.append(name)
        logger.info("Imported library %s as '%s'", incoming.type.value, name)

    return _drain(state.model_copy(update={"conflict": None}), queue, recipes, library, committed, skipped)


def transition(state: ImportState, action: ImportAction) -> ImportState:
    """
    Advance the import flow by one action.

    Args:
        state: Current state (not modified)
        action: What happened

    Returns:
        The next state

    Raises:
        ImportFlowError: If the action is not valid in the current state,
            e.g. resolving when no conflict is pending or starting a new
            import while one is paused
    """
    if isinstance(action, Resolve):
        if state.conflict is None:
            raise ImportFlowError("No import conflict is waiting for a resolution")
        return _resolve(state, action.choice)

    if state.conflict is not None:
        raise ImportFlowError(
            f"Import is paused on '{state.conflict.incoming.name}'; resolve or cancel it first"
        )

    if isinstance(action, BeginFetch):
        return state.model_copy(update={
            "status": ImportStatus.FETCHING,
            "outcome": None,
            "failure_reason": None,
            "committed": [],
            "skipped": [],
        })

    if isinstance(action, BeginParse):
        return state.model_copy(update={"status": ImportStatus.PARSING, "outcome": None})

    if isinstance(action, Fail):
        logger.info("Import failed: %s", action.reason)
        return state.model_copy(update={
            "status": ImportStatus.IDLE,
            "queue": [],
            "outcome": ImportOutcome.FAILED,
            "failure_reason": action.reason,
        })

    if isinstance(action, Start):
        queue = build_queue(action.result)
        if not queue:
            return state.model_copy(update={
                "status": ImportStatus.IDLE,
                "queue": [],
                "outcome": ImportOutcome.NOTHING_TO_IMPORT,
                "committed": [],
                "skipped": [],
            })
        fresh = state.model_copy(update={
            "status": ImportStatus.RESOLVING,
            "outcome": None,
            "failure_reason": None,
        })
        return _drain(fresh, queue, list(state.recipes), list(state.library), [], [])

    raise ImportFlowError(f"Unknown import action: {action!r}")


class ImportSession:
    """
    Mutable holder around the import state machine.

    Example:
        >>> session = ImportSession(recipes, library)
        >>> session.start(parse_beerxml(xml))
        >>> while session.conflict:
        ...     session.resolve("copy")
    """

    def __init__(
        self,
        recipes: list[Recipe] | None = None,
        library: list[LibraryIngredient] | None = None,
    ):
        self.state = ImportState(recipes=list(recipes or []), library=list(library or []))

    def dispatch(self, action: ImportAction) -> ImportState:
        previous = self.state.status
        self.state = transition(self.state, action)
        logger.debug("Import %s -> %s on %s", previous.value, self.state.status.value, action.kind)
        return self.state

    def begin_fetch(self) -> ImportState:
        return self.dispatch(BeginFetch())

    def begin_parse(self) -> ImportState:
        return self.dispatch(BeginParse())

    def start(self, result: ImportResult) -> ImportState:
        return self.dispatch(Start(result=result))

    def resolve(self, choice: ConflictChoice | str) -> ImportState:
        return self.dispatch(Resolve(choice=ConflictChoice(choice)))

    def fail(self, reason: str) -> ImportState:
        return self.dispatch(Fail(reason=reason))

    @property
    def status(self) -> ImportStatus:
        return self.state.status

    @property
    def conflict(self) -> Conflict | None:
        return self.state.conflict

    @property
    def recipes(self) -> list[Recipe]:
        return self.state.recipes

    @property
    def library(self) -> list[LibraryIngredient]:
        return self.state.library
