"""
Availability Toggle Engine

Holds a branch's ingredient catalog, the mirror of its unavailable set
and the live search query, and flips ingredient availability through an
availability store.

Flow of one toggle:
    1. Apply  - the flag is flipped locally before the remote call starts
    2. Confirm - ADD/REMOVE is sent through the store (with a timeout)
    3. Success - the unavailable mirror is reconciled with the command
       Failure - the flip is rolled back, or kept and marked desynced,
                 depending on TOGGLE_FAILURE_POLICY

Toggles of different ingredients run concurrently. Toggles of the same
ingredient are serialized with a per-name lock, so the second one flips
the state the first one settled on.

Usage:
    engine = await load_ingredients_page()
    engine.set_search_query("gi")
    result = await engine.toggle_availability("Gin")
"""

import asyncio
import logging
import unicodedata
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Mapping, Optional, Sequence

from restaurant_portal.core.config import get_settings, ToggleFailurePolicy
from restaurant_portal.schemas import (
    AvailabilityMethod,
    BranchRecord,
    Ingredient,
    normalize_ingredient_name,
)
from restaurant_portal.services.availability import get_availability_store
from restaurant_portal.services.availability.base import BaseAvailabilityStore
from restaurant_portal.services.catalog import get_catalog_source
from restaurant_portal.services.catalog.base import BaseCatalogSource

logger = logging.getLogger(__name__)


# =============================================================================
# RESULTS
# =============================================================================

class ToggleOutcome(str, Enum):
    SUCCESS = "success"
    UNKNOWN_INGREDIENT = "unknown_ingredient"
    NETWORK_FAILURE = "network_failure"


@dataclass
class ToggleResult:
    """
    Outcome of one toggle request.

    Attributes:
        outcome: SUCCESS, UNKNOWN_INGREDIENT or NETWORK_FAILURE
        ingredient_name: Name as requested
        available: Flag shown for the ingredient once the toggle settled
        method: Command sent to the store (None if nothing was sent)
        error_message: Error description on failure
        rolled_back: Whether the optimistic flip was reverted
    """
    outcome: ToggleOutcome
    ingredient_name: str
    available: Optional[bool] = None
    method: Optional[AvailabilityMethod] = None
    error_message: Optional[str] = None
    rolled_back: bool = False

    @property
    def success(self) -> bool:
        return self.outcome is ToggleOutcome.SUCCESS


@dataclass(frozen=True)
class ToggleView:
    """Derived view state: what the page renders."""
    visible_ingredients: tuple[Ingredient, ...]
    availability_by_name: dict[str, bool]


# =============================================================================
# DERIVATION
# =============================================================================

def collation_key(name: str) -> tuple[str, str, str]:
    """
    Sort key approximating locale-aware string comparison.

    Compares letters ignoring accents and case first, then accents,
    then case with lowercase ahead of uppercase.
    """
    decomposed = unicodedata.normalize("NFD", name)
    base = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    return base.casefold(), decomposed.casefold(), name.swapcase()


def sort_ingredients(catalog: Iterable[Ingredient]) -> list[Ingredient]:
    """Stable ascending sort by ingredient name."""
    return sorted(catalog, key=lambda ingredient: collation_key(ingredient.ingredient_name))


def matches_query(name: str, query: str) -> bool:
    """Case-insensitive substring match; an empty query matches everything."""
    return query.lower() in name.lower()


def derive_view(
    catalog: Iterable[Ingredient],
    unavailable: Iterable[str],
    query: str = "",
    overrides: Optional[Mapping[str, bool]] = None,
) -> ToggleView:
    """
    Compute the view from its inputs.

    Args:
        catalog: Ingredients in any order
        unavailable: Names marked unavailable at the branch
        query: Search text
        overrides: Availability flags that take precedence over the
            unavailable set (in-flight or desynced toggles)

    Returns:
        ToggleView: Sorted, filtered ingredients and the availability map
    """
    ordered = sort_ingredients(catalog)
    unavailable_names = set(unavailable)

    availability = {
        ingredient.ingredient_name: ingredient.ingredient_name not in unavailable_names
        for ingredient in ordered
    }
    for name, available in (overrides or {}).items():
        if name in availability:
            availability[name] = available

    visible = tuple(
        ingredient for ingredient in ordered
        if matches_query(ingredient.ingredient_name, query)
    )
    return ToggleView(visible_ingredients=visible, availability_by_name=availability)


def _unique_by_name(catalog: Iterable[Ingredient]) -> list[Ingredient]:
    seen: set[str] = set()
    unique = []
    for ingredient in catalog:
        if ingredient.ingredient_name in seen:
            logger.warning(f"Duplicate ingredient in catalog ignored: {ingredient.ingredient_name}")
            continue
        seen.add(ingredient.ingredient_name)
        unique.append(ingredient)
    return unique


# =============================================================================
# ENGINE
# =============================================================================

class AvailabilityToggleEngine:
    """
    Availability state of one branch's catalog.

    Args:
        branch_id: Branch the toggles apply to
        catalog: Ingredient catalog (any order)
        initially_unavailable: Names unavailable at load time
        store: Availability store (factory default if omitted)
        timeout: Seconds allowed per remote update (TOGGLE_TIMEOUT_SECONDS)
        failure_policy: rollback or keep (TOGGLE_FAILURE_POLICY)

    Example:
        >>> engine = AvailabilityToggleEngine("downtown", catalog, {"Gin"})
        >>> engine.availability_by_name
        {'Gin': False, 'Lime': True}
        >>> await engine.toggle_availability("Gin")
    """

    def __init__(
        self,
        branch_id: str,
        catalog: Sequence[Ingredient],
        initially_unavailable: Iterable[str] = (),
        store: Optional[BaseAvailabilityStore] = None,
        timeout: Optional[float] = None,
        failure_policy: Optional[ToggleFailurePolicy] = None,
    ):
        settings = get_settings()

        self.branch_id = branch_id
        self.store = store if store is not None else get_availability_store()
        self.timeout = timeout if timeout is not None else settings.toggle_timeout_seconds
        self.failure_policy = (
            ToggleFailurePolicy(failure_policy)
            if failure_policy is not None
            else settings.toggle_failure_policy
        )

        self._catalog = tuple(sort_ingredients(_unique_by_name(catalog)))
        self._unavailable = self._known_names(initially_unavailable)
        self._pending: dict[str, bool] = {}
        self._desynced: dict[str, bool] = {}
        self._locks: dict[str, asyncio.Lock] = {}
        self._search_query = ""
        self._rederive()

        logger.debug(
            f"Toggle engine ready for branch {branch_id}: "
            f"{len(self._catalog)} ingredients, {len(self._unavailable)} unavailable"
        )

    @classmethod
    def from_branch(
        cls,
        catalog: Sequence[Ingredient],
        branch: BranchRecord,
        **options,
    ) -> "AvailabilityToggleEngine":
        """Build an engine from page data (catalog plus a branch record)."""
        return cls(branch.id, catalog, branch.unavailable_names, **options)

    def _known_names(self, names: Iterable[str]) -> set[str]:
        catalog_names = {ingredient.ingredient_name for ingredient in self._catalog}
        known = set()
        for name in names:
            key = normalize_ingredient_name(name)
            if key not in catalog_names:
                logger.warning(f"Unavailable ingredient not in catalog ignored: {key}")
                continue
            known.add(key)
        return known

    # -------------------------------------------------------------------------
    # View state
    # -------------------------------------------------------------------------

    def _rederive(self) -> None:
        overrides = {**self._desynced, **self._pending}
        self._view = derive_view(self._catalog, self._unavailable, self._search_query, overrides)

    @property
    def catalog(self) -> tuple[Ingredient, ...]:
        """Full catalog, sorted."""
        return self._catalog

    @property
    def search_query(self) -> str:
        return self._search_query

    @property
    def visible_ingredients(self) -> tuple[Ingredient, ...]:
        return self._view.visible_ingredients

    @property
    def availability_by_name(self) -> dict[str, bool]:
        return dict(self._view.availability_by_name)

    @property
    def unavailable_ingredient_names(self) -> frozenset[str]:
        """Mirror of the server-confirmed unavailable set."""
        return frozenset(self._unavailable)

    @property
    def desynced_names(self) -> frozenset[str]:
        """Ingredients whose shown flag failed to reach the server (keep policy)."""
        return frozenset(self._desynced)

    def is_available(self, name: str) -> bool:
        return self._view.availability_by_name[name]

    def is_pending(self, name: str) -> bool:
        """Whether a remote update for the ingredient is in flight."""
        return name in self._pending

    def set_search_query(self, query: str) -> tuple[Ingredient, ...]:
        """Filter the visible ingredients. Never touches the network."""
        self._search_query = query or ""
        self._rederive()
        return self._view.visible_ingredients

    def resync(self, unavailable_names: Iterable[str]) -> None:
        """
        Replace the mirror with a freshly fetched unavailable set.

        Clears desynced marks; in-flight toggles keep their optimistic flag.
        """
        self._unavailable = self._known_names(unavailable_names)
        if self._desynced:
            logger.info(f"Resync cleared {len(self._desynced)} desynced ingredient(s)")
        self._desynced.clear()
        self._rederive()

    # -------------------------------------------------------------------------
    # Toggling
    # -------------------------------------------------------------------------

    async def toggle_availability(self, name: str) -> ToggleResult:
        """
        Flip one ingredient's availability.

        The local flag changes before the remote call is made; the result
        reports how the remote call went and what the flag settled on.
        """
        try:
            key = normalize_ingredient_name(name)
        except ValueError:
            key = None

        if key is None or key not in self._view.availability_by_name:
            logger.warning(f"Toggle ignored, unknown ingredient: {name!r}")
            return ToggleResult(
                outcome=ToggleOutcome.UNKNOWN_INGREDIENT,
                ingredient_name=name,
                error_message=f"Unknown ingredient: {name!r}",
            )

        lock = self._locks.setdefault(key, asyncio.Lock())
        async with lock:
            return await self._apply_and_confirm(key)

    async def _apply_and_confirm(self, name: str) -> ToggleResult:
        previous = self._view.availability_by_name[name]
        new_available = not previous
        method = AvailabilityMethod.for_availability(new_available)

        self._pending[name] = new_available
        self._rederive()

        try:
            result = await asyncio.wait_for(
                self.store.set_availability(self.branch_id, name, new_available),
                timeout=self.timeout,
            )
        except asyncio.TimeoutError:
            return self._on_failure(
                name, new_available, method,
                f"Availability update timed out after {self.timeout:g}s",
            )
        except asyncio.CancelledError:
            self._on_failure(name, new_available, method, "Availability update cancelled")
            raise
        except Exception as e:
            logger.exception(f"Error updating location ingredients: {e}")
            return self._on_failure(name, new_available, method, str(e))

        if not result.success:
            return self._on_failure(
                name, new_available, method,
                result.error_message or "Availability update failed",
            )

        self._on_success(name, method)
        logger.info(f"{name} @ {self.branch_id}: {'available' if new_available else 'unavailable'}")
        return ToggleResult(
            outcome=ToggleOutcome.SUCCESS,
            ingredient_name=name,
            available=new_available,
            method=method,
        )

    def _on_success(self, name: str, method: AvailabilityMethod) -> None:
        if method is AvailabilityMethod.ADD:
            self._unavailable.add(name)
        else:
            self._unavailable.discard(name)
        self._pending.pop(name, None)
        self._desynced.pop(name, None)
        self._rederive()

    def _on_failure(
        self,
        name: str,
        attempted: bool,
        method: AvailabilityMethod,
        message: str,
    ) -> ToggleResult:
        self._pending.pop(name, None)
        rolled_back = self.failure_policy is ToggleFailurePolicy.ROLLBACK
        if rolled_back:
            self._desynced.pop(name, None)
        else:
            self._desynced[name] = attempted
        self._rederive()

        logger.warning(
            f"{method.value} {name} @ {self.branch_id} failed ({message}); "
            f"{'rolled back' if rolled_back else 'kept as desynced'}"
        )
        return ToggleResult(
            outcome=ToggleOutcome.NETWORK_FAILURE,
            ingredient_name=name,
            available=self._view.availability_by_name[name],
            method=method,
            error_message=message,
            rolled_back=rolled_back,
        )


# =============================================================================
# PAGE LOAD
# =============================================================================

async def load_ingredients_page(
    source: Optional[BaseCatalogSource] = None,
    store: Optional[BaseAvailabilityStore] = None,
    **options,
) -> AvailabilityToggleEngine:
    """
    Fetch the catalog and the current branch, and build the engine.

    Raises:
        CatalogUnavailableError: If page data cannot be loaded
    """
    source = source if source is not None else get_catalog_source()
    ingredients, branch = await asyncio.gather(
        source.fetch_ingredients(),
        source.fetch_current_branch(),
    )
    return AvailabilityToggleEngine.from_branch(ingredients, branch, store=store, **options)
