"""
Dashboard engine coordinator.

Owns the session state, the snapshot cache and the request generations, and
recomputes every view from them on demand:
User event → Pure transition → (Async fetch → Generation check) → Derived views
"""

import asyncio
from dataclasses import dataclass
from typing import Optional

import httpx
import structlog

from .api.client import MarketDataClient
from .cache.snapshot_cache import MarketSnapshotCache
from .config.defaults import DefaultConfig, get_default_config
from .data.models import COMPARISON_LABELS, CoinSnapshot, Segment, SortField
from .errors import DataQualityError, InvalidInputError, NetworkFailureError, PersistenceError
from .exitplan.calculator import ExitPlanResult, calculate_exit_plan
from .exitplan.models import ExitPlan, make_row_id
from .logging.config import get_view_logger, log_fetch_outcome
from .persistence.watchlist_store import WatchlistStore
from .series.merger import MergedRow, merge_labelled
from .series.normalizer import SeriesStats, summarize
from .state import transitions
from .state.generation import RequestGenerations
from .state.models import DashboardState, LoadStatus, initial_state
from .view.composer import compose
from .view.headline import MarketHeadline, market_headline

logger = structlog.get_logger(__name__)
view_logger = get_view_logger(__name__)

SEGMENT_REQUEST = "segment"
COMPARISON_REQUEST = "comparison"

UNEXPECTED_ERROR_MESSAGE = "Unexpected error while loading data."


def _cancel_pending(fetches: list[asyncio.Future]) -> None:
    for fetch in fetches:
        if not fetch.done():
            fetch.cancel()


def user_message(error: Exception) -> str:
    """Text shown in the inline error banner."""
    if isinstance(error, NetworkFailureError):
        return error.user_message
    return str(error) or "Fetch failed"


@dataclass(frozen=True)
class ComparisonLeg:
    """Legend entry for one selected asset."""
    label: str
    asset_id: str
    display_name: str
    stats: SeriesStats
    has_data: bool = True


@dataclass(frozen=True)
class ComparisonView:
    """Merged chart rows plus per-asset legend and load status."""
    days: int
    rows: list[MergedRow]
    legs: tuple[ComparisonLeg, ...]
    status: LoadStatus


class DashboardEngine:
    """
    Composition layer and single owner of the snapshot cache.

    Fetch results are applied to state only when their generation token is
    still current; anything older is logged and dropped.
    """

    def __init__(self, client: MarketDataClient,
                 watchlist_store: Optional[WatchlistStore] = None,
                 config: Optional[DefaultConfig] = None) -> None:
        self.config = config or get_default_config()
        self.client = client
        self.watchlist_store = watchlist_store
        self.cache = MarketSnapshotCache(client.fetch_markets)
        self.generations = RequestGenerations()
        self.state: DashboardState = initial_state(self.config)
        self.logger = logger
        self.view_logger = view_logger
        self._comparison_task: Optional[asyncio.Future] = None
        self._owns_client = False

    @classmethod
    def create(cls, config: Optional[DefaultConfig] = None,
               transport: Optional[httpx.AsyncBaseTransport] = None) -> "DashboardEngine":
        """Engine wired from configuration, owning its client and watchlist store."""
        config = config or get_default_config()
        client = MarketDataClient(params=config.api, compare_params=config.compare, transport=transport)
        engine = cls(client, WatchlistStore.from_config(config.storage), config)
        engine._owns_client = True
        return engine

    # Lifecycle

    async def start(self) -> None:
        """Read the persisted watchlist, then load the active segment and comparison."""
        if self.watchlist_store is not None:
            try:
                ids = self.watchlist_store.load()
            except PersistenceError as e:
                self.logger.error("Could not read watchlist", error=str(e))
                ids = []
            self.state = transitions.load_watchlist(self.state, ids)

        await asyncio.gather(self.load_market(), self.load_comparison())

    async def aclose(self) -> None:
        """Cancel any pending comparison fetch and close a client built by create()."""
        self.generations.invalidate(COMPARISON_REQUEST)
        task = self._comparison_task
        if task is not None and not task.done():
            task.cancel()
            try:
                await task
            except asyncio.CancelledError:
                pass

        if self._owns_client:
            await self.client.aclose()

    # Market segments

    def segment(self, page: int) -> Segment:
        """
        Segment for a tab page.

        Raises:
            InvalidInputError: If page is outside 1..segments.count
        """
        count = self.config.segments.count
        if not 1 <= page <= count:
            raise InvalidInputError(f"Unsupported segment page: {page} (1-{count})",
                                    field="page", value=page)
        return Segment(page=page, size=self.config.segments.size)

    def segments(self) -> list[Segment]:
        """Every selectable segment in rank order, e.g. Top 100 / 200 / 300."""
        return [self.segment(page) for page in range(1, self.config.segments.count + 1)]

    async def load_market(self) -> bool:
        """
        Load the active segment through the cache.

        Returns:
            True if the response was applied, False if it failed or was superseded
        """
        segment = self.state.segment
        token = self.generations.issue(SEGMENT_REQUEST)
        self.state = transitions.market_loading(self.state)

        try:
            await self.cache.get_or_fetch(segment)
        except (NetworkFailureError, DataQualityError) as e:
            stale = not self.generations.is_current(SEGMENT_REQUEST, token)
            log_fetch_outcome(self.logger, SEGMENT_REQUEST, segment.key, token, "failed",
                              stale=stale, context={"error": str(e)})
            if not stale:
                self.state = transitions.market_failed(self.state, user_message(e))
            return False
        except Exception:
            self.logger.exception("Unexpected segment fetch error", segment=segment.key)
            if self.generations.is_current(SEGMENT_REQUEST, token):
                self.state = transitions.market_failed(self.state, UNEXPECTED_ERROR_MESSAGE)
            raise

        if not self.generations.is_current(SEGMENT_REQUEST, token):
            log_fetch_outcome(self.logger, SEGMENT_REQUEST, segment.key, token, "loaded", stale=True)
            return False

        self.state = transitions.market_loaded(self.state)
        log_fetch_outcome(self.logger, SEGMENT_REQUEST, segment.key, token, "loaded")
        return True

    async def select_segment(self, page: int) -> bool:
        segment = self.segment(page)
        self.view_logger.info("Segment selected", segment=segment.key)
        self.state = transitions.select_segment(self.state, segment)
        return await self.load_market()

    async def refresh_segment(self) -> bool:
        """Drop the active segment from the cache and fetch it again."""
        self.cache.invalidate(self.state.segment)
        return await self.load_market()

    # Coin table

    def set_search(self, text: str) -> None:
        self.state = transitions.set_search(self.state, text)

    def click_sort(self, field: SortField) -> None:
        self.state = transitions.apply_sort_click(self.state, field)

    def toggle_watchlist_mode(self) -> None:
        self.state = transitions.toggle_watchlist_mode(self.state)

    def toggle_watchlist(self, coin_id: str) -> None:
        """Add or remove a coin and persist the new list."""
        self.state = transitions.toggle_watchlist_id(self.state, coin_id)
        self.view_logger.info("Watchlist changed", coin_id=coin_id,
                              watchlisted=coin_id in self.state.watchlist_ids)

        if self.watchlist_store is None:
            return
        try:
            self.watchlist_store.save(list(self.state.watchlist_ids))
        except PersistenceError as e:
            # The session keeps the change even if it could not be saved
            self.logger.error("Could not persist watchlist", error=str(e))

    def coin_table(self) -> list[CoinSnapshot]:
        state = self.state
        if state.watchlist_active:
            base = self.cache.all_loaded_coins()
        else:
            base = list(self.cache.peek(state.segment))
        return compose(base, state.search_text, state.watchlist_active,
                       state.watchlist_ids, state.sort)

    def headline(self) -> MarketHeadline:
        return market_headline(self.cache.all_loaded_coins())

    def selectable_coins(self) -> list[CoinSnapshot]:
        """Loaded coins by name, for the asset pickers."""
        coins = [c for c in self.cache.all_loaded_coins() if c.id and c.name]
        return sorted(coins, key=lambda c: c.name.casefold())

    def _find_coin(self, coin_id: Optional[str]) -> Optional[CoinSnapshot]:
        if not coin_id:
            return None
        return next((c for c in self.cache.all_loaded_coins() if c.id == coin_id), None)

    # Comparison

    async def load_comparison(self) -> bool:
        """
        Fetch every selected series in parallel and apply them together.

        A newer call cancels this one's fetch; a superseded result is dropped.
        """
        token = self.generations.issue(COMPARISON_REQUEST)
        previous = self._comparison_task
        if previous is not None and not previous.done():
            previous.cancel()

        comparison = self.state.comparison
        assigned = comparison.slot.assigned()
        key = ",".join(assigned.values())
        self.state = transitions.comparison_loading(self.state)

        fetches = [
            asyncio.ensure_future(self.client.fetch_market_chart(asset_id, comparison.days))
            for asset_id in assigned.values()
        ]
        task = asyncio.gather(*fetches)
        self._comparison_task = task

        try:
            results = await task
        except asyncio.CancelledError:
            if self.generations.is_current(COMPARISON_REQUEST, token):
                raise
            log_fetch_outcome(self.logger, COMPARISON_REQUEST, key, token, "cancelled", stale=True)
            return False
        except (NetworkFailureError, DataQualityError) as e:
            # gather leaves the sibling fetches running after the first failure
            _cancel_pending(fetches)
            stale = not self.generations.is_current(COMPARISON_REQUEST, token)
            log_fetch_outcome(self.logger, COMPARISON_REQUEST, key, token, "failed",
                              stale=stale, context={"error": str(e)})
            if not stale:
                self.state = transitions.comparison_failed(self.state, user_message(e))
            return False
        except Exception:
            _cancel_pending(fetches)
            self.logger.exception("Unexpected comparison fetch error", key=key)
            if self.generations.is_current(COMPARISON_REQUEST, token):
                self.state = transitions.comparison_failed(self.state, UNEXPECTED_ERROR_MESSAGE)
            raise

        if not self.generations.is_current(COMPARISON_REQUEST, token):
            log_fetch_outcome(self.logger, COMPARISON_REQUEST, key, token, "loaded", stale=True)
            return False

        self.state = transitions.comparison_loaded(
            self.state, dict(zip(assigned, results)), assigned, comparison.days
        )
        log_fetch_outcome(self.logger, COMPARISON_REQUEST, key, token, "loaded",
                          context={"days": comparison.days})
        return True

    async def set_comparison_asset(self, label: str, asset_id: Optional[str]) -> bool:
        """Assign a slot and reload; returns False if the pick was ignored."""
        before = self.state
        self.state = transitions.assign_comparison_asset(self.state, label, asset_id)
        if self.state is before:
            self.view_logger.debug("Comparison pick ignored", label=label, asset_id=asset_id)
            return False
        await self.load_comparison()
        return True

    async def swap_comparison(self) -> None:
        self.state = transitions.swap_comparison(self.state)
        await self.load_comparison()

    async def set_range(self, days: int) -> None:
        self.state = transitions.select_range(self.state, days, self.config.compare.allowed_days)
        await self.load_comparison()

    def comparison_view(self) -> ComparisonView:
        """
        Legend and chart rows for the current selection.

        A series fetched for a previous asset or range is never shown under the
        current one; its leg reports has_data=False until a reload succeeds.
        """
        comparison = self.state.comparison
        assigned = comparison.slot.assigned()

        legs = []
        for label in COMPARISON_LABELS:
            asset_id = assigned.get(label)
            if asset_id is None:
                continue
            meta = self._find_coin(asset_id)
            legs.append(ComparisonLeg(
                label=label,
                asset_id=asset_id,
                display_name=meta.label if meta else f"Coin {label}",
                stats=summarize(comparison.current_series(label)),
                has_data=comparison.has_current_series(label),
            ))

        return ComparisonView(
            days=comparison.days,
            rows=merge_labelled({label: comparison.current_series(label) for label in assigned}),
            legs=tuple(legs),
            status=comparison.status,
        )

    # Exit plan

    def _update_plan(self, plan: ExitPlan) -> None:
        self.state = transitions.replace_exit_plan(self.state, plan)

    def select_exit_coin(self, coin_id: Optional[str]) -> None:
        coin = self._find_coin(coin_id)
        self._update_plan(self.state.exit_plan.with_coin(coin_id, coin.price if coin else None))

    def set_entry_price(self, text: str) -> None:
        self._update_plan(self.state.exit_plan.with_entry_price(text))

    def set_total_tokens(self, text: str) -> None:
        self._update_plan(self.state.exit_plan.with_total_tokens(text))

    def add_take_profit(self) -> str:
        """Append a blank row and return its id."""
        row_id = make_row_id()
        self._update_plan(self.state.exit_plan.append_row(id_factory=lambda: row_id))
        return row_id

    def remove_take_profit(self, row_id: str) -> None:
        self._update_plan(self.state.exit_plan.remove_row(row_id))

    def edit_take_profit(self, row_id: str, target_price: Optional[str] = None,
                         sell_percent: Optional[str] = None) -> None:
        self._update_plan(self.state.exit_plan.update_row(
            row_id, target_price=target_price, sell_percent=sell_percent
        ))

    def auto_split_exit_plan(self) -> None:
        self._update_plan(self.state.exit_plan.auto_split_three(self.config.exit_plan))

    def reset_exit_plan(self) -> None:
        self._update_plan(ExitPlan.default(self.config.exit_plan))

    def exit_plan_view(self) -> ExitPlanResult:
        return calculate_exit_plan(self.state.exit_plan)
