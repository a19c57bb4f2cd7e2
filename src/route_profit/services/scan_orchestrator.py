"""
Scan Orchestrator - walks every (base, destination) pair of an account.

Run states:
    LOGIN -> FETCH_REFERENCE_DATA
          -> for each base: for each destination: FETCH_QUOTE -> SCORE -> ACCUMULATE
          -> RANK
    -> DONE

One quote is in flight at a time. A failed quote skips its pair and
never aborts the run; a failed login does.
"""

from __future__ import annotations

import asyncio
import inspect
import logging
import time
from typing import TYPE_CHECKING, Dict, List, Optional, Sequence

from src.route_profit.exceptions import FetchError, ScanCancelledError
from src.route_profit.schemas.route import RouteScore
from src.route_profit.schemas.scan import ScanConfig
from src.route_profit.services.route_scorer import RouteScorer, ScoringContext

if TYPE_CHECKING:
    from src.route_profit.ports.airline_data_source import AirlineDataSource, AirlineSession
    from src.route_profit.ports.progress import ProgressSink
    from src.route_profit.ports.rate_limiter import RateLimiter
    from src.route_profit.schemas.account import AccountSnapshot, Base
    from src.route_profit.schemas.airport import Airport

logger = logging.getLogger(__name__)

# Returned by _process_pair when the quote fetch failed
_FAILED = object()


def rank_route_scores(scores: Sequence[RouteScore], top_n: int = 10) -> List[RouteScore]:
    """
    Best-first ranking truncated to top_n.

    The sort is stable, so equal scores keep their scan order.
    """
    return sorted(scores, key=lambda score: score.score, reverse=True)[:top_n]


def destination_candidates(
    airports: Sequence[Airport],
    base: Base,
    destination_cap: Optional[int] = None,
) -> List[Airport]:
    """
    Destinations to quote from a base.

    The optional cap keeps the first N reference airports; the base
    itself and the base's own exclusions are then removed.
    """
    pool = airports if destination_cap is None else airports[:destination_cap]
    excluded = base.excluded_airport_ids
    return [
        airport
        for airport in pool
        if airport.id != base.airport_id and airport.id not in excluded
    ]


class ScanOrchestrator:
    """
    Runs a full route profitability scan for one account.

    Owns the reference lookups and per-base result lists for the
    duration of a run; never mutates the account snapshot it is given.

    Attributes:
        _data_source: Game backend.
        _scorer: Route scorer.
        _rate_limiter: Throttle awaited before each quote.
        _config: Scan configuration.
    """

    def __init__(
        self,
        data_source: AirlineDataSource,
        scorer: RouteScorer,
        rate_limiter: RateLimiter,
        config: Optional[ScanConfig] = None,
    ) -> None:
        """
        Initialize the orchestrator.

        Args:
            data_source: Game backend adapter.
            scorer: Route scorer (fleet matcher + cost model).
            rate_limiter: Throttle for route quotes.
            config: Scan configuration. If None, uses defaults.
        """
        self._data_source = data_source
        self._scorer = scorer
        self._rate_limiter = rate_limiter
        self._config = config or ScanConfig()

    async def run(
        self,
        account: AccountSnapshot,
        progress: Optional[ProgressSink] = None,
        cancel_event: Optional[asyncio.Event] = None,
    ) -> Dict[str, List[RouteScore]]:
        """
        Scan every base of the account.

        Args:
            account: Immutable account snapshot.
            progress: Optional sink for status lines.
            cancel_event: Optional cooperative cancellation flag, checked
                before every quote.

        Returns:
            Base IATA -> best-first list of at most top_n RouteScores,
            in base declaration order. Bases missing from the airport
            list are skipped.

        Raises:
            AuthError: If login fails.
            ReferenceDataError: If airports or airplane models cannot be fetched.
            ScanCancelledError: If cancel_event is set mid-run.
        """
        start_time = time.perf_counter()

        await self._report(progress, "Logging in...")
        session = await self._data_source.login(account.credentials)
        logger.info(
            "Logged in to %s as airline %d",
            self._data_source.name,
            session.airline_id,
        )

        await self._report(progress, "Fetching global airport list...")
        airports = await self._data_source.fetch_airports(session)
        specs = await self._data_source.fetch_airplane_models(session)
        logger.info(
            "Reference data loaded: %d airports, %d airplane models",
            len(airports),
            len(specs),
        )

        airports_by_id = {airport.id: airport for airport in airports}
        context = ScoringContext(
            specs_by_id={spec.id: spec for spec in specs},
            airports_by_id=airports_by_id,
            home_base_ids=account.home_base_ids,
            load_factor=self._config.load_factor,
        )

        results: Dict[str, List[RouteScore]] = {}
        total_bases = len(account.bases)

        for base_index, base in enumerate(account.bases, start=1):
            origin = airports_by_id.get(base.airport_id)
            if origin is None:
                logger.warning("Base %s (id %d) not in airport list", base.iata, base.airport_id)
                await self._report(progress, f"Skipping base {base.iata}: Not found in airport list.")
                continue

            scores = await self._scan_base(
                session=session,
                account=account,
                base=base,
                origin=origin,
                airports=airports,
                context=context,
                progress=progress,
                progress_label=f"(Base {base_index}/{total_bases})",
                cancel_event=cancel_event,
                results=results,
            )
            results[base.iata] = rank_route_scores(scores, self._config.top_n)
            logger.info(
                "Base %s ranked: %d scored routes, kept %d",
                base.iata,
                len(scores),
                len(results[base.iata]),
            )

        logger.info(
            "Scan completed for account %s: %d base(s) in %.1fs",
            account.name,
            len(results),
            time.perf_counter() - start_time,
        )
        return results

    async def _scan_base(
        self,
        session: AirlineSession,
        account: AccountSnapshot,
        base: Base,
        origin: Airport,
        airports: Sequence[Airport],
        context: ScoringContext,
        progress: Optional[ProgressSink],
        progress_label: str,
        cancel_event: Optional[asyncio.Event],
        results: Dict[str, List[RouteScore]],
    ) -> List[RouteScore]:
        """Quote and score every destination of one base."""
        candidates = destination_candidates(airports, base, self._config.destination_cap)
        total = len(candidates)
        await self._report(
            progress,
            f"Analyzing routes from {base.iata} {progress_label}... (0/{total})",
        )

        scores: List[RouteScore] = []
        failures = 0

        for processed, destination in enumerate(candidates, start=1):
            if cancel_event is not None and cancel_event.is_set():
                logger.warning("Scan cancelled while scanning base %s", base.iata)
                raise ScanCancelledError(dict(results))

            await self._rate_limiter.acquire()
            try:
                score = await self._process_pair(session, account, origin, destination, context)
            finally:
                self._rate_limiter.release()
            if score is _FAILED:
                failures += 1
            elif score is not None:
                scores.append(score)

            if processed % self._config.progress_every == 0:
                await self._report(
                    progress,
                    f"Analyzing routes from {base.iata} {progress_label}... ({processed}/{total})",
                )

        if failures:
            logger.warning("Base %s: %d of %d quotes failed", base.iata, failures, total)
        return scores

    async def _process_pair(
        self,
        session: AirlineSession,
        account: AccountSnapshot,
        origin: Airport,
        destination: Airport,
        context: ScoringContext,
    ):
        """
        Fetch and score one pair.

        Returns:
            RouteScore, None when no owned aircraft can fly it, or the
            _FAILED sentinel when the quote could not be fetched.
        """
        try:
            offer = await self._data_source.fetch_route_offer(session, origin.id, destination.id)
        except FetchError as e:
            logger.warning("Skipping %s -> %s: %s", origin.iata, destination.iata, e)
            return _FAILED
        except Exception as e:
            logger.exception(
                "Unexpected error quoting %s -> %s: %s",
                origin.iata,
                destination.iata,
                e,
            )
            return _FAILED

        evaluation = self._scorer.score_offer(offer, account.planes, context)
        log_level = logging.INFO if self._config.verbose else logging.DEBUG
        if evaluation is None:
            logger.log(log_level, "%s -> %s: no viable aircraft", origin.iata, destination.iata)
            return None

        logger.log(
            log_level,
            "%s -> %s: %d with %s (weekly cost %.0f)",
            origin.iata,
            destination.iata,
            evaluation.score,
            evaluation.aircraft_name,
            evaluation.cost.total,
        )
        return RouteScore(
            origin_airport_id=origin.id,
            origin_iata=origin.iata,
            origin_city=origin.city,
            destination_airport_id=destination.id,
            destination_iata=destination.iata,
            destination_city=destination.city,
            score=evaluation.score,
            aircraft_name=evaluation.aircraft_name,
        )

    async def _report(self, progress: Optional[ProgressSink], message: str) -> None:
        """Deliver a progress line; sink failures are logged and ignored."""
        logger.info("%s", message)
        if progress is None:
            return
        try:
            outcome = progress(message)
            if inspect.isawaitable(outcome):
                await outcome
        except Exception as e:
            logger.warning("Progress update failed: %s", e)

    @property
    def config(self) -> ScanConfig:
        """Scan configuration in use."""
        return self._config

