"""
Region refresh orchestrator.

One refresh cycle takes a batch of regions through
planning -> fetching -> aggregating -> committing. Regions are processed
concurrently and independently: a failing region produces an outcome with a
reason and never affects its siblings. The orchestrator does not mutate any
store; it returns a ``RefreshReport`` whose successful outcomes carry the
``RegionResult`` to commit.

Only one cycle runs per orchestrator at a time. A call made while a cycle is
in flight is dropped (``skipped=True``), not queued.
"""
import asyncio
import logging
import random
from dataclasses import dataclass, field
from typing import List, Optional, Sequence

from config import FETCH_BATCH_PAUSE_S, FETCH_BATCH_SIZE, FETCH_TIMEOUT_S
from models import QualityMetadata, Region, RegionResult, TimeWindow
from services.aggregation import AggregationMode, aggregate, build_label
from services.fetcher import ValueFetch, fetch_batched
from services.sampling import plan_sampling
from utils_pkg import utc_now_iso

logger = logging.getLogger(__name__)


@dataclass
class RefreshCommand:
    regions: Sequence[Region]
    window: TimeWindow
    force: bool = False
    mode: AggregationMode = AggregationMode.AVERAGE


@dataclass
class RegionOutcome:
    region_id: str
    success: bool
    reason: Optional[str] = None
    sample_count: int = 0
    result: Optional[RegionResult] = None


@dataclass
class RefreshReport:
    generation: int
    skipped: bool = False
    outcomes: List[RegionOutcome] = field(default_factory=list)

    @property
    def succeeded(self) -> List[RegionOutcome]:
        return [o for o in self.outcomes if o.success]

    @property
    def total_samples(self) -> int:
        return sum(o.sample_count for o in self.succeeded)


def needs_refresh(region: Region, force: bool) -> bool:
    return bool(region.data_source) and (force or not region.has_value)


class RefreshOrchestrator:

    def __init__(self, fetch: ValueFetch, batch_size: int = FETCH_BATCH_SIZE,
                 pause_s: float = FETCH_BATCH_PAUSE_S, timeout_s: float = FETCH_TIMEOUT_S,
                 rng: Optional[random.Random] = None):
        self.fetch = fetch
        self.batch_size = batch_size
        self.pause_s = pause_s
        self.timeout_s = timeout_s
        self.rng = rng
        self._generation = 0
        self._in_flight: Optional[int] = None

    @property
    def busy(self) -> bool:
        return self._in_flight is not None

    async def refresh(self, command: RefreshCommand) -> RefreshReport:
        if self._in_flight is not None:
            logger.info("Refresh %d in progress, dropping new request", self._in_flight)
            return RefreshReport(generation=self._in_flight, skipped=True)
        if not command.regions:
            return RefreshReport(generation=self._generation)

        self._generation += 1
        generation = self._in_flight = self._generation
        try:
            logger.info("Refresh %d: %d region(s), force=%s", generation, len(command.regions), command.force)
            outcomes = await asyncio.gather(
                *(self._process_region(r, command) for r in command.regions)
            )
            report = RefreshReport(generation=generation, outcomes=list(outcomes))
            logger.info(
                "Refresh %d done: %d/%d region(s) updated, %d samples",
                generation, len(report.succeeded), len(report.outcomes), report.total_samples,
            )
            return report
        finally:
            self._in_flight = None

    async def _process_region(self, region: Region, command: RefreshCommand) -> RegionOutcome:
        try:
            return await self._refresh_region(region, command)
        except Exception as e:
            logger.exception("Error processing region %s", region.id)
            return RegionOutcome(region_id=region.id, success=False, reason=str(e) or type(e).__name__)

    async def _refresh_region(self, region: Region, command: RefreshCommand) -> RegionOutcome:
        if not region.data_source:
            return RegionOutcome(region_id=region.id, success=False, reason='No data source')
        if not needs_refresh(region, command.force):
            return RegionOutcome(region_id=region.id, success=False, reason='Already has data')

        # planning
        plan = plan_sampling(region.points, rng=self.rng)
        if not plan.points:
            return RegionOutcome(region_id=region.id, success=False, reason='No valid grid points')
        logger.debug("Region %s: area %.2f km², grid %dx%d, %d points",
                     region.id, plan.area_km2, plan.resolution, plan.resolution, len(plan.points))

        # fetching
        raw = await fetch_batched(
            plan.points, self.fetch, region.data_source, command.window,
            batch_size=self.batch_size, pause_s=self.pause_s, timeout_s=self.timeout_s,
        )

        # aggregating
        try:
            stats = aggregate(raw, command.mode, total_requested=len(plan.points))
        except ArithmeticError as e:
            logger.warning("Region %s: aggregation failed: %s", region.id, e)
            return RegionOutcome(region_id=region.id, success=False, reason='Aggregation failed')
        if stats is None:
            return RegionOutcome(region_id=region.id, success=False, reason='No valid data')
        label = build_label(
            region.data_source, stats.value, stats.sample_count,
            stats.min_value, stats.max_value, command.window, plan.area_km2,
        )
        if not label:
            return RegionOutcome(region_id=region.id, success=False, reason='Label generation failed')

        # committing: value, label and metadata travel as one unit
        result = RegionResult(
            value=stats.value,
            label=label,
            metadata=QualityMetadata(
                sample_count=stats.sample_count,
                total_requested=stats.total_requested,
                quality_percent=stats.quality_percent,
                min_value=stats.min_value,
                max_value=stats.max_value,
                last_updated=utc_now_iso(),
            ),
        )
        return RegionOutcome(region_id=region.id, success=True, sample_count=stats.sample_count, result=result)
