"""
In-memory map session: regions, threshold rules and the time window.

The session turns edits into refresh commands for the orchestrator and
applies the returned results. Triggers:

- a region gets a data source for the first time -> refresh regions without data
- the time window changes -> forced refresh of every region with a data source
- explicit ``refresh(force=True)``

After any commit or rule change every region is recolored. Nothing here is
persisted; a new process starts with an empty store.
"""
import logging
import random
import uuid
from typing import Dict, List, Optional, Sequence

from config import DEFAULT_WINDOW_END_H, DEFAULT_WINDOW_START_H
from models import Region, RegionResult, ThresholdRule, TimeWindow
from services.aggregation import AggregationMode
from services.classifier import DEFAULT_RULES, recolor
from services.orchestrator import RefreshCommand, RefreshOrchestrator, RefreshReport, needs_refresh
from services.weather import OpenMeteoClient

logger = logging.getLogger(__name__)


class RegionNotFound(KeyError):
    pass


class RegionStore:
    """Ordered in-memory collection of regions keyed by id."""

    def __init__(self):
        self._regions: Dict[str, Region] = {}

    def list(self) -> List[Region]:
        return list(self._regions.values())

    def get(self, region_id: str) -> Region:
        try:
            return self._regions[region_id]
        except KeyError:
            raise RegionNotFound(region_id)

    def add(self, region: Region) -> Region:
        if region.id in self._regions:
            raise ValueError(f"Region '{region.id}' already exists")
        self._regions[region.id] = region
        return region

    def update(self, region_id: str, points=None, data_source=None) -> Region:
        """Apply an edit. New geometry invalidates any computed value."""
        current = self.get(region_id)
        changes = {}
        if data_source is not None:
            changes['data_source'] = data_source or None
        if points is not None:
            # Run through validation as a new shape
            reshaped = Region(id=current.id, points=points, data_source=current.data_source)
            if list(reshaped.points) != list(current.points):
                changes['points'] = reshaped.points
        updated = current.model_copy(update=changes)
        if 'points' in changes or ('data_source' in changes and changes['data_source'] != current.data_source):
            updated = updated.invalidated()
        self._regions[region_id] = updated
        return updated

    def delete(self, region_id: str) -> Region:
        try:
            return self._regions.pop(region_id)
        except KeyError:
            raise RegionNotFound(region_id)

    def commit(self, region_id: str, result: RegionResult, expected: Region) -> bool:
        """Apply a refresh result unless the region was removed or edited meanwhile."""
        current = self._regions.get(region_id)
        if current is None:
            return False
        if current.points != expected.points or current.data_source != expected.data_source:
            logger.info("Region %s changed during refresh, discarding result", region_id)
            return False
        self._regions[region_id] = current.with_result(result)
        return True

    def replace_all(self, regions: Sequence[Region]):
        self._regions = {r.id: r for r in regions}


class MapSession:

    def __init__(self, orchestrator: RefreshOrchestrator, store: Optional[RegionStore] = None,
                 rules: Optional[List[ThresholdRule]] = None, window: Optional[TimeWindow] = None,
                 mode: AggregationMode = AggregationMode.AVERAGE):
        self.orchestrator = orchestrator
        self.store = store or RegionStore()
        self.rules: List[ThresholdRule] = list(DEFAULT_RULES if rules is None else rules)
        self.window = window or TimeWindow(start=DEFAULT_WINDOW_START_H, end=DEFAULT_WINDOW_END_H)
        self.mode = mode

    # --- region edits ---------------------------------------------------

    async def add_region(self, points, data_source: Optional[str] = None,
                         region_id: Optional[str] = None) -> RefreshReport:
        region = Region(id=region_id or str(uuid.uuid4()), points=points, data_source=data_source or None)
        self.store.add(region)
        logger.info("Region %s added (%d vertices)", region.id, len(region.points))
        return await self.refresh(force=False)

    async def update_region(self, region_id: str, points=None, data_source=None) -> RefreshReport:
        self.store.update(region_id, points=points, data_source=data_source)
        return await self.refresh(force=False)

    def delete_region(self, region_id: str) -> Region:
        region = self.store.delete(region_id)
        logger.info("Region %s deleted", region_id)
        return region

    # --- rules and window -----------------------------------------------

    def set_rules(self, rules: Sequence[ThresholdRule]):
        self.rules = list(rules)
        self.classify()

    async def set_time_window(self, window: TimeWindow) -> RefreshReport:
        self.window = window
        logger.info("Time window set to %s..%s h", window.start, window.end)
        return await self.refresh(force=True)

    # --- refresh and classification ---------------------------------------

    async def refresh(self, force: bool = False) -> RefreshReport:
        pending = [r for r in self.store.list() if needs_refresh(r, force)]
        report = await self.orchestrator.refresh(
            RefreshCommand(regions=pending, window=self.window, force=force, mode=self.mode)
        )
        if report.skipped:
            return report
        snapshot = {r.id: r for r in pending}
        for outcome in report.outcomes:
            if outcome.success:
                self.store.commit(outcome.region_id, outcome.result, snapshot[outcome.region_id])
            else:
                logger.info("Region %s not updated: %s", outcome.region_id, outcome.reason)
        self.classify()
        return report

    def classify(self):
        regions = self.store.list()
        if not self.rules:
            # Without rules every region goes back to the default color
            self.store.replace_all([r.model_copy(update={'color': None}) for r in regions])
            return
        if any(r.has_value for r in regions):
            self.store.replace_all(recolor(regions, self.rules))


_session: Optional[MapSession] = None


def build_session(rng: Optional[random.Random] = None) -> MapSession:
    client = OpenMeteoClient()
    return MapSession(RefreshOrchestrator(client.fetch_value, rng=rng))


async def get_session() -> MapSession:
    """FastAPI dependency returning the process-wide session.

    Runs on the event loop; the session is never touched from worker threads.
    """
    global _session
    if _session is None:
        _session = build_session()
    return _session
