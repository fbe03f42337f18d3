"""PhaseTimelineService: the operations challenge handlers call.

Wraps the catalog resolver and the pure scheduling functions. Every
operation returns a fresh phase list; persisting it is the caller's job.
"""

from __future__ import annotations

from datetime import datetime, timedelta
from functools import lru_cache
from typing import Sequence

from challenge_api.shared.utils.datetime_utils import ensure_utc, utcnow
from challenge_api.shared.utils.logging import get_logger

from .cancellation import close_on_cancellation
from .catalog import PhaseCatalog
from .config import PhaseEngineSettings, get_phase_settings
from .exceptions import MissingTimelineTemplateError
from .reconciler import reconcile_phases
from .repository import InMemoryPhaseCatalogStore, PhaseCatalogStore, SqlPhaseCatalogStore
from .scheduler import IdFactory, anchor_root_phases, new_phase_id, propagate_chain
from .schemas import PhaseDefinition, PhaseInstance, PhaseOverride
from .validation import validate_phase_references

logger = get_logger(__name__)


class PhaseTimelineService:
    """Computes, recomputes and closes out challenge phase timelines."""

    def __init__(
        self,
        catalog: PhaseCatalog,
        settings: PhaseEngineSettings | None = None,
        id_factory: IdFactory = new_phase_id,
    ):
        self.catalog = catalog
        self.settings = settings or get_phase_settings()
        self.id_factory = id_factory

    @property
    def stagger(self) -> timedelta:
        return timedelta(minutes=self.settings.root_stagger_minutes)

    def _index_overrides(
        self,
        overrides: Sequence[PhaseOverride] | None,
        known_phase_ids: set[str],
    ) -> dict[str, PhaseOverride]:
        indexed: dict[str, PhaseOverride] = {}
        for override in overrides or []:
            if override.phase_id not in known_phase_ids:
                logger.warning("phase_override_ignored", phase_id=override.phase_id)
                continue
            indexed[override.phase_id] = override
        return indexed

    async def populate_for_creation(
        self,
        phases: Sequence[PhaseOverride] | None,
        start_date: datetime | None,
        timeline_template_id: str | None,
    ) -> list[PhaseInstance]:
        """Build the dated phase list of a new challenge from its template."""
        if not timeline_template_id:
            raise MissingTimelineTemplateError(timeline_template_id)
        await self.validate_phase_references(phases)
        template = await self.catalog.resolve_template(timeline_template_id)
        definitions = await self.catalog.resolve_phase_catalog()

        overrides = self._index_overrides(phases, set(template.by_phase_id))
        instances = anchor_root_phases(
            template.entries,
            definitions,
            ensure_utc(start_date) if start_date is not None else None,
            overrides,
            stagger=self.stagger,
            id_factory=self.id_factory,
        )
        propagate_chain(instances, self.settings.iterative_review_phase_name)

        logger.info(
            "phases_populated",
            timeline_template_id=timeline_template_id,
            phases=len(instances),
            overrides=len(overrides),
        )
        return instances

    async def populate_for_update(
        self,
        existing_phases: Sequence[PhaseInstance],
        new_phase_overrides: Sequence[PhaseOverride] | None,
        timeline_template_id: str | None,
        is_being_activated: bool = False,
        previous_timeline_template_id: str | None = None,
        start_date: datetime | None = None,
        now: datetime | None = None,
    ) -> list[PhaseInstance]:
        """Recompute the phase list of an existing challenge.

        When the timeline template changes (or there is no previous list)
        the phases are rebuilt from scratch, anchored at ``start_date`` or
        the earliest previously scheduled root start.
        """
        if not timeline_template_id:
            raise MissingTimelineTemplateError(timeline_template_id)
        await self.validate_phase_references(new_phase_overrides)
        now = ensure_utc(now) if now is not None else utcnow()

        template_changed = (
            previous_timeline_template_id is not None
            and previous_timeline_template_id != timeline_template_id
        )
        if template_changed or not existing_phases:
            anchor = start_date or _earliest_root_start(existing_phases) or now
            logger.info(
                "phases_rebuilt",
                timeline_template_id=timeline_template_id,
                previous_timeline_template_id=previous_timeline_template_id,
            )
            existing_phases = await self.populate_for_creation(
                new_phase_overrides, anchor, timeline_template_id
            )
            if not is_being_activated:
                return existing_phases
            new_phase_overrides = None

        template = await self.catalog.resolve_template(timeline_template_id)
        definitions = await self.catalog.resolve_phase_catalog()
        overrides = self._index_overrides(
            new_phase_overrides, {phase.phase_id for phase in existing_phases}
        )
        phases = reconcile_phases(
            existing_phases,
            template,
            definitions,
            now,
            overrides=overrides,
            is_being_activated=is_being_activated,
            start_date=start_date,
            stagger=self.stagger,
            iterative_review_name=self.settings.iterative_review_phase_name,
        )

        logger.info(
            "phases_reconciled",
            timeline_template_id=timeline_template_id,
            phases=len(phases),
            activated=is_being_activated,
        )
        return phases

    def close_on_cancellation(
        self,
        phases: Sequence[PhaseInstance],
        now: datetime | None = None,
    ) -> list[PhaseInstance]:
        """Close registration and submission phases of a cancelled challenge."""
        closed = close_on_cancellation(
            phases,
            now or utcnow(),
            frozenset(self.settings.cancellation_phase_names),
        )
        logger.info(
            "phases_closed_on_cancellation",
            closed=sum(1 for before, after in zip(phases, closed) if before.is_open != after.is_open),
        )
        return closed

    async def validate_phase_references(self, phases: Sequence[PhaseOverride] | None) -> None:
        """Reject phase overrides that reference ids missing from the catalog."""
        if not phases:
            return
        validate_phase_references(phases, await self.catalog.resolve_phase_catalog())

    async def get_phase_definition_by_id(self, phase_id: str) -> PhaseDefinition:
        return await self.catalog.get_phase_definition(phase_id)


def _earliest_root_start(phases: Sequence[PhaseInstance]) -> datetime | None:
    starts = [
        p.scheduled_start_date
        for p in phases
        if p.predecessor is None and p.scheduled_start_date is not None
    ]
    return min(starts) if starts else None


def build_catalog_store(settings: PhaseEngineSettings) -> PhaseCatalogStore:
    """Create the catalog store selected by ``catalog_backend``."""
    if settings.catalog_backend == "sql":
        return SqlPhaseCatalogStore()
    if settings.catalog_backend != "memory":
        raise ValueError(f"Unknown catalog backend: {settings.catalog_backend}")
    return InMemoryPhaseCatalogStore.with_defaults()


@lru_cache
def get_phase_timeline_service() -> PhaseTimelineService:
    """Get the process-wide service over the configured catalog store."""
    settings = get_phase_settings()
    return PhaseTimelineService(PhaseCatalog(build_catalog_store(settings)), settings)
