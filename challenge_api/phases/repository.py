"""Phase catalog stores.

The timeline engine reads phase definitions and timeline templates through
the :class:`PhaseCatalogStore` protocol. Every lookup returns ``None`` on a
miss; turning a miss into an error is the catalog resolver's job.
"""

from contextlib import AbstractAsyncContextManager
from typing import Any, Callable, Iterable, Protocol

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from challenge_api.infrastructure.database.models import (
    PhaseDefinitionRecord,
    TimelineTemplateRecord,
)
from challenge_api.infrastructure.database.session import get_db_session
from challenge_api.shared.utils.logging import get_logger

from .defaults import DEFAULT_PHASE_DEFINITIONS, DEFAULT_TIMELINE_TEMPLATES
from .schemas import PhaseDefinition, TimelineTemplate

logger = get_logger(__name__)

SessionFactory = Callable[[], AbstractAsyncContextManager[AsyncSession]]


class PhaseCatalogStore(Protocol):
    """Read interface over the phase definition and timeline template stores."""

    async def get_phase_definition(self, phase_id: str) -> PhaseDefinition | None: ...

    async def scan_phase_definitions(self) -> list[PhaseDefinition]: ...

    async def get_timeline_template(self, template_id: str) -> TimelineTemplate | None: ...


class InMemoryPhaseCatalogStore:
    """Dictionary-backed catalog store."""

    def __init__(
        self,
        phase_definitions: Iterable[dict[str, Any] | PhaseDefinition] = (),
        timeline_templates: Iterable[dict[str, Any] | TimelineTemplate] = (),
    ):
        self._phases: dict[str, PhaseDefinition] = {}
        self._templates: dict[str, TimelineTemplate] = {}
        for phase in phase_definitions:
            self.add_phase_definition(phase)
        for template in timeline_templates:
            self.add_timeline_template(template)

    @classmethod
    def with_defaults(cls) -> "InMemoryPhaseCatalogStore":
        """Store seeded with the built-in catalog."""
        return cls(DEFAULT_PHASE_DEFINITIONS, DEFAULT_TIMELINE_TEMPLATES)

    def add_phase_definition(self, phase: dict[str, Any] | PhaseDefinition) -> PhaseDefinition:
        definition = PhaseDefinition.model_validate(phase)
        self._phases[definition.id] = definition
        return definition

    def add_timeline_template(self, template: dict[str, Any] | TimelineTemplate) -> TimelineTemplate:
        record = TimelineTemplate.model_validate(template)
        self._templates[record.id] = record
        return record

    async def get_phase_definition(self, phase_id: str) -> PhaseDefinition | None:
        return self._phases.get(phase_id)

    async def scan_phase_definitions(self) -> list[PhaseDefinition]:
        return list(self._phases.values())

    async def get_timeline_template(self, template_id: str) -> TimelineTemplate | None:
        return self._templates.get(template_id)


class SqlPhaseCatalogStore:
    """Catalog store over the ``phase_definitions`` and ``timeline_templates`` tables.

    Each lookup opens a short-lived session from ``session_factory`` since
    the resolver that calls it outlives any single request.
    """

    def __init__(self, session_factory: SessionFactory = get_db_session):
        self.session_factory = session_factory

    async def get_phase_definition(self, phase_id: str) -> PhaseDefinition | None:
        async with self.session_factory() as session:
            result = await session.execute(
                select(PhaseDefinitionRecord).where(PhaseDefinitionRecord.id == phase_id)
            )
            record = result.scalar_one_or_none()
        return PhaseDefinition.model_validate(record) if record is not None else None

    async def scan_phase_definitions(self) -> list[PhaseDefinition]:
        async with self.session_factory() as session:
            result = await session.execute(
                select(PhaseDefinitionRecord).order_by(PhaseDefinitionRecord.name)
            )
            records = result.scalars().all()
        logger.debug("phase_definitions_scanned", count=len(records))
        return [PhaseDefinition.model_validate(r) for r in records]

    async def get_timeline_template(self, template_id: str) -> TimelineTemplate | None:
        async with self.session_factory() as session:
            result = await session.execute(
                select(TimelineTemplateRecord).where(TimelineTemplateRecord.id == template_id)
            )
            record = result.scalar_one_or_none()
        if record is None:
            return None
        return TimelineTemplate(
            id=str(record.id),
            name=record.name,
            description=record.description,
            is_active=record.is_active,
            phases=record.phases or [],
        )


async def seed_catalog(session: AsyncSession) -> int:
    """Insert the built-in phase definitions and templates that are missing.

    Returns the number of rows added.
    """
    added = 0
    for phase in DEFAULT_PHASE_DEFINITIONS:
        if await session.get(PhaseDefinitionRecord, phase["id"]) is None:
            session.add(PhaseDefinitionRecord(**phase))
            added += 1
    for template in DEFAULT_TIMELINE_TEMPLATES:
        if await session.get(TimelineTemplateRecord, template["id"]) is None:
            session.add(TimelineTemplateRecord(**template))
            added += 1
    await session.flush()
    logger.info("phase_catalog_seeded", added=added)
    return added
