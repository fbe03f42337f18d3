"""Read-through cache over the phase catalog stores.

Phase definitions and timeline templates are reference data: they are
loaded on first access and kept for the lifetime of the process, with no
expiry. Instances created from them carry a denormalised copy of the
phase name and description, so a later catalog edit does not rewrite
existing challenges.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field

from challenge_api.shared.utils.logging import get_logger

from .exceptions import (
    InactiveTimelineTemplateError,
    InvalidPhaseGraphError,
    InvalidTimelineTemplateError,
    PhaseDefinitionNotFoundError,
    TimelineTemplateNotFoundError,
)
from .ordering import topological_order
from .repository import PhaseCatalogStore
from .schemas import PhaseDefinition, TimelineTemplate, TimelineTemplateEntry

logger = get_logger(__name__)


@dataclass(frozen=True)
class ResolvedTemplate:
    """A timeline template with its entries in dependency order."""

    template_id: str
    name: str
    is_active: bool
    entries: list[TimelineTemplateEntry] = field(default_factory=list)
    by_phase_id: dict[str, TimelineTemplateEntry] = field(default_factory=dict)

    @classmethod
    def from_template(cls, template: TimelineTemplate) -> ResolvedTemplate:
        try:
            order = topological_order([(e.phase_id, e.predecessor) for e in template.phases])
        except InvalidPhaseGraphError as exc:
            raise InvalidTimelineTemplateError(template.id, exc.reason) from exc

        entries = [template.phases[position] for position in order]
        by_phase_id: dict[str, TimelineTemplateEntry] = {}
        for entry in entries:
            by_phase_id.setdefault(entry.phase_id, entry)
        return cls(
            template_id=template.id,
            name=template.name,
            is_active=template.is_active,
            entries=entries,
            by_phase_id=by_phase_id,
        )


class PhaseCatalog:
    """Memoizing resolver for phase definitions and timeline templates."""

    def __init__(self, store: PhaseCatalogStore):
        self.store = store
        self._phase_definitions: dict[str, PhaseDefinition] | None = None
        self._templates: dict[str, ResolvedTemplate] = {}
        self._lock = asyncio.Lock()

    async def resolve_phase_catalog(self) -> dict[str, PhaseDefinition]:
        """Return every phase definition keyed by id."""
        if self._phase_definitions is None:
            async with self._lock:
                if self._phase_definitions is None:
                    records = await self.store.scan_phase_definitions()
                    self._phase_definitions = {record.id: record for record in records}
                    logger.info("phase_catalog_loaded", count=len(records))
        return self._phase_definitions

    async def resolve_template(self, template_id: str) -> ResolvedTemplate:
        """Return the template with entries in dependency order.

        Raises:
            TimelineTemplateNotFoundError: no template with this id exists.
            InactiveTimelineTemplateError: the template is switched off.
            InvalidTimelineTemplateError: the predecessor graph cannot be ordered.
        """
        resolved = self._templates.get(template_id)
        if resolved is None:
            async with self._lock:
                resolved = self._templates.get(template_id)
                if resolved is None:
                    template = await self.store.get_timeline_template(template_id)
                    if template is None:
                        raise TimelineTemplateNotFoundError(template_id)
                    resolved = ResolvedTemplate.from_template(template)
                    self._templates[template_id] = resolved
                    logger.info(
                        "timeline_template_loaded",
                        template_id=template_id,
                        phases=len(resolved.entries),
                    )

        if not resolved.is_active:
            raise InactiveTimelineTemplateError(template_id)
        return resolved

    async def get_phase_definition(self, phase_id: str) -> PhaseDefinition:
        """Look up one phase definition, falling back to the store on a cache miss."""
        definitions = await self.resolve_phase_catalog()
        definition = definitions.get(phase_id)
        if definition is None:
            definition = await self.store.get_phase_definition(phase_id)
            if definition is None:
                raise PhaseDefinitionNotFoundError(phase_id)
            definitions[phase_id] = definition
        return definition

    def clear(self) -> None:
        """Drop everything cached so far."""
        self._phase_definitions = None
        self._templates.clear()
