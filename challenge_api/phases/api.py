"""REST API endpoints for phase definitions, timeline templates and phase timelines."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Response, status

from challenge_api.shared.utils.logging import get_logger

from .exceptions import PhaseEngineError, raise_http_exception
from .schemas import (
    CancelPhasesRequest,
    PhaseDefinition,
    PhaseListResponse,
    PopulatePhasesRequest,
    ReconcilePhasesRequest,
    TimelineTemplate,
    ValidatePhasesRequest,
)
from .service import PhaseTimelineService, get_phase_timeline_service

logger = get_logger(__name__)

router = APIRouter(tags=["phases"])


# ===========================================
# CATALOG
# ===========================================


@router.get("/phases", response_model=list[PhaseDefinition])
async def list_phase_definitions(
    service: PhaseTimelineService = Depends(get_phase_timeline_service),
):
    """List every phase definition in the catalog."""
    definitions = await service.catalog.resolve_phase_catalog()
    return sorted(definitions.values(), key=lambda d: d.name)


@router.get("/phases/{phase_id}", response_model=PhaseDefinition)
async def get_phase_definition(
    phase_id: str,
    service: PhaseTimelineService = Depends(get_phase_timeline_service),
):
    """Get a single phase definition."""
    try:
        return await service.get_phase_definition_by_id(phase_id)
    except PhaseEngineError as e:
        raise_http_exception(e)


@router.get("/timeline-templates/{template_id}", response_model=TimelineTemplate)
async def get_timeline_template(
    template_id: str,
    service: PhaseTimelineService = Depends(get_phase_timeline_service),
):
    """Get a timeline template with its phases in dependency order."""
    try:
        resolved = await service.catalog.resolve_template(template_id)
    except PhaseEngineError as e:
        raise_http_exception(e)
    return TimelineTemplate(
        id=resolved.template_id,
        name=resolved.name,
        is_active=resolved.is_active,
        phases=resolved.entries,
    )


# ===========================================
# PHASE TIMELINES
# ===========================================


@router.post("/challenge-phases/populate", response_model=PhaseListResponse)
async def populate_phases(
    body: PopulatePhasesRequest,
    service: PhaseTimelineService = Depends(get_phase_timeline_service),
):
    """Compute the phase list of a new challenge."""
    try:
        phases = await service.populate_for_creation(
            body.phases,
            body.start_date,
            body.timeline_template_id,
        )
    except PhaseEngineError as e:
        raise_http_exception(e)
    return PhaseListResponse(phases=phases)


@router.post("/challenge-phases/reconcile", response_model=PhaseListResponse)
async def reconcile_phases(
    body: ReconcilePhasesRequest,
    service: PhaseTimelineService = Depends(get_phase_timeline_service),
):
    """Recompute the phase list of an existing challenge."""
    try:
        phases = await service.populate_for_update(
            body.existing_phases,
            body.phases,
            body.timeline_template_id,
            is_being_activated=body.activation_requested(),
            previous_timeline_template_id=body.previous_timeline_template_id,
            start_date=body.start_date,
        )
    except PhaseEngineError as e:
        raise_http_exception(e)
    return PhaseListResponse(phases=phases)


@router.post("/challenge-phases/cancel", response_model=PhaseListResponse)
async def cancel_phases(
    body: CancelPhasesRequest,
    service: PhaseTimelineService = Depends(get_phase_timeline_service),
):
    """Close the open registration and submission phases of a cancelled challenge."""
    return PhaseListResponse(phases=service.close_on_cancellation(body.phases))


@router.post("/challenge-phases/validate", status_code=status.HTTP_204_NO_CONTENT)
async def validate_phases(
    body: ValidatePhasesRequest,
    service: PhaseTimelineService = Depends(get_phase_timeline_service),
):
    """Check that every referenced phase exists in the catalog."""
    try:
        await service.validate_phase_references(body.phases)
    except PhaseEngineError as e:
        raise_http_exception(e)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
