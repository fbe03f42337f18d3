"""Close out phases when a challenge is cancelled."""

from datetime import datetime
from typing import Collection, Sequence

from challenge_api.shared.utils.datetime_utils import ensure_utc

from .schemas import PhaseInstance

CANCELLABLE_PHASE_NAMES = frozenset({"Registration", "Submission", "Checkpoint Submission"})


def close_on_cancellation(
    phases: Sequence[PhaseInstance],
    now: datetime,
    phase_names: Collection[str] = CANCELLABLE_PHASE_NAMES,
) -> list[PhaseInstance]:
    """Force-close registration and submission style phases.

    Phases named in ``phase_names`` are closed, and stamped with ``now`` as
    their actual end if they were open. Every other phase is copied over
    unchanged.
    """
    now = ensure_utc(now)
    closed: list[PhaseInstance] = []
    for phase in phases:
        copy = phase.model_copy(deep=True)
        if phase.name in phase_names:
            if copy.is_open:
                copy.actual_end_date = now
            copy.is_open = False
        closed.append(copy)
    return closed
