"""Unit tests for root anchoring and chain propagation on new challenges."""

from datetime import datetime, timedelta, timezone
from itertools import count

import pytest

from challenge_api.phases.catalog import ResolvedTemplate
from challenge_api.phases.exceptions import PhaseDefinitionNotFoundError
from challenge_api.phases.scheduler import (
    anchor_root_phases,
    build_phase_instance,
    propagate_chain,
    stagger_root_start,
)
from challenge_api.phases.schemas import (
    PhaseConstraint,
    PhaseDefinition,
    PhaseOverride,
    TimelineTemplate,
)
from tests.factories.phase_factory import (
    HOUR,
    REGISTRATION,
    REVIEW,
    START,
    SUBMISSION,
    make_phase_definitions,
    make_templates,
)

FIVE_MINUTES = timedelta(minutes=5)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _definitions() -> dict[str, PhaseDefinition]:
    return {d["id"]: PhaseDefinition(**d) for d in make_phase_definitions()}


def _template(template_id: str) -> ResolvedTemplate:
    raw = next(t for t in make_templates() if t["id"] == template_id)
    return ResolvedTemplate.from_template(TimelineTemplate.model_validate(raw))


def _schedule(template_id: str, start=START, overrides=None, id_factory=None):
    template = _template(template_id)
    kwargs = {"id_factory": id_factory} if id_factory else {}
    phases = anchor_root_phases(template.entries, _definitions(), start, overrides, **kwargs)
    return propagate_chain(phases)


def _by_name(phases):
    return {p.name: p for p in phases}


# ---------------------------------------------------------------------------
# stagger_root_start
# ---------------------------------------------------------------------------


class TestStaggerRootStart:
    def test_no_anchor_keeps_candidate(self):
        assert stagger_root_start(START, None) == START

    def test_equal_to_anchor_is_pushed(self):
        assert stagger_root_start(START, START) == START + FIVE_MINUTES

    def test_before_anchor_is_pushed(self):
        assert stagger_root_start(START - timedelta(days=1), START) == START + FIVE_MINUTES

    def test_after_anchor_is_kept(self):
        later = START + timedelta(seconds=1)
        assert stagger_root_start(later, START) == later

    def test_custom_stagger(self):
        assert stagger_root_start(START, START, timedelta(hours=1)) == START + timedelta(hours=1)


# ---------------------------------------------------------------------------
# build_phase_instance
# ---------------------------------------------------------------------------


class TestBuildPhaseInstance:
    def test_defaults_from_template_and_catalog(self):
        entry = _template("linear").by_phase_id[SUBMISSION]
        phase = build_phase_instance(entry, _definitions()[SUBMISSION], id_factory=lambda: "p1")

        assert phase.id == "p1"
        assert phase.name == "Submission"
        assert phase.description == "Submission phase"
        assert phase.duration == 120 * HOUR
        assert phase.predecessor == REGISTRATION
        assert phase.is_open is False
        assert phase.constraints == []
        assert phase.scheduled_start_date is None
        assert phase.actual_start_date is None

    def test_override_duration_and_constraints(self):
        entry = _template("linear").by_phase_id[SUBMISSION]
        override = PhaseOverride(
            phase_id=SUBMISSION,
            duration=HOUR,
            constraints=[PhaseConstraint(name="Number of Submissions", value=1)],
        )
        phase = build_phase_instance(entry, _definitions()[SUBMISSION], override)

        assert phase.duration == HOUR
        assert phase.constraints[0].name == "Number of Submissions"
        assert phase.constraints[0].value == 1

    def test_zero_duration_override_is_honoured(self):
        entry = _template("linear").by_phase_id[REVIEW]
        phase = build_phase_instance(
            entry, _definitions()[REVIEW], PhaseOverride(phase_id=REVIEW, duration=0)
        )
        assert phase.duration == 0

    def test_fresh_id_per_instance(self):
        entry = _template("linear").by_phase_id[REVIEW]
        first = build_phase_instance(entry, _definitions()[REVIEW])
        second = build_phase_instance(entry, _definitions()[REVIEW])
        assert first.id != second.id


# ---------------------------------------------------------------------------
# Creation scheduling
# ---------------------------------------------------------------------------


class TestCreationScheduling:
    def test_linear_chain_dates(self):
        phases = _by_name(_schedule("linear"))

        assert phases["Registration"].scheduled_start_date == START
        assert phases["Registration"].scheduled_end_date == datetime(2024, 1, 2, tzinfo=timezone.utc)
        assert phases["Submission"].scheduled_start_date == datetime(2024, 1, 2, tzinfo=timezone.utc)
        assert phases["Submission"].scheduled_end_date == datetime(2024, 1, 7, tzinfo=timezone.utc)
        assert phases["Review"].scheduled_start_date == datetime(2024, 1, 7, tzinfo=timezone.utc)
        assert phases["Review"].scheduled_end_date == datetime(2024, 1, 9, tzinfo=timezone.utc)

    def test_second_root_is_staggered_five_minutes(self):
        phases = _by_name(_schedule("two-roots"))

        assert phases["Registration"].scheduled_start_date == START
        assert phases["Submission"].scheduled_start_date == START + FIVE_MINUTES
        assert phases["Review"].scheduled_start_date == phases["Submission"].scheduled_end_date

    def test_every_colliding_root_is_pushed_past_the_first_anchor(self):
        phases = _by_name(_schedule("three-roots"))

        assert phases["Registration"].scheduled_start_date == START
        assert phases["Checkpoint Submission"].scheduled_start_date == START + FIVE_MINUTES
        assert phases["Submission"].scheduled_start_date == START + FIVE_MINUTES

    def test_root_override_after_anchor_is_not_staggered(self):
        later = START + timedelta(days=2)
        phases = _by_name(
            _schedule("two-roots", overrides={SUBMISSION: PhaseOverride(phase_id=SUBMISSION, scheduled_start_date=later)})
        )
        assert phases["Submission"].scheduled_start_date == later

    def test_root_override_before_anchor_is_staggered(self):
        earlier = START - timedelta(days=2)
        phases = _by_name(
            _schedule("two-roots", overrides={SUBMISSION: PhaseOverride(phase_id=SUBMISSION, scheduled_start_date=earlier)})
        )
        assert phases["Submission"].scheduled_start_date == START + FIVE_MINUTES

    def test_first_root_override_becomes_anchor(self):
        later = START + timedelta(days=1)
        phases = _by_name(
            _schedule("two-roots", overrides={REGISTRATION: PhaseOverride(phase_id=REGISTRATION, scheduled_start_date=later)})
        )
        assert phases["Registration"].scheduled_start_date == later
        assert phases["Submission"].scheduled_start_date == later + FIVE_MINUTES

    def test_non_root_start_override_is_ignored(self):
        ignored = START + timedelta(days=30)
        phases = _by_name(
            _schedule("linear", overrides={REVIEW: PhaseOverride(phase_id=REVIEW, scheduled_start_date=ignored)})
        )
        assert phases["Review"].scheduled_start_date == phases["Submission"].scheduled_end_date

    def test_duration_override_shifts_successors(self):
        phases = _by_name(
            _schedule("linear", overrides={REGISTRATION: PhaseOverride(phase_id=REGISTRATION, duration=48 * HOUR)})
        )
        assert phases["Submission"].scheduled_start_date == START + timedelta(hours=48)

    def test_iterative_review_starts_with_its_predecessor(self):
        phases = _by_name(_schedule("first2finish"))

        submission = phases["Submission"]
        review = phases["Iterative Review"]
        assert review.scheduled_start_date == submission.scheduled_start_date
        assert review.scheduled_end_date == submission.scheduled_start_date + timedelta(hours=24)

    def test_template_order_not_required_to_be_topological(self):
        phases = _schedule("out-of-order")

        assert [p.name for p in phases] == ["Registration", "Submission", "Review"]
        by_name = _by_name(phases)
        assert by_name["Review"].scheduled_start_date == datetime(2024, 1, 7, tzinfo=timezone.utc)

    def test_end_is_start_plus_duration_everywhere(self):
        for phase in _schedule("appeals"):
            assert phase.scheduled_end_date - phase.scheduled_start_date == timedelta(seconds=phase.duration)

    def test_chain_ordering_property(self):
        phases = _schedule("appeals")
        by_phase_id = {p.phase_id: p for p in phases}
        for phase in phases:
            if phase.predecessor:
                assert phase.scheduled_start_date == by_phase_id[phase.predecessor].scheduled_end_date

    def test_without_start_date_everything_stays_undated(self):
        phases = _schedule("linear", start=None)
        assert all(p.scheduled_start_date is None for p in phases)
        assert all(p.scheduled_end_date is None for p in phases)

    def test_naive_start_date_is_treated_as_utc(self):
        phases = _schedule("linear", start=datetime(2024, 1, 1))
        assert phases[0].scheduled_start_date == START

    def test_unknown_phase_in_template_raises_not_found(self):
        with pytest.raises(PhaseDefinitionNotFoundError) as exc_info:
            _schedule("unknown-phase")
        assert exc_info.value.phase_id == "phase-missing"
        assert exc_info.value.error_type == "phase_definition_not_found"

    def test_deterministic_given_same_inputs(self):
        def ids():
            counter = count(1)
            return lambda: f"phase-{next(counter)}"

        first = _schedule("appeals", id_factory=ids())
        second = _schedule("appeals", id_factory=ids())
        assert [p.model_dump_json() for p in first] == [p.model_dump_json() for p in second]

    def test_new_phases_are_closed_and_unstarted(self):
        for phase in _schedule("appeals"):
            assert phase.is_open is False
            assert phase.actual_start_date is None
            assert phase.actual_end_date is None
