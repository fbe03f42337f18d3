"""Unit tests for engine error to HTTP translation and engine settings."""

import pytest
from fastapi import HTTPException

from challenge_api.phases.config import PhaseEngineSettings
from challenge_api.phases.exceptions import (
    InactiveTimelineTemplateError,
    InvalidPhaseGraphError,
    PhaseDefinitionNotFoundError,
    PhaseEngineError,
    TimelineTemplateNotFoundError,
    raise_http_exception,
)


class TestRaiseHttpException:
    @pytest.mark.parametrize(
        "error, expected",
        [
            (PhaseDefinitionNotFoundError("p1"), 404),
            (TimelineTemplateNotFoundError("t1"), 404),
            (InactiveTimelineTemplateError("t1"), 400),
            (InvalidPhaseGraphError("cycle between phases a, b"), 400),
            (PhaseEngineError("boom"), 500),
        ],
    )
    def test_status_codes(self, error, expected):
        with pytest.raises(HTTPException) as exc_info:
            raise_http_exception(error)
        assert exc_info.value.status_code == expected
        assert exc_info.value.detail["status"] == expected

    def test_problem_details_body(self):
        with pytest.raises(HTTPException) as exc_info:
            raise_http_exception(TimelineTemplateNotFoundError("t1"))

        detail = exc_info.value.detail
        assert detail["type"].endswith("/timeline_template_not_found")
        assert detail["title"] == "Timeline Template Not Found"
        assert detail["detail"] == "Timeline template 't1' not found"
        assert "instance" not in detail


class TestPhaseEngineSettings:
    def test_defaults(self, monkeypatch):
        for name in ("PHASE_ROOT_STAGGER_MINUTES", "PHASE_CATALOG_BACKEND"):
            monkeypatch.delenv(name, raising=False)
        settings = PhaseEngineSettings()

        assert settings.root_stagger_minutes == 5
        assert settings.iterative_review_phase_name == "Iterative Review"
        assert settings.catalog_backend == "memory"
        assert "Checkpoint Submission" in settings.cancellation_phase_names

    def test_environment_prefix(self, monkeypatch):
        monkeypatch.setenv("PHASE_ROOT_STAGGER_MINUTES", "15")
        monkeypatch.setenv("PHASE_CATALOG_BACKEND", "sql")
        settings = PhaseEngineSettings()

        assert settings.root_stagger_minutes == 15
        assert settings.catalog_backend == "sql"
