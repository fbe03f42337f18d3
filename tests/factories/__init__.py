"""Test data factories for the Challenge Management API."""

from tests.factories.phase_factory import (
    make_phase,
    make_phase_definitions,
    make_template,
    make_templates,
)

__all__ = [
    "make_phase",
    "make_phase_definitions",
    "make_template",
    "make_templates",
]
