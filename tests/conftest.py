"""Global pytest fixtures for the Challenge Management API.

Provides an in-memory phase catalog seeded with small test templates, a
service wired to it, and an HTTP client over the FastAPI app.
"""

from collections.abc import AsyncGenerator
from itertools import count

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from challenge_api.phases.catalog import PhaseCatalog
from challenge_api.phases.config import PhaseEngineSettings
from challenge_api.phases.repository import InMemoryPhaseCatalogStore
from challenge_api.phases.service import PhaseTimelineService, get_phase_timeline_service
from tests.factories.phase_factory import make_phase_definitions, make_templates


# ===========================================
# CATALOG FIXTURES
# ===========================================


@pytest.fixture
def catalog_store() -> InMemoryPhaseCatalogStore:
    """In-memory catalog holding the test phase definitions and templates."""
    return InMemoryPhaseCatalogStore(make_phase_definitions(), make_templates())


@pytest.fixture
def phase_catalog(catalog_store: InMemoryPhaseCatalogStore) -> PhaseCatalog:
    return PhaseCatalog(catalog_store)


@pytest.fixture
def phase_settings() -> PhaseEngineSettings:
    return PhaseEngineSettings(catalog_backend="memory")


@pytest.fixture
def sequential_ids():
    """Deterministic phase id factory: phase-1, phase-2, ..."""
    counter = count(1)
    return lambda: f"phase-{next(counter)}"


@pytest.fixture
def phase_service(
    phase_catalog: PhaseCatalog,
    phase_settings: PhaseEngineSettings,
) -> PhaseTimelineService:
    return PhaseTimelineService(phase_catalog, phase_settings)


# ===========================================
# HTTP CLIENT FIXTURES
# ===========================================


@pytest_asyncio.fixture
async def async_client(phase_service: PhaseTimelineService) -> AsyncGenerator[AsyncClient, None]:
    """Async HTTP client for API testing, backed by the test catalog."""
    from challenge_api.main import app

    app.dependency_overrides[get_phase_timeline_service] = lambda: phase_service
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
    app.dependency_overrides.clear()
