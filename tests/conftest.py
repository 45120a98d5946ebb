"""
Pytest configuration for SpecCheck tests.
"""

import pytest
from fastapi.testclient import TestClient

from speccheck.analysis.schemas_speccheck import ComponentWithSpecs, MatchedComponent
from factories import make_battery, make_driver, make_led


@pytest.fixture
def unmatched_component():
    """A detected part whose datasheet could not be retrieved"""
    return ComponentWithSpecs(
        match=MatchedComponent(region_id="region_x", status="unknown", category="ic", confidence=0.2),
        specs=None,
        error="No datasheet found",
    )


@pytest.fixture
def flashlight_components():
    return [make_led(1052, 3000), make_driver(3000), make_battery(3500, 3.6, 8)]


@pytest.fixture
def client():
    from apps.api.main import app
    return TestClient(app)
