"""Shared fixtures for the Stair Studio test suite."""
import sys
import os
import pytest

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from stair import DEFAULT_CONFIG
from stair_type import StairFlightSpec, StairType


@pytest.fixture
def default_config():
    """Returns a copy of the default stair configuration."""
    return DEFAULT_CONFIG.copy()


@pytest.fixture
def spec():
    """Flight dimensions used by the concrete cases: R 0.2, T 0.3, waist 0.15, width 1."""
    return StairFlightSpec(riser_height=0.2, tread_length=0.3, waist_thickness=0.15, flight_width=1.0)


@pytest.fixture
def stair_type():
    """A shared stair type with the same dimensions as `spec`."""
    return StairType("test", riser_height=0.2, tread_length=0.3,
                     waist_thickness=0.15, flight_width=1.0)


@pytest.fixture
def minimal_config():
    """Minimal config for fast tests: a short half turn."""
    config = DEFAULT_CONFIG.copy()
    config.update({
        "height": 1.2,
        "riser_height": 0.2,
        "tread_length": 0.3,
    })
    return config
