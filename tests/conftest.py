"""Shared test fixtures for the bubbleset test suite.

Fixture Naming Convention
=========================

**Point-set fixtures** describe their layout:
    - l_shape_points: the three-point "compiled-manual" scenario
    - survey_records: one frame of language survey records in two groups

**Surface fixtures** yield matplotlib objects on the Agg backend and close
their figure on teardown.
"""

import os

import matplotlib

matplotlib.use("Agg")  # Use non-interactive backend for testing

import matplotlib.pyplot as plt
import numpy as np
import pytest
from hypothesis import Phase, Verbosity, settings
from numpy.typing import NDArray

from bubbleset.overlay.surface import MatplotlibOverlaySurface

# =============================================================================
# Hypothesis Configuration for Performance
# =============================================================================

settings.register_profile(
    "ci",
    max_examples=10,
    deadline=None,  # Disable deadline in CI (variable performance)
    suppress_health_check=[],
    phases=[Phase.explicit, Phase.reuse, Phase.generate],
    verbosity=Verbosity.quiet,
)

settings.register_profile(
    "dev",
    max_examples=25,
    deadline=5000,
    verbosity=Verbosity.normal,
)

settings.register_profile(
    "thorough",
    max_examples=100,
    deadline=None,
    verbosity=Verbosity.verbose,
)

_profile = os.environ.get("HYPOTHESIS_PROFILE", "dev")
settings.load_profile(_profile)

# =============================================================================
# Test Configuration Constants
# =============================================================================

GRID_RESOLUTION = 5.0
POINT_RADIUS = 50.0
THRESHOLD = 0.5

CHART_WIDTH = 200.0
CHART_HEIGHT = 200.0


def linear_scale(domain: tuple[float, float], pixel_range: tuple[float, float]):
    """Minimal linear mapping used in place of the chart layer's scales."""
    (d0, d1), (r0, r1) = domain, pixel_range

    def scale(value: float) -> float:
        return r0 + (value - d0) / (d1 - d0) * (r1 - r0)

    return scale


# =============================================================================
# --- Fixtures ---
# =============================================================================


@pytest.fixture
def l_shape_points() -> NDArray[np.float64]:
    """Three points forming an L: two equal-length arms from (10, 10)."""
    return np.array([[10.0, 10.0], [100.0, 10.0], [10.0, 100.0]])


@pytest.fixture
def survey_records() -> list[dict]:
    """One survey year with a compiled and an interpreted group."""
    return [
        {"language": "C", "used": 0.20, "interested": 0.10,
         "execution_model": "compiled", "memory_management": "manual"},
        {"language": "C++", "used": 0.25, "interested": 0.15,
         "execution_model": "compiled", "memory_management": "manual"},
        {"language": "Python", "used": 0.70, "interested": 0.80,
         "execution_model": "interpreted", "memory_management": "gc"},
        {"language": "Ruby", "used": 0.75, "interested": 0.70,
         "execution_model": "interpreted", "memory_management": "gc"},
    ]


@pytest.fixture
def group_by_model():
    """Group key combining execution and memory model."""
    return lambda d: f"{d['execution_model']}-{d['memory_management']}"


@pytest.fixture
def unit_scales():
    """Scales mapping [0, 1] onto a 200 px chart, y pointing down."""
    x = linear_scale((0.0, 1.0), (0.0, CHART_WIDTH))
    y = linear_scale((0.0, 1.0), (CHART_HEIGHT, 0.0))
    return x, y


@pytest.fixture
def axes():
    """Matplotlib axes in pixel coordinates."""
    fig, ax = plt.subplots()
    ax.set_xlim(0, CHART_WIDTH)
    ax.set_ylim(CHART_HEIGHT, 0)
    yield ax
    plt.close(fig)


@pytest.fixture
def surface(axes) -> MatplotlibOverlaySurface:
    """Overlay surface wrapping the ``axes`` fixture."""
    return MatplotlibOverlaySurface(axes)
