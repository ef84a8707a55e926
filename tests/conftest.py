# tests/conftest.py
"""Shared test fixtures.

Fixtures:
- mock_host / clock: a Clock over a fresh MockTimerHost starting at t=0
- waker: RecordingWaker for driving poll() by hand

Hypothesis Configuration:
- "ci" profile: Fast tests for CI (100 examples) - default
- "nightly" profile: Thorough tests (1000 examples)
- "debug" profile: Minimal tests with verbose output (10 examples)

Set profile via environment variable:
    HYPOTHESIS_PROFILE=nightly pytest tests/property/
"""

from __future__ import annotations

import os

import pytest
from hypothesis import Phase, Verbosity, settings

from hosttime.core.clock import Clock
from hosttime.testing import MockTimerHost, RecordingWaker

# =============================================================================
# Timer fixtures
# =============================================================================


@pytest.fixture
def mock_host() -> MockTimerHost:
    """Mock host at monotonic t=0."""
    return MockTimerHost()


@pytest.fixture
def clock(mock_host: MockTimerHost) -> Clock:
    """Clock over the test's mock host."""
    return Clock(mock_host)


@pytest.fixture
def waker() -> RecordingWaker:
    return RecordingWaker()


# =============================================================================
# Hypothesis Configuration
# =============================================================================

# CI profile: Fast tests for continuous integration
settings.register_profile(
    "ci",
    max_examples=100,
    phases=[Phase.explicit, Phase.reuse, Phase.generate, Phase.shrink],
    deadline=None,  # Disable deadline for CI (timing varies)
)

# Nightly profile: Thorough testing for scheduled runs
settings.register_profile(
    "nightly",
    max_examples=1000,
    phases=[Phase.explicit, Phase.reuse, Phase.generate, Phase.shrink],
    deadline=None,
)

# Debug profile: Minimal examples with verbose output for debugging
settings.register_profile(
    "debug",
    max_examples=10,
    verbosity=Verbosity.verbose,
    phases=[Phase.explicit, Phase.reuse, Phase.generate, Phase.shrink],
    deadline=None,
)

# Load profile from environment, default to "ci"
settings.load_profile(os.getenv("HYPOTHESIS_PROFILE", "ci"))
