# tests/conftest.py
"""Shared test fixtures and Hypothesis configuration.

Fixtures:
- sample_raw: the three-message sample exchange as a fresh raw dict
- transformer / validator: default-option pipeline stages

Hypothesis Configuration:
- "ci" profile: Fast tests for CI (100 examples) - default
- "nightly" profile: Thorough tests (1000 examples)
- "debug" profile: Minimal tests with verbose output (10 examples)

Set profile via environment variable:
    HYPOTHESIS_PROFILE=nightly pytest tests/property/
"""

import os
from typing import Any

import pytest
from hypothesis import Phase, Verbosity, settings

from chatlog.engine import Transformer, Validator
from tests.fixtures.chat_logs import sample_session


@pytest.fixture
def sample_raw() -> dict[str, Any]:
    return sample_session()


@pytest.fixture
def transformer() -> Transformer:
    return Transformer()


@pytest.fixture
def validator() -> Validator:
    return Validator()


# =============================================================================
# Hypothesis Configuration
# =============================================================================

settings.register_profile(
    "ci",
    max_examples=100,
    phases=[Phase.explicit, Phase.reuse, Phase.generate, Phase.shrink],
    deadline=None,  # Timing varies on shared runners
)

settings.register_profile(
    "nightly",
    max_examples=1000,
    phases=[Phase.explicit, Phase.reuse, Phase.generate, Phase.shrink],
    deadline=None,
)

settings.register_profile(
    "debug",
    max_examples=10,
    verbosity=Verbosity.verbose,
    phases=[Phase.explicit, Phase.reuse, Phase.generate, Phase.shrink],
    deadline=None,
)

settings.load_profile(os.getenv("HYPOTHESIS_PROFILE", "ci"))
