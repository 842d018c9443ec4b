"""Shared fixtures for the synthesis tests."""
import numpy as np
import pytest

from orpheus import CollectingSink, SynthesisSettings


@pytest.fixture
def rng():
    return np.random.default_rng(1234)


@pytest.fixture
def fast_settings():
    """Default settings with few noise layers to keep fricatives cheap."""
    return SynthesisSettings(synthesis_layers=3)


@pytest.fixture
def collecting_sink():
    return CollectingSink()
