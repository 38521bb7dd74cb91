"""Shared fixtures."""

import random

import pytest

from combat_sim.data.loaders import item_loader, calibration_loader
from factories import (
    create_test_ammo,
    create_test_attacker,
    create_test_body_armor,
    create_test_defender,
)


@pytest.fixture
def rng():
    """Random source with a fixed seed."""
    return random.Random(42)


@pytest.fixture
def vest():
    """Class 4 vest covering the torso zones, 50 durability."""
    return create_test_body_armor()


@pytest.fixture
def attacker():
    """Rifle firing 40 damage / 4 penetration rounds at 600 RPM."""
    return create_test_attacker()


@pytest.fixture
def armored_defender(vest):
    return create_test_defender(body_armor=vest)


@pytest.fixture
def unarmored_defender():
    return create_test_defender()


@pytest.fixture
def ammo():
    return create_test_ammo()


@pytest.fixture
def fresh_item_cache():
    """Clear loader caches before and after a test."""
    item_loader.clear_cache()
    calibration_loader.clear_cache()
    yield
    item_loader.clear_cache()
    calibration_loader.clear_cache()
