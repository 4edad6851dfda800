"""Shared fixtures for stepper tests."""
from __future__ import annotations

import os
import sys

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import pytest

from bounds import INT8, UINT8, IntervalDomain
from models import HarnessSettings
from stepper import BoundedStepper


@pytest.fixture
def int8_stepper() -> BoundedStepper:
    return BoundedStepper(domain=INT8)


@pytest.fixture
def uint8_stepper() -> BoundedStepper:
    return BoundedStepper(domain=UINT8)


@pytest.fixture
def int8_like_stepper() -> BoundedStepper:
    """The [-128, 127] range over plain Python ints."""
    return BoundedStepper(domain=IntervalDomain(lo=-128, hi=127))


@pytest.fixture
def small_settings() -> HarnessSettings:
    """A demonstration limited to two quick domains."""
    return HarnessSettings(domains=["int8", "unsigned char"], banner_width=10)
