"""Shared fixtures."""

from __future__ import annotations

import pytest

from doclens.config import Settings
from tests.helpers import make_settings


@pytest.fixture()
def config() -> Settings:
    return make_settings()
