"""Shared test fixtures."""

import os

# Settings requires a JWT secret; set it before anything builds Settings.
os.environ.setdefault("JWT_SECRET", "test-secret-not-for-production")

import pytest

from config.settings import Settings


@pytest.fixture
def settings() -> Settings:
    return Settings(
        JWT_SECRET="test-secret-not-for-production",
        SELLER_RESPONSE_HOURS=48,
        REVIEW_WINDOW_HOURS=72,
    )
