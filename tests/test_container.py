"""Tests for container wiring."""

import logging

from nutrition_insights.app_logging import LOGGER_NAME
from nutrition_insights.containers import build_container
from tests.conftest import FakePhraser


def test_build_container_creates_services(settings) -> None:
    container = build_container(settings)

    assert container.analytics_service is not None
    assert container.analytics_service.default_profile.targets.calories == 2000
    assert container.narrative_service is None


def test_build_container_configures_logging(settings) -> None:
    logger = logging.getLogger(LOGGER_NAME)
    logger.handlers.clear()

    build_container(settings)

    assert len(logger.handlers) == 1
    assert logger.level == logging.INFO
    logger.handlers.clear()
    logger.propagate = True


def test_build_container_with_phraser(settings) -> None:
    container = build_container(settings, phraser=FakePhraser())

    assert container.narrative_service is not None
    assert container.narrative_service.cache is container.narrative_cache
    assert container.narrative_service.ttl_seconds == 1800


def test_settings_default_profile(settings) -> None:
    profile = settings.default_profile()

    assert profile.timezone == "UTC"
    assert profile.targets.protein_g == 150
