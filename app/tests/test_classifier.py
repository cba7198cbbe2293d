"""Tests for duration parsing and shorts classification."""

import pytest

from app.schema.content import ContentKind
from app.services.classifier import classify, duration_to_seconds, format_duration


def test_duration_to_seconds_parses_components():
    assert duration_to_seconds("PT45S") == 45
    assert duration_to_seconds("PT5M") == 300
    assert duration_to_seconds("PT4M5S") == 245
    assert duration_to_seconds("PT1H2M3S") == 3723
    assert duration_to_seconds("P1DT1S") == 86401


@pytest.mark.parametrize("code", [None, "", "garbage", "PT", "P", "45S", "PTxM"])
def test_duration_to_seconds_rejects_unparseable(code):
    assert duration_to_seconds(code) is None


@pytest.mark.parametrize("code", ["PT1S", "PT45S", "PT60S", "PT1M", "PT0M59S"])
def test_sixty_seconds_or_less_is_short(code):
    result = classify(code)
    assert result.kind == ContentKind.SHORTS
    assert result.duration_label == "Short"


@pytest.mark.parametrize("code", ["PT61S", "PT1M1S", "PT5M", "PT1H"])
def test_longer_than_sixty_seconds_is_long_form(code):
    assert classify(code).kind == ContentKind.LONG_FORM


def test_unknown_duration_defaults_to_long_form_video():
    for code in (None, "not-a-duration"):
        result = classify(code)
        assert result.kind == ContentKind.LONG_FORM
        assert result.duration_label == "Video"
        assert result.total_seconds is None


def test_long_form_gets_clock_label():
    assert classify("PT4M5S").duration_label == "4:05"
    assert classify("PT1H2M").duration_label == "1:02:00"
    assert format_duration(61) == "1:01"
