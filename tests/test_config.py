import pytest

from proxyprint.config import (
    BASE_PDF_SIZE,
    FIT_SIZE,
    SUPPORTED_BASE_UNITS,
    Config,
    PdfBackend,
    unit_from_name,
    unit_from_value,
)
from proxyprint.units import Vec2, cm, inches, mm, points


def test_defaults_match_source():
    config = Config()
    assert config.default_card_size == "Standard"
    assert config.default_page_size == "Letter"
    assert config.color_cube == "None"
    assert config.base_preview_width == 248
    assert config.display_columns == 5
    assert config.backend is PdfBackend.LIB_HARU
    assert config.base_unit.name == "mm"


def test_default_sizes_are_registered():
    config = Config()
    assert config.default_card_size in config.card_sizes
    assert config.default_page_size in config.page_sizes
    assert FIT_SIZE in config.page_sizes
    assert BASE_PDF_SIZE in config.page_sizes


def test_a4_dimensions():
    config = Config()
    assert config.page_sizes["A4"].dimensions == Vec2(mm(210), mm(297))


def test_fit_size_has_no_dimensions():
    config = Config()
    assert config.page_sizes[FIT_SIZE].dimensions == Vec2(0.0, 0.0)


def test_novelty_is_half_scale_of_standard():
    config = Config()
    novelty = config.card_sizes["Standard Novelty"]
    standard = config.card_sizes["Standard"]
    assert novelty.card_size_scale == 0.5
    assert novelty.card_size == standard.card_size


def test_configs_do_not_share_tables():
    first = Config()
    second = Config()
    del first.page_sizes["A4"]
    first.plugins_state["x"] = True
    assert "A4" in second.page_sizes
    assert second.plugins_state == {}


@pytest.mark.parametrize("info", SUPPORTED_BASE_UNITS)
def test_unit_from_name_round_trip(info):
    assert unit_from_name(info.name) == info


@pytest.mark.parametrize("info", SUPPORTED_BASE_UNITS)
def test_unit_from_value_round_trip(info):
    assert unit_from_value(info.unit) == info


def test_unit_from_name_short_names():
    assert unit_from_name("inches").short_name == "in"
    assert unit_from_name("points").short_name == "pts"


def test_unit_from_name_unknown():
    assert unit_from_name("in") is None


def test_unit_from_value_tolerance():
    assert unit_from_value(cm(1)).name == "cm"
    assert unit_from_value(inches(1) + mm(0.00005)).name == "inches"
    assert unit_from_value(points(1)).name == "points"
    assert unit_from_value(mm(2)) is None