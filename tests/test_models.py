from pathlib import Path

import pytest

from svg2webfont.errors import ConfigurationError
from svg2webfont.models import BuildConfiguration


def test_prefix_or_base_required():
    with pytest.raises(ConfigurationError):
        BuildConfiguration.resolve("/does/not/exist")


def test_empty_strings_count_as_missing():
    with pytest.raises(ConfigurationError):
        BuildConfiguration.resolve("/does/not/exist", prefix="", base="")


def test_defaults():
    config = BuildConfiguration.resolve("/some/where/weather-icons/", prefix="wi-")

    assert config.font_name == "weather-icons"
    assert config.file_stem == "weather-icons"
    assert config.output_dir == Path(".")
    assert config.css_prefix == "wi-"
    assert config.css_base is None
    assert config.start_code_point == 0xF000


def test_file_stem_is_sanitized():
    config = BuildConfiguration.resolve("icons", font_name="My: Icons?", base="i")

    assert config.file_stem == "My Icons"
    assert config.css_prefix == ""


def test_explicit_file_stem_wins():
    config = BuildConfiguration.resolve("icons", font_name="My Icons", file_stem="mi", base="i")
    assert config.artifact_path("css") == Path("./mi.css")


def test_unusable_font_name_needs_file():
    with pytest.raises(ConfigurationError):
        BuildConfiguration.resolve("icons", font_name="???", prefix="i-")


@pytest.mark.parametrize("start", [-1, 0x110000, 0xD800])
def test_invalid_start_code_point(start):
    with pytest.raises(ConfigurationError):
        BuildConfiguration.resolve("icons", prefix="i-", start_code_point=start)


def test_invalid_font_height():
    with pytest.raises(ConfigurationError):
        BuildConfiguration.resolve("icons", prefix="i-", font_height=0)
