import os

import pytest
from helpers import write_icon

from svg2webfont.discovery import discover_icons, icon_name, natural_sort_key
from svg2webfont.errors import DiscoveryError, DuplicateNameError


def names(icons):
    return [icon.name for icon in icons]


def test_icon_name_flattens_nested_paths():
    assert icon_name(os.path.join("weather", "rain.svg")) == "weather-rain"
    assert icon_name("a//b\\c.svg") == "a-b-c"
    assert icon_name("Arrow.Up.svg") == "Arrow.Up"


def test_natural_sort_orders_numbers_numerically():
    items = ["b10", "a", "b2", "B1"]
    assert sorted(items, key=natural_sort_key) == ["a", "B1", "b2", "b10"]


def test_natural_sort_puts_punctuation_before_digits_and_letters():
    items = ["ab", "a1", "a-", "a", "a b", "a-2", "a-10"]
    assert sorted(items, key=natural_sort_key) == ["a", "a b", "a-", "a-2", "a-10", "a1", "ab"]


def test_discover_sorts_with_numeric_collation(tmp_path):
    for name in ("b10", "a", "b2"):
        write_icon(tmp_path, f"{name}.svg")

    assert names(discover_icons(tmp_path)) == ["a", "b2", "b10"]


def test_discover_recurses_and_skips_directories(tmp_path):
    write_icon(tmp_path, "weather/rain.svg")
    write_icon(tmp_path, "weather/snow/heavy.svg")
    write_icon(tmp_path, "home.svg")
    (tmp_path / "empty").mkdir()

    icons = discover_icons(tmp_path)
    assert names(icons) == ["home", "weather-rain", "weather-snow-heavy"]
    assert all(icon.path.is_absolute() for icon in icons)


def test_discover_is_case_insensitive(tmp_path):
    write_icon(tmp_path, "Zebra.svg")
    write_icon(tmp_path, "apple.svg")

    assert names(discover_icons(tmp_path)) == ["apple", "Zebra"]


def test_discover_empty_directory(tmp_path):
    assert discover_icons(tmp_path) == []


def test_discover_missing_root(tmp_path):
    with pytest.raises(DiscoveryError):
        discover_icons(tmp_path / "nope")


def test_discover_root_is_file(tmp_path):
    path = write_icon(tmp_path, "a.svg")
    with pytest.raises(DiscoveryError):
        discover_icons(path)


def test_duplicate_names_from_extensions(tmp_path):
    write_icon(tmp_path, "x.svg")
    write_icon(tmp_path, "x.SVG2")

    with pytest.raises(DuplicateNameError) as excinfo:
        discover_icons(tmp_path)
    assert "x" in excinfo.value.duplicates
    assert len(excinfo.value.duplicates["x"]) == 2


def test_duplicate_names_from_nested_paths(tmp_path):
    write_icon(tmp_path, "a/b.svg")
    write_icon(tmp_path, "a-b.svg")

    with pytest.raises(DuplicateNameError):
        discover_icons(tmp_path)


def test_symlinks_are_followed(tmp_path):
    src = tmp_path / "src"
    other = tmp_path / "other"
    write_icon(other, "linked.svg")
    write_icon(src, "own.svg")
    try:
        os.symlink(other, src / "more", target_is_directory=True)
    except (OSError, NotImplementedError):
        pytest.skip("symlinks not supported")

    assert names(discover_icons(src)) == ["more-linked", "own"]


def test_custom_sort_key(tmp_path):
    for name in ("b10", "a", "b2"):
        write_icon(tmp_path, f"{name}.svg")

    assert names(discover_icons(tmp_path, sort_key=lambda name: name)) == ["a", "b10", "b2"]
