from __future__ import annotations

import pytest

from design_drift.core.utils import (
    ancestor_directories,
    match_glob,
    parent_directory,
    round_half_up,
    strip_line_suffix,
)


@pytest.mark.parametrize(
    "path, pattern, expected",
    [
        ("src/icons/Arrow.tsx", "src/icons/**", True),
        ("src/icons/deep/Arrow.tsx", "src/icons/**", True),
        ("Button.test.tsx", "**/*.test.tsx", True),
        ("src/a/Button.test.tsx", "**/*.test.tsx", True),
        ("src/a/Button.tsx", "src/*.tsx", False),
        ("src/Button.tsx", "src/*.{tsx,jsx}", True),
        ("src/Button.vue", "src/*.{tsx,jsx}", False),
        ("./src/B.tsx", "src/?.tsx", True),
        ("src/b.tsx", "src/[!a].tsx", True),
    ],
)
def test_match_glob(path, pattern, expected) -> None:
    assert match_glob(path, pattern) is expected


def test_unterminated_glob_raises() -> None:
    with pytest.raises(ValueError):
        match_glob("src/a.tsx", "src/[a")
    with pytest.raises(ValueError):
        match_glob("src/a.tsx", "src/{a,b")


def test_location_helpers() -> None:
    assert strip_line_suffix("src/Button.tsx:42") == "src/Button.tsx"
    assert strip_line_suffix("src/Button.tsx") == "src/Button.tsx"
    assert parent_directory("src/ui/Button.tsx") == "src/ui"
    assert parent_directory("Button.tsx") is None
    assert ancestor_directories("a/b/c/File.tsx") == ["a/b/c", "a/b", "a"]


def test_round_half_up() -> None:
    assert round_half_up(2.5) == 3
    assert round_half_up(0.5) == 1
    assert round_half_up(2.49) == 2


def test_negated_class_stays_within_one_segment() -> None:
    assert match_glob("src/b.tsx", "src/[!a].tsx")
    assert not match_glob("src//.tsx", "src/[!a].tsx")
    assert not match_glob("a/b", "a[!x]b")


def test_rejected_class_raises_value_error() -> None:
    with pytest.raises(ValueError):
        match_glob("src/a/x.tsx", "src/[z-a]/**")
