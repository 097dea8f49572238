"""Unit tests for pinbump.utils.version_utils.

Test Coverage:
- Lenient numeric ordering of MAJOR.MINOR.PATCH strings
- Non-numeric and missing components
- Release tag selection (date-like tags excluded)
- Update type classification for lockfile diffs
"""

from __future__ import annotations

from typing import Optional

import pytest

from pinbump.utils.version_utils import (
    compare_semver,
    get_update_type,
    is_latest_release,
    is_release_tag,
    latest_release_tag,
    semver_key,
    sort_release_tags,
    _components,
    _to_number,
)


@pytest.mark.unit
class TestCompareSemver:
    """Tests for compare_semver."""

    @pytest.mark.parametrize(
        "a, b, expected",
        [
            ("1.2.10", "1.2.2", 1),
            ("1.2.2", "1.2.10", -1),
            ("01.1.1", "1.1.1", 0),
            ("1.01.1", "1.1.2", -1),
            ("2.0.0", "1.9.9", 1),
            ("1.0.0", "1.0.0", 0),
        ],
    )
    def test_numeric_ordering(self, a: str, b: str, expected: int) -> None:
        """Test components are compared as numbers, left to right."""
        assert compare_semver(a, b) == expected

    def test_antisymmetric(self) -> None:
        """Test swapping the arguments negates the result."""
        pairs = [("1.2.3", "1.3.0"), ("3.0.0", "2.99.99"), ("0.0.1", "0.0.1")]

        for a, b in pairs:
            assert compare_semver(a, b) == -compare_semver(b, a)

    def test_non_numeric_component_is_skipped(self) -> None:
        """Test a non-numeric component does not decide the comparison."""
        assert compare_semver("1.x.0", "1.5.0") == 0
        assert compare_semver("1.x.1", "1.5.0") == 1

    def test_missing_components_are_skipped(self) -> None:
        """Test shorter versions only compare the components they have."""
        assert compare_semver("1.2", "1.2.9") == 0
        assert compare_semver("2", "1.9.9") == 1

    def test_components_beyond_third_are_ignored(self) -> None:
        """Test only MAJOR.MINOR.PATCH take part."""
        assert compare_semver("1.2.3.9", "1.2.3.1") == 0

    def test_never_raises_on_garbage(self) -> None:
        """Test arbitrary strings compare without raising."""
        assert compare_semver("banana", "4.0.0rc1") in (-1, 0, 1)
        assert compare_semver("", "") == 0

    def test_oversized_component_does_not_raise(self) -> None:
        """Test components beyond int() digit limits sort as infinitely large."""
        huge = "9" * 5000

        assert compare_semver(f"1.{huge}.0", "1.2.0") == 1
        assert compare_semver("1.2.0", f"1.{huge}.0") == -1
        assert compare_semver(f"1.-{huge}.0", "1.2.0") == -1
        assert latest_release_tag(["3.1.0", f"{huge}.0.0", "4.0.0"]) == f"{huge}.0.0"
        assert is_latest_release("4.0.0", f"{huge}.0.0") is False

    def test_semver_key_sorts(self) -> None:
        """Test semver_key can be used with sorted()."""
        tags = ["1.10.0", "1.2.0", "1.9.1"]

        assert sorted(tags, key=semver_key) == ["1.2.0", "1.9.1", "1.10.0"]


@pytest.mark.unit
class TestComponents:
    """Tests for the component helpers."""

    @pytest.mark.parametrize(
        "component, expected",
        [
            ("7", 7),
            ("007", 7),
            ("", 0),
            (" 3 ", 3),
            ("-1", -1),
            ("+2", 2),
            ("rc1", None),
            ("1a", None),
        ],
    )
    def test_to_number(self, component: str, expected: Optional[int]) -> None:
        """Test single components convert like numbers or become None."""
        assert _to_number(component) == expected

    def test_components_pads_with_none(self) -> None:
        """Test missing components are filled with None."""
        assert _components("4") == [4, None, None]


@pytest.mark.unit
class TestReleaseTags:
    """Tests for release tag helpers."""

    @pytest.mark.parametrize(
        "tag, expected",
        [
            ("4.0.1", True),
            ("10.20.30", True),
            ("2020.01.01", False),
            ("v4.0.1", False),
            ("4.0.1rc1", False),
            ("4.0", False),
        ],
    )
    def test_is_release_tag(self, tag: str, expected: bool) -> None:
        """Test only plain X.Y.Z tags that are not dates are releases."""
        assert is_release_tag(tag) is expected

    def test_latest_release_tag(self) -> None:
        """Test the numerically newest release wins and dates are ignored."""
        tags = ["3.1.0", "4.0.0", "2023.01.05", "4.0.0rc1", "3.10.0"]

        assert latest_release_tag(tags) == "4.0.0"

    def test_latest_release_tag_without_releases(self) -> None:
        """Test None is returned when nothing looks like a release."""
        assert latest_release_tag(["nightly", "2024.05.01"]) is None

    def test_sort_release_tags_oldest_first(self) -> None:
        """Test newest_first=False sorts ascending."""
        assert sort_release_tags(["1.10.0", "1.2.0"], newest_first=False) == [
            "1.2.0",
            "1.10.0",
        ]

    @pytest.mark.parametrize(
        "release, latest, expected",
        [
            ("4.0.1", "4.0.1", True),
            ("4.1.0", "4.0.1", True),
            ("3.9.9", "4.0.1", False),
            ("1.0.0", None, True),
        ],
    )
    def test_is_latest_release(
        self, release: str, latest: Optional[str], expected: bool
    ) -> None:
        """Test a release is latest when not older than the newest tag."""
        assert is_latest_release(release, latest) is expected


@pytest.mark.unit
class TestGetUpdateType:
    """Tests for get_update_type."""

    @pytest.mark.parametrize(
        "before, after, expected",
        [
            (None, None, "unknown"),
            (None, "1.0.0", "new"),
            ("1.0.0", None, "removed"),
            ("1.0.0", "1.0.0", "same"),
            ("1.0", "1.0.0", "same"),
            ("2.0.0", "1.9.0", "downgrade"),
            ("1.9.0", "2.0.0", "major"),
            ("1.13.0", "1.14.0", "minor"),
            ("1.13.0", "1.13.1", "patch"),
            ("1.0.0rc1", "1.0.0", "update"),
            ("not-a-version", "1.0.0", "unknown"),
        ],
    )
    def test_classification(
        self, before: Optional[str], after: Optional[str], expected: str
    ) -> None:
        """Test every classification label."""
        assert get_update_type(before, after) == expected
