"""Tests for tag enumeration and version pairing."""

import pytest

from decodiff.config import ManifestConfig
from decodiff.versions import VersionPair, build_version_pairs, list_version_tags


class TestListVersionTags:
    """Test list_version_tags."""

    def test_prefix_filter_and_legacy_baseline(self, make_history):
        history = make_history(tag_output="4.26.0\n4.27.0\nv5.0.0\nv5.1.0\nv6.0.0\n")

        tags = list_version_tags(history, ManifestConfig())

        assert tags == ["4.27.0", "v5.0.0", "v5.1.0"]

    def test_prefix_matches_start_only(self, make_history):
        history = make_history(tag_output="rc-v5.0.0\nv5.0.0\nxv5\n")

        tags = list_version_tags(history, ManifestConfig(legacy_tag=None))

        assert tags == ["v5.0.0"]

    def test_prefix_is_a_pattern(self, make_history):
        history = make_history(tag_output="v5.0.0\nv6.0.0\nv7.0.0\n")

        tags = list_version_tags(history, ManifestConfig(version_prefix="v[56]", legacy_tag=None))

        assert tags == ["v5.0.0", "v6.0.0"]

    def test_order_is_preserved(self, make_history):
        history = make_history(tag_output="v5.10.0\nv5.2.0\n")

        tags = list_version_tags(history, ManifestConfig(legacy_tag="base"))

        assert tags == ["base", "v5.10.0", "v5.2.0"]

    def test_no_matching_tags_returns_empty(self, make_history):
        history = make_history(tag_output="4.27.0\nv4.0.0\n")

        assert list_version_tags(history, ManifestConfig()) == []

    def test_no_tags_at_all_returns_empty(self, make_history):
        assert list_version_tags(make_history(), ManifestConfig()) == []


class TestBuildVersionPairs:
    """Test build_version_pairs."""

    def test_adjacent_pairs(self):
        pairs = build_version_pairs(["4.27.0", "v5.0.0", "v5.1.0"])

        assert pairs == [
            VersionPair("4.27.0", "v5.0.0"),
            VersionPair("v5.0.0", "v5.1.0"),
        ]

    @pytest.mark.parametrize("count", [2, 3, 7])
    def test_n_minus_one_pairs(self, count):
        tags = [f"v5.{i}.0" for i in range(count)]

        pairs = build_version_pairs(tags)

        assert len(pairs) == count - 1
        for i, pair in enumerate(pairs):
            assert pair.from_tag == tags[i]
            assert pair.to_tag == tags[i + 1]
        assert tags[-1] not in {pair.from_tag for pair in pairs}

    @pytest.mark.parametrize("tags", [[], ["v5.0.0"]])
    def test_short_sequences_have_no_pairs(self, tags):
        assert build_version_pairs(tags) == []
