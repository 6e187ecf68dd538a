"""
Tests for the promotion policy.

The policy is a pure function, so every case is exercised without touching
the filesystem.
"""

import pytest

from cdnrelease.exceptions import (
    InvalidEnvironmentError,
    InvalidIncrementError,
    VersionFormatError,
)
from cdnrelease.promotion.policy import PromotionAction, decide


def production(current, staging, prod, artifacts=True, increment="patch"):
    return decide("production", increment, current, staging, prod, artifacts)


@pytest.mark.short
class TestStagingRequests:
    @pytest.mark.parametrize(
        "increment, expected",
        [("patch", "1.0.1"), ("minor", "1.1.0"), ("major", "2.0.0")],
    )
    def test_staging_always_rebuilds_from_manifest(self, increment, expected):
        decision = decide("staging", increment, "1.0.0", "5.0.0", "3.0.0", True)

        assert decision.action is PromotionAction.REBUILD
        assert decision.source == "rebuild"
        assert decision.next_version == expected
        assert not decision.mirror_to_staging


@pytest.mark.short
class TestProductionRequests:
    def test_nothing_built_yet_rebuilds_solo(self):
        decision = production("1.0.0", None, None, artifacts=False)

        assert decision.action is PromotionAction.REBUILD
        assert decision.next_version == "1.0.1"
        assert not decision.mirror_to_staging

    def test_staging_ahead_is_adopted(self):
        decision = production("1.2.0", "1.2.0", "1.1.0")

        assert decision.action is PromotionAction.ADOPT
        assert decision.source == "adopt"
        assert decision.next_version == "1.2.0"
        assert not decision.mirror_to_staging

    def test_adopt_ignores_increment(self):
        decision = production("1.2.0", "1.2.0", "1.1.0", increment="major")
        assert decision.next_version == "1.2.0"

    def test_adopt_when_production_never_built(self):
        decision = production("0.0.2", "0.0.2", None)

        assert decision.action is PromotionAction.ADOPT
        assert decision.next_version == "0.0.2"

    def test_staging_ahead_without_artifacts_is_not_adopted(self):
        decision = production("1.2.0", "1.2.0", "1.1.0", artifacts=False)

        assert decision.action is PromotionAction.REBUILD
        assert decision.next_version == "1.1.1"

    def test_equal_versions_rebuild_and_mirror(self):
        decision = production("1.2.0", "1.2.0", "1.2.0", increment="minor")

        assert decision.action is PromotionAction.REBUILD_AND_MIRROR
        assert decision.source == "rebuild"
        assert decision.mirror_to_staging
        assert decision.next_version == "1.3.0"

    def test_mirror_increments_from_manifest(self):
        decision = production("1.4.0", "1.2.0", "1.2.0")
        assert decision.next_version == "1.4.1"

    def test_staging_behind_rebuilds_solo_from_production(self):
        decision = production("1.5.0", "1.1.0", "1.3.0")

        assert decision.action is PromotionAction.REBUILD
        assert decision.next_version == "1.3.1"
        assert not decision.mirror_to_staging

    def test_no_staging_state_rebuilds_from_production(self):
        decision = production("2.0.0", None, "1.3.0", artifacts=False)

        assert decision.action is PromotionAction.REBUILD
        assert decision.next_version == "1.3.1"

    def test_version_comparison_is_semantic(self):
        decision = production("1.10.0", "1.10.0", "1.9.0")
        assert decision.action is PromotionAction.ADOPT

    @pytest.mark.parametrize(
        "staging, prod, artifacts",
        [
            (None, None, False),
            (None, None, True),
            ("1.0.0", None, True),
            ("1.0.0", None, False),
            ("1.0.0", "1.0.0", True),
            ("1.0.0", "1.0.0", False),
            ("1.1.0", "1.0.0", True),
            ("1.1.0", "1.0.0", False),
            ("1.0.0", "1.1.0", True),
            (None, "1.1.0", True),
        ],
    )
    def test_exactly_one_case_applies(self, staging, prod, artifacts):
        decision = production("1.0.0", staging, prod, artifacts=artifacts)

        adopt = artifacts and staging is not None and (
            prod is None or staging > prod
        )
        mirror = not adopt and staging is not None and staging == prod
        if adopt:
            assert decision.action is PromotionAction.ADOPT
        elif mirror:
            assert decision.action is PromotionAction.REBUILD_AND_MIRROR
        else:
            assert decision.action is PromotionAction.REBUILD


@pytest.mark.short
class TestDecisionValidation:
    def test_unknown_environment(self):
        with pytest.raises(InvalidEnvironmentError):
            decide("qa", "patch", "1.0.0", None, None, False)

    def test_unknown_increment(self):
        with pytest.raises(InvalidIncrementError):
            decide("staging", "micro", "1.0.0", None, None, False)

    def test_malformed_pointer(self):
        with pytest.raises(VersionFormatError):
            decide("production", "patch", "1.0.0", "latest", None, True)

    def test_describe(self):
        assert "adopt" in production("1.2.0", "1.2.0", "1.1.0").describe()
        assert "mirror" in production("1.2.0", "1.2.0", "1.2.0").describe()
        assert "rebuild v1.0.1" in production("1.0.0", None, None).describe()
