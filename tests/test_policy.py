"""
Tests for tagpolicy.policy module.

Tests semver update policies including:
- Mode names and lookup
- The "latest" sentinel
- Pre-release channel gating (and the pipeline exemption)
- Monotonicity
- Per-mode dispatch
- Error propagation
"""

from __future__ import annotations

import pytest

from tagpolicy.exceptions import (
    ConfigError,
    InvalidFormatError,
    InvalidSemVerError,
    VersionParseError,
)
from tagpolicy.policy import (
    SemverPolicy,
    SemverPolicyType,
    parse_policy_type,
    policy_type_name,
    should_update,
)

ALL_MODES = list(SemverPolicyType) + [99]


class TestPolicyNames:
    """Tests for policy mode names."""

    @pytest.mark.parametrize(
        "spt, name",
        [
            (SemverPolicyType.NONE, "none"),
            (SemverPolicyType.ALL, "all"),
            (SemverPolicyType.MAJOR, "major"),
            (SemverPolicyType.MINOR, "minor"),
            (SemverPolicyType.PATCH, "patch"),
        ],
    )
    def test_display_names(self, spt, name):
        """Test that each mode displays as its lowercase identifier."""
        assert str(spt) == name
        assert policy_type_name(spt) == name
        assert SemverPolicy(spt).name == name

    def test_unknown_value_has_empty_name(self):
        """Test that values outside the enum display as ""."""
        assert policy_type_name(99) == ""
        assert SemverPolicy(99).name == ""

    def test_parse_policy_type(self):
        """Test case-insensitive lookup by name."""
        assert parse_policy_type("minor") is SemverPolicyType.MINOR
        assert parse_policy_type(" PATCH ") is SemverPolicyType.PATCH

    def test_parse_unknown_policy_raises(self):
        """Test that unknown names are configuration errors."""
        with pytest.raises(ConfigError, match="unknown policy"):
            parse_policy_type("force")


class TestLatestSentinel:
    """Tests for current == "latest"."""

    @pytest.mark.parametrize("spt", ALL_MODES)
    def test_latest_always_updates(self, spt):
        """Test that "latest" is upgradeable under every mode."""
        assert should_update(spt, "latest", "1.0.0")
        assert should_update(spt, "latest", "anything at all")


class TestModes:
    """Tests for per-mode decisions."""

    @pytest.mark.parametrize(
        "spt, current, new, expected",
        [
            # all
            (SemverPolicyType.ALL, "1.4.5", "1.4.6", True),
            (SemverPolicyType.ALL, "1.4.5", "2.0.0", True),
            (SemverPolicyType.ALL, "1.4.5", "1.4.5", False),
            (SemverPolicyType.ALL, "1.4.5", "1.4.4", False),
            # major
            (SemverPolicyType.MAJOR, "1.4.5", "2.0.0", True),
            (SemverPolicyType.MAJOR, "1.4.5", "1.5.0", True),
            (SemverPolicyType.MAJOR, "1.4.5", "1.4.6", True),
            (SemverPolicyType.MAJOR, "v1.4.5", "v2.0.0", True),
            # minor
            (SemverPolicyType.MINOR, "1.2.3", "1.5.0", True),
            (SemverPolicyType.MINOR, "1.2.3", "1.2.4", True),
            (SemverPolicyType.MINOR, "1.2.3", "2.0.0", False),
            # patch
            (SemverPolicyType.PATCH, "1.2.3", "1.2.9", True),
            (SemverPolicyType.PATCH, "1.2.3", "1.3.0", False),
            (SemverPolicyType.PATCH, "1.2.3", "2.2.3", False),
            # none
            (SemverPolicyType.NONE, "1.2.3", "1.2.4", False),
            (SemverPolicyType.NONE, "1.2.3", "9.0.0", False),
        ],
    )
    def test_decision(self, spt, current, new, expected):
        """Test the decision table for each mode."""
        assert SemverPolicy(spt).should_update(current, new) is expected

    def test_unrecognized_mode_rejects(self):
        """Test that a mode outside the enum never updates."""
        assert not SemverPolicy(99).should_update("1.0.0", "2.0.0")

    @pytest.mark.parametrize("spt", ALL_MODES)
    @pytest.mark.parametrize(
        "current, new",
        [("1.2.3", "1.2.3"), ("1.2.3", "1.2.2"), ("2.0.0", "1.9.9"), ("1.0.0", "1.0.0-rc.1")],
    )
    def test_never_moves_backward_or_sideways(self, spt, current, new):
        """Test that a candidate not strictly newer is rejected by every mode."""
        assert not should_update(spt, current, new)

    def test_metadata_only_change_is_not_newer(self):
        """Test that build metadata does not make a version newer."""
        assert not should_update(SemverPolicyType.ALL, "1.2.3+1", "1.2.3+2")


class TestPreReleaseGate:
    """Tests for pre-release channel gating."""

    def test_stable_to_pre_release_blocked(self):
        """Test that narrower modes do not leave the stable channel."""
        assert not should_update(SemverPolicyType.MAJOR, "1.2.3", "1.3.0-rc.1")
        assert not should_update(SemverPolicyType.PATCH, "1.2.3", "1.2.4-beta")

    def test_pre_release_to_stable_blocked(self):
        """Test that narrower modes do not leave a pre-release channel."""
        assert not should_update(SemverPolicyType.MINOR, "1.2.3-rc.1", "1.2.3")

    def test_all_crosses_channels(self):
        """Test that mode "all" ignores channels."""
        assert should_update(SemverPolicyType.ALL, "1.2.3", "1.3.0-rc.1")
        assert should_update(SemverPolicyType.ALL, "1.2.3-rc.1", "1.2.3")

    def test_same_channel_passes(self):
        """Test that identical pre-release strings are not gated."""
        assert should_update(SemverPolicyType.PATCH, "1.2.3-dev", "1.2.4-dev")

    def test_pipeline_candidate_exempt(self):
        """Test that pipeline candidates skip the channel check."""
        assert should_update(
            SemverPolicyType.MINOR,
            "21.0-1571107855-1410-599b8254c7bb",
            "21.0-1571814160-1234-ca5f12c6",
        )
        assert should_update(SemverPolicyType.PATCH, "20.1-9638", "20.1-9700")

    def test_pipeline_candidate_still_needs_to_be_newer(self):
        """Test that the exemption does not bypass monotonicity."""
        assert not should_update(
            SemverPolicyType.MINOR,
            "21.0-1571814160-1234-ca5f12c6",
            "21.0-1571107855-1410-599b8254c7bb",
        )

    def test_pipeline_current_standard_candidate_gated(self):
        """Test that only the candidate's grammar grants the exemption."""
        assert not should_update(
            SemverPolicyType.MAJOR,
            "21.0-1571107855-1410-599b8254c7bb",
            "22.0.0",
        )
        assert should_update(
            SemverPolicyType.ALL,
            "21.0-1571107855-1410-599b8254c7bb",
            "22.0.0",
        )


class TestErrors:
    """Tests for error propagation."""

    @pytest.mark.parametrize("new", ["42", "1.2", "latest"])
    def test_candidate_without_elements(self, new):
        """Test that the candidate must have major.minor.patch elements."""
        with pytest.raises(InvalidFormatError):
            should_update(SemverPolicyType.ALL, "1.0.0", new)

    def test_invalid_current(self):
        """Test that a bad current version is reported as such."""
        with pytest.raises(VersionParseError, match="failed to parse current version") as exc_info:
            should_update(SemverPolicyType.ALL, "1.0.x", "1.0.1")
        assert exc_info.value.side == "current"

    def test_partial_current_reads_as_zero_filled(self):
        """Test that a current version missing minor or patch is accepted."""
        assert should_update(SemverPolicyType.ALL, "1.2", "1.3.0") is True
        assert should_update(SemverPolicyType.PATCH, "1.2", "1.2.1") is True
        assert should_update(SemverPolicyType.MINOR, "v1", "1.4.0") is True
        assert should_update(SemverPolicyType.ALL, "1.2", "1.2.0") is False

    def test_partial_candidate_still_rejected(self):
        """Test that only the current side may omit elements."""
        with pytest.raises(InvalidFormatError):
            should_update(SemverPolicyType.ALL, "1.2.0", "1.3")

    def test_invalid_new(self):
        """Test that a bad candidate is reported as such."""
        with pytest.raises(VersionParseError, match="failed to parse new version") as exc_info:
            should_update(SemverPolicyType.ALL, "1.0.0", "1.0.x")
        assert exc_info.value.side == "new"
        assert isinstance(exc_info.value.__cause__, InvalidSemVerError)

    def test_candidate_shape_checked_before_current(self):
        """Test that a malformed candidate wins over a malformed current."""
        with pytest.raises(InvalidFormatError):
            should_update(SemverPolicyType.ALL, "garbage", "42")


class TestLogging:
    """Tests for decision logging."""

    def test_rejection_reason_logged(self, recording_logger):
        """Test that channel rejections are explained."""
        should_update(
            SemverPolicyType.MINOR, "1.2.3", "1.3.0-rc.1", logger=recording_logger
        )
        assert "pre-release channel differs" in recording_logger.text()

    def test_decision_logged(self, recording_logger):
        """Test that the final decision is logged with the mode name."""
        SemverPolicy(SemverPolicyType.PATCH).should_update(
            "1.2.3", "1.2.4", logger=recording_logger
        )
        assert "patch: '1.2.3' -> '1.2.4' allowed" in recording_logger.text()
