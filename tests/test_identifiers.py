"""Tests for taskboard.governance.identifiers module."""

import pytest

from taskboard.governance.identifiers import (
    Unversioned,
    Versioned,
    classify,
    format_identifier,
    is_valid_token,
)


class TestClassify:
    """Tests for splitting assignee strings into base name and version."""

    def test_versioned_identifier(self):
        result = classify("backend-dev-val-001-v1")
        assert result == Versioned(raw="backend-dev-val-001-v1", base_name="backend-dev-val-001", version=1)

    def test_multi_digit_version(self):
        result = classify("qa-engineer-notify-v12")
        assert isinstance(result, Versioned)
        assert result.base_name == "qa-engineer-notify"
        assert result.version == 12

    def test_bare_role_is_unversioned(self):
        assert classify("backend-dev") == Unversioned(raw="backend-dev")

    def test_person_handle_is_unversioned(self):
        assert isinstance(classify("john-doe"), Unversioned)

    def test_empty_string_is_unversioned(self):
        assert classify("") == Unversioned(raw="")

    def test_only_the_last_version_suffix_counts(self):
        result = classify("api-v2-worker-v3")
        assert isinstance(result, Versioned)
        assert result.base_name == "api-v2-worker"
        assert result.version == 3

    @pytest.mark.parametrize("value", [
        "backend-dev-v0",       # versions start at 1
        "backend-dev-v01",      # no leading zeros
        "backend-dev-v",        # missing number
        "backend-dev-V1",       # uppercase marker
        "-v1",                  # empty base
        "Backend-dev-v1",       # uppercase base
        "backend--dev-v1",      # empty token
        "backend-dev-v1 ",      # trailing whitespace
        "backend-dev-v1.5",
    ])
    def test_malformed_versions_are_unversioned(self, value):
        assert classify(value) == Unversioned(raw=value)

    def test_never_raises_on_junk(self):
        for value in ["!!!", "a b c", "-", "v1", "ünïcode-v1"]:
            assert classify(value).raw == value


class TestIsValidToken:
    """Tests for role/name token syntax."""

    @pytest.mark.parametrize("value", ["backend-dev", "a", "qa2", "backend-dev-val-001"])
    def test_valid(self, value):
        assert is_valid_token(value)

    @pytest.mark.parametrize("value", ["", "Backend", "backend_dev", "-dev", "dev-", "a--b", "a b"])
    def test_invalid(self, value):
        assert not is_valid_token(value)


class TestFormatIdentifier:
    """Tests for building identifiers from base name and version."""

    def test_formats_suffix(self):
        assert format_identifier("backend-dev-val-001", 2) == "backend-dev-val-001-v2"

    def test_round_trips_through_classify(self):
        result = classify(format_identifier("cli-dev-x", 7))
        assert isinstance(result, Versioned)
        assert (result.base_name, result.version) == ("cli-dev-x", 7)

    def test_rejects_version_zero(self):
        with pytest.raises(ValueError, match="start at 1"):
            format_identifier("backend-dev", 0)
