"""
Tests for the shared helpers in utils.
"""

import json
import os
import tempfile
from unittest.mock import patch

import pytest

from internship_tracker.utils import (
    get_env_var,
    is_truthy,
    safe_read_json,
    safe_write_json,
    sanitize_text,
)


@pytest.fixture
def tmpdir_path():
    with tempfile.TemporaryDirectory() as tmpdir:
        yield tmpdir


class TestGetEnvVar:
    def test_set_value_is_stripped(self):
        with patch.dict(os.environ, {"TRACKER_TEST": "  value  "}):
            assert get_env_var("TRACKER_TEST") == "value"

    @pytest.mark.parametrize("env", [{}, {"TRACKER_TEST": "   "}])
    def test_unset_or_blank_returns_default(self, env):
        """Test that blank values count as unset."""
        with patch.dict(os.environ, env, clear=True):
            assert get_env_var("TRACKER_TEST", default="fallback") == "fallback"
            assert get_env_var("TRACKER_TEST") is None


class TestJsonHelpers:
    """Tests for the safe JSON read/write helpers."""

    def test_write_then_read(self, tmpdir_path):
        path = os.path.join(tmpdir_path, "data.json")

        assert safe_write_json(path, {"company": "Zürich Labs"}) is True
        assert safe_read_json(path) == {"company": "Zürich Labs"}

    def test_no_temp_files_left_behind(self, tmpdir_path):
        path = os.path.join(tmpdir_path, "data.json")

        safe_write_json(path, [1, 2, 3])

        assert os.listdir(tmpdir_path) == ["data.json"]

    def test_unserializable_data_cleans_up(self, tmpdir_path):
        """Test that a failed dump returns False and removes the temp file."""
        path = os.path.join(tmpdir_path, "data.json")

        assert safe_write_json(path, {"when": object()}) is False
        assert os.listdir(tmpdir_path) == []

    def test_read_missing_returns_default(self, tmpdir_path):
        assert safe_read_json(os.path.join(tmpdir_path, "absent.json"), default={}) == {}

    def test_read_invalid_returns_default(self, tmpdir_path):
        path = os.path.join(tmpdir_path, "broken.json")
        with open(path, "w", encoding="utf-8") as f:
            f.write("{ broken")

        assert safe_read_json(path, default="fallback") == "fallback"

    def test_read_directory_returns_default(self, tmpdir_path):
        assert safe_read_json(tmpdir_path) is None

    def test_written_document_is_indented(self, tmpdir_path):
        path = os.path.join(tmpdir_path, "data.json")

        safe_write_json(path, {"a": 1})

        with open(path, encoding="utf-8") as f:
            text = f.read()
        assert text == json.dumps({"a": 1}, indent=2)


class TestTextHelpers:
    @pytest.mark.parametrize("value,expected", [
        ("true", True), (" YES ", True), ("on", True), ("1", True),
        ("false", False), ("", False), (None, False),
    ])
    def test_is_truthy(self, value, expected):
        assert is_truthy(value) is expected

    def test_sanitize_collapses_whitespace(self):
        assert sanitize_text("  SWE\n\t Intern  ") == "SWE Intern"

    def test_sanitize_empty(self):
        assert sanitize_text("") == ""
