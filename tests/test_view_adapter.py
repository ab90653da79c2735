"""
Tests for the TUI view adapter (no terminal needed).
"""

import pytest

from byteview.config import ConfigManager
from byteview.core.decoder import DataTypeMode
from byteview.tui_textual.adapters import TUIViewAdapter


@pytest.fixture
def sample_file(tmp_path):
    path = tmp_path / "hey.txt"
    path.write_bytes(b"Hey!?")
    return path


def make_adapter(tmp_path, text=None):
    path = tmp_path / "config.yml"
    if text is not None:
        path.write_text(text)
    return TUIViewAdapter(ConfigManager(path))


class TestTUIViewAdapter:
    def test_uses_config(self, tmp_path):
        """Page size and default mode come from config.yml"""
        adapter = make_adapter(
            tmp_path,
            "config:\n  viewer:\n    page_size: 2\n    default_mode: hex\n"
            "  tui:\n    poll_interval_ms: 50\n",
        )
        try:
            assert adapter.config_errors == []
            assert adapter.coordinator.page_size == 2
            assert adapter.mode is DataTypeMode.HEX
            assert adapter.poll_interval == 0.05
        finally:
            adapter.shutdown()

    def test_invalid_config_falls_back(self, tmp_path):
        """An invalid config is reported and defaults are used"""
        adapter = make_adapter(tmp_path, "config:\n  viewer:\n    page_size: -1\n")
        try:
            assert len(adapter.config_errors) == 1
            assert adapter.coordinator.page_size == 10000
        finally:
            adapter.shutdown()

    def test_open_and_page(self, tmp_path, sample_file):
        """Actions run in the background and return handles"""
        adapter = make_adapter(
            tmp_path, "config:\n  viewer:\n    page_size: 2\n    default_mode: chars\n"
        )
        try:
            assert adapter.open_file(str(sample_file)).result(timeout=5).text == "He"
            assert adapter.show_page("next").result(timeout=5).text == "y!"
            assert adapter.show_page("first").result(timeout=5).text == "He"
            assert adapter.show_page("prev").result(timeout=5).current_page == 1

            result = adapter.change_mode(DataTypeMode.BYTES).result(timeout=5)
            assert result.text == "72 101 "

            assert adapter.show_page("next").result(timeout=5).current_page == 2
            assert adapter.show_page("current").result(timeout=5).text == "121 33 "
        finally:
            adapter.shutdown()

    def test_malformed_yaml_falls_back(self, tmp_path):
        """Unparseable config.yml is reported and defaults are used"""
        adapter = make_adapter(tmp_path, "config: [unclosed\n")
        try:
            assert len(adapter.config_errors) == 1
            assert "Invalid YAML" in adapter.config_errors[0]
            assert adapter.coordinator.page_size == 10000
        finally:
            adapter.shutdown()

    def test_unknown_direction(self, tmp_path):
        """Only first, next, prev and current are page directions"""
        adapter = make_adapter(tmp_path)
        try:
            with pytest.raises(ValueError):
                adapter.show_page("last")
        finally:
            adapter.shutdown()
