"""
Tests for cache directory management.
"""

from pathlib import Path

from solutionkit.core.directory import ensure_cache_structure, get_global_cache_dir


class TestGlobalCacheDir:
    """Test get_global_cache_dir."""

    def test_env_override(self, monkeypatch, temp_dir):
        """Test SOLUTIONKIT_HOME overrides the default."""
        monkeypatch.setenv("SOLUTIONKIT_HOME", str(temp_dir))
        assert get_global_cache_dir() == temp_dir

    def test_default_in_home(self, monkeypatch):
        """Test default location is ~/.solutionkit."""
        monkeypatch.delenv("SOLUTIONKIT_HOME", raising=False)
        assert get_global_cache_dir().name == ".solutionkit"


def test_ensure_cache_structure(temp_dir):
    """Test the layout is created and returned."""
    layout = ensure_cache_structure(temp_dir / "cache")

    assert set(layout) == {"root", "packages", "downloads", "lock"}
    for path in layout.values():
        assert Path(path).is_dir()
