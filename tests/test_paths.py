"""Tests for per-user paths."""

from pathlib import Path

from svgen.paths import get_cache_dir, get_config_path, resolve_output_dir, svg_output_path


def test_config_path_from_xdg(monkeypatch, tmp_path):
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path))

    assert get_config_path() == tmp_path / "svgen" / "config.json"


def test_config_path_fallback(monkeypatch, tmp_path):
    monkeypatch.delenv("XDG_CONFIG_HOME", raising=False)
    monkeypatch.setenv("HOME", str(tmp_path))

    assert get_config_path() == tmp_path / ".config" / "svgen" / "config.json"


def test_cache_dir_from_xdg(monkeypatch, tmp_path):
    monkeypatch.setenv("XDG_CACHE_HOME", str(tmp_path))

    assert get_cache_dir() == tmp_path / "svgen"


def test_resolve_output_dir_defaults_to_cwd():
    assert resolve_output_dir() == Path.cwd()
    assert resolve_output_dir("   ") == Path.cwd()


def test_svg_output_path_is_stable():
    output = svg_output_path(Path("/tmp/out"), "resp_01:abc", 1)

    assert output == Path("/tmp/out/resp_01_abc-2.svg")
