from __future__ import annotations

from pathlib import Path

from appiman.registrar import resolve_icon


def _touch(path: Path) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(b"icon")
    return path


def test_exact_match_wins_over_prefix(tmp_path: Path) -> None:
    _touch(tmp_path / "krita-symbolic.svg")
    exact = _touch(tmp_path / "usr" / "share" / "icons" / "krita.png")

    assert resolve_icon(tmp_path, "krita") == exact


def test_key_with_path_and_suffix_is_normalised(tmp_path: Path) -> None:
    exact = _touch(tmp_path / "Tool.SVG")

    assert resolve_icon(tmp_path, "/usr/share/icons/tool.png") == exact


def test_prefix_svg_match(tmp_path: Path) -> None:
    match = _touch(tmp_path / "icons" / "tool-256.svg")
    _touch(tmp_path / "icons" / "tool-256.xpm")

    assert resolve_icon(tmp_path, "tool") == match


def test_fallback_to_top_level_image(tmp_path: Path) -> None:
    _touch(tmp_path / "nested" / "other.png")
    top = _touch(tmp_path / "b.png")
    _touch(tmp_path / "c.svg")

    assert resolve_icon(tmp_path, "missing") == top
    assert resolve_icon(tmp_path, None) == top


def test_no_icon_found(tmp_path: Path) -> None:
    _touch(tmp_path / "AppRun")

    assert resolve_icon(tmp_path, None) is None


def test_symlink_escaping_root_is_ignored(tmp_path: Path) -> None:
    root = tmp_path / "root"
    root.mkdir()
    outside = _touch(tmp_path / "secret.png")
    (root / "tool.png").symlink_to(outside)

    assert resolve_icon(root, "tool") is None
