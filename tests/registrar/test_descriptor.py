from __future__ import annotations

from pathlib import Path

import pytest

from appiman.core.errors import DescriptorParseError
from appiman.registrar import Descriptor, find_descriptor, parse_descriptor, read_descriptor


def test_parse_descriptor_reads_known_keys() -> None:
    text = """
# comment
[Desktop Entry]
Name=Krita
Name[de]=Krita DE
Exec=krita %F
Icon=krita
Categories=Graphics;2DGraphics;
"""
    descriptor = parse_descriptor(text)

    assert descriptor == Descriptor(
        name="Krita", categories=("Graphics", "2DGraphics"), icon="krita", categories_terminated=True
    )


def test_first_occurrence_wins() -> None:
    text = "[Desktop Entry]\nName=First\n[Desktop Action new]\nName=Second\n"

    assert parse_descriptor(text).name == "First"


def test_empty_values_count_as_absent() -> None:
    descriptor = parse_descriptor("Name=\nIcon=\nCategories=;;\n")

    assert descriptor == Descriptor()
    filled = descriptor.with_defaults("app-name")
    assert filled.name == "App-name"
    assert filled.categories == ("Utility",)
    assert filled.icon is None


def test_find_descriptor_prefers_shallow_paths(tmp_path: Path) -> None:
    (tmp_path / "usr" / "share" / "applications").mkdir(parents=True)
    (tmp_path / "usr" / "share" / "applications" / "a.desktop").write_text("Name=Deep\n", encoding="utf-8")
    (tmp_path / "zz.desktop").write_text("Name=Top\n", encoding="utf-8")
    (tmp_path / "aa.desktop").write_text("Name=First\n", encoding="utf-8")

    assert find_descriptor(tmp_path) == tmp_path / "aa.desktop"


def test_find_descriptor_returns_none_without_match(tmp_path: Path) -> None:
    (tmp_path / "AppRun").write_text("#!/bin/sh\n", encoding="utf-8")

    assert find_descriptor(tmp_path) is None


def test_unreadable_descriptor_raises(tmp_path: Path) -> None:
    path = tmp_path / "broken.desktop"
    path.write_bytes(b"Name=\xff\xfe\n")

    with pytest.raises(DescriptorParseError):
        read_descriptor(path)


def test_unterminated_categories_are_remembered() -> None:
    assert parse_descriptor("Categories=Graphics;Office\n").categories_terminated is False
    assert parse_descriptor("Categories=Graphics;Office;\n").categories_terminated is True


def test_find_descriptor_ignores_links_leaving_the_tree(tmp_path: Path) -> None:
    outside = tmp_path / "host" / "evil.desktop"
    outside.parent.mkdir()
    outside.write_text("Name=Evil\n", encoding="utf-8")
    root = tmp_path / "squashfs-root"
    (root / "share").mkdir(parents=True)
    (root / "aa.desktop").symlink_to(outside)
    (root / "share" / "tool.desktop").write_text("Name=Tool\n", encoding="utf-8")

    assert find_descriptor(root) == root / "share" / "tool.desktop"
