from __future__ import annotations

import pytest

from appiman.core.naming import (
    CANONICAL_NAME_RE,
    canonicalize,
    display_name,
    is_canonical,
    stem_of,
)


@pytest.mark.parametrize(
    ("stem", "expected"),
    [
        ("TestApp-v1.2.3-x86_64", "testapp"),
        ("MyApplication", "myapplication"),
        ("", ""),
        ("App-Name_v2.0-amd64", "app-name"),
        ("Obsidian-1.4.16", "obsidian"),
        ("Firefox Setup 1.0", "firefox"),
        ("cool_tool.i386", "cool-tool"),
        ("Linux-Tools", "tools"),
        ("nvim-linux64", "nvim"),
        ("dev2", "dev"),
        ("2024", ""),
        ("--x86_64--", ""),
    ],
)
def test_canonicalize_examples(stem: str, expected: str) -> None:
    assert canonicalize(stem) == expected


def test_markers_only_match_whole_tokens() -> None:
    assert canonicalize("Setuptools") == "setuptools"
    assert canonicalize("linuxfoo") == "linuxfoo"


def test_removal_exposing_a_new_token_is_handled() -> None:
    assert canonicalize("lin1ux-app") == "app"


SAMPLES = [
    "Krita-5.2.2-x86_64",
    "balenaEtcher-1.18.11-x64",
    "Some App (beta) v3",
    "__weird__..name__",
    "lin1ux",
    "xx86_64",
    "v1v2v3",
    "Über-App 2",
    "a.b.c-1.2",
    "setup-setup-linux",
    "UPPER_lower-MiXeD_9.9.9",
]


@pytest.mark.parametrize("stem", SAMPLES)
def test_canonicalize_is_idempotent(stem: str) -> None:
    once = canonicalize(stem)
    assert canonicalize(once) == once


@pytest.mark.parametrize("stem", SAMPLES)
def test_canonical_names_use_restricted_alphabet(stem: str) -> None:
    result = canonicalize(stem)
    assert result == "" or CANONICAL_NAME_RE.fullmatch(result)
    assert is_canonical(result)


def test_stem_of_requires_extension() -> None:
    assert stem_of("tool.AppImage", ".AppImage") == "tool"
    assert stem_of("tool.appimage", ".AppImage") == "tool"
    assert stem_of("tool.tar.gz", ".AppImage") is None
    assert stem_of(".AppImage", ".AppImage") is None


def test_display_name_capitalises_first_letter() -> None:
    assert display_name("app-name") == "App-name"
    assert display_name("") == ""
