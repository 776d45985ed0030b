"""Reading the application descriptor embedded in an extracted package."""

from __future__ import annotations

import os
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Iterator

from appiman.core.errors import DescriptorParseError
from appiman.core.naming import display_name

DESCRIPTOR_SUFFIX = ".desktop"
DEFAULT_CATEGORY = "Utility"


@dataclass(frozen=True, slots=True)
class Descriptor:
    """Metadata recognised in a descriptor; ``None`` marks an absent key."""

    name: str | None = None
    categories: tuple[str, ...] = field(default_factory=tuple)
    icon: str | None = None
    # The Categories value ended with ";" (the usual desktop-file form).
    categories_terminated: bool = False

    def with_defaults(self, canonical: str) -> "Descriptor":
        return replace(
            self,
            name=self.name or display_name(canonical),
            categories=self.categories or (DEFAULT_CATEGORY,),
        )


def iter_tree(root: Path) -> Iterator[Path]:
    """Yield files under ``root`` shortest path first, then lexicographically.

    Directory symlinks are not followed; file symlinks are yielded when they
    resolve to a file.
    """

    found: list[Path] = []
    for dirpath, _dirnames, filenames in os.walk(root, followlinks=False):
        current = Path(dirpath)
        for name in filenames:
            candidate = current / name
            if candidate.is_file():
                found.append(candidate)
    found.sort(key=lambda path: (len(path.relative_to(root).parts), path.relative_to(root).as_posix()))
    yield from found


def is_inside(root: Path, candidate: Path) -> bool:
    """Whether ``candidate`` resolves to a location under ``root``."""

    try:
        candidate.resolve().relative_to(root.resolve())
    except ValueError:
        return False
    return True


def find_descriptor(root: Path) -> Path | None:
    return next(
        (
            path
            for path in iter_tree(root)
            if path.name.endswith(DESCRIPTOR_SUFFIX) and is_inside(root, path)
        ),
        None,
    )


def parse_descriptor(text: str) -> Descriptor:
    """Parse ``key=value`` lines; the first occurrence of each key wins."""

    values: dict[str, str] = {}
    for raw_line in text.splitlines():
        line = raw_line.strip()
        if not line or line.startswith(("#", "[")) or "=" not in line:
            continue
        key, _, value = line.partition("=")
        key = key.strip()
        if key in {"Name", "Categories", "Icon"} and key not in values:
            values[key] = value.strip()

    categories = tuple(
        item.strip() for item in values.get("Categories", "").split(";") if item.strip()
    )
    return Descriptor(
        name=values.get("Name") or None,
        categories=categories,
        icon=values.get("Icon") or None,
        categories_terminated=bool(categories) and values["Categories"].endswith(";"),
    )


def read_descriptor(path: Path) -> Descriptor:
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise DescriptorParseError(f"cannot read descriptor {path.name}: {exc}") from exc
    return parse_descriptor(text)


__all__ = [
    "DEFAULT_CATEGORY",
    "Descriptor",
    "find_descriptor",
    "is_inside",
    "iter_tree",
    "parse_descriptor",
    "read_descriptor",
]
