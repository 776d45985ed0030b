"""Menu-entry rendering and publication."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from loguru import logger

from appiman.core.errors import EntryWriteError

from .store import ArtifactStore, LinkStore

ENTRY_SUFFIX = ".desktop"
ENTRY_MODE = 0o755


def sanitize_value(value: str) -> str:
    return value.replace("\\", "\\\\").replace("\r", " ").replace("\n", " ")


@dataclass(slots=True)
class MenuEntry:
    name: str
    exec_path: Path
    icon_path: Path | None = None
    categories: list[str] = field(default_factory=lambda: ["Utility"])
    terminal: bool = False
    categories_terminated: bool = False

    def render(self) -> str:
        categories = ";".join(sanitize_value(item) for item in self.categories)
        if categories and self.categories_terminated:
            categories += ";"
        icon = sanitize_value(str(self.icon_path)) if self.icon_path else ""
        return (
            "[Desktop Entry]\n"
            "Type=Application\n"
            f"Name={sanitize_value(self.name)}\n"
            f"Exec={sanitize_value(str(self.exec_path))}\n"
            f"Icon={icon}\n"
            f"Terminal={'true' if self.terminal else 'false'}\n"
            f"Categories={categories}\n"
        )


class EntryWriter:
    """Persists menu entries and command-line symlinks for canonical names."""

    def __init__(self, entries: ArtifactStore, links: LinkStore) -> None:
        self.entries = entries
        self.links = links

    def write_entry(self, canonical: str, entry: MenuEntry) -> Path:
        name = f"{canonical}{ENTRY_SUFFIX}"
        try:
            self.entries.write(name, entry.render().encode("utf-8"), mode=ENTRY_MODE)
        except OSError as exc:
            raise EntryWriteError(f"cannot write menu entry {name}: {exc}") from exc
        path = self.entries.path_for(name)
        logger.debug("Wrote menu entry {}", path)
        return path

    def link(self, canonical: str, target: Path) -> Path:
        try:
            self.links.link(canonical, target)
        except OSError as exc:
            raise EntryWriteError(f"cannot link {canonical} -> {target}: {exc}") from exc
        return self.links.root / canonical


__all__ = ["ENTRY_SUFFIX", "EntryWriter", "MenuEntry", "sanitize_value"]
