"""System-wide AppImage installation and registration.

Packages are collected from user home directories into a staging area,
registered under canonical names in a shared target tree and cleaned up
when older naming rules left stale artifacts behind.
"""

__all__: list[str] = []
