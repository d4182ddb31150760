"""Operating-system helpers: platform detection, desktop path, folder viewer."""
from __future__ import annotations

import subprocess
import sys
from pathlib import Path

from ..config import OperatingSystem
from ..exceptions import DirectoryNotFoundError, Messages, UnknownPlatformError


def detect_os(platform: str | None = None) -> OperatingSystem:
    platform = platform or sys.platform
    if platform.startswith("win") or platform == "cygwin":
        return OperatingSystem.WINDOWS
    if platform == "darwin":
        return OperatingSystem.MACOS
    if platform.startswith("linux"):
        return OperatingSystem.LINUX
    return OperatingSystem.UNKNOWN


def get_desktop_path(platform: str | None = None) -> Path:
    """Return the user's desktop folder, or the home folder when there is none."""

    if detect_os(platform) is OperatingSystem.UNKNOWN:
        raise UnknownPlatformError(Messages.CANNOT_RETURN_SPECIFIED_PATH)
    home = Path.home()
    desktop = home / "Desktop"
    return desktop if desktop.is_dir() else home


def folder_view_command(path: str | Path, platform: str | None = None) -> list[str]:
    """Return the command line that reveals *path* in the native file browser."""

    os_type = detect_os(platform)
    if os_type is OperatingSystem.WINDOWS:
        return ["explorer", f"/root,{path}"]
    if os_type is OperatingSystem.MACOS:
        return ["open", "-R", str(path)]
    if os_type is OperatingSystem.LINUX:
        return ["xdg-open", str(path)]
    raise UnknownPlatformError(Messages.CANNOT_OPEN_FOLDER_VIEWER)


def launch_folder_view(path: str | Path, platform: str | None = None) -> subprocess.Popen:
    if not Path(path).is_dir():
        raise DirectoryNotFoundError(path=path)
    return subprocess.Popen(folder_view_command(path, platform))


__all__ = ["detect_os", "folder_view_command", "get_desktop_path", "launch_folder_view"]
