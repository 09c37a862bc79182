"""Browser profile discovery for each platform family."""

import sys
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from pathlib import Path

import structlog

logger = structlog.get_logger(__name__)


class PlatformFamily(str, Enum):
    """Platform families with distinct profile storage conventions."""

    MACOS = "macos"
    WINDOWS = "windows"
    OTHER = "other"


@dataclass
class ProfileInfo:
    """A browser profile directory found on disk."""

    name: str
    path: Path
    modified_at: datetime | None = None


def detect_platform(platform: str | None = None) -> PlatformFamily:
    """
    Map a ``sys.platform`` value to its platform family.

    Args:
        platform: Platform string (defaults to sys.platform)

    Returns:
        PlatformFamily for the platform
    """
    platform = platform or sys.platform
    if platform == "darwin":
        return PlatformFamily.MACOS
    if platform == "win32":
        return PlatformFamily.WINDOWS
    return PlatformFamily.OTHER


class ProfileLocator(ABC):
    """
    Find Firefox profile directories under a platform specific root.

    Subclasses only decide where profiles live and how the resolved path is
    handed to the browser.
    """

    family: PlatformFamily

    def __init__(self, home: Path | None = None) -> None:
        """
        Initialize locator.

        Args:
            home: Home directory to search from (defaults to Path.home())
        """
        self.home = home or Path.home()

    @property
    @abstractmethod
    def profiles_root(self) -> Path:
        """Directory containing one subdirectory per profile."""

    def normalize(self, path: Path) -> str:
        """Render a profile path the way the browser expects it."""
        return str(path)

    def list_profiles(self) -> list[ProfileInfo]:
        """
        List all profile directories under the profiles root.

        Returns:
            ProfileInfo for each directory, sorted by name
        """
        root = self.profiles_root
        if not root.is_dir():
            logger.warning("profiles_root_missing", root=str(root), platform=self.family.value)
            return []

        profiles = []
        for entry in sorted(root.iterdir()):
            if not entry.is_dir():
                continue
            try:
                modified_at = datetime.fromtimestamp(entry.stat().st_mtime)
            except OSError:
                modified_at = None
            profiles.append(ProfileInfo(name=entry.name, path=entry, modified_at=modified_at))
        return profiles

    def find(self, name: str) -> str | None:
        """
        Resolve a profile name to a directory.

        An exact directory name wins; otherwise the first directory whose name
        ends with *name* (Firefox prefixes profile names with a random salt,
        e.g. ``a1b2c3d4.default-release``).

        Args:
            name: Profile name or suffix

        Returns:
            Normalized profile path, or None if nothing matches
        """
        profiles = self.list_profiles()
        match = next((p for p in profiles if p.name == name), None)
        if match is None:
            match = next((p for p in profiles if p.name.endswith(name)), None)

        if match is None:
            logger.warning("profile_not_found", name=name, root=str(self.profiles_root))
            return None

        logger.info("profile_resolved", name=name, path=str(match.path))
        return self.normalize(match.path)


class MacOSProfileLocator(ProfileLocator):
    family = PlatformFamily.MACOS

    @property
    def profiles_root(self) -> Path:
        return self.home / "Library" / "Application Support" / "Firefox" / "Profiles"


class WindowsProfileLocator(ProfileLocator):
    family = PlatformFamily.WINDOWS

    @property
    def profiles_root(self) -> Path:
        return self.home / "AppData" / "Local" / "Mozilla" / "Firefox" / "Profiles"

    def normalize(self, path: Path) -> str:
        # Firefox drivers on Windows expect forward slashes
        return str(path).replace("\\", "/")


class DefaultProfileLocator(ProfileLocator):
    family = PlatformFamily.OTHER

    @property
    def profiles_root(self) -> Path:
        return self.home / ".mozilla" / "firefox"


_LOCATORS: dict[PlatformFamily, type[ProfileLocator]] = {
    PlatformFamily.MACOS: MacOSProfileLocator,
    PlatformFamily.WINDOWS: WindowsProfileLocator,
    PlatformFamily.OTHER: DefaultProfileLocator,
}


def get_profile_locator(
    family: PlatformFamily | None = None, home: Path | None = None
) -> ProfileLocator:
    """Return the profile locator for *family* (defaults to the running platform)."""
    return _LOCATORS[family or detect_platform()](home=home)
