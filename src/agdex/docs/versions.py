"""
Version detection for documentation providers.

Each provider declares how to find the version of the framework a project
uses. Detection never raises; failures are reported in VersionResult.error.
"""

import json
import logging
import re
import shutil
import subprocess
from abc import ABC, abstractmethod
from pathlib import Path

from agdex.docs.models import VersionResult

logger = logging.getLogger(__name__)

_RANGE_PREFIX_RE = re.compile(r"^[\^~>=<]+")
_SEMVER_RE = re.compile(r"\d+\.\d+\.\d+")


def clean_version(spec: str) -> str:
    """Strip range operators from a dependency spec (``^15.1.0`` -> ``15.1.0``)."""
    return _RANGE_PREFIX_RE.sub("", spec.strip())


class VersionDetector(ABC):
    """Strategy for detecting a framework version in a project directory."""

    @abstractmethod
    def detect(self, cwd: Path) -> VersionResult:
        """Detect the version used by the project at cwd."""
        ...


class NpmPackageDetector(VersionDetector):
    """Read a package's version range from package.json dependencies."""

    def __init__(self, packages: list[str], display_name: str):
        self.packages = packages
        self.display_name = display_name

    def detect(self, cwd: Path) -> VersionResult:
        package_json = cwd / "package.json"
        if not package_json.exists():
            return VersionResult(error="No package.json found in the current directory")

        try:
            data = json.loads(package_json.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            return VersionResult(error=f"Failed to parse package.json: {e}")

        deps = {**data.get("devDependencies", {}), **data.get("dependencies", {})}
        for package in self.packages:
            spec = deps.get(package)
            if spec:
                return VersionResult(version=clean_version(spec))

        return VersionResult(error=f"{self.display_name} is not installed in this project.")


class ManifestJsonDetector(VersionDetector):
    """Read the version of an Obsidian plugin from its manifest.json."""

    def __init__(self, plugin_id: str, display_name: str):
        self.plugin_id = plugin_id
        self.display_name = display_name

    def detect(self, cwd: Path) -> VersionResult:
        manifest_path = cwd / "manifest.json"
        if manifest_path.exists():
            try:
                manifest = json.loads(manifest_path.read_text(encoding="utf-8"))
            except (OSError, json.JSONDecodeError) as e:
                logger.debug("Cannot read %s: %s", manifest_path, e)
            else:
                if isinstance(manifest, dict) and manifest.get("id") == self.plugin_id and manifest.get("version"):
                    return VersionResult(version=str(manifest["version"]))

        return VersionResult(
            error=f"Could not detect {self.display_name} version. Use --fw-version to specify."
        )


class PythonPackageDetector(VersionDetector):
    """Find a pinned or minimum version of a package in Python project files."""

    def __init__(
        self,
        package: str,
        display_name: str,
        files: tuple[str, ...] = ("pyproject.toml", "requirements.txt"),
    ):
        self.package = package
        self.display_name = display_name
        self.files = files
        name = re.escape(package)
        self._patterns = [
            re.compile(rf"""^\s*{name}\s*=\s*["']([^"']+)["']""", re.MULTILINE),
            re.compile(rf"""(?:^|["'\s]){name}\s*(?:\[[^\]]*\])?\s*([><=!~]=?\s*v?[\d.]+)""", re.MULTILINE),
        ]

    def parse(self, content: str) -> str | None:
        """Extract an x.y.z version for the package from file content."""
        for pattern in self._patterns:
            match = pattern.search(content)
            if match:
                version = _SEMVER_RE.search(match.group(1))
                if version:
                    return version.group(0)
        return None

    def detect(self, cwd: Path) -> VersionResult:
        for filename in self.files:
            path = cwd / filename
            if not path.exists():
                continue
            try:
                content = path.read_text(encoding="utf-8")
            except OSError as e:
                logger.debug("Cannot read %s: %s", path, e)
                continue
            version = self.parse(content)
            if version:
                return VersionResult(version=version)

        return VersionResult(
            error=f"Could not detect {self.display_name} version. Use --fw-version to specify."
        )


class CommandVersionDetector(VersionDetector):
    """Ask an installed CLI for its version (``ruff --version``).

    The version is the first group of pattern, or the whole match when the
    pattern has no groups.
    """

    def __init__(
        self,
        command: str,
        display_name: str,
        flag: str = "--version",
        pattern: re.Pattern[str] = _SEMVER_RE,
    ):
        self.command = command
        self.display_name = display_name
        self.flag = flag
        self.pattern = pattern

    def detect(self, cwd: Path) -> VersionResult:
        if shutil.which(self.command) is None:
            return VersionResult(error=f"{self.command} is not installed")

        try:
            completed = subprocess.run(
                [self.command, self.flag],
                cwd=cwd,
                capture_output=True,
                text=True,
                timeout=10,
                check=True,
            )
        except (OSError, subprocess.SubprocessError) as e:
            return VersionResult(error=f"Failed to run {self.command} {self.flag}: {e}")

        match = self.pattern.search(completed.stdout)
        if match:
            return VersionResult(version=match.group(match.lastindex or 0))
        return VersionResult(error=f"Could not parse {self.display_name} version output")


class FixedVersionDetector(VersionDetector):
    """Always report the same version, for docs published from a branch."""

    def __init__(self, version: str):
        self.version = version

    def detect(self, cwd: Path) -> VersionResult:
        return VersionResult(version=self.version)


class FirstMatchDetector(VersionDetector):
    """Try detectors in order and keep the first version found.

    The error of the first detector is reported when none succeeds.
    """

    def __init__(self, detectors: list[VersionDetector]):
        self.detectors = detectors

    def detect(self, cwd: Path) -> VersionResult:
        first_error: str | None = None
        for detector in self.detectors:
            result = detector.detect(cwd)
            if result.version:
                return result
            if first_error is None:
                first_error = result.error
        return VersionResult(error=first_error or "Could not detect version")
