"""Build metadata and core initialisation."""

from __future__ import annotations

import logging
import os
import platform
from dataclasses import dataclass

NAME = "chimera"
VERSION = "0.1.0"

logger = logging.getLogger("chimera")


class CoreError(Exception):
    """Base class for core failures."""


class InitializationFailed(CoreError):
    def __init__(self, reason: str) -> None:
        super().__init__(f"Initialization failed: {reason}")
        self.reason = reason


class ConfigurationError(CoreError):
    def __init__(self, reason: str) -> None:
        super().__init__(f"Configuration error: {reason}")
        self.reason = reason


class ModuleError(CoreError):
    def __init__(self, reason: str) -> None:
        super().__init__(f"Module error: {reason}")
        self.reason = reason


@dataclass(frozen=True)
class BuildInfo:
    """Name, version and environment of the running build."""

    name: str
    version: str
    runtime: str
    git_hash: str

    def __str__(self) -> str:
        return f"{self.name} v{self.version} (Python {self.runtime}, Git: {self.git_hash})"


def build_info() -> BuildInfo:
    """Describe the current build."""
    return BuildInfo(
        name=NAME,
        version=VERSION,
        runtime=platform.python_version(),
        git_hash=os.environ.get("CHIMERA_GIT_SHA", "unknown"),
    )


def init() -> None:
    """Set up logging (if not already configured) and announce the core."""
    if not logging.getLogger().handlers:
        logging.basicConfig(level=logging.INFO)
    logger.info("ChimeraOS Core initialized (v%s)", VERSION)