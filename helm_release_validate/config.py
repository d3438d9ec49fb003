"""Validation run configuration."""

from dataclasses import dataclass
from pathlib import Path

DEFAULT_KUBE_VERSION = "master"


@dataclass(frozen=True)
class ValidationConfig:
    """Settings parsed from the command line, immutable for the whole run."""

    helm_release: Path
    kube_version: str = DEFAULT_KUBE_VERSION
    debug: bool = False
    cleanup: bool = False
