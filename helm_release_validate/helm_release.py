"""
HelmRelease class to encapsulate and provide access to Flux HelmRelease
YAML data without exposing raw dictionaries.
"""

from pathlib import Path
from typing import Any, Optional

import yaml

HELM_RELEASE_KIND = "HelmRelease"


def parse_helm_release(content: str, source: str = "<string>") -> "HelmRelease":
    """
    Parse the first YAML document of a manifest as a HelmRelease.

    The document is loaded twice: typed for spec.values, and with plain
    scalars kept as written for field queries (version 1.10 stays '1.10').

    Raises:
        ValueError: If the first document is not a YAML mapping
    """
    yaml_dict = next(yaml.safe_load_all(content), None)
    raw_dict = next(yaml.load_all(content, Loader=yaml.BaseLoader), None)

    if not isinstance(yaml_dict, dict):
        raise ValueError(f"{source}: HelmRelease manifest must be a YAML mapping")
    return HelmRelease(yaml_dict, raw_dict)


def load_helm_release(path: Path) -> "HelmRelease":
    """
    Load and parse a HelmRelease manifest file.

    Only the first document of a multi-document file is read.

    Raises:
        ValueError: If the document is not a YAML mapping
    """
    with open(path) as f:
        content = f.read()
    return parse_helm_release(content, str(path))


def _lookup(node: Any, path: str) -> Optional[Any]:
    for key in path.split("."):
        if not isinstance(node, dict) or key not in node:
            return None
        node = node[key]
    return node


class HelmRelease:
    """
    Encapsulates HelmRelease YAML data with methods to query fields and
    determine the chart source.

    Raw YAML dictionary is private and never exposed.
    """

    def __init__(self, yaml_dict: dict, raw_dict: dict = None):
        """
        Initialize with parsed YAML dictionary.

        Args:
            yaml_dict: Dictionary from yaml.safe_load()
            raw_dict: Same document loaded with yaml.BaseLoader, all scalars
                as written; defaults to yaml_dict

        Raises:
            ValueError: If yaml_dict is not a dictionary
        """
        if not isinstance(yaml_dict, dict):
            raise ValueError("HelmRelease manifest must be a YAML mapping")

        self._data = yaml_dict
        self._raw = raw_dict if isinstance(raw_dict, dict) else yaml_dict

    def get_field(self, path: str) -> Optional[Any]:
        """
        Read a value by dotted path, e.g. 'spec.chart.path'.

        Returns:
            The value found, or None if any segment is missing
        """
        return _lookup(self._data, path)

    def _get_str(self, path: str) -> str:
        value = self.get_field(path)
        if value is None:
            return ""
        raw_value = _lookup(self._raw, path)
        return raw_value if isinstance(raw_value, str) else str(value)

    # ========== Kind ==========

    def get_kind(self) -> str:
        return self._get_str("kind")

    def is_helm_release(self) -> bool:
        """Check whether the manifest declares kind HelmRelease."""
        return self.get_kind() == HELM_RELEASE_KIND

    # ========== Metadata Access ==========

    def get_release_name(self) -> str:
        """Get release name from spec.releaseName, falling back to metadata.name."""
        return self._get_str("spec.releaseName") or self._get_str("metadata.name")

    def get_namespace(self) -> str:
        """Get target namespace from spec.targetNamespace, falling back to metadata.namespace."""
        return self._get_str("spec.targetNamespace") or self._get_str("metadata.namespace")

    # ========== Chart Source ==========

    def is_git_chart(self) -> bool:
        """
        Check if the chart is fetched from git.

        A chart path inside a git repository (spec.chart.path) marks a
        git-sourced chart; without it the chart comes from a Helm repository.
        """
        return bool(self.get_chart_path())

    def get_chart_repository(self) -> str:
        return self._get_str("spec.chart.repository")

    def get_chart_name(self) -> str:
        return self._get_str("spec.chart.name")

    def get_chart_version(self) -> str:
        return self._get_str("spec.chart.version")

    def get_chart_git(self) -> str:
        return self._get_str("spec.chart.git")

    def get_chart_ref(self) -> str:
        return self._get_str("spec.chart.ref")

    def get_chart_path(self) -> str:
        return self._get_str("spec.chart.path")

    # ========== Values ==========

    def get_values(self) -> dict:
        """
        Get inline spec.values.

        Returns:
            Copy of the values mapping, or empty dict if not defined
        """
        values = self.get_field("spec.values")
        if values is None:
            return {}
        if not isinstance(values, dict):
            raise ValueError("spec.values must be a mapping")
        return dict(values)

    # ========== Validation ==========

    def validate(self) -> None:
        """
        Validate the manifest before any chart is resolved.

        Raises:
            ValueError: If validation fails on first error
        """
        if not self.is_helm_release():
            raise ValueError(
                f"Invalid resource kind: '{HELM_RELEASE_KIND}' expected, got '{self.get_kind()}'"
            )

        if not self.get_release_name():
            raise ValueError("Release name missing: set metadata.name or spec.releaseName")

        if self.is_git_chart():
            required = {
                "spec.chart.git": self.get_chart_git(),
                "spec.chart.ref": self.get_chart_ref(),
            }
        else:
            required = {
                "spec.chart.repository": self.get_chart_repository(),
                "spec.chart.name": self.get_chart_name(),
                "spec.chart.version": self.get_chart_version(),
            }

        missing = [field for field, value in required.items() if not value]
        if missing:
            raise ValueError(f"Missing chart fields: {', '.join(missing)}")

        self.get_values()

    def __repr__(self) -> str:
        """Return string representation for debugging."""
        chart_type = "git" if self.is_git_chart() else "helm-repo"

        return (
            f"HelmRelease(name={self.get_release_name()!r}, "
            f"namespace={self.get_namespace()!r}, "
            f"type={chart_type!r})"
        )
