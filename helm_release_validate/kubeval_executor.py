"""Schema validation of rendered manifests with kubeval."""

import subprocess
from pathlib import Path
from .utils import log


def run_kubeval(release_file: Path, kube_version: str, verbose: bool = False) -> int:
    """
    Validate rendered manifests in strict mode against a Kubernetes version.

    Strict mode also rejects fields unknown to the target schema. Output goes
    straight to the terminal.

    Returns:
        kubeval exit code
    """
    cmd = ["kubeval", "--strict", "--kubernetes-version", kube_version, str(release_file)]
    log(f"Running: {' '.join(cmd)}", verbose)

    result = subprocess.run(cmd)
    return result.returncode
