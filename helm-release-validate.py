#!/usr/bin/env -S uv run --quiet --script
# /// script
# dependencies = [
#   "pyyaml",
#   "click>=8.2",
# ]
# ///
"""
HelmRelease Validate - Render Flux HelmRelease charts and validate them.
Checks rendered Kubernetes manifests against a Kubernetes API schema version.
"""

from helm_release_validate import cli

if __name__ == "__main__":
    cli()
