"""Helm command execution and release file handling."""

import subprocess
from pathlib import Path
import yaml
from .helm_release import HelmRelease
from .utils import log, run_command


def write_values_file(release: HelmRelease, workdir: Path, verbose: bool = False) -> Path:
    """
    Extract inline spec.values of a HelmRelease to a values file.

    Returns:
        Path to <workdir>/<release name>.values.yaml
    """
    values_file = workdir / f"{release.get_release_name()}.values.yaml"
    log(f"Extracting values to {values_file}", verbose)

    with open(values_file, "w") as f:
        yaml.safe_dump(
            release.get_values(),
            f,
            default_flow_style=False,
            sort_keys=False,
            allow_unicode=True
        )

    return values_file


def build_dependencies(chart_dir: Path, verbose: bool = False):
    """Resolve chart dependencies in place with helm dependency build."""
    log(f"Building dependencies of {chart_dir}...", verbose)
    run_command(["helm", "dependency", "build", str(chart_dir)], verbose)


def run_helm_template(release_name: str, chart_dir: Path, namespace: str, values_file: Path, output_file: Path, verbose: bool = False):
    """
    Run helm template and write the rendered manifests to output_file.

    Args:
        release_name: Helm release name
        chart_dir: Path to helm chart
        namespace: Target namespace, omitted from the command when empty
        values_file: Values file passed with -f
        output_file: File receiving the rendered manifests
        verbose: Enable verbose logging

    Raises:
        RuntimeError: If helm template exits non-zero
    """
    # Syntax: helm template [NAME] [CHART] [flags]
    cmd = ["helm", "template", release_name, str(chart_dir)]

    if namespace:
        cmd.extend(["--namespace", namespace])

    cmd.extend(["--skip-crds=true", "-f", str(values_file)])

    log(f"Running: {' '.join(cmd)}", verbose)

    process = subprocess.Popen(
        cmd,
        stdout=subprocess.PIPE,
        stderr=subprocess.PIPE,
        text=True
    )

    stdout_output, stderr_output = process.communicate()

    if process.returncode != 0:
        raise RuntimeError(f"Helm template execution failed with exit code {process.returncode}:\n{stderr_output}")
    elif verbose and stderr_output:
        log(stderr_output, verbose)

    log(f"Writing Helm release to {output_file}", verbose)
    with open(output_file, "w") as release_file:
        release_file.write(stdout_output)


def render_release(release: HelmRelease, chart_dir: Path, workdir: Path, verbose: bool = False) -> Path:
    """
    Render a HelmRelease chart with its inline values.

    Git-sourced charts get their dependencies built first, since they are
    not packaged with them.

    Returns:
        Path to <workdir>/<release name>.release.yaml
    """
    release_name = release.get_release_name()
    values_file = write_values_file(release, workdir, verbose)
    output_file = workdir / f"{release_name}.release.yaml"

    if release.is_git_chart():
        build_dependencies(chart_dir, verbose)

    run_helm_template(release_name, chart_dir, release.get_namespace(), values_file, output_file, verbose)
    return output_file
