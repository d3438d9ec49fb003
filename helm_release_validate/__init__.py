"""
HelmRelease Validate - Render Flux HelmRelease charts and validate them.
Resolves the chart from a Helm repository or git, renders it with the
release's inline values and checks the manifests with kubeval.
"""

import shutil
import subprocess
import tempfile
from pathlib import Path
import click
import yaml

from .config import ValidationConfig, DEFAULT_KUBE_VERSION
from .helm_release import load_helm_release
from .utils import log, require_binary
from .chart_manager import download_chart
from .helm_executor import render_release
from .kubeval_executor import run_kubeval

__version__ = "0.1.0"

REQUIRED_BINARIES = ("helm", "kubeval")


def check_dependencies():
    """
    Check that the external tools needed for every run are installed.

    Raises:
        RuntimeError: If a binary is missing
    """
    for binary in REQUIRED_BINARIES:
        require_binary(binary)


def validate_helm_release(config: ValidationConfig) -> int:
    """
    Resolve, render and validate a HelmRelease.

    Processes:
    - Manifest: load and check kind HelmRelease before anything is fetched
    - Source: download from a Helm repository or check out from git
    - Render: helm template with the inline values
    - Validate: kubeval against the configured Kubernetes version

    Args:
        config: Parsed command line configuration

    Returns:
        int: kubeval exit code

    Raises:
        ValueError: If the manifest is not a valid HelmRelease
        RuntimeError: If helm template or git setup fails
        subprocess.CalledProcessError: If an external tool fails
    """
    verbose = config.debug
    log(f"Processing {config.helm_release}", verbose)

    release = load_helm_release(config.helm_release)
    if not release.is_helm_release():
        raise ValueError(f"\"{config.helm_release}\" is not of kind HelmRelease!")
    release.validate()
    log(f"Loaded {release!r}", verbose)

    workdir = Path(tempfile.mkdtemp(prefix="helm-release-validate-"))
    try:
        chart_dir = download_chart(release, workdir, verbose)
        release_file = render_release(release, chart_dir, workdir, verbose)

        log(
            f"Validating Helm release {release.get_release_name()}.{release.get_namespace()} "
            f"against Kubernetes {config.kube_version}",
            verbose
        )
        return run_kubeval(release_file, config.kube_version, verbose)
    finally:
        if config.cleanup:
            log(f"Removing working directory {workdir}", verbose)
            shutil.rmtree(workdir)
        else:
            log(f"Working directory kept at {workdir}", verbose)


@click.command(context_settings=dict(help_option_names=["-h", "--help"]))
@click.version_option(version=__version__, prog_name='helm-release-validate')
@click.option(
    '--helm-release', '-r',
    required=True,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help='Path to a yaml file with a HelmRelease definition'
)
@click.option(
    '--kube-version',
    default=DEFAULT_KUBE_VERSION,
    show_default=True,
    help='Version of Kubernetes to validate against, i.e. 1.17.0, 1.18.0, 1.19.0'
)
@click.option(
    '--debug',
    is_flag=True,
    help='Enable debugging output'
)
@click.option(
    '--cleanup',
    is_flag=True,
    help='Remove the temporary working directory when done (default: keep it for inspection)'
)
@click.pass_context
def cli(ctx, helm_release, kube_version, debug, cleanup):
    """Validate a HelmRelease against a Kubernetes API schema version.

    Downloads or clones the chart referenced by the HelmRelease, renders it
    with helm template using spec.values and validates the result with
    kubeval in strict mode. The kubeval exit code is the exit code.

    Set GITHUB_TOKEN to fetch charts from private git repositories.

    Examples:

      helm-release-validate --helm-release myapp.yaml --kube-version 1.17
    """
    config = ValidationConfig(
        helm_release=helm_release,
        kube_version=kube_version,
        debug=debug,
        cleanup=cleanup
    )
    log("Debug enabled", debug)

    try:
        check_dependencies()
        exit_code = validate_helm_release(config)
    except (ValueError, RuntimeError, yaml.YAMLError) as e:
        raise click.ClickException(str(e))
    except subprocess.CalledProcessError as e:
        raise click.ClickException(f"{' '.join(e.cmd)} failed with exit code {e.returncode}")

    ctx.exit(exit_code)


__all__ = ["cli", "check_dependencies", "validate_helm_release"]
