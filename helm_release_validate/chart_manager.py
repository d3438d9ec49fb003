"""Chart source resolution: Helm repository download or git checkout."""

from pathlib import Path

from .helm_release import HelmRelease
from .utils import log, run_command
from .repo_manager import add_repo
from .git_helper import fetch_git_revision


def _download_repo_chart(repo_url: str, chart_name: str, version: str, workdir: Path, verbose: bool = False) -> Path:
    """Download and unpack a chart from a Helm repository using helm pull."""
    repo_alias = add_repo(repo_url, verbose)

    cmd = [
        "helm", "pull",
        f"{repo_alias}/{chart_name}",
        "--version", version,
        "--untar",
        "--destination", str(workdir)
    ]
    run_command(cmd, verbose)

    return workdir / chart_name


def _clone_git_chart(repo_url: str, revision: str, chart_path: str, workdir: Path, verbose: bool = False) -> Path:
    """
    Check out a git repository into workdir and locate the chart inside it.

    The chart path is relative to the repository root, a leading slash included.

    Raises:
        ValueError: If the chart path points outside the checkout
    """
    chart_dir = workdir / chart_path.lstrip("/")
    if not chart_dir.resolve().is_relative_to(workdir.resolve()):
        raise ValueError(f"Chart path {chart_path} points outside the git checkout")

    fetch_git_revision(repo_url, revision, workdir, verbose)
    return chart_dir


def download_chart(release: HelmRelease, workdir: Path, verbose: bool = False) -> Path:
    """
    Resolve the chart source of a HelmRelease and return the chart directory.

    Args:
        release: HelmRelease instance (must be validated)
        workdir: Working directory for the chart
        verbose: Enable verbose logging

    Returns:
        Path to the downloaded or checked out chart directory
    """
    if release.is_git_chart():
        log(f"Cloning to {workdir}", verbose)
        chart_dir = _clone_git_chart(
            release.get_chart_git(),
            release.get_chart_ref(),
            release.get_chart_path(),
            workdir,
            verbose
        )
    else:
        log(f"Downloading to {workdir}", verbose)
        chart_dir = _download_repo_chart(
            release.get_chart_repository(),
            release.get_chart_name(),
            release.get_chart_version(),
            workdir,
            verbose
        )

    log(f"Chart directory: {chart_dir}", verbose)
    return chart_dir
