"""Git repository operations."""

import os
import subprocess
from pathlib import Path

from .utils import log, run_command, require_binary, get_authenticated_git_url

GIT_TOKEN_ENV = "GITHUB_TOKEN"


def fetch_git_revision(repo_url: str, revision: str, repo_path: Path, verbose: bool = False):
    """
    Fetch a repository into repo_path and check out a revision.

    The directory is initialised as a fresh working tree with the repository
    as its 'origin' remote. When GITHUB_TOKEN is set, the remote URL carries
    the token so private repositories can be fetched over HTTPS.

    Raises:
        RuntimeError: If git is not installed
        subprocess.CalledProcessError: If any git command fails
    """
    require_binary("git")

    remote_url = get_authenticated_git_url(repo_url, os.environ.get(GIT_TOKEN_ENV))
    if remote_url != repo_url:
        log(f"Using {GIT_TOKEN_ENV} to authenticate against {repo_url}", verbose)

    log(f"Fetching {repo_url} at {revision} into {repo_path}...", verbose)
    git = ["git", "-C", str(repo_path)]
    run_command(git + ["init", "-q"], verbose)
    # remote URL may embed the token, never echo it
    try:
        run_command(git + ["remote", "add", "origin", remote_url], verbose=False)
    except subprocess.CalledProcessError as e:
        raise RuntimeError(f"Failed to add remote origin for {repo_url} (exit code {e.returncode})") from None
    run_command(git + ["fetch", "-q", "origin"], verbose)
    run_command(git + ["checkout", "-q", revision], verbose)
