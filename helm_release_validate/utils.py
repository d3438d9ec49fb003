"""Common utility functions for HelmRelease validation."""

import hashlib
import shutil
import subprocess
import sys


def log(message: str, verbose: bool = False):
    """Print message only if verbose mode is enabled."""
    if verbose:
        print(message, file=sys.stderr)


def require_binary(name: str):
    """
    Ensure an external tool is available on PATH.

    Raises:
        RuntimeError: If the binary cannot be found
    """
    if shutil.which(name) is None:
        raise RuntimeError(f"{name} not found")


def run_command(cmd: list[str], verbose: bool = False):
    """
    Run an external command, failing on non-zero exit.

    Stdout is only shown in verbose mode; stderr is always inherited so the
    tool's own diagnostics reach the terminal.

    Raises:
        subprocess.CalledProcessError: If the command fails
    """
    log(f"Running: {' '.join(cmd)}", verbose)

    if verbose:
        subprocess.run(cmd, check=True)
    else:
        subprocess.run(cmd, check=True, stdout=subprocess.DEVNULL)


def get_repo_alias(repo_url: str) -> str:
    """
    Derive a stable Helm repository alias from its URL.

    The alias is the md5 digest of the URL followed by a newline, the same
    value `echo $url | md5sum` yields, so existing repository entries are reused.
    """
    return hashlib.md5(f"{repo_url}\n".encode("utf-8")).hexdigest()


def get_git_base_url(repo_url: str) -> str:
    """
    Strip the scheme and user from a git URL.
    For git@github.com:org/charts.git, return 'github.com/org/charts.git'
    For https://github.com/org/charts, return 'github.com/org/charts'
    """
    base_url = repo_url
    for prefix in ("ssh://", "http://", "https://", "git@"):
        base_url = base_url.replace(prefix, "", 1)

    # scp-like syntax: host:path
    return base_url.replace(":", "/", 1)


def get_authenticated_git_url(repo_url: str, token: str = None) -> str:
    """Embed a token credential into a git URL, or return it unchanged without one."""
    if not token:
        return repo_url
    return f"https://{token}:x-oauth-basic@{get_git_base_url(repo_url)}"
