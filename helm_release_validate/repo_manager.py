"""Helm repository management functions."""

from .utils import log, run_command, get_repo_alias


def add_repo(repo_url: str, verbose: bool = False) -> str:
    """
    Register a Helm repository under its URL-derived alias and refresh indexes.

    Returns:
        The repository alias
    """
    repo_alias = get_repo_alias(repo_url)

    log(f"Adding Helm repository {repo_url} as {repo_alias}...", verbose)
    run_command(["helm", "repo", "add", repo_alias, repo_url], verbose)

    log("Updating Helm repositories...", verbose)
    run_command(["helm", "repo", "update"], verbose)

    return repo_alias
