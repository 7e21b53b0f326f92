"""
Repository path construction helpers.

Centralizes the ``/v2/<repo>/...`` namespace of the distribution API so every
request URL is built the same way.
"""
from __future__ import annotations

from urllib.parse import urljoin


def api_root(base_url: str) -> str:
    """
    Build the API version check URL.

    Examples:
        >>> api_root("http://localhost:5000")
        "http://localhost:5000/v2/"
    """
    return f"{base_url.rstrip('/')}/v2/"


def repo_url(base_url: str, repo: str, path: str) -> str:
    """
    Build a fully resolved URL inside a repository namespace.

    Args:
        base_url: Registry origin (e.g. "http://localhost:5000")
        repo: Repository path (e.g. "team/backups")
        path: Path below the repository, starting with "/"

    Returns:
        "<base_url>/v2/<repo><path>"

    Examples:
        >>> repo_url("http://localhost:5000", "demo", "/tags/list")
        "http://localhost:5000/v2/demo/tags/list"
    """
    if not repo:
        raise ValueError("repo cannot be empty")
    return f"{base_url.rstrip('/')}/v2/{repo}{path}"


def manifest_url(base_url: str, repo: str, ref: str) -> str:
    """URL of a manifest addressed by tag or digest."""
    return repo_url(base_url, repo, f"/manifests/{ref}")


def blob_url(base_url: str, repo: str, digest: str) -> str:
    """URL of a blob addressed by digest."""
    return repo_url(base_url, repo, f"/blobs/{digest}")


def upload_url(base_url: str, repo: str) -> str:
    """URL that opens a blob upload session."""
    return repo_url(base_url, repo, "/blobs/uploads/")


def tags_url(base_url: str, repo: str) -> str:
    """URL of the repository tag listing."""
    return repo_url(base_url, repo, "/tags/list")


def resolve_location(base_url: str, location: str) -> str:
    """
    Resolve an upload ``Location`` header against the registry origin.

    Absolute locations are returned unchanged; relative ones are joined to
    the origin.

    Examples:
        >>> resolve_location("http://r:5000", "/v2/demo/blobs/uploads/abc?_state=x")
        "http://r:5000/v2/demo/blobs/uploads/abc?_state=x"
    """
    return urljoin(base_url.rstrip("/") + "/", location)


__all__ = [
    "api_root",
    "repo_url",
    "manifest_url",
    "blob_url",
    "upload_url",
    "tags_url",
    "resolve_location",
]
