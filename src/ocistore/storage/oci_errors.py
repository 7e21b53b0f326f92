"""
OCI store error classes.

Provides a clear taxonomy of errors that can occur while talking to a registry.
HTTP failures are mapped from status codes so callers can branch on class
rather than parsing messages. Transport failures (DNS, connect, timeout) are
not wrapped: they surface as the ``httpx`` exceptions that caused them.
"""
from __future__ import annotations


class OciError(Exception):
    """
    Base class for all OCI store errors.
    """
    pass


class OciConfigError(OciError, ValueError):
    """
    Invalid store configuration.

    Raised when:
    - The location is missing or malformed
    - The location names no repository
    - A settings value fails validation
    """
    pass


class UnsupportedOperation(OciError):
    """
    Operation not supported by this store.

    Raised before any network activity for resource categories that have no
    tag prefix.
    """
    pass


class OciHTTPError(OciError):
    """
    Registry answered with a non-2xx status.

    Carries the request method and URL, the status line, and up to 64 KiB of
    the response body for diagnostics.
    """

    def __init__(self, method: str, url: str, status_code: int, reason: str = "",
                 body: str = ""):
        self.method = method
        self.url = url
        self.status_code = status_code
        self.reason = reason
        self.body = body
        status = f"{status_code} {reason}".strip()
        message = f"oci {method} {url}: {status}"
        if body:
            message = f"{message}: {body}"
        super().__init__(message)


class OciAuthError(OciHTTPError):
    """
    Authentication or authorization error.

    Raised when:
    - HTTP 401 Unauthorized
    - HTTP 403 Forbidden
    """
    pass


class OciNotFound(OciHTTPError):
    """
    Resource not found in registry.

    Raised when:
    - HTTP 404 Not Found (manifest, blob, tag, or repository doesn't exist)
    """
    pass


class OciTooLarge(OciHTTPError):
    """HTTP 413 Payload Too Large."""
    pass


class OciRangeNotSatisfiable(OciHTTPError):
    """HTTP 416 Range Not Satisfiable."""
    pass


class OciRateLimited(OciHTTPError):
    """HTTP 429 Too Many Requests."""
    pass


class OciProtocolError(OciError):
    """
    Registry response violated the distribution protocol contract.

    Raised when:
    - Upload initiation returns no Location header
    - Manifest HEAD returns no Docker-Content-Digest header
    - A response body cannot be decoded
    """
    pass


class OciManifestError(OciProtocolError):
    """
    Manifest is malformed or incompatible.

    Raised for undecodable manifests, manifests without layers, and layers
    without a digest. This is never a "not found" condition.
    """
    pass


_STATUS_ERRORS = {
    401: OciAuthError,
    403: OciAuthError,
    404: OciNotFound,
    413: OciTooLarge,
    416: OciRangeNotSatisfiable,
    429: OciRateLimited,
}


def error_for_status(method: str, url: str, status_code: int, reason: str = "",
                     body: str = "") -> OciHTTPError:
    """
    Build the error matching an HTTP status code.

    Args:
        method: Request method
        url: Fully resolved request URL
        status_code: Response status code
        reason: Response reason phrase
        body: Truncated response body text

    Returns:
        Instance of the most specific OciHTTPError subclass
    """
    cls = _STATUS_ERRORS.get(status_code, OciHTTPError)
    return cls(method, url, status_code, reason, body)


__all__ = [
    "OciError",
    "OciConfigError",
    "UnsupportedOperation",
    "OciHTTPError",
    "OciAuthError",
    "OciNotFound",
    "OciTooLarge",
    "OciRangeNotSatisfiable",
    "OciRateLimited",
    "OciProtocolError",
    "OciManifestError",
    "error_for_status",
]
