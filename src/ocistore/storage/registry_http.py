"""
Registry HTTP Client for OCI Distribution API.

Implements the request primitive every registry call goes through, the
three-phase blob upload (open session, stream while hashing, finalize with
digest), and the manifest, blob and tag endpoints used by the store.
"""
from __future__ import annotations

import hashlib
import logging
from importlib.metadata import PackageNotFoundError, version
from dataclasses import dataclass, field
from typing import (
    Any, BinaryIO, Iterable, Iterator, List, Mapping, Optional, Sequence, Tuple, Union,
)
from urllib.parse import quote

import httpx
from pydantic import ValidationError

from .models import Manifest, TagList
from .oci_errors import OciManifestError, OciProtocolError, error_for_status
from .oci_media_types import (
    DIGEST_ALGORITHM,
    MANIFEST_ACCEPT_HEADER,
    OCI_GENERIC_LAYER,
    OCI_IMAGE_MANIFEST,
)
from .repo_path import (
    api_root,
    blob_url,
    manifest_url,
    resolve_location,
    tags_url,
    upload_url,
)

logger = logging.getLogger(__name__)

# Upload payloads are read and hashed in chunks of this size
CHUNK_SIZE = 1024 * 1024  # 1 MiB

# Error responses are read up to this many bytes; the rest is discarded
MAX_ERROR_BODY = 64 * 1024

try:
    __version__ = version("ocistore")
except PackageNotFoundError:
    # Source checkout without installed metadata
    __version__ = "0+unknown"

USER_AGENT = f"ocistore/{__version__}"

HeaderPairs = Sequence[Tuple[str, str]]
ByteStream = Union[bytes, BinaryIO, Iterable[bytes]]


def merge_headers(protocol: Mapping[str, str],
                  extra: Optional[HeaderPairs] = None) -> List[Tuple[str, str]]:
    """
    Merge protocol-mandated headers with caller-supplied header pairs.

    Protocol headers come first and keep their order; caller pairs follow in
    the order given. A caller header that names a protocol header is refused.

    Raises:
        ValueError: If a caller header collides with a protocol header
    """
    merged = list(protocol.items())
    reserved = {name.lower() for name in protocol}
    for name, value in extra or ():
        if name.lower() in reserved:
            raise ValueError(f"Header {name!r} is set by the protocol and cannot be overridden")
        merged.append((name, value))
    return merged


def parse_uploaded_size(range_header: Optional[str], default: int) -> int:
    """
    Recover the uploaded byte count from an upload ``Range`` header.

    Registries report progress as ``<start>-<end>`` (inclusive), so the size
    is ``end + 1``. Absent or malformed values fall back to ``default``.
    """
    if not range_header:
        return default
    parts = range_header.split("-")
    if len(parts) != 2:
        return default
    try:
        last = int(parts[1])
    except ValueError:
        return default
    if last < 0:
        return default
    return last + 1


def _iter_source(data: ByteStream) -> Iterator[bytes]:
    """Yield chunks from bytes, a file-like object, or an iterable of bytes."""
    if isinstance(data, (bytes, bytearray, memoryview)):
        view = memoryview(data)
        for start in range(0, len(view), CHUNK_SIZE):
            yield bytes(view[start:start + CHUNK_SIZE])
    elif hasattr(data, "read"):
        while True:
            chunk = data.read(CHUNK_SIZE)
            if not chunk:
                break
            yield chunk
    else:
        for chunk in data:
            if chunk:
                yield bytes(chunk)


@dataclass
class UploadSession:
    """
    State of one in-progress blob upload.

    The location may be rotated by the registry between the streaming and the
    finalize phase. Digest and size are derived only from bytes that were
    actually streamed.
    """
    location: str
    _hasher: Any = field(default_factory=lambda: hashlib.new(DIGEST_ALGORITHM), repr=False)
    size: int = 0

    def feed(self, data: ByteStream) -> Iterator[bytes]:
        """Pass payload chunks through, hashing and counting each one."""
        for chunk in _iter_source(data):
            self._hasher.update(chunk)
            self.size += len(chunk)
            yield chunk

    @property
    def digest(self) -> str:
        return f"{DIGEST_ALGORITHM}:{self._hasher.hexdigest()}"

    def finalize_url(self) -> str:
        separator = "&" if "?" in self.location else "?"
        return f"{self.location}{separator}digest={quote(self.digest, safe='')}"


class BlobReader:
    """
    Readable view over a live blob response.

    The body is streamed from the registry as it is read. Callers must close
    the reader (or use it as a context manager) to release the connection.
    """

    def __init__(self, response: httpx.Response):
        self._response = response
        self._chunks = response.iter_bytes()
        self._buffer = b""

    @property
    def status_code(self) -> int:
        return self._response.status_code

    @property
    def headers(self) -> httpx.Headers:
        return self._response.headers

    def read(self, size: int = -1) -> bytes:
        if size is None or size < 0:
            data = self._buffer + b"".join(self._chunks)
            self._buffer = b""
            return data
        while len(self._buffer) < size:
            chunk = next(self._chunks, None)
            if chunk is None:
                break
            self._buffer += chunk
        data, self._buffer = self._buffer[:size], self._buffer[size:]
        return data

    def __iter__(self) -> Iterator[bytes]:
        if self._buffer:
            data, self._buffer = self._buffer, b""
            yield data
        yield from self._chunks

    def close(self) -> None:
        self._response.close()

    @property
    def closed(self) -> bool:
        return self._response.is_closed

    def __enter__(self) -> BlobReader:
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()


class RegistryHTTP:
    """
    HTTP client for OCI Distribution API operations on one repository.

    Every call is a sequential chain of blocking requests. No retries are
    attempted and no timeout is applied unless one is configured.
    """

    def __init__(self, base_url: str, repo: str, *, verify: bool = False,
                 timeout: Optional[float] = None, auth: Optional[httpx.Auth] = None,
                 transport: Optional[httpx.BaseTransport] = None,
                 user_agent: str = USER_AGENT):
        """
        Initialize registry HTTP client.

        Args:
            base_url: Registry origin (e.g. "http://localhost:5000")
            repo: Repository path (e.g. "team/backups")
            verify: Verify TLS certificates
            timeout: Request timeout in seconds (None disables timeouts)
            auth: Optional httpx auth flow applied to every request
            transport: Optional transport override (used by tests)
            user_agent: User-Agent header value
        """
        self.base_url = base_url.rstrip("/")
        self.repo = repo
        self.client = httpx.Client(
            timeout=httpx.Timeout(timeout),
            verify=verify,
            auth=auth,
            transport=transport,
            headers={"User-Agent": user_agent},
        )

    def send(self, method: str, url: str, *, content: Any = None,
             headers: Optional[HeaderPairs] = None,
             follow_redirects: bool = False) -> httpx.Response:
        """
        Issue one request and classify the response.

        On a 2xx status the live response is returned with its body unread;
        the caller owns it and must close it. Any other status reads at most
        64 KiB of the body, closes the response, and raises. Redirects are only
        followed when asked for.

        Raises:
            OciHTTPError: Subclass matching the non-2xx status
            httpx.TransportError: On connection, DNS or timeout failures
        """
        request = self.client.build_request(method, url, content=content, headers=headers)
        response = self.client.send(request, stream=True, follow_redirects=follow_redirects)
        if response.is_success:
            return response

        try:
            body = self._read_error_body(response)
        finally:
            response.close()
        raise error_for_status(method, url, response.status_code, response.reason_phrase, body)

    @staticmethod
    def _read_error_body(response: httpx.Response) -> str:
        data = b""
        for chunk in response.iter_bytes():
            data += chunk
            if len(data) >= MAX_ERROR_BODY:
                break
        return data[:MAX_ERROR_BODY].decode("utf-8", errors="replace").strip()

    def _call(self, method: str, url: str, **kwargs) -> httpx.Response:
        """Send a request, read its body fully, and close it."""
        response = self.send(method, url, **kwargs)
        try:
            response.read()
        finally:
            response.close()
        return response

    def ping(self) -> None:
        """Check that the registry answers the API version endpoint."""
        self._call("GET", api_root(self.base_url))

    def upload_blob(self, data: ByteStream) -> Tuple[str, int]:
        """
        Push a byte stream as a blob and return its digest and size.

        1. POST to open an upload session; the registry names it in Location.
        2. PATCH the payload to the session while hashing it locally.
        3. PUT to the (possibly rotated) session location with the digest.

        Args:
            data: Payload as bytes, a file-like object, or an iterable of bytes

        Returns:
            (digest, size) where digest is "sha256:<hex>"

        Raises:
            OciProtocolError: If the registry does not return an upload Location
            OciHTTPError: If any step returns a non-2xx status
        """
        started = self._call("POST", upload_url(self.base_url, self.repo))
        location = started.headers.get("Location")
        if not location:
            raise OciProtocolError("registry missing Location on upload start")

        session = UploadSession(location=resolve_location(self.base_url, location))
        logger.debug(f"Opened upload session {session.location}")

        patched = self._call(
            "PATCH",
            session.location,
            content=session.feed(data),
            headers=merge_headers({"Content-Type": OCI_GENERIC_LAYER}),
        )

        rotated = patched.headers.get("Location")
        if rotated:
            session.location = resolve_location(self.base_url, rotated)

        # Size is the streamed count; the Range hint is only compared against it
        reported = parse_uploaded_size(patched.headers.get("Range"), default=session.size)
        if reported != session.size:
            logger.debug(f"Registry reports {reported} bytes uploaded, streamed {session.size}")

        self._call("PUT", session.finalize_url())
        logger.debug(f"Uploaded blob {session.digest} ({session.size} bytes)")
        return session.digest, session.size

    def put_manifest(self, ref: str, manifest: Manifest) -> None:
        """PUT an image manifest under a tag or digest reference."""
        self._call(
            "PUT",
            manifest_url(self.base_url, self.repo, ref),
            content=manifest.to_json_bytes(),
            headers=merge_headers({"Content-Type": OCI_IMAGE_MANIFEST}),
        )

    def get_manifest(self, ref: str) -> Manifest:
        """
        GET and decode a manifest by tag or digest.

        Raises:
            OciManifestError: If the body is not a decodable manifest
            OciNotFound: If the reference does not exist
        """
        response = self._call(
            "GET",
            manifest_url(self.base_url, self.repo, ref),
            headers=merge_headers({"Accept": MANIFEST_ACCEPT_HEADER}),
        )
        try:
            return Manifest.model_validate_json(response.content)
        except ValidationError as e:
            raise OciManifestError(f"decode manifest {ref}: {e}") from e

    def head_manifest(self, ref: str) -> str:
        """
        Resolve a manifest reference to its canonical digest.

        Returns:
            Docker-Content-Digest header value

        Raises:
            OciProtocolError: If the registry does not return the digest header
        """
        response = self._call(
            "HEAD",
            manifest_url(self.base_url, self.repo, ref),
            headers=merge_headers({"Accept": MANIFEST_ACCEPT_HEADER}),
        )
        digest = response.headers.get("Docker-Content-Digest")
        if not digest:
            raise OciProtocolError(
                f"missing Docker-Content-Digest header on HEAD manifest {self.repo}:{ref}"
            )
        return digest

    def delete_manifest(self, digest: str) -> None:
        """DELETE a manifest by digest."""
        self._call("DELETE", manifest_url(self.base_url, self.repo, digest))

    def get_blob(self, digest: str, headers: Optional[HeaderPairs] = None) -> BlobReader:
        """
        GET a blob by digest and return its live body.

        Redirects are followed; registries commonly hand blob reads off to
        object storage.

        Args:
            digest: Content digest (sha256:...)
            headers: Extra header pairs forwarded as-is (e.g. Range)
        """
        response = self.send("GET", blob_url(self.base_url, self.repo, digest),
                             headers=merge_headers({}, headers), follow_redirects=True)
        return BlobReader(response)

    def list_tags(self) -> TagList:
        """
        GET the repository tag listing.

        Only the first page is read; continuation links are not followed.
        """
        response = self._call("GET", tags_url(self.base_url, self.repo))
        if response.headers.get("Link"):
            logger.warning(
                f"Tag listing for {self.repo} is paginated; only the first page is read"
            )
        try:
            return TagList.model_validate_json(response.content)
        except ValidationError as e:
            raise OciProtocolError(f"decode tag list for {self.repo}: {e}") from e

    def close(self):
        """Close HTTP client."""
        self.client.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()


__all__ = [
    "RegistryHTTP",
    "UploadSession",
    "BlobReader",
    "merge_headers",
    "parse_uploaded_size",
    "CHUNK_SIZE",
    "MAX_ERROR_BODY",
]
