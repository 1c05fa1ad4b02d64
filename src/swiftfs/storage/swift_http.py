"""
HTTP session collaborator for OpenStack Swift compatible object stores.

Implements the SessionFactory, ObjectStorage and Container protocols with
httpx. Authentication uses the Swift v1 protocol (X-Auth-User/X-Auth-Key
exchanged for a token and a storage URL), or a pre-issued token plus the
storage URL.
"""
from __future__ import annotations

import hashlib
import io
import logging
import time
from email.utils import parsedate_to_datetime
from typing import BinaryIO, Iterator, Optional
from urllib.parse import quote

import httpx
from tenacity import Retrying, retry_if_exception_type, stop_after_attempt, wait_exponential

from ..settings import Settings
from .base import ACL, FetchFailed, FetchResult, Found, NotFound, ObjectInfo
from .errors import AuthenticationError, ResourceNotFound, SwiftError, TransportError

__all__ = ["SwiftSessionFactory", "SwiftStorage", "SwiftContainer"]

logger = logging.getLogger(__name__)

USER_AGENT = "swiftfs/0.1.0"
DEFAULT_CONTENT_TYPE = "application/octet-stream"
CHUNK_SIZE = 1024 * 1024  # 1 MiB


class _UploadBody:
    """
    Request body that reads ``stream`` from ``start`` in chunks.

    Each iteration starts over from ``start``, so a retried request sends
    the same bytes again.
    """

    def __init__(self, stream: BinaryIO, start: int) -> None:
        self.stream = stream
        self.start = start

    def __iter__(self) -> Iterator[bytes]:
        self.stream.seek(self.start)
        yield from iter(lambda: self.stream.read(CHUNK_SIZE), b"")


def _raise_for_status(response: httpx.Response, what: str) -> None:
    """Map an HTTP error status onto the storage error taxonomy."""
    status = response.status_code
    if status < 400:
        return
    if status in (401, 403):
        raise AuthenticationError(f"Authentication failed for {what} (HTTP {status})")
    if status == 404:
        raise ResourceNotFound(f"Not found: {what}")
    raise TransportError(f"Storage error {status} for {what}: {response.text[:200]}", status_code=status)


def _parse_last_modified(headers: httpx.Headers) -> Optional[float]:
    """Modification time from Last-Modified, falling back to X-Timestamp."""
    value = headers.get("Last-Modified")
    if value:
        try:
            return parsedate_to_datetime(value).timestamp()
        except (TypeError, ValueError):
            logger.debug(f"Unparseable Last-Modified header: {value!r}")
    timestamp = headers.get("X-Timestamp")
    if timestamp:
        try:
            return float(timestamp)
        except ValueError:
            logger.debug(f"Unparseable X-Timestamp header: {timestamp!r}")
    return None


def _info_from_headers(name: str, headers: httpx.Headers, default_length: int = 0) -> ObjectInfo:
    length = headers.get("Content-Length")
    etag = headers.get("ETag")
    return ObjectInfo(
        name=name,
        content_length=int(length) if length else default_length,
        content_type=headers.get("Content-Type") or DEFAULT_CONTENT_TYPE,
        etag=etag.strip('"') if etag else None,
        last_modified=_parse_last_modified(headers),
    )


def _is_public(read_acl: str) -> bool:
    """A container is public when its read ACL grants every referrer."""
    entries = [entry.strip() for entry in read_acl.split(",")]
    return ".r:*" in entries


class SwiftSessionFactory:
    """
    Creates authenticated :class:`SwiftStorage` sessions.

    One httpx client is created per session. Tests inject an
    ``httpx.MockTransport`` through ``transport``.
    """

    def __init__(
        self,
        *,
        timeout_s: float = 30.0,
        retries: int = 0,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        self.timeout_s = timeout_s
        self.retries = retries
        self._transport = transport

    @classmethod
    def from_settings(cls, settings: Settings, transport: Optional[httpx.BaseTransport] = None) -> SwiftSessionFactory:
        return cls(timeout_s=settings.http_timeout_s, retries=settings.http_retry, transport=transport)

    def _client(self) -> httpx.Client:
        return httpx.Client(
            timeout=httpx.Timeout(self.timeout_s),
            follow_redirects=True,
            headers={"User-Agent": USER_AGENT},
            transport=self._transport,
        )

    def from_token(self, token: str, endpoint: str) -> SwiftStorage:
        """Session from a pre-issued token and storage URL. No round trip."""
        logger.debug(f"Using pre-authenticated token for {endpoint}")
        return SwiftStorage(self._client(), storage_url=endpoint, token=token, retries=self.retries)

    def from_credentials(self, account: str, key: str, endpoint: str) -> SwiftStorage:
        """
        Authenticate with Swift v1 auth and return a session.

        Raises:
            AuthenticationError: If the identity service rejects the credentials
                or omits the token/storage URL
            TransportError: For network failures
        """
        client = self._client()
        try:
            response = client.get(endpoint, headers={"X-Auth-User": account, "X-Auth-Key": key})
        except httpx.RequestError as e:
            client.close()
            raise TransportError(f"Network error authenticating against {endpoint}: {e}") from e

        try:
            _raise_for_status(response, f"auth endpoint {endpoint}")
        except ResourceNotFound as e:
            client.close()
            raise AuthenticationError(f"Auth endpoint not found: {endpoint}") from e
        except SwiftError:
            client.close()
            raise

        token = response.headers.get("X-Auth-Token") or response.headers.get("X-Storage-Token")
        storage_url = response.headers.get("X-Storage-Url")
        if not token or not storage_url:
            client.close()
            raise AuthenticationError(f"Auth endpoint {endpoint} did not return a token and storage URL")

        logger.debug(f"Authenticated account {account} against {endpoint}")
        return SwiftStorage(client, storage_url=storage_url, token=token, retries=self.retries)


class SwiftStorage:
    """
    Authenticated session on a Swift storage URL.

    Implements the ObjectStorage protocol. The session owns its httpx client;
    call :meth:`close` (or use it as a context manager) when done.
    """

    def __init__(self, client: httpx.Client, *, storage_url: str, token: str, retries: int = 0) -> None:
        self.client = client
        self.storage_url = storage_url.rstrip("/")
        self.token = token
        self.retries = retries

    def url_for(self, container: str, name: Optional[str] = None) -> str:
        url = f"{self.storage_url}/{quote(container, safe='')}"
        if name is not None:
            url = f"{url}/{quote(name, safe='/')}"
        return url

    def request(self, method: str, url: str, *, headers: Optional[dict] = None, **kwargs) -> httpx.Response:
        """
        Send an authenticated request.

        Timeouts are retried with exponential backoff; other transport errors
        are raised immediately as TransportError.
        """
        request_headers = {"X-Auth-Token": self.token}
        if headers:
            request_headers.update(headers)

        retrying = Retrying(
            stop=stop_after_attempt(3 + self.retries),
            wait=wait_exponential(multiplier=1, min=1, max=10),
            retry=retry_if_exception_type(httpx.TimeoutException),
            reraise=True,
        )
        try:
            for attempt in retrying:
                with attempt:
                    return self.client.request(method, url, headers=request_headers, **kwargs)
        except httpx.RequestError as e:
            raise TransportError(f"Network error on {method} {url}: {e}") from e
        raise TransportError(f"No response for {method} {url}")

    def container(self, name: str) -> SwiftContainer:
        """
        Look up a container with a HEAD request.

        Raises:
            ResourceNotFound: If the container does not exist
            AuthenticationError: If the token is rejected
            TransportError: For other failures
        """
        response = self.request("HEAD", self.url_for(name))
        _raise_for_status(response, f"container {name}")
        acl = ACL.PUBLIC if _is_public(response.headers.get("X-Container-Read", "")) else ACL.PRIVATE
        return SwiftContainer(self, name, acl=acl)

    def close(self) -> None:
        """Close HTTP client."""
        self.client.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()


class SwiftContainer:
    """Container handle bound to a :class:`SwiftStorage` session."""

    def __init__(self, storage: SwiftStorage, name: str, *, acl: ACL = ACL.PRIVATE) -> None:
        self._storage = storage
        self.name = name
        self._acl = acl

    def acl(self) -> ACL:
        return self._acl

    def object(self, name: str) -> FetchResult:
        """
        Download an object.

        The body is exposed as a seekable, read-only stream, so sessions that
        need to write copy it into their own buffer.
        """
        what = f"object {self.name}/{name}"
        try:
            response = self._storage.request("GET", self._storage.url_for(self.name, name))
            _raise_for_status(response, what)
        except ResourceNotFound:
            return NotFound(name)
        except SwiftError as e:
            return FetchFailed(e)

        content = response.content
        info = _info_from_headers(name, response.headers, default_length=len(content))
        logger.debug(f"Fetched {what} ({len(content)} bytes)")
        return Found(info=info, stream=io.BufferedReader(io.BytesIO(content)))

    def remote_object(self, name: str) -> ObjectInfo:
        """Object metadata from a HEAD request; no body is transferred."""
        response = self._storage.request("HEAD", self._storage.url_for(self.name, name))
        _raise_for_status(response, f"object {self.name}/{name}")
        return _info_from_headers(name, response.headers)

    def save(self, info: ObjectInfo, stream: BinaryIO) -> ObjectInfo:
        """
        Upload the rest of ``stream`` as the full object content.

        The stream is read twice in CHUNK_SIZE pieces: once for the ETag and
        length, once while sending. It is never held in memory as a whole.
        """
        start = stream.tell()
        hash_obj = hashlib.md5()
        size = 0
        for chunk in iter(lambda: stream.read(CHUNK_SIZE), b""):
            hash_obj.update(chunk)
            size += len(chunk)
        etag = hash_obj.hexdigest()
        headers = {"Content-Type": info.content_type, "ETag": etag, "Content-Length": str(size)}

        response = self._storage.request(
            "PUT",
            self._storage.url_for(self.name, info.name),
            headers=headers,
            content=_UploadBody(stream, start),
        )
        _raise_for_status(response, f"object {self.name}/{info.name}")
        logger.info(f"Saved {self.name}/{info.name} ({size} bytes)")

        return ObjectInfo(
            name=info.name,
            content_length=size,
            content_type=info.content_type,
            etag=etag,
            last_modified=_parse_last_modified(response.headers) or time.time(),
        )

    def delete(self, name: str) -> bool:
        response = self._storage.request("DELETE", self._storage.url_for(self.name, name))
        _raise_for_status(response, f"object {self.name}/{name}")
        logger.info(f"Deleted {self.name}/{name}")
        return True
