"""
Locator parsing for object storage URLs.

Splits ``scheme://container/object/path`` into its container and object
components. Both components are percent-decoded because remote names may
contain characters that are unsafe in URLs; the HTTP collaborator encodes
them again when building request paths.
"""
from __future__ import annotations

from dataclasses import dataclass
from urllib.parse import unquote, urlsplit

from .errors import InvalidResourceIdentifier, MissingResourceIdentifier

__all__ = ["DEFAULT_SCHEME", "ParsedURI", "parse_swift_uri"]

DEFAULT_SCHEME = "swift"


@dataclass(frozen=True)
class ParsedURI:
    """
    Parsed components of an object storage locator.

    Attributes:
        scheme: Scheme the locator was written with (``swift`` unless rebound)
        container: Decoded container name, empty if absent
        name: Decoded object name, may contain ``/``, empty if absent
        original: Original locator string for error messages
    """
    scheme: str
    container: str
    name: str
    original: str

    @property
    def is_complete(self) -> bool:
        """True when both container and object name are present."""
        return bool(self.container) and bool(self.name)

    def require_identity(self) -> ParsedURI:
        """
        Ensure the locator names both a container and an object.

        Raises:
            MissingResourceIdentifier: If either segment is empty
        """
        if not self.container:
            raise MissingResourceIdentifier(f"No container name was supplied in {self.original}")
        if not self.name:
            raise MissingResourceIdentifier(f"No object name was supplied in {self.original}")
        return self


def parse_swift_uri(uri: str) -> ParsedURI:
    """
    Parse an object storage locator.

    Missing segments are returned as empty strings rather than rejected, so
    existence checks can still inspect what was given. Operations that need
    a full identity call :meth:`ParsedURI.require_identity`.

    Percent escapes must decode to valid UTF-8. Lenient decoding would map
    distinct locators onto the same remote name.

    The query string and fragment are reserved and ignored.

    Args:
        uri: Locator of the form ``scheme://container/object/path``

    Returns:
        ParsedURI with decoded components

    Raises:
        InvalidResourceIdentifier: If a segment has escapes that are not UTF-8

    Examples:
        >>> parse_swift_uri("swift://photos/2024/cat%20pic.jpg").name
        '2024/cat pic.jpg'
        >>> parse_swift_uri("swift://my%2Fbucket/a").container
        'my/bucket'
    """
    parts = urlsplit(uri)
    scheme = parts.scheme or DEFAULT_SCHEME

    path = parts.path
    if path.startswith("/"):
        path = path[1:]
    container = _decode(parts.netloc, "container", uri)
    name = _decode(path, "object", uri)

    return ParsedURI(scheme=scheme, container=container, name=name, original=uri)


def _decode(segment: str, label: str, uri: str) -> str:
    try:
        return unquote(segment, errors="strict")
    except UnicodeDecodeError as e:
        raise InvalidResourceIdentifier(f"Invalid {label} name encoding in {uri}: {e.reason}") from e
