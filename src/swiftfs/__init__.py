"""
swiftfs - file semantics over Swift object storage.

Open remote objects with ``swiftfs.open()`` and use them like local files,
or drive the non-throwing stream-wrapper contract through ``StreamWrapper``.
Writes are buffered locally and sent to the store on flush and close.
"""
from .fileobj import SwiftFile, open
from .metadata import StatResult
from .modes import ModeFlags, parse_mode
from .session import StreamOption, StreamSession, delete_object, stat_url
from .settings import ConfigResolver, Settings, create_settings_from_env
from .storage.base import ACL, ObjectInfo
from .storage.errors import (
    AuthenticationError,
    InvalidResourceIdentifier,
    MissingResourceIdentifier,
    ResourceConflict,
    ResourceNotFound,
    SwiftError,
    TransportError,
)
from .storage.uri import ParsedURI, parse_swift_uri
from .wrapper import StreamWarning, StreamWrapper

__version__ = "0.1.0"

__all__ = [
    "open",
    "SwiftFile",
    "StatResult",
    "ModeFlags",
    "parse_mode",
    "StreamOption",
    "StreamSession",
    "delete_object",
    "stat_url",
    "ConfigResolver",
    "Settings",
    "create_settings_from_env",
    "ACL",
    "ObjectInfo",
    "AuthenticationError",
    "MissingResourceIdentifier",
    "InvalidResourceIdentifier",
    "ResourceConflict",
    "ResourceNotFound",
    "SwiftError",
    "TransportError",
    "ParsedURI",
    "parse_swift_uri",
    "StreamWarning",
    "StreamWrapper",
]
