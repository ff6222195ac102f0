"""httprecorder: record HTTP interactions once, replay them offline in tests."""

from httprecorder.archive import pack, unpack
from httprecorder.codec import CorruptEntryError
from httprecorder.config import Mode, RecorderConfig
from httprecorder.context import record, replay
from httprecorder.fingerprint import cache_key, fingerprint
from httprecorder.recorder import Recorder, UnrecordedRequestWarning
from httprecorder.redact import canonicalize_params, strip_headers
from httprecorder.store import CacheEntryNotFound, CacheStore
from httprecorder.transport import RecorderTransport, wrap

__version__ = "0.1.0"
__all__ = [
    "CacheEntryNotFound",
    "CacheStore",
    "CorruptEntryError",
    "Mode",
    "Recorder",
    "RecorderConfig",
    "RecorderTransport",
    "UnrecordedRequestWarning",
    "cache_key",
    "canonicalize_params",
    "fingerprint",
    "pack",
    "record",
    "replay",
    "strip_headers",
    "unpack",
    "wrap",
]
