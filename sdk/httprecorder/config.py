"""Recorder configuration."""

import os
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

DEFAULT_CACHE_DIR = "tests/http_cache"

# Response headers that change on every call and are never stored
DEFAULT_FILTER_HEADER: tuple[str, ...] = (
    "Client-Peer",
    "Expires",
    "Client-Date",
    "Cache-Control",
)

_TRUTHY = {"1", "true", "yes", "on", "record"}


class Mode(str, Enum):
    RECORD = "record"
    PLAYBACK = "playback"


@dataclass(frozen=True)
class RecorderConfig:
    """Configuration for a Recorder, fixed for its lifetime.

    Attributes:
        mode: Mode.RECORD hits the network and writes the cache,
            Mode.PLAYBACK serves from the cache only. Strings are accepted.
        cache_dir: Directory holding one file per recorded request.
        filter_params: Query/body parameter names whose values are blanked
            before fingerprinting (e.g. api_key, password).
        filter_header: Response header names stripped before writing.
            Content-Length cannot be listed: stored entries are always
            re-framed with the length of the stored body.
    """

    mode: Mode = Mode.PLAYBACK
    cache_dir: Path = Path(DEFAULT_CACHE_DIR)
    filter_params: frozenset[str] = field(default_factory=frozenset)
    filter_header: tuple[str, ...] = DEFAULT_FILTER_HEADER

    def __post_init__(self):
        # Normalize loose inputs; frozen, so go through object.__setattr__
        if isinstance(self.mode, bool):
            mode = Mode.RECORD if self.mode else Mode.PLAYBACK
        else:
            try:
                mode = Mode(self.mode)
            except ValueError:
                raise ValueError(
                    f"unknown mode: {self.mode!r}. Supported: record, playback"
                ) from None
        object.__setattr__(self, "mode", mode)
        object.__setattr__(self, "cache_dir", Path(self.cache_dir))
        object.__setattr__(self, "filter_params", frozenset(self.filter_params))
        object.__setattr__(self, "filter_header", tuple(self.filter_header))
        if any(name.lower() == "content-length" for name in self.filter_header):
            raise ValueError(
                "Content-Length cannot be filtered; it is rewritten for every stored entry"
            )

    @property
    def recording(self) -> bool:
        return self.mode is Mode.RECORD

    @classmethod
    def from_env(cls, prefix: str = "HTTPRECORDER_", environ=None) -> "RecorderConfig":
        """Build a config from environment variables.

        Reads <prefix>RECORD (truthy switches to record mode), <prefix>CACHE_DIR,
        and the comma-separated <prefix>FILTER_PARAMS / <prefix>FILTER_HEADER.
        Unset variables keep their defaults.

        Usage:
            HTTPRECORDER_RECORD=1 pytest   # refresh recordings
            pytest                         # replay offline
        """
        env = os.environ if environ is None else environ
        kwargs = {
            "mode": env.get(prefix + "RECORD", "").strip().lower() in _TRUTHY,
        }
        if env.get(prefix + "CACHE_DIR"):
            kwargs["cache_dir"] = env[prefix + "CACHE_DIR"]
        if prefix + "FILTER_PARAMS" in env:
            kwargs["filter_params"] = _split_list(env[prefix + "FILTER_PARAMS"])
        if prefix + "FILTER_HEADER" in env:
            kwargs["filter_header"] = _split_list(env[prefix + "FILTER_HEADER"])
        return cls(**kwargs)


def _split_list(value: str) -> list[str]:
    return [item.strip() for item in value.split(",") if item.strip()]
