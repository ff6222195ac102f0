"""On-disk store of recorded responses, one file per fingerprint."""

import logging
import re
from pathlib import Path

logger = logging.getLogger(__name__)

_FINGERPRINT_RE = re.compile(r"^[0-9a-f]{32}$")


class CacheEntryNotFound(LookupError):
    """No recording exists for the requested fingerprint."""


class CacheStore:
    """Maps fingerprints to raw HTTP responses under a cache directory.

    Entries live at <cache_dir>/<fingerprint>. Writes replace the whole
    file, so the last writer for a fingerprint wins. There is no locking:
    concurrent writers to the same fingerprint leave undefined content,
    which is fine for sequential test runs.

    Usage:
        store = CacheStore("tests/http_cache")
        store.write(fp, raw_response)
        if store.exists(fp):
            raw = store.read(fp)
    """

    def __init__(self, cache_dir: str | Path):
        self.cache_dir = Path(cache_dir)

    def path_for(self, fingerprint: str) -> Path:
        return self.cache_dir / fingerprint

    def exists(self, fingerprint: str) -> bool:
        return self.path_for(fingerprint).is_file()

    def write(self, fingerprint: str, raw: bytes):
        """Persist raw response bytes, replacing any earlier entry.

        Creates the cache directory on first use. OSError propagates when
        the directory cannot be created or written.
        """
        self.cache_dir.mkdir(parents=True, exist_ok=True)
        path = self.path_for(fingerprint)
        path.write_bytes(raw)
        logger.debug("wrote %d bytes to %s", len(raw), path)

    def read(self, fingerprint: str) -> bytes:
        """Return the bytes previously written for fingerprint.

        Raises:
            CacheEntryNotFound: nothing was recorded for fingerprint.
        """
        try:
            return self.path_for(fingerprint).read_bytes()
        except FileNotFoundError:
            raise CacheEntryNotFound(
                f"no recording for {fingerprint} in {self.cache_dir}"
            ) from None

    def __iter__(self):
        """Yield stored fingerprints in sorted order."""
        if not self.cache_dir.is_dir():
            return
        for path in sorted(self.cache_dir.iterdir()):
            if path.is_file() and _FINGERPRINT_RE.match(path.name):
                yield path.name

    def __len__(self) -> int:
        return sum(1 for _ in self)

    def __contains__(self, fingerprint: str) -> bool:
        return self.exists(fingerprint)
