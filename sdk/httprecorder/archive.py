"""Bundle a cache directory into a single archive file and restore it.

Handy for checking recordings in as one artifact instead of hundreds of
digest-named files.

Layout:
    header   magic "HTTPCASS", version u32, created_at u64 (ms)
    entries  u32 length + zstd(msgpack([fingerprint, response_bytes])), repeated
    index    zstd(msgpack({fingerprint: entry_offset}))
    trailer  index_offset u64, index_length u32
"""

import logging
import struct
import time
from pathlib import Path
from typing import Iterator

import msgpack
import zstandard as zstd

from httprecorder.store import CacheStore

logger = logging.getLogger(__name__)

MAGIC = b"HTTPCASS"
FORMAT_VERSION = 1

_HEADER = struct.Struct("<8sIQ")
_LENGTH = struct.Struct("<I")
_TRAILER = struct.Struct("<QI")


class ArchiveWriter:
    """Stream recorded responses into an open binary file.

    The index is only written by close(), so use it as a context manager:

        with open("recordings.httpcass", "wb") as f, ArchiveWriter(f) as archive:
            archive.add(fp, raw_response)
    """

    def __init__(self, f, created_at: int | None = None):
        if created_at is None:
            created_at = int(time.time() * 1000)
        self._f = f
        self._compressor = zstd.ZstdCompressor(level=3)
        self._offsets: dict[str, int] = {}
        f.write(_HEADER.pack(MAGIC, FORMAT_VERSION, created_at))

    def add(self, fingerprint: str, response_bytes: bytes):
        # A repeated fingerprint shadows the earlier entry, like a store overwrite
        self._offsets[fingerprint] = self._f.tell()
        blob = self._compressor.compress(msgpack.packb([fingerprint, response_bytes]))
        self._f.write(_LENGTH.pack(len(blob)) + blob)

    def __len__(self) -> int:
        return len(self._offsets)

    def close(self):
        index_offset = self._f.tell()
        index = self._compressor.compress(msgpack.packb(self._offsets))
        self._f.write(index)
        self._f.write(_TRAILER.pack(index_offset, len(index)))
        self._f.flush()

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()


class ArchiveReader:
    """Random access to an archive, mapping fingerprints to response bytes."""

    def __init__(self, f):
        self._f = f
        self._decompressor = zstd.ZstdDecompressor()

        header = f.read(_HEADER.size)
        magic, self.version, self.created_at = (
            _HEADER.unpack(header) if len(header) == _HEADER.size else (header, None, None)
        )
        if magic != MAGIC:
            raise ValueError(f"not an httprecorder archive (got {magic[:8]!r})")
        if self.version != FORMAT_VERSION:
            raise ValueError(f"unsupported archive version: {self.version}")

        f.seek(-_TRAILER.size, 2)
        index_offset, index_length = _TRAILER.unpack(f.read(_TRAILER.size))
        f.seek(index_offset)
        index = self._decompressor.decompress(f.read(index_length))
        self._offsets: dict[str, int] = msgpack.unpackb(index, raw=False)

    @property
    def fingerprints(self) -> list[str]:
        return list(self._offsets)

    def __len__(self) -> int:
        return len(self._offsets)

    def __contains__(self, fingerprint: str) -> bool:
        return fingerprint in self._offsets

    def get(self, fingerprint: str) -> bytes | None:
        offset = self._offsets.get(fingerprint)
        if offset is None:
            return None
        self._f.seek(offset)
        (length,) = _LENGTH.unpack(self._f.read(_LENGTH.size))
        _, response_bytes = msgpack.unpackb(
            self._decompressor.decompress(self._f.read(length)), raw=False
        )
        return response_bytes

    def items(self) -> Iterator[tuple[str, bytes]]:
        for fingerprint in self._offsets:
            yield fingerprint, self.get(fingerprint)


def pack(cache_dir: str | Path, archive_path: str | Path) -> int:
    """Write every entry of cache_dir into archive_path.

    Returns:
        Number of entries packed.
    """
    store = CacheStore(cache_dir)
    with open(archive_path, "wb") as f, ArchiveWriter(f) as archive:
        for fp in store:
            archive.add(fp, store.read(fp))
        count = len(archive)
    logger.debug("packed %d entries from %s into %s", count, cache_dir, archive_path)
    return count


def unpack(archive_path: str | Path, cache_dir: str | Path) -> int:
    """Restore the entries of archive_path into cache_dir.

    Existing entries with the same fingerprint are overwritten; others are
    left alone.

    Returns:
        Number of entries written.
    """
    store = CacheStore(cache_dir)
    with open(archive_path, "rb") as f:
        reader = ArchiveReader(f)
        for fp, response_bytes in reader.items():
            store.write(fp, response_bytes)
    logger.debug("unpacked %d entries from %s into %s", len(reader), archive_path, cache_dir)
    return len(reader)
