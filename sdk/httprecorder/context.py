"""Context managers for recording and replaying."""

from contextlib import contextmanager
from pathlib import Path

from httprecorder.config import Mode, RecorderConfig
from httprecorder.recorder import Recorder


@contextmanager
def record(cache_dir: str | Path, transport=None, on_miss=None, **options):
    """Record every request made through the yielded Recorder.

    Args:
        cache_dir: Directory the recordings are written to.
        transport: Optional client used for the real calls.
        options: filter_params / filter_header for RecorderConfig; anything
            else is passed to the httpx.Client the recorder builds.

    Usage:
        with httprecorder.record("tests/http_cache", filter_params={"api_key"}) as rec:
            response = rec.get("https://api.example.com/items?api_key=s3cret")
    """
    recorder = _build(Mode.RECORD, cache_dir, transport, on_miss, options)
    try:
        yield recorder
    finally:
        recorder.close()


@contextmanager
def replay(cache_dir: str | Path, transport=None, on_miss=None, **options):
    """Serve requests made through the yielded Recorder from cache_dir.

    Usage:
        with httprecorder.replay("tests/http_cache") as rec:
            response = rec.get("https://api.example.com/items")  # from disk
    """
    recorder = _build(Mode.PLAYBACK, cache_dir, transport, on_miss, options)
    try:
        yield recorder
    finally:
        recorder.close()


def _build(mode: Mode, cache_dir, transport, on_miss, options: dict) -> Recorder:
    config_options = {
        name: options.pop(name) for name in ("filter_params", "filter_header") if name in options
    }
    config = RecorderConfig(mode=mode, cache_dir=cache_dir, **config_options)
    return Recorder(config, transport=transport, on_miss=on_miss, **options)
