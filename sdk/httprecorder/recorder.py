"""Record HTTP interactions to disk and play them back offline."""

import logging
import warnings
from typing import Callable, Protocol

import httpx

from httprecorder.codec import clone_response, dump_response, load_response
from httprecorder.config import Mode, RecorderConfig
from httprecorder.fingerprint import fingerprint
from httprecorder.redact import strip_headers
from httprecorder.store import CacheStore

logger = logging.getLogger(__name__)

MissHook = Callable[[httpx.Request, str], None]


class UnrecordedRequestWarning(UserWarning):
    """A request was made in playback mode that was never recorded."""


class Transport(Protocol):
    """Anything that can send an httpx.Request, e.g. httpx.Client."""

    def send(self, request: httpx.Request, **kwargs) -> httpx.Response: ...


class Recorder:
    """Send HTTP requests through a record/playback cache.

    In record mode every request goes to the network; the response is
    returned untouched and a copy, minus the configured headers, is written
    under its fingerprint. In playback mode the network is never used:
    recorded responses are served from disk and unrecorded requests get an
    empty 404 plus an UnrecordedRequestWarning.

    Usage:
        config = RecorderConfig(mode="record", cache_dir="tests/http_cache",
                                filter_params={"api_key"})
        with Recorder(config, timeout=10) as rec:
            response = rec.get("https://api.example.com/items?api_key=s3cret")

    Extra keyword arguments build the default httpx.Client; pass transport
    to supply your own (anything with a send(request) method).
    """

    def __init__(
        self,
        config: RecorderConfig | None = None,
        transport: Transport | None = None,
        on_miss: MissHook | None = None,
        **client_options,
    ):
        self.config = config or RecorderConfig()
        self.store = CacheStore(self.config.cache_dir)
        self.on_miss = on_miss
        self._owns_transport = transport is None
        self._transport = transport
        self._client_options = client_options
        self.hits = 0
        self.misses = 0
        self.recorded = 0

    @property
    def mode(self) -> Mode:
        return self.config.mode

    @property
    def transport(self) -> Transport:
        # Built lazily; an httpx.Client opens no connection until it sends
        if self._transport is None:
            self._transport = httpx.Client(**self._client_options)
        return self._transport

    def fingerprint(self, request: httpx.Request) -> str:
        return fingerprint(request, self.config.filter_params)

    def send(self, request: httpx.Request, **send_options) -> httpx.Response:
        """Record or replay a single request depending on the mode."""
        key = self.fingerprint(request)
        if self.config.mode is Mode.RECORD:
            return self._record(request, key, send_options)
        return self._playback(request, key)

    def _record(self, request: httpx.Request, key: str, send_options: dict) -> httpx.Response:
        response = self.transport.send(request, **send_options)

        cached = clone_response(response)
        strip_headers(cached, self.config.filter_header)
        self.store.write(key, dump_response(cached))
        self.recorded += 1
        logger.debug("recorded %s %s as %s", request.method, request.url, key)
        return response

    def _playback(self, request: httpx.Request, key: str) -> httpx.Response:
        if self.store.exists(key):
            self.hits += 1
            logger.debug("replaying %s %s from %s", request.method, request.url, key)
            return load_response(self.store.read(key), request)

        self.misses += 1
        warnings.warn(
            f"Page requested that wasn't recorded: {request.url}",
            UnrecordedRequestWarning,
            stacklevel=3,
        )
        if self.on_miss is not None:
            self.on_miss(request, key)
        return httpx.Response(httpx.codes.NOT_FOUND, request=request)

    def build_request(self, method: str, url, **kwargs) -> httpx.Request:
        # Same construction in both modes, so client defaults reach the fingerprint
        if isinstance(self.transport, httpx.Client):
            return self.transport.build_request(method, url, **kwargs)
        return httpx.Request(method, url, **kwargs)

    def request(self, method: str, url, **kwargs) -> httpx.Response:
        send_options = {
            name: kwargs.pop(name) for name in ("auth", "follow_redirects") if name in kwargs
        }
        return self.send(self.build_request(method, url, **kwargs), **send_options)

    def get(self, url, **kwargs) -> httpx.Response:
        return self.request("GET", url, **kwargs)

    def head(self, url, **kwargs) -> httpx.Response:
        return self.request("HEAD", url, **kwargs)

    def options(self, url, **kwargs) -> httpx.Response:
        return self.request("OPTIONS", url, **kwargs)

    def post(self, url, **kwargs) -> httpx.Response:
        return self.request("POST", url, **kwargs)

    def put(self, url, **kwargs) -> httpx.Response:
        return self.request("PUT", url, **kwargs)

    def patch(self, url, **kwargs) -> httpx.Response:
        return self.request("PATCH", url, **kwargs)

    def delete(self, url, **kwargs) -> httpx.Response:
        return self.request("DELETE", url, **kwargs)

    def close(self):
        if self._owns_transport and self._transport is not None:
            self._transport.close()
            self._transport = None

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()
