"""Route an existing httpx.Client through a Recorder."""

import httpx

from httprecorder.codec import clone_response
from httprecorder.config import RecorderConfig
from httprecorder.recorder import Recorder


class RecorderTransport(httpx.BaseTransport):
    """httpx transport that records or replays every request it handles.

    Mount it on a client so code that already uses httpx is recorded
    without changing any call sites:

        recorder = Recorder(RecorderConfig(mode="playback"))
        client = httpx.Client(transport=RecorderTransport(recorder))
        client.get("https://api.example.com/items")  # served from cache

    The recorder keeps its own client for the real network calls.
    """

    def __init__(self, recorder: Recorder):
        self.recorder = recorder

    def handle_request(self, request: httpx.Request) -> httpx.Response:
        response = self.recorder.send(request)
        # The body is already decoded; the host client must not decode it again
        return clone_response(response)

    def close(self):
        self.recorder.close()


def wrap(config: RecorderConfig | None = None, **client_options) -> httpx.Client:
    """Build an httpx.Client whose requests go through a Recorder.

    client_options configure both the returned client (base_url, headers,
    ...) and the recorder's own network client. A transport option is
    used for the real calls only; the returned client always routes
    through the recorder.
    """
    transport = client_options.pop("transport", None)
    if isinstance(transport, httpx.BaseTransport):
        transport = httpx.Client(transport=transport, **client_options)
    recorder = Recorder(config, transport=transport, **client_options)
    return httpx.Client(transport=RecorderTransport(recorder), **client_options)
