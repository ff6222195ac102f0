"""Tests for the record/replay context managers and the httpx transport."""

import gzip
import tempfile

import httpx
import pytest

import httprecorder
from httprecorder.config import Mode, RecorderConfig
from httprecorder.recorder import Recorder, UnrecordedRequestWarning
from httprecorder.transport import RecorderTransport


def _echo(request: httpx.Request) -> httpx.Response:
    return httpx.Response(200, json={"path": request.url.path, "query": request.url.query.decode()})


def test_record_and_replay_context_managers():
    cache_dir = tempfile.mkdtemp()
    network = httpx.Client(transport=httpx.MockTransport(_echo))

    with httprecorder.record(cache_dir, transport=network, filter_params={"token"}) as rec:
        assert rec.mode is Mode.RECORD
        live = rec.get("http://api.example.com/users?token=abc&page=2")

    with httprecorder.replay(cache_dir, filter_params={"token"}) as rep:
        assert rep.mode is Mode.PLAYBACK
        replayed = rep.get("http://api.example.com/users?page=2&token=xyz")

    assert replayed.json() == live.json()
    assert rep.hits == 1


def test_replay_context_miss():
    with httprecorder.replay(tempfile.mkdtemp()) as rep:
        with pytest.warns(UnrecordedRequestWarning):
            assert rep.get("http://api.example.com/none").status_code == 404


def test_transport_routes_host_client():
    cache_dir = tempfile.mkdtemp()
    network = httpx.Client(transport=httpx.MockTransport(_echo))
    recorder = Recorder(RecorderConfig(mode="record", cache_dir=cache_dir), transport=network)

    with httpx.Client(transport=RecorderTransport(recorder)) as client:
        live = client.get("http://api.example.com/items", params={"b": "2", "a": "1"})
    assert live.json()["path"] == "/items"

    player = Recorder(RecorderConfig(mode="playback", cache_dir=cache_dir))
    with httpx.Client(transport=RecorderTransport(player)) as client:
        replayed = client.get("http://api.example.com/items?a=1&b=2")
    assert replayed.status_code == 200
    assert replayed.json() == live.json()


def test_transport_handles_encoded_live_body():
    def gzipped(request):
        return httpx.Response(
            200,
            headers={"Content-Encoding": "gzip"},
            content=gzip.compress(b"compressed payload"),
        )

    cache_dir = tempfile.mkdtemp()
    network = httpx.Client(transport=httpx.MockTransport(gzipped))
    recorder = Recorder(RecorderConfig(mode="record", cache_dir=cache_dir), transport=network)
    with httpx.Client(transport=RecorderTransport(recorder)) as client:
        assert client.get("http://api.example.com/gz").content == b"compressed payload"

    with httprecorder.replay(cache_dir) as rep:
        replayed = rep.get("http://api.example.com/gz")
    assert replayed.content == b"compressed payload"
    assert "content-encoding" not in replayed.headers


def test_wrap_builds_playback_client():
    cache_dir = tempfile.mkdtemp()
    network = httpx.Client(transport=httpx.MockTransport(_echo))
    with httprecorder.record(cache_dir, transport=network) as rec:
        rec.get("http://api.example.com/v1/status")

    client = httprecorder.wrap(RecorderConfig(mode="playback", cache_dir=cache_dir),
                               base_url="http://api.example.com")
    with client:
        response = client.get("/v1/status")
    assert response.status_code == 200
    assert response.json()["path"] == "/v1/status"


def test_wrap_with_network_transport():
    cache_dir = tempfile.mkdtemp()
    config = RecorderConfig(mode="record", cache_dir=cache_dir)
    with httprecorder.wrap(config, transport=httpx.MockTransport(_echo),
                           base_url="http://api.example.com") as client:
        live = client.get("/v2/ping")
    assert live.json()["path"] == "/v2/ping"

    with httprecorder.replay(cache_dir) as rep:
        assert rep.get("http://api.example.com/v2/ping").json() == live.json()


def test_wrap_with_network_client():
    cache_dir = tempfile.mkdtemp()
    network = httpx.Client(transport=httpx.MockTransport(_echo))
    config = RecorderConfig(mode="record", cache_dir=cache_dir)
    with httprecorder.wrap(config, transport=network) as client:
        assert client.get("http://api.example.com/v2/pong").status_code == 200
    assert len(httprecorder.CacheStore(cache_dir)) == 1
