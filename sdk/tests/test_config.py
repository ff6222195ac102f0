"""Tests for recorder configuration."""

import dataclasses
from pathlib import Path

import pytest

from httprecorder.config import DEFAULT_FILTER_HEADER, Mode, RecorderConfig


def test_defaults():
    config = RecorderConfig()
    assert config.mode is Mode.PLAYBACK
    assert config.cache_dir == Path("tests/http_cache")
    assert config.filter_params == frozenset()
    assert config.filter_header == ("Client-Peer", "Expires", "Client-Date", "Cache-Control")
    assert not config.recording


def test_mode_from_string_and_bool():
    assert RecorderConfig(mode="record").mode is Mode.RECORD
    assert RecorderConfig(mode=True).mode is Mode.RECORD
    assert RecorderConfig(mode=False).mode is Mode.PLAYBACK


def test_unknown_mode_rejected():
    with pytest.raises(ValueError, match="unknown mode"):
        RecorderConfig(mode="rewind")


def test_inputs_normalized():
    config = RecorderConfig(cache_dir="t/cache", filter_params=["a", "b", "a"], filter_header=["X"])
    assert config.cache_dir == Path("t/cache")
    assert config.filter_params == frozenset({"a", "b"})
    assert config.filter_header == ("X",)


def test_frozen():
    config = RecorderConfig()
    with pytest.raises(dataclasses.FrozenInstanceError):
        config.mode = Mode.RECORD


def test_from_env():
    config = RecorderConfig.from_env(environ={
        "HTTPRECORDER_RECORD": "1",
        "HTTPRECORDER_CACHE_DIR": "/tmp/cache",
        "HTTPRECORDER_FILTER_PARAMS": "api_key, password",
        "HTTPRECORDER_FILTER_HEADER": "Date,Server",
    })
    assert config.mode is Mode.RECORD
    assert config.cache_dir == Path("/tmp/cache")
    assert config.filter_params == frozenset({"api_key", "password"})
    assert config.filter_header == ("Date", "Server")


def test_from_env_defaults_to_playback():
    config = RecorderConfig.from_env(environ={"HTTPRECORDER_RECORD": "0"})
    assert config.mode is Mode.PLAYBACK
    assert config.filter_header == DEFAULT_FILTER_HEADER


def test_from_env_custom_prefix():
    config = RecorderConfig.from_env(prefix="LWP_", environ={"LWP_RECORD": "yes"})
    assert config.recording


def test_content_length_filter_rejected():
    with pytest.raises(ValueError, match="Content-Length"):
        RecorderConfig(filter_header=["Expires", "content-length"])
