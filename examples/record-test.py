#!/usr/bin/env python3
"""Record once with HTTPRECORDER_RECORD=1, then run again offline to replay."""
import httprecorder

config = httprecorder.RecorderConfig.from_env()

with httprecorder.Recorder(config, timeout=10) as ua:
    resp = ua.get("https://httpbin.org/get", params={"q": "recorder"})
    print("Mode:", config.mode.value, "status:", resp.status_code)
    print("Cache entries in", config.cache_dir, "->", len(ua.store))
