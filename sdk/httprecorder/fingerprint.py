"""Compute stable cache keys for HTTP requests."""

import hashlib
from typing import Iterable

import httpx

from httprecorder.redact import canonicalize_params


def _raw_path(url: httpx.URL) -> str:
    # raw_path is the still-encoded "path?query"; url.path would be decoded
    return url.raw_path.split(b"?", 1)[0].decode("ascii")


def _param_string(request: httpx.Request) -> str:
    params = request.url.query.decode("ascii")
    body = request.read()
    if body:
        if params:
            params += "&"
        # latin-1 maps every byte to one character, so any payload survives
        params += body.decode("latin-1")
    return params


def cache_key(request: httpx.Request, filter_params: Iterable[str] = ()) -> str:
    """Build the normalized string a request is fingerprinted on.

    Layout: "<METHOD> <lowercased host><path>?<canonical params>", where the
    params are the query string plus the body, sorted and filtered.
    """
    return "{} {}{}?{}".format(
        request.method,
        # raw_host stays IDNA-encoded ("xn--..."); url.host may be unicode
        request.url.raw_host.decode("ascii").lower(),
        _raw_path(request.url),
        canonicalize_params(_param_string(request), filter_params),
    )


def fingerprint(request: httpx.Request, filter_params: Iterable[str] = ()) -> str:
    """Return the 32-char hex digest identifying a request in the cache.

    Pure function of method, host, path, parameters and filter_params:
    reordering query or body parameters does not change it.
    """
    key = cache_key(request, filter_params)
    return hashlib.md5(key.encode("latin-1"), usedforsecurity=False).hexdigest()
