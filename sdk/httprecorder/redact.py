"""Redact sensitive request parameters and volatile response headers.

Parameters are redacted before fingerprinting, so recordings made with one
api_key replay for any other. Headers are redacted before a response is
written to disk; responses read back from the cache already lack them.
"""

from typing import Iterable

import httpx


def parse_params(param_string: str) -> dict[str, str]:
    """Split a query/body string into a name -> value mapping.

    Splits on "&", then on the first "=". A segment with no "=" is a key
    with an empty value; empty segments are skipped. When a key repeats,
    the last occurrence wins. Nothing is URL-decoded.
    """
    params: dict[str, str] = {}
    if not param_string:
        return params
    for pair in param_string.split("&"):
        if not pair:
            continue
        key, _, value = pair.partition("=")
        params[key] = value
    return params


def canonicalize_params(param_string: str, filter_params: Iterable[str] = ()) -> str:
    """Return an order-independent form of a query/body string.

    Keys are sorted and each pair is emitted as "key=value" with no
    separator between pairs. Keys in filter_params keep their place but
    lose their value ("key=").

        >>> canonicalize_params("foo=a&bar=b&password=x", {"password"})
        'bar=bfoo=apassword='
    """
    params = parse_params(param_string)
    if not params:
        return ""
    blocked = set(filter_params)
    return "".join(
        f"{key}={'' if key in blocked else params[key]}" for key in sorted(params)
    )


def strip_headers(response: httpx.Response, names: Iterable[str]) -> httpx.Response:
    """Remove each named header from response in place.

    Header names match case-insensitively; names the response does not
    carry are ignored. Returns the same response for chaining.
    """
    for name in names:
        if name in response.headers:
            del response.headers[name]
    return response
