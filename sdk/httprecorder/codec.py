"""Convert httpx responses to and from raw HTTP/1.1 wire bytes via h11.

A cached entry is exactly what a server would put on the socket: status
line, headers, blank line, body. httpx hands us a body that is already
de-chunked and decompressed, so framing headers are rewritten to match
the stored body before serialization.
"""

import h11
import httpx

# h11 only emits a response after it has seen a request on the connection
_PRIMER_REQUEST = b"GET / HTTP/1.1\r\nHost: httprecorder\r\n\r\n"

# Dropped because the stored body is the decoded payload
_FRAMING_HEADERS = {b"content-length", b"transfer-encoding", b"content-encoding"}


class CorruptEntryError(ValueError):
    """A cached entry does not hold one complete HTTP response."""


def _framed_headers(headers: httpx.Headers, body: bytes) -> list[tuple[bytes, bytes]]:
    framed = [(name, value) for name, value in headers.raw if name.lower() not in _FRAMING_HEADERS]
    framed.append((b"Content-Length", str(len(body)).encode("ascii")))
    return framed


def clone_response(response: httpx.Response) -> httpx.Response:
    """Copy a response into a new one framed the way it will be stored.

    The copy can be modified (e.g. by strip_headers) without touching the
    response handed back to the caller. Its body is the decoded content of
    the original, so Content-Encoding and Transfer-Encoding are dropped and
    Content-Length is recomputed.
    """
    body = response.read()
    return httpx.Response(
        status_code=response.status_code,
        headers=_framed_headers(response.headers, body),
        content=body,
        request=response.request if _has_request(response) else None,
        extensions={"reason_phrase": response.reason_phrase.encode("ascii", errors="replace")},
    )


def dump_response(response: httpx.Response) -> bytes:
    """Serialize a response to HTTP/1.1 wire format."""
    body = response.read()
    headers = _framed_headers(response.headers, body)

    conn = h11.Connection(our_role=h11.SERVER)
    conn.receive_data(_PRIMER_REQUEST)
    while not isinstance(conn.next_event(), h11.EndOfMessage):
        pass

    reason = response.reason_phrase.encode("ascii", errors="replace")
    chunks = [
        conn.send(h11.Response(status_code=response.status_code, headers=headers, reason=reason)),
        conn.send(h11.Data(data=body)) if body else b"",
        conn.send(h11.EndOfMessage()),
    ]
    return b"".join(chunks)


def load_response(raw: bytes, request: httpx.Request | None = None) -> httpx.Response:
    """Parse wire bytes written by dump_response back into a response.

    Raises:
        CorruptEntryError: raw is truncated or not an HTTP/1.x response.
    """
    conn = h11.Connection(our_role=h11.CLIENT)
    conn.send(h11.Request(method="GET", target="/", headers=[("Host", "httprecorder")]))
    conn.send(h11.EndOfMessage())
    conn.receive_data(raw)
    conn.receive_data(b"")

    head = None
    body = bytearray()
    try:
        while True:
            event = conn.next_event()
            if isinstance(event, h11.Response):
                head = event
            elif isinstance(event, h11.Data):
                body += event.data
            elif isinstance(event, h11.EndOfMessage):
                break
            elif event is h11.NEED_DATA or isinstance(event, h11.ConnectionClosed):
                raise CorruptEntryError("cached response is truncated")
    except h11.RemoteProtocolError as exc:
        raise CorruptEntryError(f"cached response is not valid HTTP: {exc}") from exc

    return httpx.Response(
        status_code=head.status_code,
        headers=list(head.headers.raw_items()),
        content=bytes(body),
        request=request,
        extensions={
            "http_version": b"HTTP/" + head.http_version,
            "reason_phrase": head.reason,
        },
    )


def _has_request(response: httpx.Response) -> bool:
    # response.request raises RuntimeError when no request is attached
    try:
        response.request
    except RuntimeError:
        return False
    return True
