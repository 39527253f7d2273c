"""Wire-level request dumps for operator diagnostics."""

from __future__ import annotations

import httpx


def dump_request(request: httpx.Request) -> str:
    """Render *request* as it goes over the wire in HTTP/1.1 form.

    Raises :class:`httpx.RequestNotRead` when the body was never buffered.
    """

    body = request.content
    target = request.url.raw_path.decode("ascii")
    lines = [f"{request.method} {target} HTTP/1.1"]
    for name, value in request.headers.raw:
        lines.append(f"{name.decode('latin-1')}: {value.decode('latin-1')}")
    head = "\r\n".join(lines)
    return f"{head}\r\n\r\n{body.decode('utf-8', errors='replace')}"
