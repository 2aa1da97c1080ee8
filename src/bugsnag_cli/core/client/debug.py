"""Request/response dumps printed in debug mode."""

from typing import Optional

import httpx
from rich.console import Console

SEPARATOR_WIDTH = 60

_REDACTED_HEADERS = {"authorization", "proxy-authorization"}


def _redact(name: str, value: str) -> str:
    if name.lower() not in _REDACTED_HEADERS:
        return value
    scheme, _, credential = value.partition(" ")
    return f"{scheme} ****" if credential else "****"


def dump_request(request: httpx.Request) -> str:
    """Render a request the way it goes on the wire, body included."""
    target = request.url.raw_path.decode("ascii", errors="replace")
    lines = [f"{request.method} {target} HTTP/1.1"]
    lines.extend(f"{name}: {_redact(name, value)}" for name, value in request.headers.items())

    body = b""
    try:
        body = request.content
    except httpx.RequestNotRead:
        pass

    return "\r\n".join(lines) + "\r\n\r\n" + body.decode("utf-8", errors="replace")


def dump_response(response: Optional[httpx.Response]) -> str:
    """Render the status line and headers of a response."""
    if response is None:
        return ""
    lines = [f"{response.http_version} {response.status_code} {response.reason_phrase}".rstrip()]
    lines.extend(f"{name}: {value}" for name, value in response.headers.items())
    return "\r\n".join(lines) + "\r\n\r\n"


def print_dump(console: Console, heading: str, data: str) -> None:
    console.print(f"\n\n{heading.upper()}", markup=False, highlight=False)
    console.print(f"{'-' * SEPARATOR_WIDTH}\n", markup=False, highlight=False)
    console.print(data, markup=False, highlight=False, end="")


def dump(console: Console, request: httpx.Request, response: Optional[httpx.Response]) -> None:
    print_dump(console, "Request Details", dump_request(request))
    print_dump(console, "Response Details", dump_response(response))
