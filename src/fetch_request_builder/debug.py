"""
Request inspection helpers.

Prints a built request the same way the HTTP client prints outgoing
requests: a panel with method and URL, masked headers, and a
syntax-highlighted body.
"""
import json
from typing import Dict, List, Mapping, Optional, Tuple, Union

import httpx
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.syntax import Syntax

from .constants import SENSITIVE_HEADERS

MASK_VISIBLE_CHARS = 15


def mask_header_value(value: str, visible_chars: int = MASK_VISIBLE_CHARS) -> str:
    """Mask sensitive value for safe logging."""
    if len(value) <= visible_chars:
        return "*" * len(value)
    return value[:visible_chars] + "*" * (len(value) - visible_chars)


def mask_headers(
    headers: Union[httpx.Headers, Mapping[str, Union[str, List[str]]]],
) -> Dict[str, str]:
    """
    Mask credential headers for safe logging.

    Accepts httpx.Headers or a mapping of name to value(s). Repeated values
    are joined with ", ".
    """
    items: List[Tuple[str, str]]
    if isinstance(headers, httpx.Headers):
        items = headers.multi_items()
    else:
        items = []
        for key, values in headers.items():
            if isinstance(values, str):
                items.append((key, values))
            else:
                items.extend((key, value) for value in values)

    masked: Dict[str, str] = {}
    for key, value in items:
        if key.lower() in SENSITIVE_HEADERS:
            value = mask_header_value(value)
        masked[key] = f"{masked[key]}, {value}" if key in masked else value
    return masked


def format_body(request: httpx.Request) -> str:
    """Format an in-memory request body for pretty printing."""
    try:
        content = request.content
    except httpx.RequestNotRead:
        return "<streaming body>"

    if not content:
        return ""
    try:
        text = content.decode("utf-8")
    except UnicodeDecodeError:
        return f"<binary data: {len(content)} bytes>"
    try:
        return json.dumps(json.loads(text), indent=2, ensure_ascii=False)
    except ValueError:
        return text


def print_request(request: httpx.Request, console: Optional[Console] = None) -> None:
    """Pretty print a built request."""
    console = console or Console()

    request_info = f"[bold cyan]{request.method}[/bold cyan] {escape(str(request.url))}"
    console.print(Panel(request_info, title="[bold blue]Request[/bold blue]"))
    console.print("[bold]Headers:[/bold]", mask_headers(request.headers))

    body = format_body(request)
    if not body:
        return

    lexer = "json" if body.startswith(("{", "[")) else "text"
    console.print(
        Panel(
            Syntax(body, lexer, theme="monokai"),
            title="[bold]Request Body[/bold]",
            expand=True,
        )
    )
