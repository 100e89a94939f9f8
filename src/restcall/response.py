r"""Result type of a completed call."""

from __future__ import annotations

__all__ = ["Response"]

from dataclasses import dataclass, field

import httpx


@dataclass
class Response:
    """A received HTTP response with a bounded body.

    Non-2xx responses are regular values, not errors.

    Attributes:
        status_code: The HTTP status code.
        status_text: The standard reason phrase of the status code.
        headers: The response headers (case-insensitive, multi-valued).
        body: The captured body, at most ``max_response_size`` bytes.
        duration: Wall-clock duration of the attempt in seconds.
        truncated: ``True`` if the body was cut at the size cap.
        original_size: Best-effort total body size in bytes.
        url: The final URL of the response (after redirects, if any).
    """

    status_code: int
    status_text: str = ""
    headers: httpx.Headers = field(default_factory=httpx.Headers)
    body: bytes = b""
    duration: float = 0.0
    truncated: bool = False
    original_size: int = 0
    url: str = ""

    @property
    def text(self) -> str:
        """The body decoded as UTF-8, invalid sequences replaced."""
        return self.body.decode("utf-8", errors="replace")

    @property
    def is_server_error(self) -> bool:
        return 500 <= self.status_code <= 599

    @property
    def is_client_error(self) -> bool:
        return 400 <= self.status_code <= 499
