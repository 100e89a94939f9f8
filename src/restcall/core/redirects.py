r"""Per-call redirect policy.

The policy is derived fresh for every call and handed to
``httpx.Client.send`` as an argument. The shared client (and its
connection pool) is never reconfigured, so calls in flight at the same
time cannot observe each other's redirect setting.
"""

from __future__ import annotations

__all__ = ["RedirectPolicy"]

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from restcall.core.config import RequestParams


@dataclass(frozen=True)
class RedirectPolicy:
    """Whether the transport follows 3xx responses for one call.

    When ``follow`` is ``False`` the first response received, 3xx
    included, is returned untouched.

    Example:
        ```pycon
        >>> from restcall.core.config import RequestParams
        >>> from restcall.core.redirects import RedirectPolicy
        >>> policy = RedirectPolicy.for_call(RequestParams(method="GET", url="/", follow_redirects=False))
        >>> policy.send_options()
        {'follow_redirects': False}
        >>> RedirectPolicy.for_call(RequestParams(method="GET", url="/")).follow
        True

        ```
    """

    follow: bool = True

    @classmethod
    def for_call(cls, params: RequestParams) -> RedirectPolicy:
        return cls(follow=params.should_follow_redirects())

    def send_options(self) -> dict[str, Any]:
        """Return the keyword arguments to pass to ``client.send``."""
        return {"follow_redirects": self.follow}
