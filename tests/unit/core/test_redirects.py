from __future__ import annotations

import pytest

from restcall.core import RedirectPolicy, RequestParams


def test_redirect_policy_default_follows() -> None:
    assert RedirectPolicy().follow


@pytest.mark.parametrize(
    ("follow_redirects", "expected"), [(None, True), (True, True), (False, False)]
)
def test_redirect_policy_for_call(follow_redirects: bool | None, expected: bool) -> None:
    policy = RedirectPolicy.for_call(
        RequestParams(method="GET", url="/", follow_redirects=follow_redirects)
    )
    assert policy.send_options() == {"follow_redirects": expected}
