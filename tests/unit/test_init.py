from __future__ import annotations

import restcall


def test_version() -> None:
    assert isinstance(restcall.__version__, str)


def test_public_api() -> None:
    for name in restcall.__all__:
        assert hasattr(restcall, name)
