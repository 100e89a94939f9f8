r"""Retry delay strategy."""

from __future__ import annotations

__all__ = ["ConstantBackoff"]

from restcall.backoff.constant import ConstantBackoff
