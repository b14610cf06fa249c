"""Deferred expectations and the checkpoint that reports them."""

from .result import FailureRecord, Verdict
from .base import expect, expect_assertion, render_message
from .checkpoint import PASS_NOTICE, checkpoint, let_fail, render_report
from .transformers import deferred, rewrite_function

__all__ = [
    "FailureRecord",
    "Verdict",
    "expect",
    "expect_assertion",
    "render_message",
    "PASS_NOTICE",
    "checkpoint",
    "let_fail",
    "render_report",
    "deferred",
    "rewrite_function",
]
