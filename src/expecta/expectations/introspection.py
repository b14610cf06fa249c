"""Recover the source text of an ``expect`` condition from its call site."""

from __future__ import annotations

import ast
import inspect
import linecache
import logging
import re
from dataclasses import dataclass
from functools import lru_cache
from types import FrameType

logger = logging.getLogger(__name__)

EXPECT_CALL_NAMES = frozenset({"expect", "record", "check"})

_LINE_BREAK = re.compile(r"\s*\n\s*")


@dataclass(frozen=True, slots=True)
class CallSite:
    """Where an expectation was evaluated."""

    filename: str
    lineno: int
    function: str
    expression: str | None = None


@lru_cache(maxsize=128)
def _parse(source: str) -> ast.Module | None:
    try:
        return ast.parse(source)
    except SyntaxError:
        return None


def _call_name(node: ast.Call) -> str | None:
    match node.func:
        case ast.Name(id=name):
            return name
        case ast.Attribute(attr=name):
            return name
        case _:
            return None


def _normalize(segment: str) -> str:
    return _LINE_BREAK.sub(" ", segment.strip())


def _find_condition(
    tree: ast.Module,
    source: str,
    frame: FrameType,
) -> str | None:
    lineno = frame.f_lineno
    positions = inspect.getframeinfo(frame, context=0).positions

    candidates: list[ast.Call] = []
    for node in ast.walk(tree):
        if not isinstance(node, ast.Call) or not node.args:
            continue
        end_lineno = node.end_lineno or node.lineno
        if not node.lineno <= lineno <= end_lineno:
            continue
        if (
            positions is not None
            and positions.lineno == node.lineno
            and positions.col_offset == node.col_offset
            and positions.end_lineno == node.end_lineno
            and positions.end_col_offset == node.end_col_offset
        ):
            candidates = [node]
            break
        if _call_name(node) in EXPECT_CALL_NAMES:
            candidates.append(node)

    if not candidates:
        return None

    condition = candidates[0].args[0]
    segment = ast.get_source_segment(source, condition)
    if segment:
        return _normalize(segment)
    return ast.unparse(condition)


def describe_call_site(frame: FrameType, *, with_expression: bool = True) -> CallSite:
    """Build a :class:`CallSite` for the ``expect`` call running in ``frame``."""
    filename = frame.f_code.co_filename
    site = CallSite(filename=filename, lineno=frame.f_lineno, function=frame.f_code.co_name)
    if not with_expression:
        return site

    lines = linecache.getlines(filename, frame.f_globals)
    if not lines:
        logger.warning("No source available for %s; using a location-only message", filename)
        return site

    tree = _parse("".join(lines))
    if tree is None:
        return site

    expression = _find_condition(tree, "".join(lines), frame)
    if expression is None:
        logger.warning(
            "Could not locate the expect() condition at %s:%d", filename, frame.f_lineno
        )
        return site

    return CallSite(
        filename=site.filename,
        lineno=site.lineno,
        function=site.function,
        expression=expression,
    )


def default_message(site: CallSite) -> str:
    """Self-describing message for an ``expect`` call without a custom one."""
    if site.expression is not None:
        return f"Expected {site.expression}"
    return f"Expected condition at {site.filename}:{site.lineno}"
