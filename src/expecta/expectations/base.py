"""Deferred expectations: record failed conditions without stopping the test."""

from __future__ import annotations

import inspect
import logging
from collections.abc import Callable, Mapping, Sequence
from typing import Any

from expecta.context import AccumulationContext, current_expectations
from expecta.errors import FormattingFault
from expecta.expectations.introspection import default_message, describe_call_site
from expecta.expectations.result import FailureRecord

logger = logging.getLogger(__name__)

Message = str | Callable[..., Any] | None


def render_message(message: Any, args: Sequence[Any], kwargs: Mapping[str, Any]) -> str:
    """Render a user supplied message.

    - ``str`` with arguments is a :meth:`str.format` template;
    - ``str`` without arguments is used verbatim (braces are not interpreted);
    - a callable is invoked with the arguments and its result passed to ``str``;
    - anything else is passed to ``str``.

    Raises
    ------
    FormattingFault
        If the template or the message object cannot be rendered.
    """
    try:
        if callable(message):
            return str(message(*args, **kwargs))
        if isinstance(message, str):
            if args or kwargs:
                return message.format(*args, **kwargs)
            return message
        return str(message)
    except Exception as exc:
        raise FormattingFault(message, exc) from exc


def record_into(
    ctx: AccumulationContext,
    condition: Any,
    message: Message,
    args: Sequence[Any],
    kwargs: Mapping[str, Any],
    *,
    expression: str | None = None,
    _stacklevel: int = 1,
) -> bool:
    """Append a :class:`FailureRecord` to ``ctx`` when ``condition`` is falsy.

    ``_stacklevel`` counts frames above this one to reach the test code that
    evaluated the condition.
    """
    if condition:
        return True

    frame = inspect.currentframe()
    try:
        for _ in range(_stacklevel):
            if frame is None:
                break
            frame = frame.f_back
        site = None
        if frame is not None:
            site = describe_call_site(frame, with_expression=expression is None)
    finally:
        del frame

    if expression is None and site is not None:
        expression = site.expression

    if message is not None:
        text = render_message(message, args, kwargs)
    elif expression is not None:
        text = f"Expected {expression}"
    elif site is not None:
        text = default_message(site)
    else:
        text = "Expected condition to be true"

    ctx.add(
        FailureRecord(
            message=text,
            expression=expression,
            filename=site.filename if site else None,
            lineno=site.lineno if site else None,
            function=site.function if site else None,
        )
    )
    return False


def expect(condition: Any, message: Message = None, /, *args: Any, **kwargs: Any) -> bool:
    """Record ``condition`` as failed if it is falsy, and keep going.

    Parameters
    ----------
    condition
        Already evaluated condition; only its truthiness matters.
    message
        Optional diagnostic. Rendered only when the condition is falsy, see
        :func:`render_message`. Without one, the message is
        ``"Expected <condition as written>"``.
    *args, **kwargs
        Arguments for the message template.

    Returns
    -------
    bool
        ``bool(condition)``, so dependent checks can be skipped.

    Examples
    --------
    >>> expect(2 + 2 == 5, "{} surely {} {}", 4, "is not", 5)  # doctest: +SKIP
    False
    """
    return record_into(current_expectations(), condition, message, args, kwargs, _stacklevel=2)


def expect_assertion(condition: Any, expression: str, message: Message = None) -> bool:
    """Target of ``assert`` statements rewritten by :func:`expecta.deferred`."""
    return record_into(
        current_expectations(),
        condition,
        message,
        (),
        {},
        expression=expression,
        _stacklevel=2,
    )
