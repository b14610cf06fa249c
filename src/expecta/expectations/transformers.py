import __future__
import ast
import functools
import inspect
import logging
import textwrap
from collections.abc import Callable
from typing import Any, TypeVar

from expecta.context import expectation_scope
from expecta.errors import RewriteError
from expecta.expectations.checkpoint import render_report

logger = logging.getLogger(__name__)

F = TypeVar("F", bound=Callable[..., Any])

EXPECT_ASSERTION_NAME = "__expecta_expect_assertion"

_FUTURE_FLAGS = functools.reduce(
    lambda acc, feature: acc | getattr(__future__, feature).compiler_flag,
    __future__.all_feature_names,
    0,
)


class InjectExpectationDependenciesTransformer(ast.NodeTransformer):
    """Import the rewrite target at the top of the rewritten function.

    Rewritten ``assert`` statements call ``__expecta_expect_assertion``; the
    import is injected into the function body so it does not depend on what
    the test module itself imported.
    """

    def _inject_dependencies(self, node: ast.FunctionDef | ast.AsyncFunctionDef):
        inject_stmt = ast.ImportFrom(
            module="expecta.expectations.base",
            names=[ast.alias(name="expect_assertion", asname=EXPECT_ASSERTION_NAME)],
            level=0,
        )
        ast.copy_location(inject_stmt, node)

        body = list(node.body)
        insert_at = 1 if ast.get_docstring(node, clean=False) is not None else 0
        node.body = [*body[:insert_at], inject_stmt, *body[insert_at:]]
        return node

    def visit_FunctionDef(self, node: ast.FunctionDef):
        return self._inject_dependencies(node)

    def visit_AsyncFunctionDef(self, node: ast.AsyncFunctionDef):
        return self._inject_dependencies(node)


class AssertToExpectTransformer(ast.NodeTransformer):
    """Rewrite ``assert`` statements into deferred expectations.

    ``assert cond`` becomes ``__expecta_expect_assertion(cond, "<cond source>")``
    and ``assert cond, msg`` passes ``lambda: msg`` so the message is only
    evaluated on failure, as with a plain assert. Nested functions, lambdas
    and classes are left untouched: their bodies may run outside the scope of
    the decorated function.
    """

    def __init__(self, source: str | None = None) -> None:
        self.source = source
        self._depth = 0

    def _expr_text(self, expr: ast.expr) -> str:
        if self.source is not None:
            segment = ast.get_source_segment(self.source, expr)
            if segment:
                return " ".join(line.strip() for line in segment.splitlines())
        return ast.unparse(expr)

    def _visit_scope(self, node):
        if self._depth > 0:
            return node
        self._depth += 1
        try:
            self.generic_visit(node)
        finally:
            self._depth -= 1
        return node

    def visit_FunctionDef(self, node: ast.FunctionDef):
        return self._visit_scope(node)

    def visit_AsyncFunctionDef(self, node: ast.AsyncFunctionDef):
        return self._visit_scope(node)

    def visit_ClassDef(self, node: ast.ClassDef):
        return node

    def visit_Lambda(self, node: ast.Lambda):
        return node

    def visit_Assert(self, node: ast.Assert):
        args: list[ast.expr] = [node.test, ast.Constant(value=self._expr_text(node.test))]
        if node.msg is not None:
            args.append(
                ast.Lambda(
                    args=ast.arguments(
                        posonlyargs=[], args=[], vararg=None, kwonlyargs=[],
                        kw_defaults=[], kwarg=None, defaults=[],
                    ),
                    body=node.msg,
                )
            )

        call = ast.Expr(
            value=ast.Call(
                func=ast.Name(id=EXPECT_ASSERTION_NAME, ctx=ast.Load()),
                args=args,
                keywords=[],
            )
        )
        ast.copy_location(call, node)
        ast.fix_missing_locations(call)
        return call


def rewrite_function(fn: F) -> F:
    """Recompile ``fn`` with its ``assert`` statements turned into expectations.

    Raises
    ------
    RewriteError
        If the function closes over outer variables, is already wrapped by
        another decorator, or its source cannot be found.
    """
    name = getattr(fn, "__qualname__", repr(fn))
    if not inspect.isfunction(fn):
        raise RewriteError(f"@deferred expects a plain function, got {fn!r}")
    if hasattr(fn, "__wrapped__"):
        raise RewriteError(f"@deferred must be the innermost decorator on {name}")
    if fn.__code__.co_freevars:
        free = ", ".join(fn.__code__.co_freevars)
        raise RewriteError(
            f"{name} closes over {free}; define it at module or class level to use @deferred"
        )

    try:
        lines, start = inspect.getsourcelines(fn)
        filename = inspect.getsourcefile(fn) or fn.__code__.co_filename
    except (OSError, TypeError) as exc:
        raise RewriteError(f"Source of {name} is not available") from exc

    source = textwrap.dedent("".join(lines))
    tree = ast.parse(source)
    func_def = tree.body[0]
    if not isinstance(func_def, (ast.FunctionDef, ast.AsyncFunctionDef)):
        raise RewriteError(f"Could not locate the definition of {name}")
    func_def.decorator_list = []

    AssertToExpectTransformer(source).visit(func_def)
    InjectExpectationDependenciesTransformer().visit(func_def)
    ast.fix_missing_locations(tree)
    ast.increment_lineno(tree, start - 1)

    code = compile(
        tree,
        filename=filename,
        mode="exec",
        flags=fn.__code__.co_flags & _FUTURE_FLAGS,
        dont_inherit=True,
    )
    namespace: dict[str, Any] = {}
    exec(code, fn.__globals__, namespace)

    rewritten = namespace[func_def.name]
    rewritten.__defaults__ = fn.__defaults__
    rewritten.__kwdefaults__ = fn.__kwdefaults__
    rewritten.__qualname__ = fn.__qualname__
    logger.debug("Rewrote assertions of %s", name)
    return rewritten


def _note_pending(exc: BaseException, ctx) -> None:
    records = ctx.drain()
    if records:
        exc.add_note(render_report(records))


def deferred(fn: F) -> F:
    """Defer every ``assert`` in ``fn`` and checkpoint when it returns.

    The function runs in its own accumulation scope. Failed asserts are
    recorded instead of raising, and a single
    :class:`~expecta.errors.AggregateFailure` is raised after the body
    completes. If the body raises, pending failures are attached to that
    exception as a note. Must be the innermost decorator.
    """
    rewritten = rewrite_function(fn)

    if inspect.iscoroutinefunction(fn):

        @functools.wraps(fn)
        async def async_wrapper(*args: Any, **kwargs: Any) -> Any:
            with expectation_scope(name=fn.__qualname__) as ctx:
                try:
                    result = await rewritten(*args, **kwargs)
                except BaseException as exc:
                    _note_pending(exc, ctx)
                    raise
                ctx.checkpoint()
                return result

        return async_wrapper  # type: ignore[return-value]

    @functools.wraps(fn)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        with expectation_scope(name=fn.__qualname__) as ctx:
            try:
                result = rewritten(*args, **kwargs)
            except BaseException as exc:
                _note_pending(exc, ctx)
                raise
            ctx.checkpoint()
            return result

    return wrapper  # type: ignore[return-value]
