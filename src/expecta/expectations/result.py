from dataclasses import dataclass

from expecta.types import Verdict

__all__ = ["FailureRecord", "Verdict"]


@dataclass(frozen=True, slots=True)
class FailureRecord:
    """A single failed expectation.

    Attributes
    ----------
    message
        Rendered diagnostic text.
    expression
        Source text of the condition, when it could be recovered.
    filename
        File of the ``expect`` call site.
    lineno
        Line of the ``expect`` call site.
    function
        Name of the function that called ``expect``.
    """

    message: str
    expression: str | None = None
    filename: str | None = None
    lineno: int | None = None
    function: str | None = None

    @property
    def location(self) -> str | None:
        if self.filename is None:
            return None
        if self.lineno is None:
            return self.filename
        return f"{self.filename}:{self.lineno}"

    def __str__(self) -> str:
        return self.message
