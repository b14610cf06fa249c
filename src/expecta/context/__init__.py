from .context import (
    AccumulationContext,
    EXPECTATIONS_CONTEXT,
    current_expectations,
    expectation_scope,
)

__all__ = [
    "AccumulationContext",
    "EXPECTATIONS_CONTEXT",
    "current_expectations",
    "expectation_scope",
]
