"""One-call property check for a single view op."""

from __future__ import annotations

import torch

from ..views import ViewOp
from .core import (
    Check, Severity, ValidationError, ValidationResult, ViewCase, run_validators,
)


def verify_inverse(
    op: ViewOp,
    base: torch.Tensor,
    *args,
    mutated: torch.Tensor | None = None,
    checks: list[Check] | None = None,
    validation: str = "normal",
    rtol: float = 1e-5,
    atol: float = 1e-6,
    verbose: bool = False,
) -> list[ValidationResult]:
    """Check `op`'s inverse against a concrete base.

        verify_inverse(ViewOp.SELECT, torch.randn(3, 4), 1, 2,
                       mutated=torch.zeros(3))

    Args:
        op: The view op to check.
        base: Base tensor the view is taken from. Never modified.
        *args: The view's creation arguments.
        mutated: New value for the view. Required by the REGION check.
        checks: Which properties to check. None = all of them.
        validation: How strictly to enforce the checks.
            "strict"  : Fail on WARNING or ERROR.
            "normal"  : Fail on ERROR only (default).
            "none"    : Collect diagnostics without raising.
        rtol, atol: Tolerances for value comparisons.
        verbose: Print every diagnostic.

    Raises:
        ValidationError: If a diagnostic reaches the failure severity.
    """
    fail_on = _validation_severity(validation)
    case = ViewCase(op, base, tuple(args), mutated, rtol=rtol, atol=atol)
    results = run_validators(case, checks, fail_on=None)
    if verbose:
        print(f"[verify] {case}")
        for result in results:
            print(f"  {result}")
    # Raise after printing so verbose output shows every diagnostic.
    if fail_on is not None:
        if any(r.severity.value <= fail_on.value for r in results):
            raise ValidationError(case, results)
    return results


def _validation_severity(validation: str) -> Severity | None:
    """Map validation preference string to fail_on severity."""
    if validation == "strict":
        return Severity.WARNING
    if validation == "normal":
        return Severity.ERROR
    if validation == "none":
        return None
    raise ValueError(
        f"Unknown validation '{validation}' "
        f"(expected 'strict', 'normal', or 'none')"
    )
