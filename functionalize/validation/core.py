"""Core validation types, registry, and runner.

All types live here to avoid circular imports; validator submodules
import from core, and __init__ re-exports everything.
"""

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Callable

import torch

from ..views import ViewOp


class Check(Enum):
    """Properties a view inverse is checked against.

        ROUNDTRIP: inverse(a, view(a)) reproduces a.
        REGION:    inverse(a, b') writes b' into the addressed region of a
                   and keeps everything else (scatter ops only).
        METADATA:  the rebuilt base has the base's shape and dtype.
    """
    ROUNDTRIP = auto()
    REGION    = auto()
    METADATA  = auto()


class Severity(Enum):
    """Diagnostic severity level.

    ERROR:   The inverse produced a wrong base.
    WARNING: Suspicious but not necessarily wrong.
    INFO:    Diagnostic observation (check skipped, not applicable).
    """
    ERROR   = auto()
    WARNING = auto()
    INFO    = auto()


@dataclass
class ViewCase:
    """A view op applied to a concrete base, ready to be checked.

    `args` are the view's creation arguments, passed positionally to both
    the forward view and its inverse. `mutated` is an arbitrary new value
    for the view; region checks need it, the others ignore it.
    """
    op: ViewOp
    base: torch.Tensor
    args: tuple = ()
    mutated: torch.Tensor | None = None
    rtol: float = 1e-5
    atol: float = 1e-6

    def __str__(self) -> str:
        return f"{self.op.name}{tuple(self.args)} on base {tuple(self.base.shape)}"


@dataclass
class ValidationResult:
    """A single diagnostic from a validator."""
    validator: str
    severity: Severity
    message: str

    def __str__(self) -> str:
        return f"[{self.severity.name}] {self.validator}: {self.message}"


class ValidationError(Exception):
    """Raised when validation produces fatal errors."""

    def __init__(self, case: ViewCase, results: list[ValidationResult]) -> None:
        self.case = case
        self.results = results
        errors = [r for r in results if r.severity == Severity.ERROR]
        msg = f"Validation failed for {case} ({len(errors)} error(s)):\n"
        msg += "\n".join(f"  {r}" for r in errors)
        super().__init__(msg)


# ---------------------------------------------------------------------------
# Registry
# ---------------------------------------------------------------------------

@dataclass
class Validator:
    """A tagged validation check.

    Attributes:
        name: Human-readable identifier.
        check: Which property this validator covers.
        fn: Callable that inspects a ViewCase and returns diagnostics.
    """
    name: str
    check: Check
    fn: Callable[[ViewCase], list[ValidationResult]] = field(repr=False)


VALIDATORS: list[Validator] = []


def register_validator(name: str, check: Check):
    """Decorator to register a validation function.

    Usage:
        @register_validator("my_check", Check.ROUNDTRIP)
        def check_something(case: ViewCase) -> list[ValidationResult]:
            ...
    """
    def decorator(fn: Callable[[ViewCase], list[ValidationResult]]):
        VALIDATORS.append(Validator(name=name, check=check, fn=fn))
        return fn
    return decorator


def run_validators(
    case: ViewCase,
    checks: list[Check] | None = None,
    *,
    fail_on: Severity | None = Severity.ERROR,
) -> list[ValidationResult]:
    """Run all validators registered for the given checks.

    Args:
        case: The view op, base and args to check.
        checks: Which properties to check. None = all of them.
        fail_on: Raise ValidationError if any result meets or exceeds
            this severity. Set to None to collect without raising.

    Returns:
        All validation results (errors, warnings, and info).

    Raises:
        ValidationError: If any result's severity >= fail_on.
    """
    results: list[ValidationResult] = []
    for v in VALIDATORS:
        if checks is None or v.check in checks:
            results.extend(v.fn(case))

    if fail_on is not None:
        fatal = [r for r in results if r.severity.value <= fail_on.value]
        if fatal:
            raise ValidationError(case, results)

    return results
