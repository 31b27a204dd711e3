"""Property checks for view inverses.

Validators are tagged checks for one property each (round trip, region
preservation, base metadata). Each validator inspects a ViewCase (a view
op applied to a concrete base) and returns structured diagnostics.

The registry collects validators via decorator. verify_inverse() runs
them for a single op, but they work standalone too:

    from functionalize.validation import ViewCase, run_validators
    results = run_validators(ViewCase(ViewOp.T, torch.randn(3, 4)))

Validators are defined in submodules:
    properties.py: ROUNDTRIP, REGION and METADATA checks
    coverage.py:   registry completeness (not tied to a ViewCase)
    verify.py:     verify_inverse() with strict/normal/none modes

Core types live in core.py to avoid circular imports.
"""

from .core import (  # noqa: F401
    Check,
    Severity,
    ViewCase,
    ValidationResult,
    ValidationError,
    Validator,
    VALIDATORS,
    register_validator,
    run_validators,
)
from .coverage import check_registry  # noqa: F401
from .verify import verify_inverse  # noqa: F401

# Import submodules to trigger validator registration.
from . import properties  # noqa: F401
