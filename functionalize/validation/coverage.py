"""Registry-level checks.

Unlike the property validators these don't take a ViewCase: they inspect
INVERSE_REGISTRY itself, so they aren't registered with a Check tag.
"""

from collections import Counter

from ..registry import INVERSE_REGISTRY, InverseDef
from ..views import BaseUsage, InverseKind, ViewOp
from .core import Severity, ValidationResult


def check_registry(
    registry: dict[ViewOp, InverseDef] | None = None,
) -> list[ValidationResult]:
    """Verify the inverse registry is complete and self-consistent.

    Checks that every ViewOp has an entry, that supported entries can be
    produced (have a forward view), that scatter inverses are the only ones
    reading base values, and that no ATen overload maps to two ops.
    """
    registry = INVERSE_REGISTRY if registry is None else registry
    results = []
    r = lambda sev, msg: results.append(ValidationResult("registry", sev, msg))

    # --- Coverage ---
    for op in ViewOp:
        if op not in registry:
            r(Severity.ERROR, f"{op.name} has no inverse entry")

    for op, op_def in registry.items():
        # --- Forward views ---
        if op_def.supported and op_def.forward is None:
            r(Severity.ERROR, f"{op.name} is supported but has no forward view")
        if not op_def.supported and op_def.forward is not None:
            r(Severity.WARNING,
              f"{op.name} is guarded but has a forward view; it will never be used")

        # --- Base usage ---
        scatter = op_def.kind is InverseKind.SCATTER
        reads_region = op_def.base_usage is BaseUsage.REGION
        if scatter and not reads_region:
            r(Severity.ERROR,
              f"{op.name} scatters into base but doesn't declare REGION base usage")
        if reads_region and not scatter:
            r(Severity.ERROR,
              f"{op.name} declares REGION base usage but isn't a scatter inverse")

        # --- Naming ---
        name = getattr(op_def.inverse, "__name__", "")
        if not name.endswith("_inverse"):
            r(Severity.WARNING,
              f"{op.name} inverse '{name}' doesn't follow the <op>_inverse naming")

        if not op_def.aten:
            r(Severity.INFO, f"{op.name} has no ATen overloads registered")

    # --- ATen overloads map to one op each ---
    counts = Counter(name for op_def in registry.values() for name in op_def.aten)
    for name, count in counts.items():
        if count > 1:
            r(Severity.ERROR, f"ATen overload '{name}' is registered {count} times")

    return results
