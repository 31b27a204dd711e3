"""Property validators for view inverses.

Covers the ROUNDTRIP, REGION and METADATA checks. All validators receive
a ViewCase, run the forward view and its inverse, and compare against the
base. None of them modify the case's tensors.
"""

import numpy as np
import torch

from ..registry import INVERSE_REGISTRY, apply_inverse, apply_view
from ..dims import maybe_wrap_dim
from ..views import InverseKind, ViewOp
from .core import Check, Severity, ValidationResult, ViewCase, register_validator


def _to_numpy(t: torch.Tensor) -> np.ndarray:
    """Flat numpy copy of a tensor, with lazy conj/neg bits materialized."""
    return t.detach().cpu().resolve_conj().resolve_neg().numpy().reshape(-1)


def _windows_tile(case: ViewCase) -> bool:
    """True if unfold's windows cover its dimension exactly once.

    Only then does unfold_inverse reproduce the base: overlapping windows
    (step < size) accumulate, and gaps (step > size or a short tail) come
    back as zeros.
    """
    dimension, size, step = case.args
    dim_size = case.base.size(maybe_wrap_dim(dimension, case.base.dim()))
    return step == size and dim_size % size == 0


def _mutated_or_view(case: ViewCase, view: torch.Tensor) -> torch.Tensor:
    return case.mutated if case.mutated is not None else view


# ---------------------------------------------------------------------------
# Round trip
# ---------------------------------------------------------------------------

@register_validator("roundtrip", Check.ROUNDTRIP)
def check_roundtrip(case: ViewCase) -> list[ValidationResult]:
    """inverse(a, view(a), *args) must reproduce a without modifying it."""
    results = []
    r = lambda sev, msg: results.append(ValidationResult("roundtrip", sev, msg))

    if not INVERSE_REGISTRY[case.op].supported:
        r(Severity.INFO, f"{case.op.name} has no inverse; skipped")
        return results
    if case.op == ViewOp.UNFOLD and not _windows_tile(case):
        r(Severity.INFO,
          f"unfold windows {tuple(case.args)} don't tile the dimension; "
          f"inverse accumulates instead of restoring, skipped")
        return results

    before = case.base.clone()
    view = apply_view(case.op, case.base, *case.args)
    if case.op == ViewOp.EXPAND and view.numel() != case.base.numel():
        r(Severity.INFO,
          f"expand to {tuple(view.shape)} broadcasts; inverse sums the copies "
          f"instead of restoring, skipped")
        return results

    rebuilt = apply_inverse(case.op, case.base, view, *case.args)

    if tuple(rebuilt.shape) != tuple(case.base.shape):
        r(Severity.ERROR,
          f"Rebuilt base has shape {tuple(rebuilt.shape)}, "
          f"expected {tuple(case.base.shape)}")
    elif rebuilt.dtype != case.base.dtype:
        r(Severity.ERROR,
          f"Rebuilt base has dtype {rebuilt.dtype}, expected {case.base.dtype}")
    elif not torch.allclose(rebuilt, case.base, rtol=case.rtol, atol=case.atol):
        bad = int((~torch.isclose(rebuilt, case.base, rtol=case.rtol,
                                  atol=case.atol)).sum())
        r(Severity.ERROR,
          f"Rebuilt base differs from the original in {bad} of "
          f"{case.base.numel()} elements")

    if not torch.equal(case.base, before):
        r(Severity.ERROR, "Base was modified in place")

    return results


# ---------------------------------------------------------------------------
# Region preservation (scatter ops)
# ---------------------------------------------------------------------------

@register_validator("region_preserved", Check.REGION)
def check_region_preserved(case: ViewCase) -> list[ValidationResult]:
    """The addressed region must equal the mutated view; the rest, the base.

    The region is found by applying the forward view to a tensor holding
    each element's flat index, so every view element knows which base
    element it came from.
    """
    results = []
    r = lambda sev, msg: results.append(ValidationResult("region_preserved", sev, msg))

    if INVERSE_REGISTRY[case.op].kind is not InverseKind.SCATTER:
        return results
    if case.mutated is None:
        r(Severity.INFO, f"No mutated view supplied for {case.op.name}; skipped")
        return results

    base = case.base
    index = torch.arange(base.numel()).reshape(base.shape)
    addressed = apply_view(case.op, index, *case.args)
    if tuple(case.mutated.shape) != tuple(addressed.shape):
        r(Severity.ERROR,
          f"Mutated view has shape {tuple(case.mutated.shape)}, "
          f"but {case.op.name} produces {tuple(addressed.shape)}")
        return results

    before = base.clone()
    rebuilt = apply_inverse(case.op, base, case.mutated, *case.args)
    if tuple(rebuilt.shape) != tuple(base.shape):
        r(Severity.ERROR,
          f"Rebuilt base has shape {tuple(rebuilt.shape)}, "
          f"expected {tuple(base.shape)}")
        return results

    got = _to_numpy(rebuilt)
    original = _to_numpy(base)
    flat_index = _to_numpy(addressed)
    inside = np.zeros(base.numel(), dtype=bool)
    inside[flat_index] = True

    region_bad = ~np.isclose(got[flat_index], _to_numpy(case.mutated),
                             rtol=case.rtol, atol=case.atol)
    if region_bad.any():
        r(Severity.ERROR,
          f"{int(region_bad.sum())} of {flat_index.size} addressed elements "
          f"don't match the mutated view")

    outside_bad = ~np.isclose(got[~inside], original[~inside],
                              rtol=case.rtol, atol=case.atol)
    if outside_bad.any():
        r(Severity.ERROR,
          f"{int(outside_bad.sum())} elements outside the addressed region "
          f"were changed")

    if not torch.equal(base, before):
        r(Severity.ERROR, "Base was modified in place")

    return results


# ---------------------------------------------------------------------------
# Metadata
# ---------------------------------------------------------------------------

@register_validator("base_metadata", Check.METADATA)
def check_base_metadata(case: ViewCase) -> list[ValidationResult]:
    """The rebuilt base must have the base's shape and dtype."""
    results = []
    r = lambda sev, msg: results.append(ValidationResult("base_metadata", sev, msg))

    if not INVERSE_REGISTRY[case.op].supported:
        return results

    view = apply_view(case.op, case.base, *case.args)
    value = _mutated_or_view(case, view)
    if tuple(value.shape) != tuple(view.shape):
        r(Severity.ERROR,
          f"Mutated view has shape {tuple(value.shape)}, "
          f"but {case.op.name} produces {tuple(view.shape)}")
        return results

    rebuilt = apply_inverse(case.op, case.base, value, *case.args)
    if tuple(rebuilt.shape) != tuple(case.base.shape):
        r(Severity.ERROR,
          f"Rebuilt base has shape {tuple(rebuilt.shape)}, "
          f"expected {tuple(case.base.shape)}")
    if rebuilt.dtype != case.base.dtype:
        r(Severity.ERROR,
          f"Rebuilt base has dtype {rebuilt.dtype}, expected {case.base.dtype}")
    if rebuilt.is_conj() and not case.base.is_conj():
        r(Severity.WARNING, "Rebuilt base carries a lazy conjugate bit the base didn't")

    return results
