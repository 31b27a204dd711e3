"""Inverse definitions: per-view-op metadata unified in one place.

Each InverseDef describes everything the functionalization pass needs to
know about a view op: how to undo it, how to produce it (used by the
property checks), what the inverse reads from the base, and which ATen
overloads create it.

Adding a new view op: add a ViewOp member, write its inverse in
inverses.py, and add an InverseDef to INVERSE_REGISTRY.
"""

from dataclasses import dataclass
from typing import Any, Callable

import torch

from . import inverses as inv
from .dims import maybe_wrap_dim
from .inverses import InternalAssertError
from .views import BaseUsage, InverseKind, ViewOp


# Inverse: (base, mutated_view, *args) -> new base
InverseFn = Callable[..., torch.Tensor]

# Forward view: (tensor, *args) -> view
ForwardFn = Callable[..., torch.Tensor]


@dataclass(frozen=True)
class InverseDef:
    """Complete definition of a view op's inverse.

    Fields:
        inverse: Rebuilds the base from (base, mutated_view, *args).
        kind: How the inverse reconstructs the base. SCATTER inverses keep
            every base element outside the addressed region.
        base_usage: What the inverse reads from `base`. Inverses with
            UNUSED accept base only for the uniform calling convention.
        forward: Produces the view from (tensor, *args). Takes the same
            args as the inverse. None for guarded ops.
        aten: ATen overload names that produce this view, as str(OpOverload)
            renders them (e.g. "aten.slice.Tensor").
    """
    inverse: InverseFn
    kind: InverseKind
    base_usage: BaseUsage = BaseUsage.UNUSED
    forward: ForwardFn | None = None
    aten: tuple[str, ...] = ()

    @property
    def supported(self) -> bool:
        return self.kind is not InverseKind.UNSUPPORTED


# ---------------------------------------------------------------------------
# Forward views (too involved for inline lambdas)
# ---------------------------------------------------------------------------

def _slice(t: torch.Tensor, dim: int = 0, start: int | None = None,
           end: int | None = None, step: int = 1) -> torch.Tensor:
    dim = maybe_wrap_dim(dim, t.dim())
    index = tuple(slice(start, end, step) if d == dim else slice(None)
                  for d in range(t.dim()))
    return t[index]


def _split(t: torch.Tensor, index: int, split_size: int, dim: int = 0) -> torch.Tensor:
    return torch.split(t, split_size, dim)[index]


def _split_with_sizes(t: torch.Tensor, index: int, split_sizes, dim: int = 0) -> torch.Tensor:
    return torch.split(t, list(split_sizes), dim)[index]


def _unbind(t: torch.Tensor, index: int, dim: int = 0) -> torch.Tensor:
    return t.unbind(dim)[index]


# ---------------------------------------------------------------------------
# Registry
# ---------------------------------------------------------------------------

_SELF = InverseKind.SELF_INVERSE
_SCATTER = InverseKind.SCATTER
_RESHAPE = InverseKind.RESHAPE
_IDENTITY = InverseKind.IDENTITY
_GUARD = InverseKind.UNSUPPORTED

INVERSE_REGISTRY: dict[ViewOp, InverseDef] = {
    # --- Element flips ---
    ViewOp.CONJ:            InverseDef(inv.conj_inverse, _SELF,
                                       forward=lambda t: t.conj(),
                                       aten=("aten._conj.default",)),
    ViewOp.NEG_VIEW:        InverseDef(inv.neg_view_inverse, _SELF,
                                       forward=lambda t: torch._neg_view(t),
                                       aten=("aten._neg_view.default",)),
    ViewOp.VIEW_AS_REAL:    InverseDef(inv.view_as_real_inverse, _SELF,
                                       forward=torch.view_as_real,
                                       aten=("aten.view_as_real.default",)),
    ViewOp.VIEW_AS_COMPLEX: InverseDef(inv.view_as_complex_inverse, _SELF,
                                       forward=torch.view_as_complex,
                                       aten=("aten.view_as_complex.default",)),

    # --- Region views: base values kept outside the region ---
    ViewOp.DIAGONAL:         InverseDef(inv.diagonal_inverse, _SCATTER, BaseUsage.REGION,
                                        forward=torch.diagonal,
                                        aten=("aten.diagonal.default",)),
    ViewOp.SELECT:           InverseDef(inv.select_inverse, _SCATTER, BaseUsage.REGION,
                                        forward=lambda t, dim, index: t.select(dim, index),
                                        aten=("aten.select.int",)),
    ViewOp.SLICE:            InverseDef(inv.slice_inverse, _SCATTER, BaseUsage.REGION,
                                        forward=_slice,
                                        aten=("aten.slice.Tensor",)),
    ViewOp.SPLIT:            InverseDef(inv.split_inverse, _SCATTER, BaseUsage.REGION,
                                        forward=_split,
                                        aten=("aten.split.Tensor",)),
    ViewOp.SPLIT_WITH_SIZES: InverseDef(inv.split_with_sizes_inverse, _SCATTER, BaseUsage.REGION,
                                        forward=_split_with_sizes,
                                        aten=("aten.split_with_sizes.default",)),
    ViewOp.UNBIND:           InverseDef(inv.unbind_inverse, _SCATTER, BaseUsage.REGION,
                                        forward=_unbind,
                                        aten=("aten.unbind.int",)),

    # --- Shape views ---
    ViewOp.EXPAND:        InverseDef(inv.expand_inverse, InverseKind.REDUCTION, BaseUsage.SHAPE,
                                     forward=lambda t, size, implicit=False: t.expand(size),
                                     aten=("aten.expand.default",)),
    ViewOp.PERMUTE:       InverseDef(inv.permute_inverse, _SELF,
                                     forward=lambda t, dims: t.permute(dims),
                                     aten=("aten.permute.default",)),
    ViewOp.RESHAPE_ALIAS: InverseDef(inv.reshape_alias_inverse, _RESHAPE, BaseUsage.SHAPE,
                                     forward=lambda t, size, stride: t.as_strided(size, stride),
                                     aten=("aten._reshape_alias.default",)),
    ViewOp.SQUEEZE:       InverseDef(inv.squeeze_inverse, _RESHAPE, BaseUsage.SHAPE,
                                     forward=lambda t: t.squeeze(),
                                     aten=("aten.squeeze.default",)),
    ViewOp.SQUEEZE_DIM:   InverseDef(inv.squeeze_dim_inverse, _RESHAPE, BaseUsage.SHAPE,
                                     forward=lambda t, dim: t.squeeze(dim),
                                     aten=("aten.squeeze.dim",)),
    ViewOp.TRANSPOSE:     InverseDef(inv.transpose_inverse, _SELF,
                                     forward=lambda t, dim0, dim1: t.transpose(dim0, dim1),
                                     aten=("aten.transpose.int",)),
    ViewOp.T:             InverseDef(inv.t_inverse, _SELF,
                                     forward=lambda t: t.t(),
                                     aten=("aten.t.default",)),
    ViewOp.UNSQUEEZE:     InverseDef(inv.unsqueeze_inverse, _RESHAPE,
                                     forward=lambda t, dim: t.unsqueeze(dim),
                                     aten=("aten.unsqueeze.default",)),
    ViewOp.VIEW:          InverseDef(inv.view_inverse, _RESHAPE, BaseUsage.SHAPE,
                                     forward=lambda t, size: t.view(size),
                                     aten=("aten.view.default",)),
    ViewOp.VIEW_DTYPE:    InverseDef(inv.view_dtype_inverse, _RESHAPE, BaseUsage.SHAPE,
                                     forward=lambda t, dtype: t.view(dtype),
                                     aten=("aten.view.dtype",)),
    ViewOp.UNFOLD:        InverseDef(inv.unfold_inverse, InverseKind.REDUCTION, BaseUsage.SHAPE,
                                     forward=lambda t, dimension, size, step: t.unfold(dimension, size, step),
                                     aten=("aten.unfold.default",)),

    # --- Identity ---
    ViewOp.DETACH: InverseDef(inv.detach_inverse, _IDENTITY,
                              forward=lambda t: t.detach(),
                              aten=("aten.detach.default",)),
    ViewOp.ALIAS:  InverseDef(inv.alias_inverse, _IDENTITY,
                              forward=lambda t: torch.ops.aten.alias(t),
                              aten=("aten.alias.default",)),

    # --- Guarded (100+) ---
    # No forward: these must never reach the functionalization pass.
    ViewOp.FW_PRIMAL:         InverseDef(inv.fw_primal_inverse, _GUARD,
                                         aten=("aten._fw_primal.default",)),
    ViewOp.AS_STRIDED:        InverseDef(inv.as_strided_inverse, _GUARD,
                                         aten=("aten.as_strided.default",)),
    ViewOp.INDICES_UNCHECKED: InverseDef(inv.indices_unchecked_inverse, _GUARD,
                                         aten=("aten._indices.default",)),
    ViewOp.VALUES_UNCHECKED:  InverseDef(inv.values_unchecked_inverse, _GUARD,
                                         aten=("aten._values.default",)),
    ViewOp.INDICES:           InverseDef(inv.indices_inverse, _GUARD,
                                         aten=("aten.indices.default",)),
    ViewOp.VALUES:            InverseDef(inv.values_inverse, _GUARD,
                                         aten=("aten.values.default",)),
    ViewOp.CROW_INDICES:      InverseDef(inv.crow_indices_inverse, _GUARD,
                                         aten=("aten.crow_indices.default",)),
    ViewOp.COL_INDICES:       InverseDef(inv.col_indices_inverse, _GUARD,
                                         aten=("aten.col_indices.default",)),
}


# ATen overload name -> ViewOp, derived from the registry.
ATEN_VIEW_OPS: dict[str, ViewOp] = {
    name: op for op, op_def in INVERSE_REGISTRY.items() for name in op_def.aten
}


# ---------------------------------------------------------------------------
# Lookup and dispatch
# ---------------------------------------------------------------------------

def get_inverse(op: ViewOp) -> InverseFn:
    """Return the inverse function registered for a view op."""
    op_def = INVERSE_REGISTRY.get(op)
    if op_def is None:
        raise KeyError(f"No inverse registered for {op}")
    return op_def.inverse


def lookup(target: Any) -> ViewOp:
    """Resolve an ATen overload to its ViewOp.

    Accepts an OpOverload (torch.ops.aten.slice.Tensor), an
    OpOverloadPacket (resolved through its .default overload), or the
    overload's string name ("aten.slice.Tensor").
    """
    name = target if isinstance(target, str) else str(target)
    if name in ATEN_VIEW_OPS:
        return ATEN_VIEW_OPS[name]
    if f"{name}.default" in ATEN_VIEW_OPS:
        return ATEN_VIEW_OPS[f"{name}.default"]
    raise KeyError(f"'{name}' is not a registered view op")


def apply_inverse(op: ViewOp, base: torch.Tensor, mutated_view: torch.Tensor,
                  *args) -> torch.Tensor:
    """Rebuild the base for a view created by `op` with `args`.

    `args` must be exactly the arguments the view was created with.
    """
    return get_inverse(op)(base, mutated_view, *args)


def apply_view(op: ViewOp, tensor: torch.Tensor, *args) -> torch.Tensor:
    """Create the view `op(tensor, *args)`.

    Raises:
        InternalAssertError: If op is guarded (has no functionalized form).
    """
    op_def = INVERSE_REGISTRY[op]
    if op_def.forward is None:
        raise InternalAssertError(
            f"{op.name} is not supported by the functionalization pass")
    return op_def.forward(tensor, *args)
