"""View inverses for the functionalization pass.

These aren't true inverses in the mathematical sense: each one describes how
to undo the original view, given the base the view was taken from. For every
invertible view op:

    b = view(a, *args)
    a_copy = view_inverse(a, b, *args)
    # a and a_copy are equal

For region views (select, slice, split, unbind, diagonal) the same holds
for any mutated b: the result is a with exactly the addressed region
replaced by b.

Every inverse takes (base, mutated_view, *args) so callers can dispatch
uniformly, but most of them only need base's shape, and several ignore it
entirely. The BaseUsage recorded in the registry says which is which.

Nothing here mutates its inputs; every function returns a new tensor (or
the mutated view itself, for identity views).
"""

from typing import NoReturn, Sequence

import torch

from .dims import maybe_wrap_dim, unsqueeze_to, unsqueeze_to_dim


class InternalAssertError(AssertionError):
    """A view op with no inverse was reached during functionalization.

    This is a programming error in the caller, not a recoverable input
    error: these ops must never be functionalized.
    """


def _internal_assert_fail(msg: str) -> NoReturn:
    raise InternalAssertError(msg)


def _sparse_unsupported(name: str) -> NoReturn:
    _internal_assert_fail(
        f"Attempted to call {name}() during the functionalization pass. "
        f"For now, sparse tensors aren't supported during functionalization")


# ---------------------------------------------------------------------------
# Element flips
# ---------------------------------------------------------------------------

def conj_inverse(base: torch.Tensor, mutated_view: torch.Tensor) -> torch.Tensor:
    return mutated_view.conj()


def neg_view_inverse(base: torch.Tensor, mutated_view: torch.Tensor) -> torch.Tensor:
    return mutated_view.neg()


def view_as_real_inverse(base: torch.Tensor, mutated_view: torch.Tensor) -> torch.Tensor:
    return torch.view_as_complex(mutated_view)


def view_as_complex_inverse(base: torch.Tensor, mutated_view: torch.Tensor) -> torch.Tensor:
    # view_as_real can't carry a lazy conj bit; materialize it first.
    return torch.view_as_real(mutated_view.resolve_conj())


# ---------------------------------------------------------------------------
# Region views: scatter into base, keep everything else
# ---------------------------------------------------------------------------

def diagonal_inverse(base: torch.Tensor, mutated_view: torch.Tensor,
                     offset: int = 0, dim1: int = 0, dim2: int = 1) -> torch.Tensor:
    return torch.diagonal_scatter(base, mutated_view, offset, dim1, dim2)


def select_inverse(base: torch.Tensor, mutated_view: torch.Tensor,
                   dim: int, index: int) -> torch.Tensor:
    return torch.select_scatter(base, mutated_view, dim, index)


def slice_inverse(base: torch.Tensor, mutated_view: torch.Tensor, dim: int = 0,
                  start: int | None = None, end: int | None = None,
                  step: int = 1) -> torch.Tensor:
    return torch.slice_scatter(base, mutated_view, dim, start, end, step)


def split_inverse(base: torch.Tensor, mutated_view: torch.Tensor,
                  mutated_view_idx: int, split_size: int, dim: int = 0) -> torch.Tensor:
    """Layer chunk `mutated_view_idx` of split(split_size, dim) back onto base.

    Only one of split()'s outputs is available here, so unlike autograd's
    split backward we can't just concatenate; the chunk is slice-scattered
    into its own range. The last chunk may be short, so `end` is clamped to
    the dim size.
    """
    dim = maybe_wrap_dim(dim, base.dim())
    dim_size = base.size(dim)
    start = mutated_view_idx * split_size
    end = min(start + split_size, dim_size)
    return torch.slice_scatter(base, mutated_view, dim, start, end, 1)


def split_with_sizes_inverse(base: torch.Tensor, mutated_view: torch.Tensor,
                             mutated_view_idx: int, split_sizes: Sequence[int],
                             dim: int = 0) -> torch.Tensor:
    dim = maybe_wrap_dim(dim, base.dim())
    dim_size = base.size(dim)
    start = sum(split_sizes[:mutated_view_idx])
    end = min(start + split_sizes[mutated_view_idx], dim_size)
    return torch.slice_scatter(base, mutated_view, dim, start, end, 1)


def unbind_inverse(base: torch.Tensor, mutated_view: torch.Tensor,
                   mutated_view_idx: int, dim: int = 0) -> torch.Tensor:
    dim = maybe_wrap_dim(dim, base.dim())
    return torch.select_scatter(base, mutated_view, dim, mutated_view_idx)


# ---------------------------------------------------------------------------
# Shape views
# ---------------------------------------------------------------------------

def expand_inverse(base: torch.Tensor, mutated_view: torch.Tensor,
                   size: Sequence[int], implicit: bool = False) -> torch.Tensor:
    """Fold the broadcast axes back by summing over them.

    expand duplicates elements rather than selecting a region, so every copy
    of a base element contributes to it.
    """
    return mutated_view.sum_to_size(base.shape)


def invert_permutation(tensor: torch.Tensor, dims: Sequence[int]) -> torch.Tensor:
    """Apply the permutation that undoes `tensor.permute(dims)`."""
    ndims = len(dims)
    inverse = [0] * ndims
    for i, d in enumerate(dims):
        inverse[maybe_wrap_dim(d, ndims)] = i
    return tensor.permute(inverse)


def permute_inverse(base: torch.Tensor, mutated_view: torch.Tensor,
                    dims: Sequence[int]) -> torch.Tensor:
    return invert_permutation(mutated_view, dims)


def reshape_alias_inverse(base: torch.Tensor, mutated_view: torch.Tensor,
                          size: Sequence[int], stride: Sequence[int]) -> torch.Tensor:
    return mutated_view.as_strided(base.size(), base.stride())


def squeeze_inverse(base: torch.Tensor, mutated_view: torch.Tensor) -> torch.Tensor:
    return unsqueeze_to(mutated_view, base.shape)


def squeeze_dim_inverse(base: torch.Tensor, mutated_view: torch.Tensor,
                        dim: int) -> torch.Tensor:
    return unsqueeze_to_dim(mutated_view, dim, base.shape)


def t_inverse(base: torch.Tensor, mutated_view: torch.Tensor) -> torch.Tensor:
    return mutated_view.t()


def transpose_inverse(base: torch.Tensor, mutated_view: torch.Tensor,
                      dim0: int, dim1: int) -> torch.Tensor:
    return mutated_view.transpose(dim0, dim1)


def unsqueeze_inverse(base: torch.Tensor, mutated_view: torch.Tensor,
                      dim: int) -> torch.Tensor:
    # dim was given against the unsqueezed rank, which is the view's rank
    return mutated_view.squeeze(maybe_wrap_dim(dim, mutated_view.dim()))


def view_inverse(base: torch.Tensor, mutated_view: torch.Tensor,
                 size: Sequence[int]) -> torch.Tensor:
    return mutated_view.view(base.shape)


def view_dtype_inverse(base: torch.Tensor, mutated_view: torch.Tensor,
                       dtype: torch.dtype) -> torch.Tensor:
    return mutated_view.view(base.dtype)


def unfold_inverse(base: torch.Tensor, mutated_view: torch.Tensor,
                   dimension: int, size: int, step: int) -> torch.Tensor:
    """Scatter-add every window back into a base-shaped tensor.

    Windows overlap when step < size; overlapping elements are summed, the
    same accumulation autograd's unfold backward does. Elements no window
    covers come back as zeros.
    """
    dimension = maybe_wrap_dim(dimension, base.dim())
    return torch.ops.aten.unfold_backward(
        mutated_view, list(base.shape), dimension, size, step)


# ---------------------------------------------------------------------------
# Identity views
# ---------------------------------------------------------------------------

def detach_inverse(base: torch.Tensor, mutated_view: torch.Tensor) -> torch.Tensor:
    # Functionalization doesn't track autograd metadata, so detach() is an identity.
    return mutated_view


def alias_inverse(base: torch.Tensor, mutated_view: torch.Tensor) -> torch.Tensor:
    return mutated_view


# ---------------------------------------------------------------------------
# Guarded: no inverse under functionalization
# ---------------------------------------------------------------------------

def fw_primal_inverse(base: torch.Tensor, mutated_view: torch.Tensor,
                      level: int) -> NoReturn:
    _internal_assert_fail(
        "Attempted to call _fw_primal() during the functionalization pass. "
        "For now, this is not supported.")


def as_strided_inverse(base: torch.Tensor, mutated_view: torch.Tensor,
                       size: Sequence[int], stride: Sequence[int],
                       storage_offset: int | None = None) -> NoReturn:
    _internal_assert_fail(
        "as_strided has not been implemented in the functionalization pass yet")


def indices_unchecked_inverse(base: torch.Tensor, mutated_view: torch.Tensor) -> NoReturn:
    _sparse_unsupported("_indices")


def values_unchecked_inverse(base: torch.Tensor, mutated_view: torch.Tensor) -> NoReturn:
    _sparse_unsupported("_values")


def indices_inverse(base: torch.Tensor, mutated_view: torch.Tensor) -> NoReturn:
    _sparse_unsupported("indices")


def values_inverse(base: torch.Tensor, mutated_view: torch.Tensor) -> NoReturn:
    _sparse_unsupported("values")


def crow_indices_inverse(base: torch.Tensor, mutated_view: torch.Tensor) -> NoReturn:
    _sparse_unsupported("crow_indices")


def col_indices_inverse(base: torch.Tensor, mutated_view: torch.Tensor) -> NoReturn:
    _sparse_unsupported("col_indices")
