"""Dimension and shape arithmetic shared by the view inverses."""

from typing import Sequence

import torch


class DimensionError(IndexError):
    """An axis index falls outside the valid range for a tensor's rank."""


def maybe_wrap_dim(dim: int, rank: int, wrap_scalar: bool = True) -> int:
    """Normalize a possibly-negative axis into [0, rank).

    Negative axes count from the end (-1 is the last axis). A rank-0 tensor
    is treated as rank 1 when wrap_scalar is set, so -1 and 0 both address
    a scalar, matching torch.

    Raises:
        DimensionError: If dim is outside [-rank, rank - 1].
    """
    if rank <= 0:
        if not wrap_scalar:
            raise DimensionError(
                f"Dimension specified as {dim} but tensor has no dimensions")
        rank = 1

    lo, hi = -rank, rank - 1
    if dim < lo or dim > hi:
        raise DimensionError(
            f"Dimension out of range (expected to be in range of [{lo}, {hi}], "
            f"but got {dim})")
    return dim + rank if dim < 0 else dim


def unsqueeze_to(tensor: torch.Tensor, sizes: Sequence[int]) -> torch.Tensor:
    """Insert a size-1 axis at every position where `sizes` has extent 1.

    Inverts a squeeze that removed all size-1 axes. Insertions go left to
    right, so each position refers to the already-expanded result.
    """
    result = tensor
    for dim, size in enumerate(sizes):
        if size == 1:
            result = result.unsqueeze(dim)
    return result


def unsqueeze_to_dim(tensor: torch.Tensor, dim: int,
                     sizes: Sequence[int]) -> torch.Tensor:
    """Insert one size-1 axis at `dim` if `sizes` had extent 1 there.

    Squeezing an axis whose extent isn't 1 is a no-op, so the inverse is a
    no-op too. A scalar `sizes` never gets an axis back.
    """
    dim = maybe_wrap_dim(dim, len(sizes))
    if len(sizes) > 0 and sizes[dim] == 1:
        return tensor.unsqueeze(dim)
    return tensor
