"""Shared fixtures and helpers for the test suite.

pytest discovers conftest.py automatically; fixtures defined here are
available to all test files in this directory without explicit imports.
"""

import numpy as np
import pytest
import torch


@pytest.fixture(autouse=True)
def _seed():
    """Deterministic random bases and mutations for every test."""
    torch.manual_seed(0)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def as_numpy(t: torch.Tensor) -> np.ndarray:
    """numpy copy of a tensor with lazy conj/neg bits materialized."""
    return t.detach().cpu().resolve_conj().resolve_neg().numpy()


def assert_tensors_close(actual: torch.Tensor, expected: torch.Tensor,
                         atol: float = 1e-6) -> None:
    """Same shape, same dtype, same values."""
    assert tuple(actual.shape) == tuple(expected.shape), (
        f"shape {tuple(actual.shape)} != {tuple(expected.shape)}")
    assert actual.dtype == expected.dtype, f"dtype {actual.dtype} != {expected.dtype}"
    np.testing.assert_allclose(as_numpy(actual), as_numpy(expected), atol=atol)


def region_mask(base_shape: tuple[int, ...], view_fn) -> np.ndarray:
    """Boolean mask over base of the elements a view addresses.

    view_fn maps a tensor to its view; it's applied to a tensor of flat
    indices so each view element names the base element it came from.
    """
    numel = int(np.prod(base_shape))
    index = torch.arange(numel).reshape(base_shape)
    mask = np.zeros(numel, dtype=bool)
    mask[as_numpy(view_fn(index)).reshape(-1)] = True
    return mask.reshape(base_shape)
