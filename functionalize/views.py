"""View operator identities for the functionalization pass.

A view is identified by its operator and the argument tuple it was created
with. The argument tuple is passed positionally to the inverse; only the
operator is materialized here, as a ViewOp.

Operators with several ATen overloads that need different inverses
(squeeze with/without dim, view with size/dtype) get distinct members.
"""

from enum import Enum, auto


class ViewOp(Enum):
    """View-producing operators that have an inverse entry.

    Values use range-based numbering so related ops cluster together:
      10–19  Element flips (conj, neg, real/complex reinterpretation)
      20–29  Region views (inverse scatters into a sub-region of base)
      30–49  Shape views (inverse re-shapes or reduces the mutated view)
      50–59  Identity views
      100+   Guarded (no inverse exists under functionalization)
    """
    # --- Element flips (10–19) ---
    CONJ            = 10
    NEG_VIEW        = 11
    VIEW_AS_REAL    = 12
    VIEW_AS_COMPLEX = 13

    # --- Region views (20–29) ---
    DIAGONAL         = 20   # args: offset, dim1, dim2
    SELECT           = 21   # args: dim, index
    SLICE            = 22   # args: dim, start, end, step
    SPLIT            = 23   # args: index, split_size, dim
    SPLIT_WITH_SIZES = 24   # args: index, split_sizes, dim
    UNBIND           = 25   # args: index, dim

    # --- Shape views (30–49) ---
    EXPAND        = 30      # args: size, implicit
    PERMUTE       = 31      # args: dims
    RESHAPE_ALIAS = 32      # args: size, stride
    SQUEEZE       = 33
    SQUEEZE_DIM   = 34      # args: dim
    TRANSPOSE     = 35      # args: dim0, dim1
    T             = 36
    UNSQUEEZE     = 37      # args: dim
    VIEW          = 38      # args: size
    VIEW_DTYPE    = 39      # args: dtype
    UNFOLD        = 40      # args: dimension, size, step

    # --- Identity (50–59) ---
    DETACH = 50
    ALIAS  = 51

    # --- Guarded (100+) ---
    FW_PRIMAL         = 100  # args: level
    AS_STRIDED        = 101  # args: size, stride, storage_offset
    INDICES_UNCHECKED = 102  # Tensor._indices()
    VALUES_UNCHECKED  = 103  # Tensor._values()
    INDICES           = 104
    VALUES            = 105
    CROW_INDICES      = 106
    COL_INDICES       = 107


GUARDED_BASE = 100


class InverseKind(Enum):
    """How an inverse reconstructs the base.

    SELF_INVERSE: Re-applies the same (or the inverse) view to the
        mutated view. Base is never read.
    SCATTER:      Writes the mutated view into the addressed sub-region of
        base; everything else in base is kept.
    REDUCTION:    Folds duplicated elements back by summation (expand,
        overlapping unfold windows).
    RESHAPE:      Re-expresses the mutated view under base's shape, strides
        or dtype.
    IDENTITY:     Returns the mutated view as is.
    UNSUPPORTED:  Always raises InternalAssertError.
    """
    SELF_INVERSE = auto()
    SCATTER      = auto()
    REDUCTION    = auto()
    RESHAPE      = auto()
    IDENTITY     = auto()
    UNSUPPORTED  = auto()


class BaseUsage(Enum):
    """What an inverse reads from its `base` argument.

    UNUSED: base is accepted for a uniform calling convention and ignored.
    SHAPE:  only base's sizes, strides or dtype are read.
    REGION: base's values are read and kept outside the scattered region.
    """
    UNUSED = auto()
    SHAPE  = auto()
    REGION = auto()
