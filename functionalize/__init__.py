"""View inverses for a tensor functionalization pass.

For every view op, an inverse rebuilds the base from a mutated view
without mutating anything:

    from functionalize import ViewOp, apply_inverse

    view = base.select(1, 2)
    new_base = apply_inverse(ViewOp.SELECT, base, torch.zeros(3), 1, 2)

The inverses themselves live in functionalize.inverses under their
<op>_inverse names; INVERSE_REGISTRY maps each ViewOp to its inverse and
metadata, and lookup() resolves an ATen overload to its ViewOp.
"""

from .dims import DimensionError, maybe_wrap_dim, unsqueeze_to, unsqueeze_to_dim  # noqa: F401
from .inverses import InternalAssertError  # noqa: F401
from .registry import (  # noqa: F401
    ATEN_VIEW_OPS,
    INVERSE_REGISTRY,
    InverseDef,
    apply_inverse,
    apply_view,
    get_inverse,
    lookup,
)
from .views import BaseUsage, InverseKind, ViewOp  # noqa: F401
