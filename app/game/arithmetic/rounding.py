from __future__ import annotations

import math
from decimal import ROUND_HALF_UP, Decimal, localcontext

_ONE_DECIMAL = Decimal("0.1")


def round_one_decimal(value: float) -> float:
    # Half-up on the decimal representation: 6.25 -> 6.3, unlike round().
    if not math.isfinite(value):
        return value
    exact = Decimal(repr(value))
    with localcontext() as ctx:
        ctx.prec = max(ctx.prec, exact.adjusted() + 3)
        return float(exact.quantize(_ONE_DECIMAL, rounding=ROUND_HALF_UP))
