"""
Conversion of percentage allocations into integer delegation ratios.

The contract stores integer ratios, so the user's percentages are turned into
the smallest integers with exactly the same proportions:

    {25, 25, 50} -> {1, 1, 2}
    {33, 33, 33} -> {1, 1, 1}

Each share is taken relative to the sum of the supplied percents, so inputs
that do not add up to 100 keep their relative proportion.
"""

import math
from fractions import Fraction
from functools import reduce
from typing import Dict, Iterable, Tuple, Mapping, Union

from .utils import Number, to_fraction


RatioSet = Dict[str, int]


def calculate_ratios(allocations: Union[Mapping[str, Number],
                                        Iterable[Tuple[str, Number]]]) -> RatioSet:
    """Return the minimal integer ratio of every address.

    Args:
        allocations: address to percent, as a mapping or (address, percent)
            pairs. Zero percents are ignored.

    Raises:
        ValueError: on a negative percent
    """
    if isinstance(allocations, Mapping):
        allocations = allocations.items()

    percents: Dict[str, Fraction] = {}
    for address, percent in allocations:
        value = to_fraction(percent)
        if value < 0:
            raise ValueError(f"Negative percent {percent} for {address}")
        if value == 0:
            continue
        percents[address] = value

    if not percents:
        return {}

    total = sum(percents.values(), Fraction(0))

    # Fraction keeps itself in lowest terms
    shares = {address: value / total for address, value in percents.items()}
    denominator = reduce(_lcm, (share.denominator for share in shares.values()), 1)

    return {
        address: share.numerator * (denominator // share.denominator)
        for address, share in shares.items()
    }


def _lcm(a: int, b: int) -> int:
    return a * b // math.gcd(a, b)
