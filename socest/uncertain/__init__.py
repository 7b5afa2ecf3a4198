from socest.uncertain.bayes import bayes_update
from socest.uncertain.value import (
    UncertainValue,
    exp,
    gate,
    is_uncertain,
    maximum,
    nth_moment,
    point,
    sample,
    sqrt,
    std,
    support_max,
    support_min,
)

__all__ = [
    "UncertainValue",
    "bayes_update",
    "exp",
    "gate",
    "is_uncertain",
    "maximum",
    "nth_moment",
    "point",
    "sample",
    "sqrt",
    "std",
    "support_max",
    "support_min",
]
