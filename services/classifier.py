"""Threshold classification of region values into display colors."""
import operator
from typing import List, Sequence

from config import DEFAULT_COLOR
from models import Region, ThresholdRule

_OPERATORS = {
    '<': operator.lt,
    '<=': operator.le,
    '=': operator.eq,
    '>=': operator.ge,
    '>': operator.gt,
}

DEFAULT_RULES = [
    ThresholdRule(operator='<', value=10, color='#ff0000'),
    ThresholdRule(operator='>=', value=10, color='#0000ff'),
    ThresholdRule(operator='>=', value=25, color='#00ff00'),
]


def matches(rule: ThresholdRule, value: float) -> bool:
    op = _OPERATORS.get(rule.operator)
    return bool(op and op(value, rule.value))


def classify(value: float, rules: Sequence[ThresholdRule], default: str = DEFAULT_COLOR) -> str:
    """Color of the first matching rule in list order, else ``default``."""
    for rule in rules:
        if matches(rule, value):
            return rule.color
    return default


def recolor(regions: Sequence[Region], rules: Sequence[ThresholdRule],
            default: str = DEFAULT_COLOR) -> List[Region]:
    """Recompute the color of every region that has a value."""
    out = []
    for region in regions:
        if not region.has_value:
            out.append(region)
            continue
        out.append(region.model_copy(update={'color': classify(region.value, rules, default)}))
    return out
