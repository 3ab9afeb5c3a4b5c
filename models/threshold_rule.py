from pydantic import BaseModel
from typing import Literal

Operator = Literal["<", "<=", "=", ">=", ">"]


class ThresholdRule(BaseModel):
    operator: Operator
    value: float
    color: str  # CSS color, e.g. "#ff0000"
