from pydantic import BaseModel
from typing import List
from models import ThresholdRule


class RulesRequest(BaseModel):
    """Reglas en orden de evaluación; gana la primera que coincide."""
    rules: List[ThresholdRule]


class RulesResponse(BaseModel):
    rules: List[ThresholdRule]
    default_color: str
