from pydantic import BaseModel
from typing import Tuple


class TimeWindow(BaseModel):
    """Ventana temporal expresada en horas relativas a "ahora".

    start > end is accepted; consumers call ``normalized()`` before use.
    """
    start: float = 0.0   # horas desde ahora (negativo = pasado)
    end: float = 168.0

    def normalized(self) -> Tuple[float, float]:
        return min(self.start, self.end), max(self.start, self.end)

    @property
    def duration_hours(self) -> float:
        return abs(self.end - self.start)
