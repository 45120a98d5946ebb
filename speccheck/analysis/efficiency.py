"""LED drive-current to luminous-flux models.

Luminous efficacy falls as drive current rises, so an LED run at half its
rated current gives more than half its rated flux per milliamp, and the last
stretch up to the rated current yields less. The droop model below is a
heuristic curve, not a fit to any particular datasheet; anything with a
``lumens_at_current`` method can replace it.
"""
from typing import Optional, Protocol
from pydantic import BaseModel, Field


class LedEfficiencyModel(Protocol):
    def lumens_at_current(self, target_current: float, max_current: float, max_lumens: float) -> float:
        ...


class LedDroopModel(BaseModel):
    linear_boundary: float = Field(0.5, gt=0.0, lt=1.0)  # drive ratio where droop starts
    peak_efficiency_ratio: float = 0.75  # relative efficiency at rated current
    droop_exponent: float = 1.5

    def lumens_at_current(self, target_current: float, max_current: float, max_lumens: float) -> float:
        """Flux reachable at ``target_current``; both currents in the same unit."""
        if max_current <= 0 or target_current <= 0 or max_lumens <= 0:
            return 0.0

        # Never extrapolate past the rated current
        ratio = min(target_current / max_current, 1.0)
        linear_output = self.linear_boundary * max_lumens

        if ratio <= self.linear_boundary:
            return (ratio / self.linear_boundary) * linear_output

        remaining = (ratio - self.linear_boundary) / (1 - self.linear_boundary)
        droop = 1 - (1 - self.peak_efficiency_ratio) * remaining ** self.droop_exponent
        additional = (max_lumens - linear_output) * remaining * droop
        return round(linear_output + additional)


def calculate_led_lumens_at_current(target_current: float,
                                    max_current: float,
                                    max_lumens: float,
                                    model: Optional[LedEfficiencyModel] = None) -> float:
    model = model or LedDroopModel()
    return model.lumens_at_current(target_current, max_current, max_lumens)
