from __future__ import annotations

from nicegui import binding

from crane_console.constants import DEFAULT_AXIS_VALUE, Axis
from crane_console.core.validation import AxisValues


# Last values the device confirmed; written only after a successful dispatch
@binding.bindable_dataclass
class ViewState:
    x: float = DEFAULT_AXIS_VALUE
    y: float = DEFAULT_AXIS_VALUE
    z: float = DEFAULT_AXIS_VALUE
    weight: float | None = None
    vehicle_code: int | None = None
    last_error: str | None = None
    last_update_ts: float = 0.0

    def axis(self, axis: Axis) -> float:
        return float(getattr(self, axis))

    def set_axis(self, axis: Axis, value: float) -> None:
        setattr(self, axis, float(value))

    def axis_values(self) -> AxisValues:
        return AxisValues(x=self.x, y=self.y, z=self.z)


# Module-level singleton
view_state = ViewState()
