"""Mapping of CPU percentages onto thermal states."""

from __future__ import annotations

from models.thermal import ThermalState, ThresholdSet


def classify(cpu_percent: float, thresholds: ThresholdSet) -> ThermalState:
    """Return the first state whose inclusive upper bound holds ``cpu_percent``.

    Boundaries are compared in ascending order, so an inverted configuration
    still yields a well-defined state. Values above ``throttle`` (kernel_task
    can exceed 100% across cores) are always ``heavy_throttling``.
    """
    if cpu_percent <= thresholds.idle:
        return ThermalState.idle
    if cpu_percent <= thresholds.light:
        return ThermalState.light_load
    if cpu_percent <= thresholds.heavy:
        return ThermalState.heavy_load
    if cpu_percent <= thresholds.throttle:
        return ThermalState.throttling
    return ThermalState.heavy_throttling
