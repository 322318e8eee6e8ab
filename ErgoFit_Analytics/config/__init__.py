"""Fixed ergonomic thresholds."""
from .ergo_thresholds import (
    ERGO_THRESHOLDS, ActionThresholds, ForceThresholds, GeometryThresholds,
    LeverThresholds, PostureThresholds, get_risk_level,
)
