from .limits import SpeedBoundsConfig, clamp_segment_speed_kmh, distance_scale_factor
from .reconstructor import ReconstructionConfig, SegmentSpeedReconstructor
from .smoothing import centered_moving_average

__all__ = [
    "ReconstructionConfig",
    "SegmentSpeedReconstructor",
    "SpeedBoundsConfig",
    "centered_moving_average",
    "clamp_segment_speed_kmh",
    "distance_scale_factor",
]
