from .clusterer import CameraClusterer, ClusteredCamera, ClusteringConfig, ClusterMember, collect_encounters, encounter_date
from .views import CameraFilter, CameraSort, CameraSummary, filter_cameras, sort_cameras, summarize_cameras

__all__ = [
    "CameraClusterer",
    "CameraFilter",
    "CameraSort",
    "CameraSummary",
    "ClusterMember",
    "ClusteredCamera",
    "ClusteringConfig",
    "collect_encounters",
    "encounter_date",
    "filter_cameras",
    "sort_cameras",
    "summarize_cameras",
]
