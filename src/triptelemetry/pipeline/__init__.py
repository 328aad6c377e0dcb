from .engine import AnalysisReport, EngineConfig, TelemetryEngine

__all__ = ["AnalysisReport", "EngineConfig", "TelemetryEngine"]
