from .loader import load_config
from .models import (
    EngineConfig,
    ExportConfig,
    FlowchartConfig,
    MermendConfig,
    RenderSettings,
    WatchConfig,
)

__all__ = [
    "EngineConfig",
    "ExportConfig",
    "FlowchartConfig",
    "MermendConfig",
    "RenderSettings",
    "WatchConfig",
    "load_config",
]
