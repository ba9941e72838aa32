from .loader import load_config, load_config_with_overrides
from .schema import AtlasConfig, StoreConfig, AIServiceConfig, OutputConfig

__all__ = [
    "load_config",
    "load_config_with_overrides",
    "AtlasConfig",
    "StoreConfig",
    "AIServiceConfig",
    "OutputConfig",
]
