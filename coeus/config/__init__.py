"""Engine configuration."""

from .settings import (
    AspectsCfg,
    RenderCfg,
    Settings,
    WheelCfg,
    config_path,
    default_settings,
    get_config_home,
    load_settings,
    save_settings,
)

__all__ = [
    "AspectsCfg",
    "RenderCfg",
    "Settings",
    "WheelCfg",
    "config_path",
    "default_settings",
    "get_config_home",
    "load_settings",
    "save_settings",
]
