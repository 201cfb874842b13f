# barsmith/config/__init__.py
"""
Configuration for barsmith: the RenderConfig dataclass and the TOML
defaults/profile loader that feeds it.
"""
from .settings import RenderConfig
from .loader import load_and_merge_configs, save_config_to_profile

__all__ = ["RenderConfig", "load_and_merge_configs", "save_config_to_profile"]
