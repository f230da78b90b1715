"""
Configuration modules for graph construction.
"""

from .config import settings, Settings
from .engine_settings import EngineSettings, DEFAULT_ENGINE_SETTINGS

__all__ = ['settings', 'Settings', 'EngineSettings', 'DEFAULT_ENGINE_SETTINGS']
