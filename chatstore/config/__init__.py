"""
Configuration handling for the application.

Settings hierarchy: defaults → config.yaml → environment → overrides.
"""

from chatstore.config.settings import settings, load_settings, AppConfig
from chatstore.config.base_paths import PROJECT_ROOT, find_project_root

__all__ = [
    'settings',
    'load_settings',
    'AppConfig',
    'PROJECT_ROOT',
    'find_project_root',
]
