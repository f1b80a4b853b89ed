"""
Utilities Package

Contains utility functions, decorators, and helper modules.
"""

from .helpers import get_user_identity, normalize_key
from .game_logger import game_logger

__all__ = ['get_user_identity', 'normalize_key', 'game_logger']
