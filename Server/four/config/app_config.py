"""
Configuration Management Module

Centralized configuration management following the 12-factor app methodology.
All configuration is loaded from environment variables with sensible defaults.
"""

import os
from dotenv import load_dotenv

from . import game_settings

# Load environment variables from config.env next to this module
load_dotenv(os.path.join(os.path.dirname(os.path.abspath(__file__)), 'config.env'))


class Config:
    """Base configuration class with all settings."""

    # Flask Settings
    SECRET_KEY = os.getenv('SECRET_KEY', 'dev-secret-key-change-in-production')
    DEBUG = os.getenv('DEBUG', 'False').lower() == 'true'
    TESTING = False

    # Server Settings
    HOST = os.getenv('HOST', '127.0.0.1')
    PORT = int(os.getenv('PORT', 5000))

    # Game Settings
    MAX_ATTEMPTS = int(os.getenv('MAX_ATTEMPTS', game_settings.MAX_ATTEMPTS))
    REVEAL_INTERVAL_SECONDS = float(os.getenv('REVEAL_INTERVAL_SECONDS', game_settings.REVEAL_INTERVAL_SECONDS))
    SETTLE_MARGIN_SECONDS = float(os.getenv('SETTLE_MARGIN_SECONDS', game_settings.SETTLE_MARGIN_SECONDS))
    NOTIFICATION_TTL_SECONDS = float(os.getenv('NOTIFICATION_TTL_SECONDS', game_settings.NOTIFICATION_TTL_SECONDS))
    SESSION_IDLE_TIMEOUT_SECONDS = float(os.getenv('SESSION_IDLE_TIMEOUT_SECONDS', game_settings.SESSION_IDLE_TIMEOUT_SECONDS))

    # Logging Settings
    LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO')
    LOG_DIR = os.getenv('LOG_DIR', 'logs')


class DevelopmentConfig(Config):
    """Development configuration."""
    DEBUG = True


class ProductionConfig(Config):
    """Production configuration."""
    DEBUG = False


class TestingConfig(Config):
    """Testing configuration."""
    TESTING = True
    DEBUG = True


# Configuration mapping
config = {
    'development': DevelopmentConfig,
    'production': ProductionConfig,
    'testing': TestingConfig,
    'default': DevelopmentConfig
}
