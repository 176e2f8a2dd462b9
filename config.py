"""
Application configuration module.

This module defines configuration classes for different environments
(development, testing, production). Configuration values are loaded
from environment variables with sensible defaults.

The client keeps no database of its own: the only external dependency is
the remote task service, addressed by ``TASK_SERVICE_URL``.
"""

from __future__ import annotations

import os
from pathlib import Path

# Base directory of the project
BASE_DIR = Path(__file__).resolve().parent

DEFAULT_TASK_SERVICE_URL = "https://todo-expo-backend.onrender.com"


class Config:
    """Base configuration with default settings."""

    # Only used to sign the session cookie that carries flash messages.
    SECRET_KEY: str = os.environ.get("SECRET_KEY", "dev-secret-key-change-in-production")

    TASK_SERVICE_URL: str = os.environ.get("TASK_SERVICE_URL", DEFAULT_TASK_SERVICE_URL)
    # requests never times out on its own, so always pass one explicitly.
    TASK_SERVICE_TIMEOUT: int = int(os.environ.get("TASK_SERVICE_TIMEOUT", "5"))


class DevelopmentConfig(Config):
    """Development environment configuration."""

    DEBUG: bool = True
    TESTING: bool = False


class TestingConfig(Config):
    """Testing environment configuration."""

    DEBUG: bool = True
    TESTING: bool = True

    TASK_SERVICE_URL: str = os.environ.get("TEST_TASK_SERVICE_URL", "http://task-service")
    TASK_SERVICE_TIMEOUT: int = int(os.environ.get("TEST_TASK_SERVICE_TIMEOUT", "1"))


class ProductionConfig(Config):
    """Production environment configuration."""

    DEBUG: bool = False
    TESTING: bool = False


# Configuration mapping for easy access
config = {
    "development": DevelopmentConfig,
    "testing": TestingConfig,
    "production": ProductionConfig,
    "default": DevelopmentConfig,
}


def get_config(env: str | None = None) -> type[Config]:
    """
    Get the configuration class for the specified environment.

    Args:
        env: Environment name (development, testing, production).
             If None, uses FLASK_ENV environment variable.

    Returns:
        Configuration class for the specified environment.
    """
    if env is None:
        env = os.environ.get("FLASK_ENV", "development")
    return config.get(env, config["default"])
