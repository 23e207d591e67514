"""Configuration path handling for the pricing model registry.

This module resolves where the pricing catalog is read from, following the XDG
Base Directory Specification for user-specific configuration files.
"""

import logging
import os
from pathlib import Path
from typing import Tuple

import platformdirs

# Application name used for directory paths
APP_NAME = "pricing-model-registry"

# Environment variable names
ENV_CATALOG_PATH = "PMR_CATALOG_PATH"
ENV_USAGE_API_KEY = "PMR_USAGE_API_KEY"
ENV_USAGE_API_URL = "PMR_USAGE_API_URL"

# Default filenames
CATALOG_FILENAME = "pricing_models.yaml"

# Source labels reported by get_catalog_source()
SOURCE_ENV = "Environment variable (PMR_CATALOG_PATH)"
SOURCE_USER = "User config directory"
SOURCE_BUNDLED = "Bundled package data"

logger = logging.getLogger(__name__)


def get_package_data_dir() -> Path:
    """Get the path to the package's bundled data directory."""
    return Path(__file__).parent / "data"


def get_user_config_dir() -> Path:
    """Get the path to the user's config directory for this application."""
    return Path(platformdirs.user_config_dir(APP_NAME))


def ensure_user_config_dir_exists() -> None:
    """Ensure that the user config directory exists.

    Raises:
        OSError: If the directory cannot be created due to permission errors or other IO issues
        PermissionError: If the directory exists but is not writable
    """
    user_dir = get_user_config_dir()

    if user_dir.exists():
        if not os.access(user_dir, os.W_OK):
            raise PermissionError(f"Config directory exists but is not writable: {user_dir}")
        return

    os.makedirs(user_dir, exist_ok=True)

    if not os.access(user_dir, os.W_OK):
        raise PermissionError(f"Created config directory but it is not writable: {user_dir}")


def copy_default_to_user_config(filename: str = CATALOG_FILENAME) -> bool:
    """Copy a bundled data file to the user config directory if it doesn't exist.

    This seeds an editable catalog; the bundled copy is never modified.

    Args:
        filename: Name of the data file to copy

    Returns:
        True if file was copied, False if no action was taken

    Raises:
        OSError: If there is an error creating directory or copying file
    """
    package_file = get_package_data_dir() / filename
    user_file = get_user_config_dir() / filename

    if user_file.exists():
        return False

    try:
        ensure_user_config_dir_exists()
    except OSError as e:
        logger.error(f"Failed to create user config directory: {e}")
        raise

    if package_file.exists():
        try:
            user_file.write_bytes(package_file.read_bytes())
            return True
        except OSError as e:
            logger.error(f"Failed to copy config file {filename}: {e}")
            raise

    return False


def resolve_catalog_path() -> Tuple[str, str]:
    """Resolve the catalog path together with the source it came from.

    Returns:
        Tuple of (path, source label)
    """
    # 1. Environment variable
    env_path = os.environ.get(ENV_CATALOG_PATH)
    if env_path and Path(env_path).is_file():
        return env_path, SOURCE_ENV

    # 2. User config directory
    user_path = get_user_config_dir() / CATALOG_FILENAME
    if user_path.is_file():
        return str(user_path), SOURCE_USER

    # 3. Bundled package data
    return str(get_package_data_dir() / CATALOG_FILENAME), SOURCE_BUNDLED


def get_catalog_path() -> str:
    """Get the path to the pricing catalog file, respecting XDG specification.

    Returns:
        Path to the pricing catalog file
    """
    return resolve_catalog_path()[0]
