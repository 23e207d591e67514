"""Catalog loading result object.

This module defines the result object returned when reading the pricing
catalog from disk, before any model is built from it.
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional

from .errors import ConfigFileNotFoundError, InvalidConfigFormatError


@dataclass
class ConfigResult:
    """Result of a catalog loading operation.

    Attributes:
        success: Whether the file was read and parsed
        data: Parsed catalog document (if successful)
        error: Error message (if unsuccessful)
        exception: Original exception (if an error occurred)
        path: Path to the catalog file
        missing: True when the file does not exist at all
    """

    success: bool
    data: Optional[Dict[str, Any]] = None
    error: Optional[str] = None
    exception: Optional[Exception] = None
    path: Optional[str] = None
    missing: bool = False

    def unwrap(self) -> Dict[str, Any]:
        """Return the parsed document or raise the matching configuration error.

        Raises:
            ConfigFileNotFoundError: If the file does not exist
            InvalidConfigFormatError: If the file could not be parsed
        """
        if self.success and self.data is not None:
            return self.data
        message = self.error or "Failed to load pricing catalog"
        if self.missing:
            raise ConfigFileNotFoundError(message, path=self.path)
        raise InvalidConfigFormatError(message, path=self.path)
