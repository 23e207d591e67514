"""Catalog schema version validation and compatibility checking using semver."""

from typing import Any, Dict, Optional

import semver

from .logging import LogEvent, log_error, log_warning


class SchemaVersionValidator:
    """Handles catalog schema version validation and compatibility checking."""

    # Supported schema version ranges
    SUPPORTED_SCHEMA_VERSIONS = {
        "1.x": ">=1.0.0,<2.0.0",
    }

    DEFAULT_SCHEMA_VERSION = "1.0.0"

    @classmethod
    def _check_version_range(cls, version: str, range_spec: str) -> bool:
        """Check if a version satisfies a range specification.

        Args:
            version: Version string to check
            range_spec: Range specification like ">=1.0.0,<2.0.0"

        Returns:
            True if version satisfies the range
        """
        try:
            parsed_version = semver.Version.parse(version)
        except ValueError:
            return False

        for condition in (cond.strip() for cond in range_spec.split(",")):
            # Pre-releases of a supported version count as that version
            if condition.startswith(">=") and parsed_version.prerelease:
                candidate = parsed_version.finalize_version()
            else:
                candidate = parsed_version
            if not candidate.match(condition):
                return False
        return True

    @classmethod
    def get_schema_version(cls, config_data: Dict[str, Any]) -> str:
        """Extract and normalise the schema version from catalog data.

        Args:
            config_data: Parsed catalog document

        Returns:
            Valid schema version string

        Raises:
            ValueError: If version is invalid
        """
        version = config_data.get("version")

        if not version:
            log_warning(
                LogEvent.PRICING_REGISTRY,
                "Missing schema version, using default",
                default_version=cls.DEFAULT_SCHEMA_VERSION,
            )
            return cls.DEFAULT_SCHEMA_VERSION

        version_str = str(version)

        try:
            semver.Version.parse(version_str)
        except ValueError:
            # Accept "1.0" and "1" as shorthand
            parts = version_str.split(".")
            if len(parts) == 2:
                normalised = f"{parts[0]}.{parts[1]}.0"
            elif len(parts) == 1:
                normalised = f"{parts[0]}.0.0"
            else:
                normalised = ""
            try:
                semver.Version.parse(normalised)
            except ValueError as e:
                log_error(
                    LogEvent.PRICING_REGISTRY,
                    "Invalid schema version format",
                    version=version_str,
                    error=str(e),
                )
                raise ValueError(f"Invalid schema version format: {version_str}") from e
            version_str = normalised

        return version_str

    @classmethod
    def is_compatible_schema(cls, version: str) -> bool:
        """Check if schema version is supported by this registry.

        Args:
            version: Schema version string

        Returns:
            True if version is supported, False otherwise
        """
        return cls.get_compatible_range(version) is not None

    @classmethod
    def get_compatible_range(cls, version: str) -> Optional[str]:
        """Get the compatible version range name for a given version.

        Args:
            version: Schema version string

        Returns:
            Version range name if compatible, None otherwise
        """
        for range_name, range_spec in cls.SUPPORTED_SCHEMA_VERSIONS.items():
            if cls._check_version_range(version, range_spec):
                return range_name
        return None

    @classmethod
    def validate_schema_structure(cls, config_data: Dict[str, Any], version: str) -> bool:
        """Validate that the document structure matches the declared schema version.

        Args:
            config_data: Parsed catalog document
            version: Schema version string

        Returns:
            True if structure is valid for the version
        """
        if cls._check_version_range(version, cls.SUPPORTED_SCHEMA_VERSIONS["1.x"]):
            if "models" not in config_data:
                log_error(
                    LogEvent.PRICING_REGISTRY,
                    "Missing required keys for schema version",
                    version=version,
                    missing_keys=["models"],
                )
                return False
            if not isinstance(config_data["models"], dict):
                log_error(
                    LogEvent.PRICING_REGISTRY,
                    "'models' must be a mapping of model id to definition",
                    version=version,
                    found_type=type(config_data["models"]).__name__,
                )
                return False
            return True

        return False
