"""Policy file loader with validation."""

import hashlib
from pathlib import Path

import structlog
import yaml
from pydantic import ValidationError

from diverse_select.config.schemas.policies import PoliciesConfig


logger = structlog.get_logger()


class PolicyValidationError(Exception):
    """Raised when a policy file fails schema validation."""

    def __init__(self, errors: list[dict[str, str]], file_path: str) -> None:
        """Initialize the error.

        Args:
            errors: List of validation error details.
            file_path: Path to the file that failed validation.
        """
        self.errors = errors
        self.file_path = file_path
        super().__init__(f"Validation failed for {file_path}: {len(errors)} errors")


def _errors_from_validation(error: ValidationError) -> list[dict[str, str]]:
    """Flatten a Pydantic ValidationError into loc/msg/type dicts."""
    return [
        {
            "loc": ".".join(str(loc) for loc in err["loc"]),
            "msg": err["msg"],
            "type": err["type"],
        }
        for err in error.errors()
    ]


def load_policies(file_path: Path) -> PoliciesConfig:
    """Load and validate a policies YAML file.

    An empty file yields the built-in defaults.

    Args:
        file_path: Path to policies.yaml.

    Returns:
        Validated PoliciesConfig.

    Raises:
        PolicyValidationError: If the content does not match the schema.
        FileNotFoundError: If the file does not exist.
        yaml.YAMLError: If YAML parsing fails.
    """
    log = logger.bind(component="config", file_path=str(file_path))

    try:
        content_bytes = file_path.read_bytes()
    except FileNotFoundError:
        log.error("policy_file_not_found")
        raise

    checksum = hashlib.sha256(content_bytes).hexdigest()

    try:
        parsed = yaml.safe_load(content_bytes.decode("utf-8")) or {}
    except yaml.YAMLError as e:
        log.error("policy_yaml_parse_failed", error=str(e))
        raise

    try:
        config = PoliciesConfig.model_validate(parsed)
    except ValidationError as e:
        errors = _errors_from_validation(e)
        log.error(
            "policy_validation_failed",
            validation_error_count=len(errors),
            errors=errors,
        )
        raise PolicyValidationError(errors, str(file_path)) from e

    log.info(
        "policy_file_loaded",
        file_sha256=checksum,
        version=config.version,
    )
    return config
