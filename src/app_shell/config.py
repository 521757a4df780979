import logging
import os

from src.rules.models import Rules

logger = logging.getLogger(__name__)


class ConfigError(Exception):
    """Operational requirements are not met; the app must not start."""


def validate_ops_rules(rules: Rules, environ: dict[str, str] | None = None) -> None:
    """
    Validate operational requirements before startup.
    """
    env = os.environ if environ is None else environ

    missing = [name for name in rules.ops.required_env if name not in env]
    if missing:
        raise ConfigError(f"Missing required environment variables: {', '.join(missing)}")

    if rules.auth.jwt_secret_env not in env:
        logger.warning(
            "%s is not set; tokens are verified with the development secret",
            rules.auth.jwt_secret_env,
        )

    if logging.getLevelName(rules.ops.log_level.upper()) not in range(0, 51):
        raise ConfigError(f"Unknown log level: {rules.ops.log_level}")
