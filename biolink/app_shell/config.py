import os

from biolink.rules.models import Rules


class ConfigError(RuntimeError):
    """Raised when the runtime environment does not satisfy the rules."""


def validate_ops_rules(rules: Rules) -> None:
    """
    Validate operational requirements before startup.
    """
    missing = [env_var for env_var in rules.ops.required_env if env_var not in os.environ]
    if missing:
        raise ConfigError(f"Missing required environment variables: {', '.join(missing)}")
