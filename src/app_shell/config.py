import logging
import os

from src.adapters.auth.crypto import DEFAULT_SECRET_KEY
from src.rules.models import Rules

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

logger = logging.getLogger(__name__)


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(level=level.upper(), format=LOG_FORMAT)


def validate_ops_rules(rules: Rules) -> None:
    """
    Validate operational requirements before startup.
    Raises RuntimeError naming every missing environment variable.
    """
    missing = [name for name in rules.ops.required_env if name not in os.environ]
    if missing:
        raise RuntimeError(f"Missing required environment variables: {', '.join(missing)}")


def check_secret_key(secret_key: str) -> bool:
    """Warn when sessions would be signed with the built-in development key."""
    if secret_key == DEFAULT_SECRET_KEY:
        logger.warning(
            "POSTBOARD_SECRET_KEY is not set; session tokens are signed with the "
            "public development key. Set it (or list it in ops.required_env) in production."
        )
        return False
    return True
