import logging
from pathlib import Path

import yaml
from pydantic import ValidationError

from src.rules.models import Rules

logger = logging.getLogger(__name__)


def load_rules(path: Path | str) -> Rules:
    """
    Parse and validate a rules file.

    Raises FileNotFoundError when the file does not exist and ValueError when
    it is not a YAML mapping that satisfies the Rules schema.
    """
    path = Path(path)
    if not path.is_file():
        raise FileNotFoundError(f"Rules file not found at: {path}")

    try:
        data = yaml.safe_load(path.read_text())
    except yaml.YAMLError as e:
        raise ValueError(f"Invalid YAML syntax in {path.name}: {e}") from e

    if not isinstance(data, dict):
        raise ValueError(f"{path.name} must contain a mapping at the top level")

    try:
        rules = Rules.model_validate(data)
    except ValidationError as e:
        raise ValueError(f"Rules validation failed:\n{e}") from e

    logger.debug("Rules version %s loaded from %s", rules.project.rules_version, path)
    return rules
