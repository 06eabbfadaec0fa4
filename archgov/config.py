"""
Runtime configuration read from environment variables.

ARCHGOV_POLICY_FILE  JSON governance policy replacing the compiled-in one
ARCHGOV_API_BASE     Backend API URL used by the MCP server
ARCHGOV_HOST         Backend bind host
ARCHGOV_PORT         Backend bind port
ARCHGOV_LOG_LEVEL    Logging level name (default INFO)
"""

import json
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

from pydantic import ValidationError

from .errors import PolicyConfigError
from .layers import DEFAULT_POLICY, GovernancePolicy

logger = logging.getLogger(__name__)

DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 8765
DEFAULT_API_BASE = f"http://{DEFAULT_HOST}:{DEFAULT_PORT}/api"
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


@dataclass(frozen=True)
class Settings:
    """Settings for the backend, CLI and MCP server."""
    policy_file: Optional[Path] = None
    api_base: str = DEFAULT_API_BASE
    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT
    log_level: str = "INFO"


def load_settings(environ: Optional[Mapping[str, str]] = None) -> Settings:
    """Build settings from the environment."""
    env = os.environ if environ is None else environ
    policy_file = env.get("ARCHGOV_POLICY_FILE")
    return Settings(
        policy_file=Path(policy_file) if policy_file else None,
        api_base=env.get("ARCHGOV_API_BASE", DEFAULT_API_BASE),
        host=env.get("ARCHGOV_HOST", DEFAULT_HOST),
        port=int(env.get("ARCHGOV_PORT", DEFAULT_PORT)),
        log_level=env.get("ARCHGOV_LOG_LEVEL", "INFO").upper(),
    )


def load_policy(file_path: str | Path) -> GovernancePolicy:
    """
    Load a governance policy from a JSON file.

    Only `layers` is required; framework tables default to the built-in ones.
    """
    path = Path(file_path)
    if not path.exists():
        raise PolicyConfigError(f"Policy file not found: {path}")

    try:
        data = json.loads(path.read_text(encoding="utf-8"))
        policy = GovernancePolicy.model_validate(data)
    except json.JSONDecodeError as e:
        raise PolicyConfigError(f"Policy file {path} is not valid JSON: {e}") from e
    except ValidationError as e:
        raise PolicyConfigError(f"Policy file {path} is invalid: {e}") from e

    logger.info("Loaded governance policy from %s", path)
    return policy


def get_policy(settings: Optional[Settings] = None) -> GovernancePolicy:
    """The policy configured for this process."""
    settings = settings or load_settings()
    if settings.policy_file is None:
        return DEFAULT_POLICY
    return load_policy(settings.policy_file)


def configure_logging(level: str = "INFO") -> None:
    """Set up root logging for the backend and CLI entry points."""
    logging.basicConfig(level=getattr(logging, level.upper(), logging.INFO), format=LOG_FORMAT)
