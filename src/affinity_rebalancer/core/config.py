"""
config.py
- Defines global configuration values derived from environment variables.
- Configures loguru for every entrypoint through configure_logging().
"""

import os
import sys

from loguru import logger


def env_flag(name, default="false"):
    return os.getenv(name, default).lower() == "true"


# --- Runtime Behavior Flags ---
DEBUG = env_flag("DEBUG")
DRY_RUN = env_flag("DRY_RUN")
STRICT_RULES = env_flag("STRICT_RULES")
TOLERANCE = os.getenv("TOLERANCE")  # raw string; validated by the entrypoint

# --- Backend Selection ---
ORCH_BACKEND = os.getenv("ORCH_BACKEND")  # overrides default.backend in the YAML config
KUBECONFIG = os.getenv("KUBECONFIG")
KUBE_CONTEXT = os.getenv("KUBE_CONTEXT")

# --- Reporting ---
SENTRY_DSN = os.getenv("SENTRY_DSN")
LOG_LEVEL = "DEBUG" if DEBUG else "INFO"  # Loguru string levels

# --- Config Paths ---
REBALANCE_CONFIG_PATH = os.getenv("REBALANCE_CONFIG", "/etc/affinity-rebalancer/rebalance_config.yml")

LOG_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - "
    "<level>{message}</level>"
)


def configure_logging(level=None):
    """Replace loguru's default sink with the project's stderr sink."""
    logger.remove()
    logger.add(
        sys.stderr,
        level=level or LOG_LEVEL,
        format=LOG_FORMAT,
        colorize=True,
    )
