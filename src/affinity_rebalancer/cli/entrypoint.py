#!/usr/bin/env python3
"""
entrypoint.py
- Command-line entrypoint for a single affinity rebalance pass.
- Usage:
    affinity-rebalancer [--dry-run] [--tolerance N]

- Backend, debug output, strict rule handling and the config file location
  are taken from the environment (see core/config.py).
- Exit codes: 0 success, 1 fatal error, 2 pass finished but units were
  skipped because of invalid preference rules.
"""

import argparse
import signal
import sys

import sentry_sdk
from loguru import logger

from affinity_rebalancer.core import config
from affinity_rebalancer.core.config_loader import get_default, load_yaml
from affinity_rebalancer.core.constants import DEFAULT_TOLERANCE
from affinity_rebalancer.core.errors import RebalanceError
from affinity_rebalancer.lib.cluster import get_backend
from affinity_rebalancer.runner.rebalance import run_rebalance_pass

EXIT_OK = 0
EXIT_FATAL = 1
EXIT_INVALID_RULES = 2


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Affinity-aware workload rebalancer")
    parser.add_argument("--dry-run", action="store_true", help="Print intended evictions without applying them")
    parser.add_argument("--tolerance", type=int, default=None, help="Ignore score differences up to this margin")
    return parser.parse_args(argv)


def resolve_tolerance(cli_value, env_value, file_config):
    """Flag, then TOLERANCE env var, then default.tolerance in the YAML config."""
    if cli_value is not None:
        tolerance = cli_value
    elif env_value not in (None, ""):
        try:
            tolerance = int(env_value)
        except ValueError:
            raise ValueError(f"TOLERANCE must be an integer, got {env_value!r}") from None
    else:
        raw = get_default(file_config, "tolerance", DEFAULT_TOLERANCE)
        if isinstance(raw, bool) or not isinstance(raw, int):
            raise ValueError(f"default.tolerance must be an integer, got {raw!r}")
        tolerance = raw

    if tolerance < 0:
        raise ValueError(f"tolerance must be non-negative, got {tolerance}")
    return tolerance


def handle_exit(signum, frame):
    logger.warning("[entrypoint] Received shutdown signal. Exiting...")
    sys.exit(EXIT_FATAL)


def main(argv=None):
    args = parse_args(argv)
    config.configure_logging()

    if config.SENTRY_DSN:
        sentry_sdk.init(dsn=config.SENTRY_DSN, traces_sample_rate=1.0)

    file_config = load_yaml(config.REBALANCE_CONFIG_PATH)
    dry_run = args.dry_run or config.DRY_RUN
    strict_rules = config.STRICT_RULES or bool(get_default(file_config, "strict_rules", False))
    backend_name = config.ORCH_BACKEND or get_default(file_config, "backend", "swarm")

    try:
        tolerance = resolve_tolerance(args.tolerance, config.TOLERANCE, file_config)
        cluster = get_backend(backend_name, file_config, kubeconfig=config.KUBECONFIG,
                              kube_context=config.KUBE_CONTEXT)
    except (ValueError, RebalanceError) as e:
        logger.error(f"[entrypoint] {e}")
        return EXIT_FATAL

    logger.info(f"[entrypoint] Starting rebalance pass: backend={cluster.name} "
                f"tolerance={tolerance} dry_run={dry_run}")

    try:
        result = run_rebalance_pass(cluster, tolerance, dry_run=dry_run, strict_rules=strict_rules)
    except RebalanceError as e:
        sentry_sdk.capture_exception(e)
        logger.error(f"[entrypoint] Rebalance pass aborted: {e}")
        return EXIT_FATAL

    if result.invalid_units:
        logger.warning(f"[entrypoint] {len(result.invalid_units)} unit(s) skipped due to invalid preference rules")
        return EXIT_INVALID_RULES
    return EXIT_OK


def run():
    signal.signal(signal.SIGINT, handle_exit)
    signal.signal(signal.SIGTERM, handle_exit)
    sys.exit(main())


if __name__ == "__main__":
    run()
