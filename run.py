#!/usr/bin/env python3
"""
Redis PodDisruptionBudget Reconciler - Entry Point

Watches RedisCluster objects and keeps one PodDisruptionBudget per
cluster role (leader, follower) in line with the cluster's spec.

Usage:
    python run.py [--namespace NAMESPACE] [--dry-run] [--in-cluster] [--interval SECONDS]
"""

import argparse
import logging
import sys

from kubernetes import config

from pdb_reconciler.config import RECONCILE_INTERVAL_SECONDS
from pdb_reconciler.controller import PDBController

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    datefmt='%Y-%m-%d %H:%M:%S'
)
logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Redis PodDisruptionBudget Reconciler - Keep cluster PDBs in line with RedisCluster specs"
    )
    parser.add_argument(
        "--namespace", "-n",
        default="",
        help="Namespace to watch (default: all namespaces)"
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Run in dry-run mode (no changes made)"
    )
    parser.add_argument(
        "--in-cluster",
        action="store_true",
        help="Use in-cluster config (for running inside Kubernetes)"
    )
    parser.add_argument(
        "--interval",
        type=int,
        default=RECONCILE_INTERVAL_SECONDS,
        help=f"Seconds between full resyncs (default: {RECONCILE_INTERVAL_SECONDS})"
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable verbose/debug logging"
    )
    return parser


def main(argv=None):
    """Main entry point."""
    args = build_parser().parse_args(argv)

    # Set log level
    if args.verbose:
        logging.getLogger().setLevel(logging.DEBUG)

    # Load Kubernetes configuration
    try:
        if args.in_cluster:
            config.load_incluster_config()
            logger.info("Loaded in-cluster configuration")
        else:
            config.load_kube_config()
            logger.info("Loaded kubeconfig from default location")
    except Exception as e:
        logger.error(f"Failed to load Kubernetes config: {e}")
        sys.exit(1)

    controller = PDBController(
        namespace=args.namespace,
        dry_run=args.dry_run,
        interval=args.interval
    )

    try:
        controller.run()
    except KeyboardInterrupt:
        controller.stop()
        logger.info("Controller stopped")
        sys.exit(0)
    except Exception as e:
        logger.error(f"Controller error: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
