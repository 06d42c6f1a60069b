"""
Contract Deployment
Deploys one compiled contract and exits 0 on success, 1 on failure
"""

import sys
import asyncio
import argparse
from loguru import logger

from blockchain.exceptions import DeploymentError
from deployer import OutcomeStatus, build_orchestrator, load_config
from utils.logging_setup import configure_logging


class DeployArgumentParser(argparse.ArgumentParser):
    """Usage errors exit 1 like every other failure"""

    def error(self, message):
        self.print_usage(sys.stderr)
        self.exit(OutcomeStatus.FAILURE.exit_code, f"{self.prog}: error: {message}\n")


def parse_args(argv=None):
    parser = DeployArgumentParser(description="Deploy a compiled smart contract")
    parser.add_argument('--contract', help="Contract name (default: CONTRACT_NAME or LendingPlatform)")
    parser.add_argument('--config', help="JSON config file (default: config/deploy_config.json)")
    return parser.parse_args(argv)


async def main(argv=None) -> OutcomeStatus:
    """Load configuration, then run the deployment pipeline once"""
    args = parse_args(argv)

    configure_logging()

    try:
        config = load_config(args.config, overrides={'contract_name': args.contract})
        configure_logging(config.log_level, config.log_file)
        orchestrator = build_orchestrator(config)
    except DeploymentError as e:
        logger.opt(exception=e).error(f"Deployment setup failed: {e}")
        return OutcomeStatus.FAILURE
    except Exception as e:
        logger.opt(exception=e).error(f"Unexpected error during setup: {e}")
        return OutcomeStatus.FAILURE

    return await orchestrator.run()


def cli():
    try:
        outcome = asyncio.run(main())
    except KeyboardInterrupt:
        logger.warning("Interrupted by user; a broadcast transaction may still be mined")
        outcome = OutcomeStatus.FAILURE

    sys.exit(outcome.exit_code)


if __name__ == "__main__":
    cli()
