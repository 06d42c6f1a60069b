"""
System Check Script
Verifies configuration, RPC connection, balance, and artifact before deploying
"""

import sys
from web3 import Web3
from loguru import logger

from blockchain import ArtifactRegistry, DeploymentError, NetworkClient
from deployer import load_config
from utils.logging_setup import configure_logging


def check_configuration():
    """Load configuration; returns None when it is invalid"""
    logger.info("Checking configuration...")

    try:
        config = load_config()
    except DeploymentError as e:
        logger.error(f"✗ {e}")
        return None

    logger.success(f"✓ Configuration loaded (contract: {config.contract_name})")
    return config


def check_rpc_connection(client: NetworkClient) -> bool:
    """Check RPC endpoint connection"""
    logger.info("Checking RPC connection...")

    try:
        if not client.w3.is_connected():
            logger.error("✗ Connection failed")
            return False

        block = client.w3.eth.block_number
        chain_id = client.w3.eth.chain_id
        logger.success(f"✓ Connected (chain {chain_id}, block {block})")

        if client.chain_id is not None and client.chain_id != chain_id:
            logger.error(f"✗ CHAIN_ID is {client.chain_id} but the node reports {chain_id}")
            return False

        return True

    except Exception as e:
        logger.error(f"✗ {e}")
        return False


def check_deployer_balance(client: NetworkClient) -> bool:
    """Check deployer balance is non-zero"""
    logger.info("Checking deployer balance...")

    try:
        balance = client.get_balance()
    except Exception as e:
        logger.error(f"✗ Error checking balance: {e}")
        return False

    logger.info(f"  Deployer {client.address}: {Web3.from_wei(balance, 'ether')} ETH")

    if balance == 0:
        logger.error("✗ Deployer account has no funds")
        return False

    logger.success("✓ Deployer account funded")
    return True


def check_artifact(config) -> bool:
    """Check the configured contract artifact resolves"""
    logger.info("Checking contract artifact...")

    registry = ArtifactRegistry(config.artifacts_dir)

    try:
        artifact = registry.resolve(config.contract_name)
    except DeploymentError as e:
        logger.error(f"✗ {e}")

        available = registry.available_contracts()
        if available:
            logger.info(f"  Available: {', '.join(available)}")

        return False

    logger.success(f"✓ {artifact.name} artifact found ({artifact.source_path})")
    return True


def main() -> int:
    """Run all checks; returns the process exit code"""
    configure_logging()

    logger.info("=" * 70)
    logger.info("Contract Deployer - System Check")
    logger.info("=" * 70)

    config = check_configuration()
    if config is None:
        return 1

    try:
        client = NetworkClient.from_config(config)
    except DeploymentError as e:
        logger.error(f"✗ {e}")
        return 1

    results = [
        check_artifact(config),
        check_rpc_connection(client),
    ]

    if results[-1]:
        results.append(check_deployer_balance(client))

    logger.info("=" * 70)

    if all(results):
        logger.success("✅ All checks passed - ready to deploy")
        return 0

    logger.error("❌ Some checks failed")
    return 1


if __name__ == "__main__":
    sys.exit(main())
