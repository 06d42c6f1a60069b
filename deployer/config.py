"""
Deployment Configuration
Loads network/account settings from .env, the environment, and a JSON file
"""

import os
import json
from dataclasses import dataclass, field
from typing import Any, Dict, Optional
from loguru import logger
from dotenv import load_dotenv

from blockchain.exceptions import ConfigurationError

DEFAULT_CONFIG_PATH = "config/deploy_config.json"

# key -> (env vars in priority order, parser, default)
_SETTINGS = {
    'rpc_url': (('RPC_URL', 'ALCHEMY_RPC_URL'), str, None),
    'contract_name': (('CONTRACT_NAME',), str, 'LendingPlatform'),
    'artifacts_dir': (('ARTIFACTS_DIR',), str, 'artifacts'),
    'chain_id': (('CHAIN_ID',), int, None),
    'confirmations': (('CONFIRMATIONS',), int, 1),
    'confirmation_timeout': (('CONFIRMATION_TIMEOUT',), float, 300.0),
    'poll_interval': (('POLL_INTERVAL',), float, 2.0),
    'gas_limit_buffer': (('GAS_LIMIT_BUFFER',), float, 1.2),
    'default_gas_limit': (('DEFAULT_GAS_LIMIT',), int, 3_000_000),
    'max_gas_price_gwei': (('MAX_GAS_PRICE_GWEI',), float, 500.0),
    'priority_fee_gwei': (('PRIORITY_FEE_GWEI',), float, 2.0),
    'log_level': (('LOG_LEVEL',), lambda value: str(value).upper(), 'INFO'),
    'log_file': (('LOG_FILE',), str, 'data/logs/deploy.log'),
}


@dataclass(frozen=True)
class DeployConfig:
    """Settings for one deployment run"""

    rpc_url: str
    private_key: str = field(repr=False)
    contract_name: str = 'LendingPlatform'
    artifacts_dir: str = 'artifacts'
    chain_id: Optional[int] = None
    confirmations: int = 1
    confirmation_timeout: float = 300.0
    poll_interval: float = 2.0
    gas_limit_buffer: float = 1.2
    default_gas_limit: int = 3_000_000
    max_gas_price_gwei: float = 500.0
    priority_fee_gwei: float = 2.0
    log_level: str = 'INFO'
    log_file: Optional[str] = 'data/logs/deploy.log'

    def __post_init__(self):
        if self.confirmations < 1:
            raise ConfigurationError("confirmations must be at least 1")
        if self.confirmation_timeout <= 0:
            raise ConfigurationError("confirmation_timeout must be positive")
        if self.poll_interval < 0:
            raise ConfigurationError("poll_interval must not be negative")
        if self.gas_limit_buffer < 1:
            raise ConfigurationError("gas_limit_buffer must be at least 1.0")
        if self.default_gas_limit <= 0:
            raise ConfigurationError("default_gas_limit must be positive")

        try:
            logger.level(self.log_level)
        except ValueError:
            raise ConfigurationError(f"Unknown log level: {self.log_level!r}") from None


def load_config(
    config_path: Optional[str] = None,
    overrides: Optional[Dict[str, Any]] = None,
    env_file: Optional[str] = None
) -> DeployConfig:
    """
    Build a DeployConfig

    Precedence: overrides > environment (.env included) > JSON file > defaults.
    The private key is only read from the environment.

    Args:
        config_path: JSON config file (default config/deploy_config.json, optional)
        overrides: Values that win over every other source (None values ignored)
        env_file: .env file to load (default: search from the working directory)

    Returns:
        DeployConfig

    Raises:
        ConfigurationError: required value missing or a value fails to parse
    """
    load_dotenv(env_file)

    file_values = _load_json(config_path)
    overrides = {k: v for k, v in (overrides or {}).items() if v is not None}

    values = {}
    for key, (env_vars, parser, default) in _SETTINGS.items():
        raw, source = _lookup(key, env_vars, overrides, file_values)

        if raw is None:
            values[key] = default
            continue

        try:
            values[key] = parser(raw)
        except (TypeError, ValueError):
            raise ConfigurationError(f"Invalid value for {key} (from {source}): {raw!r}") from None

    private_key = os.getenv('DEPLOYER_PRIVATE_KEY') or os.getenv('ADMIN_PRIVATE_KEY')

    if not values['rpc_url'] or not private_key:
        raise ConfigurationError("RPC_URL and DEPLOYER_PRIVATE_KEY must be set")

    config = DeployConfig(private_key=private_key, **values)

    logger.debug(f"Configuration loaded: {config}")
    return config


def _lookup(key, env_vars, overrides, file_values):
    if key in overrides:
        return overrides[key], 'override'

    for var in env_vars:
        value = os.getenv(var)
        if value:
            return value, var

    if file_values.get(key) is not None:
        return file_values[key], 'config file'

    return None, None


def _load_json(config_path: Optional[str]) -> Dict[str, Any]:
    path = config_path or DEFAULT_CONFIG_PATH

    if not os.path.exists(path):
        if config_path:
            raise ConfigurationError(f"Config file not found: {config_path}")
        return {}

    try:
        with open(path, 'r') as f:
            data = json.load(f)
    except (OSError, ValueError) as e:
        raise ConfigurationError(f"Cannot read config file {path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigurationError(f"Config file {path} must contain a JSON object")

    if 'private_key' in data:
        logger.warning(f"Ignoring private_key in {path}; set DEPLOYER_PRIVATE_KEY instead")

    return data
