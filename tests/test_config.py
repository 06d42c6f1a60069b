"""
Unit Tests for Deployment Configuration
"""

import os
import json
import pytest

from blockchain.exceptions import ConfigurationError
from deployer.config import DeployConfig, load_config, _SETTINGS

PRIVATE_KEY = '0x' + '11' * 32


@pytest.fixture(autouse=True)
def clean_env(monkeypatch, tmp_path):
    """Isolate from the developer's environment and .env"""
    names = [var for env_vars, _, _ in _SETTINGS.values() for var in env_vars]
    names += ['DEPLOYER_PRIVATE_KEY', 'ADMIN_PRIVATE_KEY']

    for var in names:
        monkeypatch.delenv(var, raising=False)
    monkeypatch.chdir(tmp_path)

    yield

    # load_dotenv writes os.environ directly
    for var in names:
        os.environ.pop(var, None)


@pytest.fixture
def env_file(tmp_path):
    return str(tmp_path / 'missing.env')


@pytest.fixture
def network_env(monkeypatch):
    monkeypatch.setenv('RPC_URL', 'http://127.0.0.1:8545')
    monkeypatch.setenv('DEPLOYER_PRIVATE_KEY', PRIVATE_KEY)


class TestLoadConfig:
    """Source precedence and defaults"""

    def test_defaults(self, network_env, env_file):
        config = load_config(env_file=env_file)

        assert config.rpc_url == 'http://127.0.0.1:8545'
        assert config.contract_name == 'LendingPlatform'
        assert config.artifacts_dir == 'artifacts'
        assert config.chain_id is None
        assert config.confirmations == 1
        assert config.confirmation_timeout == 300.0

    def test_missing_rpc_url(self, monkeypatch, env_file):
        monkeypatch.setenv('DEPLOYER_PRIVATE_KEY', PRIVATE_KEY)

        with pytest.raises(ConfigurationError, match="RPC_URL"):
            load_config(env_file=env_file)

    def test_missing_private_key(self, monkeypatch, env_file):
        monkeypatch.setenv('RPC_URL', 'http://127.0.0.1:8545')

        with pytest.raises(ConfigurationError, match="DEPLOYER_PRIVATE_KEY"):
            load_config(env_file=env_file)

    def test_legacy_variable_names(self, monkeypatch, env_file):
        monkeypatch.setenv('ALCHEMY_RPC_URL', 'https://polygon.example/rpc')
        monkeypatch.setenv('ADMIN_PRIVATE_KEY', PRIVATE_KEY)

        config = load_config(env_file=env_file)

        assert config.rpc_url == 'https://polygon.example/rpc'
        assert config.private_key == PRIVATE_KEY

    def test_env_parsing(self, network_env, monkeypatch, env_file):
        monkeypatch.setenv('CHAIN_ID', '137')
        monkeypatch.setenv('CONFIRMATIONS', '3')
        monkeypatch.setenv('CONFIRMATION_TIMEOUT', '60')

        config = load_config(env_file=env_file)

        assert config.chain_id == 137
        assert config.confirmations == 3
        assert config.confirmation_timeout == 60.0

    def test_invalid_number(self, network_env, monkeypatch, env_file):
        monkeypatch.setenv('CHAIN_ID', 'polygon')

        with pytest.raises(ConfigurationError, match="chain_id"):
            load_config(env_file=env_file)

    def test_precedence(self, network_env, monkeypatch, tmp_path, env_file):
        config_path = tmp_path / 'deploy.json'
        config_path.write_text(json.dumps({
            'contract_name': 'FromFile',
            'artifacts_dir': 'out',
            'confirmations': 2
        }))
        monkeypatch.setenv('CONTRACT_NAME', 'FromEnv')

        config = load_config(str(config_path), overrides={'contract_name': 'FromOverride'}, env_file=env_file)
        assert config.contract_name == 'FromOverride'
        assert config.artifacts_dir == 'out'
        assert config.confirmations == 2

        config = load_config(str(config_path), overrides={'contract_name': None}, env_file=env_file)
        assert config.contract_name == 'FromEnv'

    def test_default_config_file_is_optional(self, network_env, env_file):
        config = load_config(env_file=env_file)

        assert config.contract_name == 'LendingPlatform'

    def test_default_config_file_is_read(self, network_env, tmp_path, env_file):
        (tmp_path / 'config').mkdir()
        (tmp_path / 'config' / 'deploy_config.json').write_text(json.dumps({'contract_name': 'Vault'}))

        assert load_config(env_file=env_file).contract_name == 'Vault'

    def test_explicit_config_file_must_exist(self, network_env, tmp_path, env_file):
        with pytest.raises(ConfigurationError, match="not found"):
            load_config(str(tmp_path / 'nope.json'), env_file=env_file)

    def test_config_file_must_be_object(self, network_env, tmp_path, env_file):
        config_path = tmp_path / 'deploy.json'
        config_path.write_text('[1, 2]')

        with pytest.raises(ConfigurationError, match="JSON object"):
            load_config(str(config_path), env_file=env_file)

    def test_log_level_is_normalised(self, network_env, monkeypatch, env_file):
        monkeypatch.setenv('LOG_LEVEL', 'debug')

        assert load_config(env_file=env_file).log_level == 'DEBUG'

    def test_unknown_log_level(self, network_env, monkeypatch, env_file):
        monkeypatch.setenv('LOG_LEVEL', 'verbose')

        with pytest.raises(ConfigurationError, match="log level"):
            load_config(env_file=env_file)

    def test_dotenv_file(self, tmp_path):
        dotenv_path = tmp_path / '.env'
        dotenv_path.write_text(f"RPC_URL=http://localhost:8545\nDEPLOYER_PRIVATE_KEY={PRIVATE_KEY}\n")

        config = load_config(env_file=str(dotenv_path))

        assert config.rpc_url == 'http://localhost:8545'


class TestDeployConfig:
    """Validation"""

    def test_private_key_hidden_from_repr(self):
        config = DeployConfig(rpc_url='http://127.0.0.1:8545', private_key=PRIVATE_KEY)

        assert PRIVATE_KEY not in repr(config)

    @pytest.mark.parametrize('field, value', [
        ('confirmations', 0),
        ('confirmation_timeout', 0),
        ('poll_interval', -1),
        ('gas_limit_buffer', 0.5),
        ('default_gas_limit', 0),
        ('log_level', 'VERBOSE'),
    ])
    def test_invalid_values(self, field, value):
        with pytest.raises(ConfigurationError):
            DeployConfig(rpc_url='http://127.0.0.1:8545', private_key=PRIVATE_KEY, **{field: value})
