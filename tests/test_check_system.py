"""
Tests for the preflight system check
"""

import os
import json
import pytest
from unittest.mock import Mock, patch
from web3 import Web3

from blockchain.exceptions import ConfigurationError
from scripts import check_system


@pytest.fixture
def client():
    client = Mock()
    client.address = '0xf39Fd6e51aad88F6F4ce6aB8827279cffFb92266'
    client.chain_id = None
    client.w3.is_connected.return_value = True
    client.w3.eth.block_number = 100
    client.w3.eth.chain_id = 31337
    client.get_balance.return_value = Web3.to_wei(1, 'ether')
    return client


@pytest.fixture
def config(tmp_path):
    contract_dir = tmp_path / 'artifacts' / 'contracts' / 'LendingPlatform.sol'
    os.makedirs(str(contract_dir))
    (contract_dir / 'LendingPlatform.json').write_text(json.dumps({'abi': [], 'bytecode': '0x6080'}))
    return Mock(contract_name='LendingPlatform', artifacts_dir=str(tmp_path / 'artifacts'))


class TestChecks:
    """Individual checks"""

    def test_artifact_found(self, config):
        assert check_system.check_artifact(config)

    def test_artifact_missing(self, config):
        config.contract_name = 'Missing'
        assert not check_system.check_artifact(config)

    def test_rpc_connected(self, client):
        assert check_system.check_rpc_connection(client)

    def test_rpc_chain_id_mismatch(self, client):
        client.chain_id = 137
        assert not check_system.check_rpc_connection(client)

    def test_rpc_unreachable(self, client):
        client.w3.is_connected.return_value = False
        assert not check_system.check_rpc_connection(client)

    def test_balance(self, client):
        assert check_system.check_deployer_balance(client)

    def test_empty_balance(self, client):
        client.get_balance.return_value = 0
        assert not check_system.check_deployer_balance(client)


class TestMain:
    """Exit code"""

    def test_invalid_configuration(self):
        with patch('scripts.check_system.configure_logging'), \
                patch('scripts.check_system.load_config', side_effect=ConfigurationError("RPC_URL must be set")):
            assert check_system.main() == 1

    def test_all_checks_pass(self, config, client):
        with patch('scripts.check_system.configure_logging'), \
                patch('scripts.check_system.load_config', return_value=config), \
                patch('scripts.check_system.NetworkClient.from_config', return_value=client):
            assert check_system.main() == 0
