"""
Pytest fixtures for the EthExplorer SDK tests.
"""
import pytest
from unittest.mock import MagicMock
from web3.providers.rpc import HTTPProvider

from ethexplorer_sdk.config import NetworkConfig
from tests.test_helpers import (
    create_test_client, USERS_ABI, TEST_CONTRACT, TEST_NETWORK_ID, TEST_CHAIN_ID, TEST_ACCOUNT,
    TEST_GAS_PRICE, TEST_GAS_LIMIT, TEST_NONCE, TEST_TX_HASH
)


@pytest.fixture(autouse=True)
def _patch_http_provider(monkeypatch):
    """
    Stub every Web3 HTTP call so no DNS / network traffic is triggered.
    Works for all tests because it is autouse.
    """
    def _dummy(self, method, params=None, _=None):      # signature match
        if method == "net_version":
            return {"jsonrpc": "2.0", "id": 1, "result": str(TEST_NETWORK_ID)}
        if method == "eth_chainId":
            return {"jsonrpc": "2.0", "id": 1, "result": hex(TEST_CHAIN_ID)}
        if method == "eth_gasPrice":
            return {"jsonrpc": "2.0", "id": 1, "result": hex(TEST_GAS_PRICE)}
        if method == "eth_accounts":
            return {"jsonrpc": "2.0", "id": 1, "result": [TEST_ACCOUNT]}
        # everything else – return something harmless
        return {"jsonrpc": "2.0", "id": 1, "result": "0x0"}

    monkeypatch.setattr(HTTPProvider, "make_request", _dummy, raising=True)


@pytest.fixture(autouse=True)
def _clean_network_env(monkeypatch):
    """Keep fallback endpoint overrides from the environment out of the tests."""
    for var in ("ETHEXPLORER_NETWORK", "GANACHE_RPC_URL", "HARDHAT_RPC_URL"):
        monkeypatch.delenv(var, raising=False)
    NetworkConfig._networks_cache = None
    yield
    NetworkConfig._networks_cache = None


@pytest.fixture
def mock_receipt():
    return {
        "transactionHash": TEST_TX_HASH,
        "blockNumber": 101,
        "blockHash": bytes.fromhex("cd" * 32),
        "status": 1,
        "gasUsed": 42000,
        "logs": []
    }


@pytest.fixture
def mock_w3(mock_receipt):
    """
    Create a mock Web3 instance modelling a local development chain.
    """
    w3 = MagicMock()
    w3.net.version = str(TEST_NETWORK_ID)
    w3.eth.chain_id = TEST_CHAIN_ID
    w3.eth.gas_price = TEST_GAS_PRICE
    w3.eth.block_number = 100
    w3.eth.accounts = [TEST_ACCOUNT]
    w3.eth.get_transaction_count = MagicMock(return_value=TEST_NONCE)
    w3.eth.get_block = MagicMock(return_value={"number": 100, "gasLimit": TEST_GAS_LIMIT})
    w3.eth.send_raw_transaction = MagicMock(return_value=TEST_TX_HASH)
    w3.eth.wait_for_transaction_receipt = MagicMock(return_value=mock_receipt)
    w3.eth.account.sign_transaction = MagicMock(return_value=MagicMock(raw_transaction=b"signed_transaction"))

    def contract(address, abi):
        contract_mock = MagicMock()
        contract_mock.address = address
        contract_mock.abi = abi
        contract_mock.encode_abi = MagicMock(return_value="0xdeadbeef")
        return contract_mock

    w3.eth.contract = MagicMock(side_effect=contract)
    return w3


@pytest.fixture
def client(mock_w3):
    """Client attached to the mock chain."""
    return create_test_client(w3=mock_w3)


@pytest.fixture
def users_client(client):
    """Client with the Users contract registered."""
    client.register(TEST_CONTRACT, USERS_ABI, name="Users")
    return client
