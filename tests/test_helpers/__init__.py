from .client_creator import (
    create_test_client, USERS_ABI, TEST_RPC_URL, TEST_NETWORK_ID, TEST_CHAIN_ID,
    TEST_CONTRACT, TEST_ACCOUNT, TEST_PRIV_KEY, TEST_GAS_PRICE, TEST_GAS_LIMIT,
    TEST_NONCE, TEST_TX_HASH
)
