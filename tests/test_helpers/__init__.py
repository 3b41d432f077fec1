from .client_creator import create_test_client, TEST_FULL_NODE_URL, TEST_DEFAULT_ADDRESS

__all__ = ["create_test_client", "TEST_FULL_NODE_URL", "TEST_DEFAULT_ADDRESS"]
