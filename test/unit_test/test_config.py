"""
Unit tests for configuration and the shared connection
"""

import logging
import os
import tempfile
import unittest
from unittest.mock import patch

from solana_wingman import config as config_module
from solana_wingman.client import WingmanClient
from solana_wingman.config import (
    CLUSTER_URLS,
    Config,
    LoggingConfig,
    NetworkConfig,
    setup_logging,
)
from solana_wingman.errors import ConfigurationError
from solana_wingman.infra import connection
from solana_wingman.types import Network

from fakes import make_config


class TestConfigFromEnv(unittest.TestCase):
    """Settings come from environment variables"""

    @patch.dict(os.environ, {
        "SOLANA_NETWORK": "devnet",
        "SOLANA_COMMITMENT": "finalized",
        "TX_MAX_ATTEMPTS": "5",
        "TX_RETRY_DELAY": "0.25",
        "TX_SKIP_PREFLIGHT": "yes",
        "DEFAULT_SLIPPAGE_BPS": "100",
    }, clear=False)
    def test_values(self):
        os.environ.pop("SOLANA_RPC_URL", None)
        config = Config()

        self.assertEqual(config.network.network, "devnet")
        self.assertEqual(config.network.rpc_url, CLUSTER_URLS["devnet"])
        self.assertEqual(config.network.commitment, "finalized")
        self.assertEqual(config.tx.max_attempts, 5)
        self.assertEqual(config.tx.retry_delay, 0.25)
        self.assertTrue(config.tx.skip_preflight)
        self.assertEqual(config.trading.default_slippage_bps, 100)

    @patch.dict(os.environ, {"TX_MAX_ATTEMPTS": "many", "RPC_TIMEOUT_SECONDS": "soon"})
    def test_invalid_numbers_use_defaults(self):
        config = Config()
        self.assertEqual(config.tx.max_attempts, 3)
        self.assertEqual(config.rpc.timeout_seconds, 30.0)

    def test_custom_rpc_url_overrides_cluster(self):
        network = NetworkConfig(network="devnet", custom_rpc_url="https://my.rpc", commitment="confirmed")
        self.assertEqual(network.rpc_url, "https://my.rpc")

    def test_reload_rereads_environment(self):
        original = config_module.get_config()
        try:
            with patch.dict(os.environ, {"SOLANA_NETWORK": "testnet"}):
                reloaded = config_module.reload_config()
            self.assertIsNot(reloaded, original)
            self.assertIs(config_module.get_config(), reloaded)
            self.assertEqual(reloaded.network.network, "testnet")
        finally:
            config_module.config = original

    def test_jupiter_urls(self):
        config = make_config()
        self.assertEqual(config.jupiter.quote_url, "https://jupiter.test/v6/quote")
        self.assertEqual(config.jupiter.swap_url, "https://jupiter.test/v6/swap")


class TestClientNetwork(unittest.TestCase):

    def test_network_parsed(self):
        client = WingmanClient(config=make_config("testnet"))
        self.assertIs(client.network, Network.TESTNET)

    def test_unknown_network(self):
        config = make_config()
        config.network.network = "moonnet"
        with self.assertRaises(ConfigurationError):
            WingmanClient(config=config).network


class TestSetupLogging(unittest.TestCase):

    def test_file_handler(self):
        """Log file directories are created and the level applied"""
        with tempfile.TemporaryDirectory() as tmp:
            path = os.path.join(tmp, "logs", "wingman.log")
            logger = setup_logging(
                LoggingConfig(log_file=path, log_level="DEBUG", console_output=False),
                logger_name="wingman_test",
            )
            try:
                self.assertEqual(logger.level, logging.DEBUG)
                self.assertEqual(len(logger.handlers), 1)
                self.assertTrue(os.path.isfile(path))
            finally:
                for handler in logger.handlers[:]:
                    handler.close()
                    logger.removeHandler(handler)

    def test_reconfigure_replaces_handlers(self):
        config = LoggingConfig(log_file="", log_level="INFO", console_output=True)
        setup_logging(config, logger_name="wingman_test2")
        logger = setup_logging(config, logger_name="wingman_test2")
        self.assertEqual(len(logger.handlers), 1)
        self.assertEqual(logging.getLogger("wingman_test2.infra").level, logging.INFO)


class TestSharedConnection(unittest.IsolatedAsyncioTestCase):
    """The process-wide connection is created once and can be closed"""

    async def asyncTearDown(self):
        await connection.close_connection()

    @patch("solana_wingman.infra.connection.global_config", make_config("devnet"))
    async def test_get_connection_reuses_client(self):
        first = connection.get_connection()
        second = connection.get_connection()

        self.assertIs(first, second)
        self.assertEqual(first.endpoint, CLUSTER_URLS["devnet"])
        self.assertEqual(first.commitment, "confirmed")

    @patch("solana_wingman.infra.connection.global_config", make_config("devnet"))
    async def test_close_resets(self):
        first = connection.get_connection()
        await connection.close_connection()

        self.assertIsNot(connection.get_connection(), first)

    async def test_default_client_uses_shared_connection(self):
        self.assertIs(WingmanClient().rpc, connection.get_connection())

    async def test_injected_config_gets_private_connection(self):
        """A client built from its own config talks to that config's endpoint"""
        client = WingmanClient(config=make_config("testnet"))
        rpc = client.rpc

        self.assertEqual(rpc.endpoint, CLUSTER_URLS["testnet"])
        self.assertEqual(rpc.commitment, "confirmed")
        self.assertIsNot(rpc, connection.get_connection())

        await client.close()
        self.assertIsNot(client.rpc, rpc)
        await client.close()

    @patch("solana_wingman.infra.connection.global_config", make_config("devnet"))
    def test_create_connection_independent(self):
        rpc = connection.create_connection("http://127.0.0.1:8899", "processed")
        self.assertEqual(rpc.endpoint, "http://127.0.0.1:8899")
        self.assertEqual(rpc.commitment, "processed")
        self.assertIsNot(rpc, connection.get_connection())


if __name__ == "__main__":
    unittest.main()
