"""
Configuration management for Solana Wingman

Loads settings from environment variables and .env file.
Includes logging configuration with file output and correlation ID support.
"""

import os
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, List

from dotenv import load_dotenv


def _load_env_file():
    """Load .env file from project root and the working directory"""
    current = Path(__file__).parent.parent  # solana_wingman package parent
    env_file = current / ".env"

    if env_file.exists():
        load_dotenv(env_file)

    cwd_env = Path.cwd() / ".env"
    if cwd_env.exists() and cwd_env != env_file:
        load_dotenv(cwd_env)


# Load .env on module import
_load_env_file()


CLUSTER_URLS = {
    "mainnet-beta": "https://api.mainnet-beta.solana.com",
    "devnet": "https://api.devnet.solana.com",
    "testnet": "https://api.testnet.solana.com",
    "localnet": "http://127.0.0.1:8899",
}


def _get_env(key: str, default: Optional[str] = "") -> Optional[str]:
    """Get environment variable with default"""
    value = os.getenv(key)
    if value is None:
        return default
    return value


def _get_env_float(key: str, default: float) -> float:
    """Get environment variable as float"""
    value = os.getenv(key)
    if value is None:
        return default
    try:
        return float(value)
    except ValueError:
        logging.getLogger(__name__).warning(
            f"Invalid float value for {key}='{value}', using default={default}"
        )
        return default


def _get_env_int(key: str, default: int) -> int:
    """Get environment variable as int"""
    value = os.getenv(key)
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        logging.getLogger(__name__).warning(
            f"Invalid int value for {key}='{value}', using default={default}"
        )
        return default


def _get_env_bool(key: str, default: bool) -> bool:
    """Get environment variable as bool"""
    value = os.getenv(key)
    if value is None:
        return default
    return value.lower() in ("true", "1", "yes", "on")


@dataclass
class NetworkConfig:
    """Cluster selection. SOLANA_RPC_URL overrides the cluster's public endpoint."""
    network: str = field(default_factory=lambda: _get_env("SOLANA_NETWORK", "mainnet-beta"))
    custom_rpc_url: str = field(default_factory=lambda: _get_env("SOLANA_RPC_URL", ""))
    commitment: str = field(default_factory=lambda: _get_env("SOLANA_COMMITMENT", "confirmed"))

    @property
    def rpc_url(self) -> str:
        if self.custom_rpc_url:
            return self.custom_rpc_url
        return CLUSTER_URLS.get(self.network, CLUSTER_URLS["mainnet-beta"])


@dataclass
class RpcConfig:
    """RPC client configuration"""
    timeout_seconds: float = field(default_factory=lambda: _get_env_float("RPC_TIMEOUT_SECONDS", 30.0))


@dataclass
class SignerConfig:
    """Wallet sources, checked in this order: private_key, keypair_path"""
    # Never shown in repr
    private_key: str = field(default_factory=lambda: _get_env("WALLET_PRIVATE_KEY", ""), repr=False)
    keypair_path: str = field(
        default_factory=lambda: _get_env("WALLET_PATH", "~/.config/solana/id.json")
    )


@dataclass
class TxConfig:
    """Transaction submission configuration"""
    max_attempts: int = field(default_factory=lambda: _get_env_int("TX_MAX_ATTEMPTS", 3))
    # Linear backoff: retry_delay * attempt (1s, 2s)
    retry_delay: float = field(default_factory=lambda: _get_env_float("TX_RETRY_DELAY", 1.0))
    poll_interval: float = field(default_factory=lambda: _get_env_float("TX_POLL_INTERVAL", 1.0))
    # Consecutive status-poll failures before the outcome is reported as unknown
    max_poll_errors: int = field(default_factory=lambda: _get_env_int("TX_MAX_POLL_ERRORS", 10))
    skip_preflight: bool = field(default_factory=lambda: _get_env_bool("TX_SKIP_PREFLIGHT", False))


@dataclass
class JupiterConfig:
    """Jupiter API configuration"""
    base_url: str = field(default_factory=lambda: _get_env("JUPITER_API_URL", "https://quote-api.jup.ag/v6"))
    timeout: float = field(default_factory=lambda: _get_env_float("JUPITER_TIMEOUT", 30.0))

    @property
    def quote_url(self) -> str:
        return f"{self.base_url.rstrip('/')}/quote"

    @property
    def swap_url(self) -> str:
        return f"{self.base_url.rstrip('/')}/swap"


@dataclass
class TradingConfig:
    """Default trading parameters and advisory thresholds (warnings only)"""
    default_slippage_bps: int = field(default_factory=lambda: _get_env_int("DEFAULT_SLIPPAGE_BPS", 50))
    large_transfer_sol: float = field(default_factory=lambda: _get_env_float("LARGE_TRANSFER_SOL", 10.0))
    price_impact_warn_pct: float = field(default_factory=lambda: _get_env_float("PRICE_IMPACT_WARN_PCT", 1.0))


@dataclass
class DeployConfig:
    """External deploy utility"""
    solana_cli: str = field(default_factory=lambda: _get_env("SOLANA_CLI", "solana"))


@dataclass
class LoggingConfig:
    """
    Logging configuration with file output and correlation ID support.

    Environment variables:
        LOG_FILE: Path to log file (empty disables file output)
        LOG_LEVEL: DEBUG, INFO, WARNING, ERROR, CRITICAL (default: WARNING)
        LOG_FORMAT: Custom log format string
        LOG_CONSOLE: Enable console output (default: true)
        LOG_MAX_BYTES: Max log file size before rotation (default: 10MB)
        LOG_BACKUP_COUNT: Number of backup files to keep (default: 5)
    """
    log_file: str = field(default_factory=lambda: _get_env("LOG_FILE", ""))

    log_level: str = field(default_factory=lambda: _get_env("LOG_LEVEL", "WARNING"))

    log_format: str = field(default_factory=lambda: _get_env(
        "LOG_FORMAT",
        "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    ))

    console_output: bool = field(default_factory=lambda: _get_env_bool("LOG_CONSOLE", True))

    max_bytes: int = field(default_factory=lambda: _get_env_int("LOG_MAX_BYTES", 10 * 1024 * 1024))  # 10MB
    backup_count: int = field(default_factory=lambda: _get_env_int("LOG_BACKUP_COUNT", 5))

    @property
    def level(self) -> int:
        """Get numeric log level"""
        return getattr(logging, self.log_level.upper(), logging.WARNING)


@dataclass
class Config:
    """
    Main configuration container

    Usage:
        from solana_wingman.config import config

        print(config.network.rpc_url)
        print(config.jupiter.quote_url)
    """
    network: NetworkConfig = field(default_factory=NetworkConfig)
    rpc: RpcConfig = field(default_factory=RpcConfig)
    signer: SignerConfig = field(default_factory=SignerConfig)
    tx: TxConfig = field(default_factory=TxConfig)
    jupiter: JupiterConfig = field(default_factory=JupiterConfig)
    trading: TradingConfig = field(default_factory=TradingConfig)
    deploy: DeployConfig = field(default_factory=DeployConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    @classmethod
    def reload(cls) -> "Config":
        """Reload configuration from environment"""
        _load_env_file()
        return cls()


# Global config instance
config = Config()


def get_config() -> Config:
    """Get global configuration instance"""
    return config


def reload_config() -> Config:
    """Reload and return new configuration"""
    global config
    config = Config.reload()
    return config


def setup_logging(
    log_config: Optional[LoggingConfig] = None,
    logger_name: str = "solana_wingman",
) -> logging.Logger:
    """
    Set up logging based on configuration.

    Creates handlers for file and/or console output with optional rotation.
    The log file directory is created automatically if it doesn't exist.

    Args:
        log_config: Logging configuration (uses global config if None)
        logger_name: Name of the logger to configure

    Returns:
        Configured logger instance
    """
    if log_config is None:
        log_config = config.logging

    logger = logging.getLogger(logger_name)
    logger.setLevel(log_config.level)

    # Close before removing to release file handles on reload
    for handler in logger.handlers[:]:
        handler.close()
        logger.removeHandler(handler)

    formatter = logging.Formatter(log_config.log_format)

    handlers: List[logging.Handler] = []

    if log_config.log_file:
        from logging.handlers import RotatingFileHandler

        log_path = Path(log_config.log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)

        file_handler = RotatingFileHandler(
            log_config.log_file,
            maxBytes=log_config.max_bytes,
            backupCount=log_config.backup_count,
            encoding='utf-8',
        )
        file_handler.setLevel(log_config.level)
        file_handler.setFormatter(formatter)
        handlers.append(file_handler)

    if log_config.console_output:
        console_handler = logging.StreamHandler()
        console_handler.setLevel(log_config.level)
        console_handler.setFormatter(formatter)
        handlers.append(console_handler)

    for handler in handlers:
        logger.addHandler(handler)

    # Child loggers inherit handlers from parent
    for name in [
        f"{logger_name}.infra",
        f"{logger_name}.actions",
        f"{logger_name}.protocols",
    ]:
        logging.getLogger(name).setLevel(log_config.level)

    if log_config.log_file:
        logger.info(f"Logging initialized: file={log_config.log_file}, level={log_config.log_level}")

    return logger
