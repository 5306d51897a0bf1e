"""
Deployment Configuration
Loads config/deploy_config.json and applies environment overrides
"""

import os
import json
from typing import Dict, Optional
from loguru import logger
from dotenv import load_dotenv

from blockchain.exceptions import ConfigurationError

DEFAULT_CONFIG_PATH = "config/deploy_config.json"

DEFAULT_CONFIG = {
    'contract_name': 'TourSecureDigitalID',
    'artifacts_dir': 'artifacts',
    'default_network': 'localhost',
    'networks': {
        'localhost': {
            'rpc_url': 'http://127.0.0.1:8545'
        }
    },
    'confirmation': {
        'timeout_seconds': 120,
        'poll_latency_seconds': 0.1
    },
    'gas': {
        'estimate_buffer': 1.2
    }
}


class DeployConfig:
    """
    Resolved settings for a single deployment run

    Values come from the JSON config; environment variables
    (DEPLOY_NETWORK, DEPLOY_CONTRACT, ARTIFACTS_DIR, CONFIRMATION_TIMEOUT)
    take precedence.
    """

    def __init__(self, config: Dict, network: Optional[str] = None):
        """
        Initialize Deploy Config

        Args:
            config: Parsed configuration dict
            network: Network name (None = DEPLOY_NETWORK or default_network)
        """
        self.config = config

        self.contract_name = os.getenv('DEPLOY_CONTRACT') or config.get(
            'contract_name', DEFAULT_CONFIG['contract_name']
        )
        self.artifacts_dir = os.getenv('ARTIFACTS_DIR') or config.get(
            'artifacts_dir', DEFAULT_CONFIG['artifacts_dir']
        )

        # Network selection
        self.network_name = (
            network
            or os.getenv('DEPLOY_NETWORK')
            or config.get('default_network', DEFAULT_CONFIG['default_network'])
        )
        networks = config.get('networks') or {}
        if self.network_name not in networks:
            raise ConfigurationError(
                f"Unknown network '{self.network_name}' "
                f"(configured: {', '.join(sorted(networks)) or 'none'})"
            )
        self.network = networks[self.network_name]

        self.rpc_url = self._resolve_rpc_url()
        self.accounts_env = self.network.get('accounts_env')
        self.chain_id = self.network.get('chain_id')
        self.poa = bool(self.network.get('poa', False))
        self.request_timeout = self._positive(
            'request_timeout', self.network.get('request_timeout', 30)
        )

        # Confirmation policy
        confirmation = config.get('confirmation') or {}
        timeout = os.getenv('CONFIRMATION_TIMEOUT') or confirmation.get(
            'timeout_seconds', DEFAULT_CONFIG['confirmation']['timeout_seconds']
        )
        self.confirmation_timeout = self._positive('confirmation timeout', timeout)
        self.poll_latency = self._positive(
            'poll latency',
            confirmation.get(
                'poll_latency_seconds',
                DEFAULT_CONFIG['confirmation']['poll_latency_seconds']
            )
        )

        # Gas settings
        gas = config.get('gas') or {}
        self.gas_estimate_buffer = self._positive(
            'gas estimate buffer',
            gas.get('estimate_buffer', DEFAULT_CONFIG['gas']['estimate_buffer'])
        )
        if self.gas_estimate_buffer < 1.0:
            raise ConfigurationError("gas estimate buffer must be >= 1.0")

        self.gas_limit = gas.get('gas_limit')
        if self.gas_limit is not None:
            self.gas_limit = int(self._positive('gas limit', self.gas_limit))

        self.max_priority_fee_gwei = gas.get('max_priority_fee_gwei')
        if self.max_priority_fee_gwei is not None:
            self.max_priority_fee_gwei = self._positive(
                'max priority fee', self.max_priority_fee_gwei
            )

    def _resolve_rpc_url(self) -> str:
        """Get RPC URL from the network entry or the env var it names"""
        rpc_url_env = self.network.get('rpc_url_env')

        if rpc_url_env:
            rpc_url = os.getenv(rpc_url_env)
            if not rpc_url:
                raise ConfigurationError(
                    f"{rpc_url_env} must be set for network '{self.network_name}'"
                )
            return rpc_url

        rpc_url = self.network.get('rpc_url')
        if not rpc_url:
            raise ConfigurationError(f"Network '{self.network_name}' has no rpc_url")
        return rpc_url

    @staticmethod
    def _positive(name: str, value) -> float:
        try:
            number = float(value)
        except (TypeError, ValueError):
            raise ConfigurationError(f"Invalid {name}: {value!r}") from None

        if number <= 0:
            raise ConfigurationError(f"{name} must be positive, got {value!r}")
        return number


def load_config(path: Optional[str] = None, network: Optional[str] = None) -> DeployConfig:
    """
    Load deployment configuration

    Args:
        path: Config file path (None = DEPLOY_CONFIG or config/deploy_config.json)
        network: Network name override

    Returns:
        DeployConfig instance
    """
    load_dotenv()

    explicit_path = path or os.getenv('DEPLOY_CONFIG')
    config_path = explicit_path or DEFAULT_CONFIG_PATH

    if os.path.exists(config_path):
        try:
            with open(config_path, 'r') as f:
                config = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise ConfigurationError(f"Cannot read {config_path}: {e}") from e

        if not isinstance(config, dict):
            raise ConfigurationError(f"{config_path} must contain a JSON object")

        logger.debug(f"Loaded configuration from {config_path}")
    else:
        if explicit_path:
            raise ConfigurationError(f"Config file not found: {config_path}")
        logger.debug(f"{config_path} not found, using built-in defaults")
        config = DEFAULT_CONFIG

    return DeployConfig(config, network=network)
