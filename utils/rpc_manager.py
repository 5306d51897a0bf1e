"""
RPC Manager
Builds the Web3 connection for the selected deployment network
"""

from typing import Optional
from urllib.parse import urlsplit
from web3 import Web3
from web3.middleware import ExtraDataToPOAMiddleware
from loguru import logger

from blockchain.exceptions import ConfigurationError, NetworkUnavailable


class RPCManager:
    """
    Owns the single Web3 instance used for a deployment run

    Connection is lazy: nothing touches the network until get_web3()
    is called for the first time.
    """

    def __init__(self, config):
        """
        Initialize RPC Manager

        Args:
            config: DeployConfig instance
        """
        self.config = config
        self.w3: Optional[Web3] = None

        logger.debug(f"RPC Manager initialized for network '{config.network_name}'")

    def get_web3(self) -> Web3:
        """
        Get connected Web3 instance

        Returns:
            Web3 instance

        Raises:
            NetworkUnavailable: endpoint does not answer
            ConfigurationError: endpoint reports an unexpected chain id
        """
        if self.w3 is None:
            self.w3 = self._connect()
        return self.w3

    def _connect(self) -> Web3:
        """Create Web3 instance and verify the endpoint"""
        logger.info(f"Connecting to {self.config.network_name} ({self._masked_url()})")

        w3 = Web3(Web3.HTTPProvider(
            self.config.rpc_url,
            request_kwargs={'timeout': self.config.request_timeout}
        ))

        # PoA chains (Polygon, BSC, Geth clique) put extra data in block headers
        if self.config.poa:
            w3.middleware_onion.inject(ExtraDataToPOAMiddleware, layer=0)

        if not w3.is_connected():
            raise NetworkUnavailable(
                f"Failed to connect to {self.config.network_name} at {self._masked_url()}"
            )

        chain_id = w3.eth.chain_id
        if self.config.chain_id is not None and chain_id != int(self.config.chain_id):
            raise ConfigurationError(
                f"Network '{self.config.network_name}' expects chain id "
                f"{self.config.chain_id}, endpoint reports {chain_id}"
            )

        logger.success(f"Connected to {self.config.network_name} (chain id {chain_id})")
        return w3

    def _masked_url(self) -> str:
        """RPC URL reduced to scheme, host and port; path, query and credentials often carry API keys"""
        parts = urlsplit(self.config.rpc_url)
        if not parts.scheme or not parts.hostname:
            return '<rpc url>'
        port = f":{parts.port}" if parts.port else ''
        return f"{parts.scheme}://{parts.hostname}{port}"
