"""
Wallet Manager
Provides the signing accounts available on the selected network
"""

import os
from typing import Dict, List, Optional
from decimal import Decimal
from web3 import Web3
from eth_account import Account
from loguru import logger

from .exceptions import NoSignerAvailable


class LocalSigner:
    """Account whose private key is held in this process"""

    def __init__(self, account):
        self.account = account
        self.address = account.address

    def send_transaction(self, w3: Web3, transaction: Dict) -> bytes:
        """
        Sign locally and broadcast as a raw transaction

        Args:
            w3: Web3 instance
            transaction: Fully populated transaction dict

        Returns:
            Transaction hash
        """
        signed_tx = self.account.sign_transaction(transaction)
        return w3.eth.send_raw_transaction(signed_tx.raw_transaction)

    def __repr__(self):
        return f"LocalSigner({self.address})"


class NodeSigner:
    """Account unlocked on the node itself (Hardhat/Anvil/Ganache dev accounts)"""

    def __init__(self, address: str):
        self.address = Web3.to_checksum_address(address)

    def send_transaction(self, w3: Web3, transaction: Dict) -> bytes:
        """Let the node sign and broadcast via eth_sendTransaction"""
        return w3.eth.send_transaction(transaction)

    def __repr__(self):
        return f"NodeSigner({self.address})"


class WalletManager:
    """
    Signer provider

    If the network names an accounts env var, signers are built from the
    comma separated private keys it holds. Otherwise the node's own
    unlocked accounts (eth_accounts) are used, in node order.
    """

    def __init__(self, w3: Web3, accounts_env: Optional[str] = None):
        """
        Initialize Wallet Manager

        Args:
            w3: Web3 instance
            accounts_env: Env var holding private keys (None = node accounts)
        """
        self.w3 = w3
        self.accounts_env = accounts_env

    def get_signers(self) -> List:
        """
        Get ordered list of available signers

        Returns:
            List of LocalSigner or NodeSigner (may be empty)

        Raises:
            NoSignerAvailable: a configured private key is malformed
        """
        if self.accounts_env:
            return self._local_signers()

        accounts = self.w3.eth.accounts
        logger.debug(f"Node exposes {len(accounts)} unlocked accounts")
        return [NodeSigner(address) for address in accounts]

    def _local_signers(self) -> List[LocalSigner]:
        """Build signers from private keys in the environment"""
        raw_keys = os.getenv(self.accounts_env, '')
        keys = [key.strip() for key in raw_keys.split(',') if key.strip()]

        if not keys:
            logger.warning(f"{self.accounts_env} is not set - no local signers")
            return []

        signers = []
        for index, key in enumerate(keys):
            try:
                account = Account.from_key(key)
            except Exception as e:
                # Never echo the key itself
                raise NoSignerAvailable(
                    f"Private key #{index} in {self.accounts_env} is invalid"
                ) from e
            signers.append(LocalSigner(account))

        logger.debug(f"Loaded {len(signers)} signers from {self.accounts_env}")
        return signers

    def get_balance(self, address: str) -> Decimal:
        """
        Get native balance of an account

        Args:
            address: Account address

        Returns:
            Balance in ether units
        """
        balance_wei = self.w3.eth.get_balance(Web3.to_checksum_address(address))
        return Decimal(str(self.w3.from_wei(balance_wei, 'ether')))
