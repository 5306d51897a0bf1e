"""
Wallet Manager Tests
"""

from decimal import Decimal
import pytest
from eth_account import Account

from conftest import DEPLOYER, DEPLOYER_KEY, TX_HASH
from blockchain.exceptions import NoSignerAvailable
from blockchain.wallet_manager import LocalSigner, NodeSigner, WalletManager


# Hardhat default account #1
SECOND_KEY = '0x59c6995e998f97a5a0044966f0945389dc9e86dae88c7a8412f4603b6b78690d'
SECOND_ADDRESS = '0x70997970C51812dc3A010C7d01b50e0d17dc79C8'


class TestNodeSigners:
    """Unlocked node accounts"""

    def test_node_accounts_in_order(self, node_w3):
        node_w3.eth.accounts = [DEPLOYER.lower(), SECOND_ADDRESS]

        signers = WalletManager(node_w3).get_signers()

        assert [type(s) for s in signers] == [NodeSigner, NodeSigner]
        assert [s.address for s in signers] == [DEPLOYER, SECOND_ADDRESS]

    def test_no_node_accounts(self, node_w3):
        node_w3.eth.accounts = []

        assert WalletManager(node_w3).get_signers() == []

    def test_node_signer_uses_send_transaction(self, node_w3):
        tx = {'from': DEPLOYER, 'data': '0x00'}

        assert NodeSigner(DEPLOYER).send_transaction(node_w3, tx) == TX_HASH
        node_w3.eth.send_transaction.assert_called_once_with(tx)


class TestLocalSigners:
    """Private keys from the environment"""

    def test_single_key(self, node_w3, clean_env):
        clean_env.setenv('DEPLOYER_PRIVATE_KEY', DEPLOYER_KEY)

        signers = WalletManager(node_w3, accounts_env='DEPLOYER_PRIVATE_KEY').get_signers()

        assert len(signers) == 1
        assert isinstance(signers[0], LocalSigner)
        assert signers[0].address == DEPLOYER

    def test_multiple_keys(self, node_w3, clean_env):
        clean_env.setenv('DEPLOYER_PRIVATE_KEY', f" {DEPLOYER_KEY}, {SECOND_KEY} ,")

        signers = WalletManager(node_w3, accounts_env='DEPLOYER_PRIVATE_KEY').get_signers()

        assert [s.address for s in signers] == [DEPLOYER, SECOND_ADDRESS]

    def test_env_not_set(self, node_w3, clean_env):
        """Missing keys mean no signers, not node accounts"""
        signers = WalletManager(node_w3, accounts_env='DEPLOYER_PRIVATE_KEY').get_signers()

        assert signers == []

    def test_invalid_key(self, node_w3, clean_env):
        clean_env.setenv('DEPLOYER_PRIVATE_KEY', '0xdeadbeef')

        with pytest.raises(NoSignerAvailable) as exc_info:
            WalletManager(node_w3, accounts_env='DEPLOYER_PRIVATE_KEY').get_signers()

        assert 'deadbeef' not in str(exc_info.value)

    def test_local_signer_sends_raw_transaction(self, node_w3):
        node_w3.eth.send_raw_transaction.return_value = TX_HASH
        signer = LocalSigner(Account.from_key(DEPLOYER_KEY))
        tx = {
            'from': DEPLOYER,
            'data': '0x6080604052',
            'value': 0,
            'nonce': 0,
            'chainId': 31337,
            'gas': 100_000,
            'maxFeePerGas': 3_000_000_000,
            'maxPriorityFeePerGas': 1_000_000_000
        }

        assert signer.send_transaction(node_w3, tx) == TX_HASH

        raw = node_w3.eth.send_raw_transaction.call_args[0][0]
        assert isinstance(raw, bytes)
        node_w3.eth.send_transaction.assert_not_called()


class TestBalance:

    def test_balance_in_ether(self, node_w3):
        node_w3.eth.get_balance.return_value = 15 * 10**17

        assert WalletManager(node_w3).get_balance(DEPLOYER) == Decimal('1.5')


if __name__ == "__main__":
    pytest.main([__file__, '-v'])
