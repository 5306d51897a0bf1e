"""
Deployment Runner
Deploys one contract owned by the deploying signer and reports its address
"""

import sys
from typing import Optional, TextIO
from loguru import logger

from blockchain.contract_manager import ContractManager
from blockchain.exceptions import NoSignerAvailable
from blockchain.transaction_builder import TransactionBuilder
from blockchain.wallet_manager import WalletManager
from utils.rpc_manager import RPCManager


class DeploymentRunner:
    """
    Runs a single deployment:

    1. first available signer
    2. contract factory for the configured artifact
    3. deploy with the signer address as the only constructor argument
    4. wait for confirmation
    5. report the deployed address

    Failures propagate to the caller untouched. Nothing is retried, and a
    second run deploys a second, independent instance.
    """

    def __init__(
        self,
        wallet_manager,
        contract_manager,
        contract_name: str = "TourSecureDigitalID",
        confirmation_timeout: float = 120,
        poll_latency: float = 0.1,
        output: Optional[TextIO] = None
    ):
        """
        Initialize Deployment Runner

        Args:
            wallet_manager: Signer provider (get_signers)
            contract_manager: Factory provider (get_contract_factory)
            contract_name: Artifact to deploy
            confirmation_timeout: Seconds to wait for the receipt
            poll_latency: Seconds between receipt polls
            output: Report stream (None = sys.stdout)
        """
        self.wallet_manager = wallet_manager
        self.contract_manager = contract_manager
        self.contract_name = contract_name
        self.confirmation_timeout = confirmation_timeout
        self.poll_latency = poll_latency
        self.output = output

    def run(self) -> str:
        """
        Deploy the contract

        Returns:
            Deployed contract address
        """
        signers = self.wallet_manager.get_signers()
        if not signers:
            raise NoSignerAvailable("No signer available for deployment")

        deployer = signers[0]
        self._report(f"Deploying with: {deployer.address}")

        factory = self.contract_manager.get_contract_factory(self.contract_name, deployer)

        # Constructor argument is the initial owner
        pending = factory.deploy(deployer.address)

        contract = pending.wait_for_confirmation(
            timeout=self.confirmation_timeout,
            poll_latency=self.poll_latency
        )

        self._report(f"{self.contract_name} deployed to: {contract.address}")
        return contract.address

    def _report(self, line: str):
        print(line, file=self.output or sys.stdout, flush=True)


def create_runner(config, output: Optional[TextIO] = None) -> DeploymentRunner:
    """
    Wire a runner from configuration

    Connects to the configured network; raises NetworkUnavailable if the
    endpoint does not answer.

    Args:
        config: DeployConfig instance
        output: Report stream (None = sys.stdout)

    Returns:
        DeploymentRunner
    """
    rpc_manager = RPCManager(config)
    w3 = rpc_manager.get_web3()

    tx_builder = TransactionBuilder(
        w3,
        gas_estimate_buffer=config.gas_estimate_buffer,
        gas_limit=config.gas_limit,
        max_priority_fee_gwei=config.max_priority_fee_gwei
    )

    wallet_manager = WalletManager(w3, accounts_env=config.accounts_env)
    contract_manager = ContractManager(w3, config.artifacts_dir, tx_builder)

    logger.debug(
        f"Runner ready: {config.contract_name} on {config.network_name}, "
        f"artifacts in {config.artifacts_dir}"
    )

    return DeploymentRunner(
        wallet_manager,
        contract_manager,
        contract_name=config.contract_name,
        confirmation_timeout=config.confirmation_timeout,
        poll_latency=config.poll_latency,
        output=output
    )
