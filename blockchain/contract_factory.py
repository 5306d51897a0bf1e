"""
Contract Factory
Submits a deployment for one compiled artifact and tracks it to confirmation
"""

from typing import Optional
from web3 import Web3
from web3.exceptions import TimeExhausted, Web3Exception
from loguru import logger

from .exceptions import ConfirmationError, SubmissionError


class DeployedContract:
    """Confirmed contract instance"""

    def __init__(
        self,
        contract_name: str,
        address: str,
        transaction_hash: str,
        block_number: Optional[int] = None,
        gas_used: Optional[int] = None
    ):
        self.contract_name = contract_name
        self.address = address
        self.transaction_hash = transaction_hash
        self.block_number = block_number
        self.gas_used = gas_used

    def __repr__(self):
        return f"DeployedContract({self.contract_name} at {self.address})"


class PendingDeployment:
    """
    Deployment transaction accepted by the node but not yet confirmed
    """

    def __init__(self, w3: Web3, contract_name: str, transaction_hash: str, deployer: str):
        """
        Initialize Pending Deployment

        Args:
            w3: Web3 instance
            contract_name: Contract being deployed
            transaction_hash: Hex hash of the creation transaction
            deployer: Address that sent the transaction
        """
        self.w3 = w3
        self.contract_name = contract_name
        self.transaction_hash = transaction_hash
        self.deployer = deployer

    def wait_for_confirmation(
        self,
        timeout: float = 120,
        poll_latency: float = 0.1
    ) -> DeployedContract:
        """
        Block until the creation transaction is mined

        Args:
            timeout: Seconds to wait for a receipt
            poll_latency: Seconds between receipt polls

        Returns:
            DeployedContract

        Raises:
            ConfirmationError: timed out, reverted, or no contract created
        """
        logger.info(f"Waiting for confirmation of {self.transaction_hash} (timeout {timeout}s)...")

        try:
            receipt = self.w3.eth.wait_for_transaction_receipt(
                self.transaction_hash,
                timeout=timeout,
                poll_latency=poll_latency
            )
        except TimeExhausted as e:
            raise ConfirmationError(
                f"Transaction {self.transaction_hash} not mined within {timeout}s",
                transaction_hash=self.transaction_hash
            ) from e
        except (Web3Exception, ValueError, OSError) as e:
            raise ConfirmationError(
                f"Error waiting for {self.transaction_hash}: {e}",
                transaction_hash=self.transaction_hash
            ) from e

        if receipt.get('status') != 1:
            raise ConfirmationError(
                f"Deployment of {self.contract_name} reverted "
                f"(tx {self.transaction_hash}, block {receipt.get('blockNumber')})",
                transaction_hash=self.transaction_hash
            )

        contract_address = receipt.get('contractAddress')
        if not contract_address:
            raise ConfirmationError(
                f"Receipt for {self.transaction_hash} has no contract address",
                transaction_hash=self.transaction_hash
            )

        deployed = DeployedContract(
            contract_name=self.contract_name,
            address=Web3.to_checksum_address(contract_address),
            transaction_hash=self.transaction_hash,
            block_number=receipt.get('blockNumber'),
            gas_used=receipt.get('gasUsed')
        )

        logger.success(
            f"{self.contract_name} confirmed in block {deployed.block_number} "
            f"(gas used: {deployed.gas_used})"
        )
        return deployed


class ContractFactory:
    """
    Deploys new instances of one artifact on behalf of one signer
    """

    def __init__(self, w3: Web3, artifact, signer, transaction_builder):
        """
        Initialize Contract Factory

        Args:
            w3: Web3 instance
            artifact: ContractArtifact to deploy
            signer: Signer that pays for and owns the deployment
            transaction_builder: TransactionBuilder
        """
        self.w3 = w3
        self.artifact = artifact
        self.signer = signer
        self.tx_builder = transaction_builder

    @property
    def contract_name(self) -> str:
        return self.artifact.contract_name

    def deploy(self, *args) -> PendingDeployment:
        """
        Submit a creation transaction without waiting for it to be mined

        Args:
            *args: Constructor arguments

        Returns:
            PendingDeployment

        Raises:
            SubmissionError: arguments rejected, estimation or broadcast failed
        """
        try:
            contract = self.w3.eth.contract(abi=self.artifact.abi, bytecode=self.artifact.bytecode)
            constructor = contract.constructor(*args)

            tx = self.tx_builder.build_deployment_tx(constructor, self.signer.address)
            logger.info(f"Sending {self.contract_name} deployment transaction...")
            tx_hash = self.signer.send_transaction(self.w3, tx)
        # Web3ValidationError (bad constructor arguments) is a Web3Exception
        except (Web3Exception, ValueError, TypeError, OSError) as e:
            raise SubmissionError(f"Deployment of {self.contract_name} rejected: {e}") from e

        tx_hash = Web3.to_hex(tx_hash)
        logger.info(f"Transaction sent: {tx_hash}")

        return PendingDeployment(self.w3, self.contract_name, tx_hash, self.signer.address)
