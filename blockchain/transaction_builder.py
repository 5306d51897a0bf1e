"""
Transaction Builder
Fills in sender, nonce, chain id and gas for contract deployments
"""

from typing import Dict, List, Optional
from web3 import Web3
from loguru import logger


class TransactionBuilder:
    """
    Builds contract-creation transactions from a web3 contract constructor

    Calldata and fee defaults come from web3's build_transaction. This
    class adds the pending nonce, the gas estimate buffer and the
    configured overrides.
    """

    def __init__(
        self,
        w3: Web3,
        gas_estimate_buffer: float = 1.2,
        gas_limit: Optional[int] = None,
        max_priority_fee_gwei: Optional[float] = None
    ):
        """
        Initialize Transaction Builder

        Args:
            w3: Web3 instance
            gas_estimate_buffer: Multiplier applied to the node's gas estimate
            gas_limit: Fixed gas limit (skips estimation)
            max_priority_fee_gwei: Fixed EIP-1559 tip (None = web3 default)
        """
        self.w3 = w3
        self.gas_estimate_buffer = gas_estimate_buffer
        self.gas_limit = gas_limit
        self.max_priority_fee_gwei = max_priority_fee_gwei

    def build_deployment_tx(self, constructor, sender: str) -> Dict:
        """
        Build a contract-creation transaction

        Args:
            constructor: Bound constructor, w3.eth.contract(...).constructor(*args)
            sender: Deployer address

        Returns:
            Transaction dict (no 'to' field)
        """
        sender = Web3.to_checksum_address(sender)

        params = {
            'from': sender,
            'nonce': self.w3.eth.get_transaction_count(sender, 'pending'),
            'chainId': self.w3.eth.chain_id
        }

        if self.max_priority_fee_gwei is not None:
            params['maxPriorityFeePerGas'] = self.w3.to_wei(self.max_priority_fee_gwei, 'gwei')

        if self.gas_limit:
            gas = int(self.gas_limit)
        else:
            estimate = constructor.estimate_gas(params)
            gas = apply_gas_buffer(estimate, self.gas_estimate_buffer)
            logger.debug(f"Gas estimate: {estimate} (limit {gas})")

        tx = constructor.build_transaction({**params, 'gas': gas})

        logger.info(f"Deployment tx: nonce {tx['nonce']}, gas limit {tx['gas']}")
        return tx


def get_constructor_inputs(abi: List[Dict]) -> List[Dict]:
    """Constructor inputs from an ABI (empty when there is no explicit constructor)"""
    for item in abi:
        if item.get('type') == 'constructor':
            return item.get('inputs', [])
    return []


def apply_gas_buffer(estimate: int, buffer: float) -> int:
    """Gas limit with safety margin, never below the estimate"""
    return max(int(estimate), int(round(int(estimate) * buffer)))
