"""
Shared test fixtures
"""

import json
import sys
import pytest
from unittest.mock import Mock
from eth_abi import encode
from eth_abi.exceptions import EncodingError
from hexbytes import HexBytes
from loguru import logger
from web3 import Web3
from web3.exceptions import Web3ValidationError


# Hardhat default account #0 and the address of its first deployment
DEPLOYER = '0xf39Fd6e51aad88F6F4ce6aB8827279cffFb92266'
DEPLOYER_KEY = '0xac0974bec39a17e36ba4a6b4d238ff944bacb478cbed5efcae784d7bf4f2ff80'
DEPLOYED = '0x5FbDB2315678afecb367f032d93F642f64180aa3'

BYTECODE = '0x6080604052348015600f57600080fd5b50'
TX_HASH = HexBytes('0x' + 'ab' * 32)

OWNER_CONSTRUCTOR_ABI = [
    {
        "inputs": [
            {"internalType": "address", "name": "initialOwner", "type": "address"}
        ],
        "stateMutability": "nonpayable",
        "type": "constructor"
    },
    {
        "inputs": [],
        "name": "owner",
        "outputs": [{"internalType": "address", "name": "", "type": "address"}],
        "stateMutability": "view",
        "type": "function"
    }
]

ENV_OVERRIDES = [
    'DEPLOY_CONFIG',
    'DEPLOY_NETWORK',
    'DEPLOY_CONTRACT',
    'ARTIFACTS_DIR',
    'CONFIRMATION_TIMEOUT',
    'DEPLOYER_PRIVATE_KEY',
    'SEPOLIA_RPC_URL',
    'LOG_LEVEL',
    'LOG_FILE'
]


def write_artifact(artifacts_dir, name, abi=None, bytecode=BYTECODE, source=None):
    """Write a Hardhat-style artifact and return its path"""
    source = source or f"contracts/{name}.sol"
    path = artifacts_dir / source / f"{name}.json"
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps({
        "_format": "hh-sol-artifact-1",
        "contractName": name,
        "sourceName": source,
        "abi": OWNER_CONSTRUCTOR_ABI if abi is None else abi,
        "bytecode": bytecode,
        "deployedBytecode": bytecode,
        "linkReferences": {},
        "deployedLinkReferences": {}
    }))
    return path


def contract_class_for(w3):
    """
    Stand-in for w3.eth.contract(abi=..., bytecode=...)

    Constructors encode their arguments with eth-abi and fill fees the
    way web3's build_transaction does (tip + 2 * base fee).
    """
    def contract(abi, bytecode):
        inputs = next((item.get('inputs', []) for item in abi if item.get('type') == 'constructor'), [])
        types = [item['type'] for item in inputs]

        def constructor(*args):
            if len(args) != len(types):
                raise Web3ValidationError(f"Constructor expects {len(types)} argument(s), got {len(args)}")
            try:
                data = bytecode + encode(types, list(args)).hex()
            except EncodingError as e:
                raise Web3ValidationError(str(e)) from e

            def build_transaction(params):
                tx = dict(params, data=data, value=0)
                base_fee = w3.eth.get_block('latest').get('baseFeePerGas')
                if base_fee is None:
                    tx.setdefault('gasPrice', w3.eth.gas_price)
                else:
                    tx.setdefault('maxPriorityFeePerGas', w3.eth.max_priority_fee)
                    tx.setdefault('maxFeePerGas', tx['maxPriorityFeePerGas'] + 2 * base_fee)
                return tx

            bound = Mock(data_in_transaction=data)
            bound.estimate_gas.side_effect = lambda params: w3.eth.estimate_gas(dict(params, data=data))
            bound.build_transaction.side_effect = build_transaction
            return bound

        contract_class = Mock()
        contract_class.constructor.side_effect = constructor
        return contract_class

    return contract


@pytest.fixture
def clean_env(monkeypatch):
    """Remove deployment overrides inherited from the shell"""
    for var in ENV_OVERRIDES:
        monkeypatch.delenv(var, raising=False)
    return monkeypatch


@pytest.fixture
def artifacts_dir(tmp_path):
    """Artifacts directory holding TourSecureDigitalID"""
    directory = tmp_path / 'artifacts'
    write_artifact(directory, 'TourSecureDigitalID')
    return directory


@pytest.fixture
def config_file(tmp_path, artifacts_dir):
    """Deploy config pointing at a local node and the temp artifacts"""
    path = tmp_path / 'deploy_config.json'
    path.write_text(json.dumps({
        "contract_name": "TourSecureDigitalID",
        "artifacts_dir": str(artifacts_dir),
        "default_network": "localhost",
        "networks": {
            "localhost": {"rpc_url": "http://127.0.0.1:8545", "chain_id": 31337}
        },
        "confirmation": {"timeout_seconds": 5, "poll_latency_seconds": 0.01},
        "gas": {"estimate_buffer": 1.2}
    }))
    return path


@pytest.fixture
def node_w3():
    """Mock Web3 connected to a local dev node with one unlocked account"""
    w3 = Mock()
    w3.is_connected.return_value = True
    w3.from_wei.side_effect = Web3.from_wei
    w3.to_wei.side_effect = Web3.to_wei
    w3.eth.chain_id = 31337
    w3.eth.block_number = 1
    w3.eth.accounts = [DEPLOYER]
    w3.eth.get_transaction_count.return_value = 0
    w3.eth.get_block.return_value = {'number': 1, 'baseFeePerGas': 1_000_000_000}
    w3.eth.max_priority_fee = 1_000_000_000
    w3.eth.estimate_gas.return_value = 500_000
    w3.eth.get_balance.return_value = 10_000 * 10**18
    w3.eth.contract.side_effect = contract_class_for(w3)
    w3.eth.send_transaction.return_value = TX_HASH
    w3.eth.wait_for_transaction_receipt.return_value = {
        'status': 1,
        'contractAddress': DEPLOYED,
        'blockNumber': 2,
        'gasUsed': 420_000
    }
    return w3


@pytest.fixture
def patch_web3(monkeypatch, node_w3):
    """Make RPCManager hand out node_w3"""
    web3_class = Mock(return_value=node_w3)
    monkeypatch.setattr('utils.rpc_manager.Web3', web3_class)
    return web3_class


@pytest.fixture
def restore_logger():
    """Put loguru back to its default stderr sink after configure_logging()"""
    yield logger
    logger.remove()
    logger.add(sys.stderr)


@pytest.fixture
def log_records():
    """Capture loguru records emitted during the test"""
    records = []
    handler_id = logger.add(lambda message: records.append(message.record), level="DEBUG")
    yield records
    logger.remove(handler_id)
