"""
Contract Manager
Resolves compiled contract artifacts and hands out contract factories
"""

import os
import json
import glob
from typing import Dict, List
from web3 import Web3
from loguru import logger

from .contract_factory import ContractFactory
from .exceptions import ArtifactNotFound


class ContractArtifact:
    """Compiled contract as written by `npx hardhat compile`"""

    def __init__(self, contract_name: str, source_name: str, abi: List[Dict], bytecode: str, path: str):
        self.contract_name = contract_name
        self.source_name = source_name
        self.abi = abi
        self.bytecode = bytecode
        self.path = path

    @property
    def fully_qualified_name(self) -> str:
        return f"{self.source_name}:{self.contract_name}"

    def __repr__(self):
        return f"ContractArtifact({self.fully_qualified_name})"


class ContractManager:
    """
    Looks up artifacts by contract name in a Hardhat artifacts directory

    Names may be bare ("TourSecureDigitalID") or fully qualified
    ("contracts/TourSecureDigitalID.sol:TourSecureDigitalID"). A bare name
    that matches more than one source file is rejected.
    """

    def __init__(self, w3: Web3, artifacts_dir: str, transaction_builder):
        """
        Initialize Contract Manager

        Args:
            w3: Web3 instance
            artifacts_dir: Hardhat artifacts root
            transaction_builder: TransactionBuilder passed on to factories
        """
        self.w3 = w3
        self.artifacts_dir = artifacts_dir
        self.tx_builder = transaction_builder

    def get_contract_factory(self, name: str, signer) -> ContractFactory:
        """
        Get a factory for the named contract bound to a signer

        Args:
            name: Contract name or fully qualified name
            signer: Signer that will send the deployment

        Returns:
            ContractFactory

        Raises:
            ArtifactNotFound: unknown, ambiguous, unreadable or abstract contract
        """
        artifact = self.get_artifact(name)
        return ContractFactory(self.w3, artifact, signer, self.tx_builder)

    def get_artifact(self, name: str) -> ContractArtifact:
        """Load and validate the artifact for a contract name"""
        if not os.path.isdir(self.artifacts_dir):
            raise ArtifactNotFound(
                f"Artifacts directory not found: {self.artifacts_dir} "
                f"(run 'npx hardhat compile' first)"
            )

        path = self._find_artifact_path(name)
        artifact = self._load_artifact(path)

        logger.debug(f"Resolved {name} to {artifact.path}")
        return artifact

    def _find_artifact_path(self, name: str) -> str:
        if ':' in name:
            source_name, contract_name = name.rsplit(':', 1)
            path = os.path.join(self.artifacts_dir, source_name, f"{contract_name}.json")
            if not os.path.isfile(path):
                raise ArtifactNotFound(f"Artifact for {name} not found: {path}")
            return path

        pattern = os.path.join(self.artifacts_dir, '**', f"{name}.json")
        matches = sorted(
            path for path in glob.glob(pattern, recursive=True)
            if 'build-info' not in os.path.relpath(path, self.artifacts_dir).split(os.sep)
        )

        if not matches:
            raise ArtifactNotFound(
                f"Artifact for contract {name} not found in {self.artifacts_dir} "
                f"(run 'npx hardhat compile' first)"
            )

        if len(matches) > 1:
            candidates = [
                f"{os.path.dirname(os.path.relpath(path, self.artifacts_dir))}:{name}"
                for path in matches
            ]
            raise ArtifactNotFound(
                f"Multiple artifacts for contract {name}, use a fully qualified name: "
                f"{', '.join(candidates)}"
            )

        return matches[0]

    def _load_artifact(self, path: str) -> ContractArtifact:
        try:
            with open(path, 'r') as f:
                contract_json = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise ArtifactNotFound(f"Cannot read artifact {path}: {e}") from e

        if 'abi' not in contract_json or 'bytecode' not in contract_json:
            raise ArtifactNotFound(f"Artifact {path} has no abi/bytecode")

        bytecode = contract_json['bytecode']
        if isinstance(bytecode, dict):
            # Foundry layout: {"object": "0x..."}
            bytecode = bytecode.get('object', '')

        contract_name = contract_json.get(
            'contractName', os.path.splitext(os.path.basename(path))[0]
        )

        if not bytecode or bytecode in ('0x', '0X'):
            raise ArtifactNotFound(
                f"{contract_name} has no bytecode (abstract contract or interface)"
            )

        source_name = contract_json.get(
            'sourceName',
            os.path.relpath(os.path.dirname(path), self.artifacts_dir)
        )

        return ContractArtifact(
            contract_name=contract_name,
            source_name=source_name,
            abi=contract_json['abi'],
            bytecode=bytecode,
            path=path
        )
