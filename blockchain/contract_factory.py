"""
Contract Factory
Loads compiled Hardhat artifacts and deploys them
"""

import json
from pathlib import Path
from typing import Dict, List, Optional, Sequence
from web3 import Web3
from hexbytes import HexBytes
from loguru import logger

from .exceptions import ArtifactNotFoundError, DeploymentError
from .transaction_builder import TransactionBuilder


def find_artifact(contract_name: str, artifacts_dir: str = 'artifacts') -> Path:
    """
    Locate the artifact JSON for a contract name

    Hardhat writes artifacts/contracts/<Source>.sol/<Name>.json next to a
    <Name>.dbg.json debug file, which is skipped.

    Args:
        contract_name: Contract name as declared in Solidity
        artifacts_dir: Hardhat artifacts root

    Returns:
        Path to the artifact
    """
    root = Path(artifacts_dir)

    if not root.is_dir():
        raise ArtifactNotFoundError(
            f"Artifacts directory not found: {artifacts_dir} (run 'npx hardhat compile' first)"
        )

    matches = sorted(
        path for path in root.rglob(f"{contract_name}.json")
        if 'build-info' not in path.parts
    )

    if not matches:
        raise ArtifactNotFoundError(f"Artifact for contract {contract_name} not found in {artifacts_dir}")

    if len(matches) > 1:
        found = ', '.join(str(path) for path in matches)
        raise ArtifactNotFoundError(f"Multiple artifacts for contract {contract_name}: {found}")

    return matches[0]


class PendingDeployment:
    """A submitted creation transaction whose receipt is not known yet"""

    def __init__(
        self,
        factory: 'ContractFactory',
        tx_hash: HexBytes,
        timeout: float = 120
    ):
        self.factory = factory
        self.tx_hash = tx_hash
        self.timeout = timeout
        self.address: Optional[str] = None
        self.receipt = None

    async def deployed(self) -> str:
        """
        Wait until the deployment is mined

        Returns:
            Checksummed contract address
        """
        if self.address is not None:
            return self.address

        receipt = await self.factory.transaction_builder.wait_for_receipt(
            self.tx_hash,
            timeout=self.timeout
        )

        if receipt['status'] != 1:
            raise DeploymentError(
                f"Deployment of {self.factory.contract_name} reverted "
                f"(tx: {self.tx_hash.hex()})"
            )

        self.receipt = receipt
        self.address = Web3.to_checksum_address(receipt['contractAddress'])

        logger.success(f"{self.factory.contract_name} mined in block {receipt['blockNumber']}")
        logger.info(f"Gas used: {receipt['gasUsed']}")

        return self.address

    def contract(self):
        """web3 Contract instance at the deployed address"""
        if self.address is None:
            raise DeploymentError("Contract is not deployed yet - await deployed() first")

        return self.factory.w3.eth.contract(address=self.address, abi=self.factory.abi)


class ContractFactory:
    """
    Deploys one compiled contract
    """

    def __init__(
        self,
        w3: Web3,
        contract_name: str,
        abi: List[Dict],
        bytecode: str,
        transaction_builder: TransactionBuilder,
        confirmation_timeout: float = 120
    ):
        """
        Initialize Contract Factory

        Args:
            w3: Web3 instance
            contract_name: Contract name
            abi: Contract ABI
            bytecode: Creation bytecode (0x-prefixed)
            transaction_builder: Sender for the creation transaction
            confirmation_timeout: Seconds to wait for the receipt
        """
        if not bytecode or bytecode == '0x':
            raise DeploymentError(
                f"{contract_name} has no bytecode (abstract contract or interface?)"
            )

        self.w3 = w3
        self.contract_name = contract_name
        self.abi = abi
        self.bytecode = bytecode
        self.transaction_builder = transaction_builder
        self.confirmation_timeout = confirmation_timeout

    @classmethod
    def from_artifact(
        cls,
        w3: Web3,
        contract_name: str,
        transaction_builder: TransactionBuilder,
        artifacts_dir: str = 'artifacts',
        confirmation_timeout: float = 120
    ) -> 'ContractFactory':
        """Build a factory from the Hardhat artifact of contract_name"""
        artifact_path = find_artifact(contract_name, artifacts_dir)

        with open(artifact_path, 'r') as f:
            artifact = json.load(f)

        logger.info(f"Loaded artifact: {artifact_path}")

        return cls(
            w3,
            contract_name,
            artifact['abi'],
            artifact['bytecode'],
            transaction_builder,
            confirmation_timeout=confirmation_timeout
        )

    @property
    def constructor_inputs(self) -> List[Dict]:
        for entry in self.abi:
            if entry.get('type') == 'constructor':
                return entry.get('inputs', [])
        return []

    def deploy(self, *args) -> PendingDeployment:
        """
        Submit the creation transaction

        Args:
            *args: Constructor arguments in ABI order

        Returns:
            PendingDeployment to await
        """
        self._check_arguments(args)

        contract = self.w3.eth.contract(abi=self.abi, bytecode=self.bytecode)

        logger.info(f"Deploying {self.contract_name} with {len(args)} constructor argument(s)")
        tx_hash = self.transaction_builder.send_deployment(contract.constructor(*args))

        return PendingDeployment(self, tx_hash, timeout=self.confirmation_timeout)

    def _check_arguments(self, args: Sequence):
        expected = self.constructor_inputs

        if len(args) != len(expected):
            signature = ', '.join(f"{item['type']} {item.get('name', '')}".strip() for item in expected)
            raise DeploymentError(
                f"{self.contract_name} constructor expects {len(expected)} argument(s) "
                f"({signature}), got {len(args)}"
            )
