"""
Artifact Registry
Resolves compiled contract artifacts (ABI + bytecode) by contract name
"""

import os
import json
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple
from loguru import logger

from .exceptions import ArtifactNotFoundError


@dataclass(frozen=True)
class ContractArtifact:
    """Compiled contract interface and creation bytecode"""

    name: str
    abi: Tuple[Dict, ...]
    bytecode: str
    source_path: str


class ArtifactRegistry:
    """
    Looks up compiled artifacts produced by Hardhat or Foundry

    Hardhat: artifacts/contracts/<Source>.sol/<Name>.json
    Foundry: out/<Source>.sol/<Name>.json
    """

    def __init__(self, artifacts_dir: str = "artifacts"):
        """
        Initialize Artifact Registry

        Args:
            artifacts_dir: Root of the compiler's artifact tree
        """
        self.artifacts_dir = artifacts_dir

        logger.debug(f"Artifact Registry using {self.artifacts_dir}")

    def resolve(self, contract_name: str) -> ContractArtifact:
        """
        Resolve a deployable artifact

        Args:
            contract_name: Bare name ("LendingPlatform") or fully qualified
                name ("contracts/LendingPlatform.sol:LendingPlatform")

        Returns:
            ContractArtifact

        Raises:
            ArtifactNotFoundError: name unknown, ambiguous, or not deployable
        """
        if not contract_name or not contract_name.strip():
            raise ArtifactNotFoundError(contract_name or "", "empty contract name")

        if not os.path.isdir(self.artifacts_dir):
            raise ArtifactNotFoundError(
                contract_name,
                f"artifacts directory '{self.artifacts_dir}' does not exist "
                "(run 'npx hardhat compile' first)"
            )

        path = self._find_artifact_path(contract_name)
        artifact = self._load(contract_name, path)

        logger.debug(f"Resolved {artifact.name} from {path}")
        return artifact

    def available_contracts(self) -> List[str]:
        """List contract names with an artifact in the tree"""
        if not os.path.isdir(self.artifacts_dir):
            return []

        return sorted({
            os.path.splitext(os.path.basename(path))[0]
            for path in self._artifact_files()
        })

    def _find_artifact_path(self, contract_name: str) -> str:
        source, _, name = contract_name.rpartition(':')

        candidates = [
            path for path in self._artifact_files()
            if os.path.splitext(os.path.basename(path))[0] == name
        ]

        if source:
            # "contracts/Foo.sol:Foo" -> match on the source directory suffix
            source_dir = os.path.normpath(source)
            candidates = [
                path for path in candidates
                if (os.sep + os.path.normpath(os.path.dirname(path))).endswith(os.sep + source_dir)
            ]

        if not candidates:
            raise ArtifactNotFoundError(
                contract_name,
                f"no artifact in '{self.artifacts_dir}' (was it compiled?)"
            )

        if len(candidates) > 1:
            raise ArtifactNotFoundError(
                contract_name,
                "ambiguous name, use a fully qualified name: "
                + ", ".join(sorted(candidates))
            )

        return candidates[0]

    def _artifact_files(self):
        for root, dirs, files in os.walk(self.artifacts_dir):
            # Hardhat build-info holds compiler I/O, not artifacts
            dirs[:] = [d for d in dirs if d != 'build-info']

            for filename in files:
                if filename.endswith('.json') and not filename.endswith('.dbg.json'):
                    yield os.path.join(root, filename)

    def _load(self, contract_name: str, path: str) -> ContractArtifact:
        try:
            with open(path, 'r') as f:
                contract_json = json.load(f)
        except (OSError, ValueError) as e:
            raise ArtifactNotFoundError(contract_name, f"unreadable artifact {path}: {e}") from e

        if not isinstance(contract_json, dict):
            raise ArtifactNotFoundError(contract_name, f"artifact {path} is not a JSON object")

        abi = contract_json.get('abi')
        bytecode = self._extract_bytecode(contract_json.get('bytecode'))

        if abi is None:
            raise ArtifactNotFoundError(contract_name, f"artifact {path} has no ABI")

        if not bytecode or bytecode in ('0x', '0x0'):
            raise ArtifactNotFoundError(
                contract_name,
                "artifact has no creation bytecode (abstract contract or interface?)"
            )

        if '__$' in bytecode:
            raise ArtifactNotFoundError(contract_name, "bytecode has unlinked library references")

        if not bytecode.startswith('0x'):
            bytecode = '0x' + bytecode

        return ContractArtifact(
            name=contract_json.get('contractName', contract_name.rpartition(':')[2]),
            abi=tuple(abi),
            bytecode=bytecode,
            source_path=path
        )

    @staticmethod
    def _extract_bytecode(raw) -> Optional[str]:
        # Foundry nests creation code under {"object": ...}
        if isinstance(raw, dict):
            raw = raw.get('object')

        if isinstance(raw, str):
            return raw.strip()

        return None
