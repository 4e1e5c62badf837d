import json
from pathlib import Path
from typing import Any, Callable, Dict, NamedTuple

from ape import project
from ape.api import AccountAPI
from ape.contracts import ContractContainer, ContractInstance
from ethpm_types import ContractType
from eth_typing import ABI

from deployment.constants import VERSION_FILENAME
from deployment.exceptions import ArtifactNotFoundError

ContractName = str


class LiveArtifact(NamedTuple):
    """ABI and creation bytecode of a contract from a pinned release."""

    abi: ABI
    bytecode: str


class LiveArtifacts:
    """Registry of pinned contract builds, keyed by contract name."""

    def __init__(self, artifacts: Dict[ContractName, LiveArtifact]):
        self.artifacts = artifacts

    @classmethod
    def from_directory(cls, directory: Path) -> "LiveArtifacts":
        """Loads every <ContractName>.json artifact in a release directory."""
        if not directory.is_dir():
            raise ArtifactNotFoundError(f"No live contracts found at {directory}")

        artifacts = dict()
        for filepath in sorted(directory.glob("*.json")):
            with open(filepath, "r") as file:
                data = json.load(file)
            artifacts[filepath.stem] = LiveArtifact(abi=data["abi"], bytecode=data["bytecode"])
        return cls(artifacts)

    def __contains__(self, contract_name: ContractName) -> bool:
        return contract_name in self.artifacts

    def get(self, contract_name: ContractName) -> LiveArtifact:
        try:
            return self.artifacts[contract_name]
        except KeyError:
            raise ArtifactNotFoundError(f"No live artifact for contract '{contract_name}'.")

    def get_contract_container(self, contract_name: ContractName) -> ContractContainer:
        artifact = self.get(contract_name)
        contract_type = ContractType.model_validate(
            {
                "contractName": contract_name,
                "abi": artifact.abi,
                "deploymentBytecode": {"bytecode": artifact.bytecode},
            }
        )
        return ContractContainer(contract_type)


class ContractFactory:
    """A contract container bound to the account that deploys and transacts with it."""

    def __init__(self, container: ContractContainer, signer: AccountAPI):
        self.container = container
        self.signer = signer

    @property
    def contract_name(self) -> ContractName:
        return self.container.contract_type.name

    def deploy(self, *args, **tx_kwargs: Any) -> ContractInstance:
        return self.signer.deploy(self.container, *args, **tx_kwargs)

    def at(self, address: str) -> ContractInstance:
        return self.container.at(address)


ContractFactoryProvider = Callable[[ContractName, AccountAPI], ContractFactory]


def _get_dependency_contract_container(contract: ContractName) -> ContractContainer:
    for dependency_name, dependency_versions in project.dependencies.items():
        if len(dependency_versions) > 1:
            raise ValueError(f"Ambiguous {dependency_name} dependency for {contract}")
        try:
            dependency_api = list(dependency_versions.values())[0]
            contract_container = getattr(dependency_api, contract)
            return contract_container
        except AttributeError:
            continue
    raise ArtifactNotFoundError(f"No contract found with name '{contract}'.")


def get_contract_container(contract: ContractName) -> ContractContainer:
    try:
        contract_container = getattr(project, contract)
    except AttributeError:
        # not in root project; check dependencies
        contract_container = _get_dependency_contract_container(contract)

    return contract_container


def get_contract_factory(use_live_version: bool, live_dir: Path) -> ContractFactoryProvider:
    """
    Selects where contract ABIs and bytecode come from: the pinned release
    in `live_dir`, or the project's own compiled contracts.
    """
    if use_live_version:
        live_artifacts = LiveArtifacts.from_directory(live_dir)

        def live_contract_factory(name: ContractName, signer: AccountAPI) -> ContractFactory:
            return ContractFactory(live_artifacts.get_contract_container(name), signer)

        return live_contract_factory

    def project_contract_factory(name: ContractName, signer: AccountAPI) -> ContractFactory:
        return ContractFactory(get_contract_container(name), signer)

    return project_contract_factory


def read_contracts_version(directory: Path) -> str:
    """Returns the build version tag of the contracts in `directory`."""
    filepath = directory / VERSION_FILENAME
    try:
        with open(filepath, "r") as file:
            return file.read().strip()
    except FileNotFoundError:
        raise ArtifactNotFoundError(f"Contracts version file not found at {filepath}")
