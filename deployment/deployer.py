from pathlib import Path
from typing import Callable, Optional

from ape.api import AccountAPI
from ape.contracts import ContractInstance
from eth_typing import ChecksumAddress

from deployment.artifacts import ContractFactoryProvider, get_contract_factory
from deployment.config import DeploymentSettings
from deployment.constants import DEPLOYMENTS_DIR, PRICE_FEED, PRICE_FEED_TESTNET
from deployment.contracts import deploy_and_setup_contracts
from deployment.exceptions import DeploymentInvariantError
from deployment.manifest import DeploymentRecord, write_manifest, write_partial_manifest
from deployment.networks import NetworkName, NetworkResolver
from deployment.oracles import wire_oracles
from deployment.params import DeployParams, ResolvedDeployParams, resolve_deploy_params

TELLOR_CALLER_KEY = "tellorCaller"

DeployAndSetup = Callable[..., DeploymentRecord]
WireOracles = Callable[..., ChecksumAddress]


def price_feed_is_testnet(price_feed: ContractInstance) -> bool:
    """The testnet PriceFeed is the one whose price can be set by hand."""
    return any(abi.name == "setPrice" for abi in price_feed.contract_type.mutable_methods)


class Deployer:
    """
    Deploys the Liquity system to one network, wires the production
    price feed to its oracles and records the result.
    """

    def __init__(
        self,
        settings: DeploymentSettings,
        resolver: NetworkResolver,
        network_name: NetworkName,
        contract_factory: Optional[ContractFactoryProvider] = None,
        deploy_and_setup: DeployAndSetup = deploy_and_setup_contracts,
        wire_oracles: WireOracles = wire_oracles,
        deployments_dir: Path = DEPLOYMENTS_DIR,
        silent: bool = False,
    ):
        self.settings = settings
        self.resolver = resolver
        self.network_name = network_name
        if contract_factory is None:
            contract_factory = get_contract_factory(
                use_live_version=settings.use_live_version, live_dir=settings.live_dir
            )
        self.get_contract_factory = contract_factory
        self.deploy_and_setup = deploy_and_setup
        self.wire_oracles = wire_oracles
        self.deployments_dir = deployments_dir
        self.silent = silent

    def _log(self, message: str) -> None:
        if not self.silent:
            print(message)

    def _print_deployment_info(self, params: ResolvedDeployParams, deployer: AccountAPI) -> None:
        if self.settings.use_live_version:
            contracts = f"live ({self.settings.contracts_version})"
        else:
            contracts = f"local build ({self.settings.contracts_version})"
        self._log(
            "\n".join(
                [
                    f"Account: {deployer.address}",
                    f"Network: {self.network_name}",
                    f"Channel: {params.channel}",
                    f"Contracts: {contracts}",
                    f"Real PriceFeed: {params.use_real_price_feed}",
                    f"Uniswap pair: {params.wiotx_address or 'mock'}",
                    f"Gas Price: {params.overrides.gas_price or 'network default'}",
                ]
            )
        )

    def _connect_price_feed(
        self, record: DeploymentRecord, deployer: AccountAPI
    ) -> ContractInstance:
        contract_name = PRICE_FEED_TESTNET if record.price_feed_is_testnet else PRICE_FEED
        factory = self.get_contract_factory(contract_name, deployer)
        return factory.at(record.addresses["priceFeed"])

    def _connect_oracles(
        self, record: DeploymentRecord, params: ResolvedDeployParams, deployer: AccountAPI
    ) -> DeploymentRecord:
        price_feed = self._connect_price_feed(record, deployer)
        if price_feed_is_testnet(price_feed):
            raise DeploymentInvariantError(
                f"Deployed PriceFeed at {price_feed.address} is the testnet variant."
            )
        if not self.resolver.has_oracles(self.network_name):
            return record

        oracles = self.resolver.oracle_addresses(self.network_name)
        try:
            tellor_caller_address = self.wire_oracles(
                deployer,
                self.get_contract_factory,
                price_feed,
                oracles,
                params.overrides,
                silent=self.silent,
            )
        except Exception:
            try:
                filepath = write_partial_manifest(
                    channel=params.channel,
                    network_name=self.network_name,
                    record=record,
                    deployments_dir=self.deployments_dir,
                )
            except OSError as e:
                # the wiring error is the one to report
                self._log(f"(!) Oracle wiring failed; could not keep deployed addresses: {e}")
            else:
                self._log(f"(!) Oracle wiring failed; deployed addresses kept in {filepath}")
            raise

        return record.with_address(TELLOR_CALLER_KEY, tellor_caller_address)

    def deploy(self, params: DeployParams, deployer: AccountAPI) -> DeploymentRecord:
        """
        Validates the options, then deploys and sets up the contracts.
        Any failure aborts the whole deployment; there are no retries.
        """
        resolved = resolve_deploy_params(params, network=self.network_name, resolver=self.resolver)
        self._print_deployment_info(resolved, deployer)

        record = self.deploy_and_setup(
            deployer,
            self.get_contract_factory,
            not resolved.use_real_price_feed,
            self.resolver.is_dev_network(self.network_name),
            resolved.wiotx_address,
            resolved.overrides,
        )
        record = record.with_version(self.settings.contracts_version)

        if resolved.use_real_price_feed:
            record = self._connect_oracles(record, resolved, deployer)

        return record

    def deploy_and_persist(self, params: DeployParams, deployer: AccountAPI) -> DeploymentRecord:
        record = self.deploy(params, deployer)
        filepath = write_manifest(
            channel=params.channel,
            network_name=self.network_name,
            record=record,
            deployments_dir=self.deployments_dir,
        )
        self._log(f"(i) Deployment written to {filepath}!")
        return record
