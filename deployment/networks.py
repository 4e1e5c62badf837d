from pathlib import Path
from typing import Dict, List, NamedTuple, Optional

from eth_account import Account
from eth_typing import ChecksumAddress
from eth_utils import to_checksum_address, to_hex

from deployment.constants import (
    DEV_CHAIN_RICH_ACCOUNT,
    DEV_NETWORK,
    NETWORKS_FILEPATH,
    NUM_ACCOUNTS,
    PRODUCTION_NETWORK,
)
from deployment.exceptions import DeploymentConfigError
from deployment.utils import _load_yaml

NetworkName = str


class NetworkConfig(NamedTuple):
    """Connection parameters of a network; the first account is the deployer."""

    name: NetworkName
    url: str
    accounts: List[str]

    @property
    def deployer_key(self) -> str:
        return self.accounts[0]


class OracleAddresses(NamedTuple):
    chainlink: ChecksumAddress  # primary price oracle
    tellor: ChecksumAddress  # fallback price oracle


def generate_random_accounts(number_of_accounts: int) -> List[str]:
    """Returns freshly generated private keys (different on every call)."""
    return [to_hex(Account.create().key) for _ in range(number_of_accounts)]


def dev_network_accounts(deployer_key: str, num_accounts: int = NUM_ACCOUNTS) -> List[str]:
    """Deployer, the dev chain's pre-funded account, then throwaway accounts."""
    return [deployer_key, DEV_CHAIN_RICH_ACCOUNT, *generate_random_accounts(num_accounts - 2)]


def _network_config(name: NetworkName, url: str, accounts: List[str]) -> NetworkConfig:
    if not accounts:
        raise DeploymentConfigError(f"No deployer account configured for network '{name}'.")
    return NetworkConfig(name=name, url=url, accounts=accounts)


class NetworkResolver:
    """
    Static per-network deployment parameters: connection details, price oracles
    and the wrapped native token (WIOTX) used to form a Uniswap pair.

    Oracle and WIOTX lookups are only defined for the networks that have them;
    check with `has_oracles` / `has_wiotx` first.
    """

    def __init__(
        self,
        networks: Dict[NetworkName, NetworkConfig],
        oracles: Dict[NetworkName, OracleAddresses],
        wiotx_addresses: Dict[NetworkName, ChecksumAddress],
        production_network: NetworkName = PRODUCTION_NETWORK,
        dev_network: NetworkName = DEV_NETWORK,
    ):
        self.networks = networks
        self.oracles = oracles
        self.wiotx_addresses = wiotx_addresses
        self.production_network = production_network
        self.dev_network = dev_network

    @classmethod
    def from_config(cls, config: Dict, deployer_key: str) -> "NetworkResolver":
        dev_network = config.get("development", DEV_NETWORK)
        num_accounts = int(config.get("num_accounts", NUM_ACCOUNTS))

        networks = dict()
        for name, network_data in (config.get("networks") or {}).items():
            if name == dev_network:
                accounts = dev_network_accounts(deployer_key, num_accounts)
            else:
                accounts = [deployer_key] if deployer_key else []
            networks[name] = _network_config(name=name, url=network_data["url"], accounts=accounts)

        oracles = {
            name: OracleAddresses(
                chainlink=to_checksum_address(addresses["chainlink"]),
                tellor=to_checksum_address(addresses["tellor"]),
            )
            for name, addresses in (config.get("oracles") or {}).items()
        }
        wiotx_addresses = {
            name: to_checksum_address(address)
            for name, address in (config.get("wiotx") or {}).items()
        }

        return cls(
            networks=networks,
            oracles=oracles,
            wiotx_addresses=wiotx_addresses,
            production_network=config.get("production", PRODUCTION_NETWORK),
            dev_network=dev_network,
        )

    @classmethod
    def from_yaml(cls, deployer_key: str, filepath: Optional[Path] = None) -> "NetworkResolver":
        config = _load_yaml(filepath or NETWORKS_FILEPATH)
        return cls.from_config(config=config, deployer_key=deployer_key)

    @property
    def network_names(self) -> List[NetworkName]:
        return list(self.networks)

    def network(self, name: NetworkName) -> NetworkConfig:
        try:
            return self.networks[name]
        except KeyError:
            raise DeploymentConfigError(f"Network '{name}' is not configured.")

    def is_production_network(self, name: NetworkName) -> bool:
        return name == self.production_network

    def is_dev_network(self, name: NetworkName) -> bool:
        return name == self.dev_network

    def has_oracles(self, name: NetworkName) -> bool:
        return name in self.oracles

    def has_wiotx(self, name: NetworkName) -> bool:
        return name in self.wiotx_addresses

    def oracle_addresses(self, name: NetworkName) -> OracleAddresses:
        return self.oracles[name]

    def wiotx_address(self, name: NetworkName) -> ChecksumAddress:
        return self.wiotx_addresses[name]
