import json
from pathlib import Path
from typing import Any, Dict, NamedTuple, Optional

from eth_typing import ChecksumAddress

from deployment.constants import DEPLOYMENTS_DIR
from deployment.utils import _load_json

ContractKey = str

MANIFEST_JSON_FORMAT = {"indent": 2}

PARTIAL_SUFFIX = ".partial.json"
ORACLE_WIRING_PENDING = "pending"


class DeploymentRecord(NamedTuple):
    """Represents a complete Liquity deployment on a single chain."""

    chain_id: int
    version: str
    deployment_date: int  # ms since epoch
    bootstrap_period: int  # seconds
    total_stability_pool_lqty_reward: str
    liquidity_mining_lqty_reward_rate: str
    price_feed_is_testnet: bool
    uni_token_is_mock: bool
    is_dev: bool
    start_block: int
    addresses: Dict[ContractKey, ChecksumAddress]

    def with_version(self, version: str) -> "DeploymentRecord":
        return self._replace(version=version)

    def with_address(self, key: ContractKey, address: ChecksumAddress) -> "DeploymentRecord":
        return self._replace(addresses={**self.addresses, key: address})

    def to_dict(self) -> Dict[str, Any]:
        return {
            "chainId": self.chain_id,
            "version": self.version,
            "deploymentDate": self.deployment_date,
            "bootstrapPeriod": self.bootstrap_period,
            "totalStabilityPoolLQTYReward": self.total_stability_pool_lqty_reward,
            "liquidityMiningLQTYRewardRate": self.liquidity_mining_lqty_reward_rate,
            "_priceFeedIsTestnet": self.price_feed_is_testnet,
            "_uniTokenIsMock": self.uni_token_is_mock,
            "_isDev": self.is_dev,
            "startBlock": self.start_block,
            "addresses": dict(self.addresses),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "DeploymentRecord":
        return cls(
            chain_id=int(data["chainId"]),
            version=data["version"],
            deployment_date=int(data["deploymentDate"]),
            bootstrap_period=int(data["bootstrapPeriod"]),
            total_stability_pool_lqty_reward=data["totalStabilityPoolLQTYReward"],
            liquidity_mining_lqty_reward_rate=data["liquidityMiningLQTYRewardRate"],
            price_feed_is_testnet=data["_priceFeedIsTestnet"],
            uni_token_is_mock=data["_uniTokenIsMock"],
            is_dev=data["_isDev"],
            start_block=int(data["startBlock"]),
            addresses=dict(data["addresses"]),
        )


def serialize_record(record: DeploymentRecord, extra: Optional[Dict[str, Any]] = None) -> str:
    data = record.to_dict()
    if extra:
        data.update(extra)
    return json.dumps(data, **MANIFEST_JSON_FORMAT)


def manifest_filepath(
    channel: str, network_name: str, deployments_dir: Path = DEPLOYMENTS_DIR
) -> Path:
    return deployments_dir / channel / f"{network_name}.json"


def partial_manifest_filepath(
    channel: str, network_name: str, deployments_dir: Path = DEPLOYMENTS_DIR
) -> Path:
    return deployments_dir / channel / f"{network_name}{PARTIAL_SUFFIX}"


def _write(filepath: Path, text: str) -> Path:
    # Create the channel directory if it does not exist
    filepath.parent.mkdir(parents=True, exist_ok=True)
    with open(filepath, "w") as file:
        file.write(text)
    return filepath


def write_manifest(
    channel: str,
    network_name: str,
    record: DeploymentRecord,
    deployments_dir: Path = DEPLOYMENTS_DIR,
) -> Path:
    """
    Writes the deployment record for a network into its channel.
    An existing manifest for the same channel and network is replaced.
    """
    filepath = manifest_filepath(channel, network_name, deployments_dir)
    _write(filepath, serialize_record(record))

    # a complete deployment supersedes any earlier incomplete one
    partial_manifest_filepath(channel, network_name, deployments_dir).unlink(missing_ok=True)
    return filepath


def write_partial_manifest(
    channel: str,
    network_name: str,
    record: DeploymentRecord,
    deployments_dir: Path = DEPLOYMENTS_DIR,
) -> Path:
    """
    Keeps the addresses of a deployment whose oracles could not be wired.
    Written next to, never over, the network's manifest.
    """
    filepath = partial_manifest_filepath(channel, network_name, deployments_dir)
    text = serialize_record(record, extra={"_oracleWiring": ORACLE_WIRING_PENDING})
    return _write(filepath, text)


def read_manifest(filepath: Path) -> DeploymentRecord:
    return DeploymentRecord.from_dict(_load_json(filepath))
