import json

import pytest

from deployment.artifacts import LiveArtifacts, get_contract_factory, read_contracts_version
from deployment.exceptions import ArtifactNotFoundError

PRICE_FEED_ABI = [
    {
        "type": "function",
        "name": "setAddresses",
        "stateMutability": "nonpayable",
        "inputs": [
            {"name": "_priceAggregatorAddress", "type": "address"},
            {"name": "_tellorCallerAddress", "type": "address"},
        ],
        "outputs": [],
    }
]


@pytest.fixture
def live_dir(tmp_path):
    directory = tmp_path / "live"
    directory.mkdir()
    artifact = {"abi": PRICE_FEED_ABI, "bytecode": "0x6080604052"}
    with open(directory / "PriceFeed.json", "w") as file:
        json.dump(artifact, file)
    (directory / "version").write_text("6d2ad8a\n")
    return directory


def test_load_live_artifacts(live_dir):
    artifacts = LiveArtifacts.from_directory(live_dir)

    assert "PriceFeed" in artifacts
    assert "TroveManager" not in artifacts
    assert artifacts.get("PriceFeed").bytecode == "0x6080604052"


def test_live_contract_container(live_dir):
    container = LiveArtifacts.from_directory(live_dir).get_contract_container("PriceFeed")

    assert container.contract_type.name == "PriceFeed"
    assert [abi.name for abi in container.contract_type.mutable_methods] == ["setAddresses"]


def test_missing_live_artifact(live_dir):
    artifacts = LiveArtifacts.from_directory(live_dir)

    with pytest.raises(ArtifactNotFoundError, match="No live artifact for contract 'TroveManager'"):
        artifacts.get_contract_container("TroveManager")

    # still a plain file-not-found for callers that do not know our errors
    with pytest.raises(FileNotFoundError):
        artifacts.get("TroveManager")


def test_missing_live_directory(tmp_path):
    with pytest.raises(ArtifactNotFoundError):
        get_contract_factory(use_live_version=True, live_dir=tmp_path / "nowhere")


def test_live_factory_serves_live_artifacts(live_dir):
    get_factory = get_contract_factory(use_live_version=True, live_dir=live_dir)

    factory = get_factory("PriceFeed", None)
    assert factory.contract_name == "PriceFeed"

    with pytest.raises(ArtifactNotFoundError):
        get_factory("TellorCaller", None)


def test_read_contracts_version(live_dir, tmp_path):
    assert read_contracts_version(live_dir) == "6d2ad8a"

    with pytest.raises(ArtifactNotFoundError, match="version file not found"):
        read_contracts_version(tmp_path)
