from pathlib import Path
from types import SimpleNamespace

import pytest

import deployment.contracts
from deployment.artifacts import ContractFactory
from deployment.config import DeploymentSettings
from deployment.networks import NetworkConfig, NetworkResolver, OracleAddresses

# Common constants
CHAIN_ID = 4690
CONTRACTS_VERSION = "6d2ad8a"
DEPLOYER_KEY = "0x" + "11" * 32
ONE_DAY = 24 * 60 * 60

CHAINLINK = "0x5f4eC3Df9cbd43714FE2740f5E3616155c5b8419"
TELLOR = "0x88dF592F8eb5D7Bd38bFeF7dEb0fBc02cf3778a0"
WIOTX = "0xff5fae9fe685b90841275e32c348dc4426190db0"
PAIR_ADDRESS = "0x" + "ab" * 20

# Values returned by read-only calls of the fake contracts
VIEW_RESULTS = {
    "getDeploymentStartTime": 1_700_000_000,
    "BOOTSTRAP_PERIOD": 14 * ONE_DAY,
    "LQTYSupplyCap": 32_000_000 * 10**18,
    "rewardRate": 0,
}

# Entry points that tell the two PriceFeed flavours apart
MUTABLE_METHODS = {
    "PriceFeed": ["setAddresses"],
    "PriceFeedTestnet": ["setAddresses", "setPrice"],
}


class FakeReceipt:
    def __init__(self, block_number):
        self.block_number = block_number
        self.confirmed = False

    def await_confirmations(self):
        self.confirmed = True
        return self


class FakeChain:
    """In-memory stand-in for a network: hands out addresses and logs every transaction."""

    def __init__(self, chain_id=CHAIN_ID):
        self.chain_id = chain_id
        self.block_number = 100
        self.transactions = []
        self.receipts = []
        self.contracts = {}
        self.failures = {}

    def fail_on(self, name, error):
        """Makes the next deployment of, or call to, `name` raise `error`."""
        self.failures[name] = error

    def mine(self, entry):
        name = entry[1] if entry[0] == "deploy" else f"{entry[1]}.{entry[2]}"
        if name in self.failures:
            raise self.failures.pop(name)
        self.block_number += 1
        self.transactions.append(entry)
        receipt = FakeReceipt(self.block_number)
        self.receipts.append(receipt)
        return receipt

    def next_address(self):
        return "0x" + f"{len(self.contracts) + 1:040x}"

    def deployed(self, name):
        return [c for c in self.contracts.values() if c.contract_type.name == name]

    def calls(self, method_name=None):
        return [
            entry
            for entry in self.transactions
            if entry[0] == "call" and (method_name is None or entry[2] == method_name)
        ]


class FakeContract:
    def __init__(self, chain, name, address, receipt=None):
        self._chain = chain
        self.address = address
        self.receipt = receipt
        self.contract_type = SimpleNamespace(
            name=name,
            mutable_methods=[SimpleNamespace(name=m) for m in MUTABLE_METHODS.get(name, [])],
        )

    def __getattr__(self, method_name):
        if method_name.startswith("_"):
            raise AttributeError(method_name)

        if method_name in VIEW_RESULTS:
            return lambda *args: VIEW_RESULTS[method_name]

        def transact(*args, sender=None, **tx_kwargs):
            entry = ("call", self.contract_type.name, method_name, args, tx_kwargs)
            return self._chain.mine(entry)

        return transact


class FakeUniswapV2Factory(FakeContract):
    def getPair(self, token_a, token_b):
        return PAIR_ADDRESS


class FakeContainer:
    def __init__(self, chain, name):
        self.chain = chain
        self.contract_type = SimpleNamespace(name=name)

    def at(self, address):
        return self.chain.contracts[address]


class FakeAccount:
    def __init__(self, chain, address="0x" + "de" * 20):
        self.chain = chain
        self.address = address
        self.provider = SimpleNamespace(chain_id=chain.chain_id)

    def deploy(self, container, *args, **tx_kwargs):
        name = container.contract_type.name
        receipt = self.chain.mine(("deploy", name, args, tx_kwargs))
        contract = FakeContract(self.chain, name, self.chain.next_address(), receipt)
        self.chain.contracts[contract.address] = contract
        return contract


# Fixtures
@pytest.fixture
def chain():
    return FakeChain()


@pytest.fixture
def deployer_account(chain):
    return FakeAccount(chain)


@pytest.fixture
def contract_factory(chain):
    def get_contract_factory(name, signer):
        return ContractFactory(FakeContainer(chain, name), signer)

    return get_contract_factory


@pytest.fixture
def resolver():
    accounts = [DEPLOYER_KEY]
    return NetworkResolver(
        networks={
            "dev": NetworkConfig(name="dev", url="http://localhost:8545", accounts=accounts),
            "testnet": NetworkConfig(name="testnet", url="https://testnet", accounts=accounts),
            "mainnet": NetworkConfig(name="mainnet", url="https://mainnet", accounts=accounts),
        },
        oracles={
            "mainnet": OracleAddresses(chainlink=CHAINLINK, tellor=TELLOR),
            "testnet": OracleAddresses(chainlink=CHAINLINK, tellor=TELLOR),
        },
        wiotx_addresses={"mainnet": WIOTX, "testnet": WIOTX},
    )


@pytest.fixture
def settings(tmp_path: Path):
    return DeploymentSettings(
        use_live_version=False,
        contracts_version=CONTRACTS_VERSION,
        deployer_private_key=DEPLOYER_KEY,
        deployer_passphrase="",
        live_dir=tmp_path / "live",
        artifacts_dir=tmp_path / ".build",
    )


@pytest.fixture
def deployments_dir(tmp_path: Path) -> Path:
    return tmp_path / "deployments"


@pytest.fixture
def uniswap_factory(chain, monkeypatch):
    factory = FakeUniswapV2Factory(chain, "UniswapV2Factory", "0x" + "5c" * 20)
    monkeypatch.setattr(deployment.contracts, "_uniswap_v2_factory", lambda: factory)
    return factory
