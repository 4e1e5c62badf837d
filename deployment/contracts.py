from collections import OrderedDict
from decimal import Decimal
from typing import Callable, Dict, List, Optional, Tuple

from ape.api import AccountAPI
from ape.contracts import ContractContainer, ContractInstance
from eth_account import Account
from eth_typing import ChecksumAddress
from eth_utils import from_wei
from ethpm_types import ContractType

from deployment.artifacts import ContractFactoryProvider
from deployment.constants import (
    ERC20_MOCK,
    PRICE_FEED,
    PRICE_FEED_TESTNET,
    SORTED_TROVES_MAX_SIZE,
    TELLOR_CALLER,
    UNIPOOL_DURATION,
    UNISWAP_V2_FACTORY_ABI,
    UNISWAP_V2_FACTORY_ADDRESS,
)
from deployment.manifest import ContractKey, DeploymentRecord
from deployment.params import TransactionOverrides

UNKNOWN_VERSION = "unknown"

# Contracts whose constructors take no arguments, in deployment order.
# The first one's deployment block marks the start of the system.
CORE_CONTRACTS = [
    ("activePool", "ActivePool"),
    ("borrowerOperations", "BorrowerOperations"),
    ("troveManager", "TroveManager"),
    ("collSurplusPool", "CollSurplusPool"),
    ("communityIssuance", "CommunityIssuance"),
    ("defaultPool", "DefaultPool"),
    ("hintHelpers", "HintHelpers"),
    ("lockupContractFactory", "LockupContractFactory"),
    ("lqtyStaking", "LQTYStaking"),
    ("priceFeed", None),  # PriceFeed or PriceFeedTestnet
    ("sortedTroves", "SortedTroves"),
    ("stabilityPool", "StabilityPool"),
    ("gasPool", "GasPool"),
    ("unipool", "Unipool"),
]

Contracts = Dict[ContractKey, ContractInstance]


def _log(message: str, silent: bool) -> None:
    if not silent:
        print(message)


def _random_address() -> ChecksumAddress:
    return Account.create().address


def _decimal_string(value: int) -> str:
    """Renders an 18-decimal fixed point integer."""
    return format(Decimal(from_wei(value, "ether")), "f")


def deploy_contract(
    deployer: AccountAPI,
    get_contract_factory: ContractFactoryProvider,
    contract_name: str,
    *args,
    overrides: Optional[TransactionOverrides] = None,
    silent: bool = False,
) -> ContractInstance:
    overrides = overrides or TransactionOverrides()
    _log(f"Deploying {contract_name} ...", silent)
    factory = get_contract_factory(contract_name, deployer)
    instance = factory.deploy(*args, **overrides.as_kwargs())
    _log(f"Deployed {contract_name} to {instance.address}", silent)
    return instance


def deploy_contracts(
    deployer: AccountAPI,
    get_contract_factory: ContractFactoryProvider,
    price_feed_is_testnet: bool = True,
    overrides: Optional[TransactionOverrides] = None,
    silent: bool = False,
) -> Tuple[Contracts, int]:
    """Deploys the Liquity contracts and returns them with the starting block number."""

    def deploy(contract_name, *args):
        return deploy_contract(
            deployer, get_contract_factory, contract_name, *args, overrides=overrides, silent=silent
        )

    contracts = OrderedDict()
    for key, contract_name in CORE_CONTRACTS:
        if key == "priceFeed":
            contract_name = PRICE_FEED_TESTNET if price_feed_is_testnet else PRICE_FEED
        contracts[key] = deploy(contract_name)

    start_block = contracts["activePool"].receipt.block_number

    contracts["lusdToken"] = deploy(
        "LUSDToken",
        contracts["troveManager"].address,
        contracts["stabilityPool"].address,
        contracts["borrowerOperations"].address,
    )
    contracts["lqtyToken"] = deploy(
        "LQTYToken",
        contracts["communityIssuance"].address,
        contracts["lqtyStaking"].address,
        contracts["lockupContractFactory"].address,
        _random_address(),  # bounty address
        contracts["unipool"].address,
        _random_address(),  # multisig address
    )
    contracts["multiTroveGetter"] = deploy(
        "MultiTroveGetter",
        contracts["troveManager"].address,
        contracts["sortedTroves"].address,
    )
    return contracts, start_block


def deploy_tellor_caller(
    deployer: AccountAPI,
    get_contract_factory: ContractFactoryProvider,
    tellor_address: ChecksumAddress,
    overrides: Optional[TransactionOverrides] = None,
    silent: bool = False,
) -> ContractInstance:
    return deploy_contract(
        deployer,
        get_contract_factory,
        TELLOR_CALLER,
        tellor_address,
        overrides=overrides,
        silent=silent,
    )


def deploy_mock_uni_token(
    deployer: AccountAPI,
    get_contract_factory: ContractFactoryProvider,
    overrides: Optional[TransactionOverrides] = None,
    silent: bool = False,
) -> ChecksumAddress:
    mock_uni_token = deploy_contract(
        deployer,
        get_contract_factory,
        ERC20_MOCK,
        "Mock Uniswap V2",
        "UNI-V2",
        _random_address(),
        0,
        overrides=overrides,
        silent=silent,
    )
    return mock_uni_token.address


def _uniswap_v2_factory() -> ContractInstance:
    contract_type = ContractType.model_validate(
        {"contractName": "UniswapV2Factory", "abi": UNISWAP_V2_FACTORY_ABI}
    )
    return ContractContainer(contract_type).at(UNISWAP_V2_FACTORY_ADDRESS)


def create_uniswap_v2_pair(
    deployer: AccountAPI,
    token_a: ChecksumAddress,
    token_b: ChecksumAddress,
    overrides: Optional[TransactionOverrides] = None,
    silent: bool = False,
) -> ChecksumAddress:
    overrides = overrides or TransactionOverrides()
    factory = _uniswap_v2_factory()

    _log("Creating Uniswap v2 WIOTX <=> LUSD pair...", silent)
    receipt = factory.createPair(token_a, token_b, sender=deployer, **overrides.as_kwargs())
    receipt.await_confirmations()
    pair_address = factory.getPair(token_a, token_b)

    _log(f"Created Uniswap v2 WIOTX <=> LUSD pair at {pair_address}", silent)
    return pair_address


def _connections(
    contracts: Contracts, addresses: Dict[ContractKey, ChecksumAddress]
) -> List[Tuple[str, Callable, tuple]]:
    """Every post-deployment call that links the contracts together, in order."""
    a = addresses
    return [
        (
            "sortedTroves",
            contracts["sortedTroves"].setParams,
            (SORTED_TROVES_MAX_SIZE, a["troveManager"], a["borrowerOperations"]),
        ),
        (
            "troveManager",
            contracts["troveManager"].setAddresses,
            (
                a["borrowerOperations"],
                a["activePool"],
                a["defaultPool"],
                a["stabilityPool"],
                a["gasPool"],
                a["collSurplusPool"],
                a["priceFeed"],
                a["lusdToken"],
                a["sortedTroves"],
                a["lqtyToken"],
                a["lqtyStaking"],
            ),
        ),
        (
            "borrowerOperations",
            contracts["borrowerOperations"].setAddresses,
            (
                a["troveManager"],
                a["activePool"],
                a["defaultPool"],
                a["stabilityPool"],
                a["gasPool"],
                a["collSurplusPool"],
                a["priceFeed"],
                a["sortedTroves"],
                a["lusdToken"],
                a["lqtyStaking"],
            ),
        ),
        (
            "stabilityPool",
            contracts["stabilityPool"].setAddresses,
            (
                a["borrowerOperations"],
                a["troveManager"],
                a["activePool"],
                a["lusdToken"],
                a["sortedTroves"],
                a["priceFeed"],
                a["communityIssuance"],
            ),
        ),
        (
            "activePool",
            contracts["activePool"].setAddresses,
            (a["borrowerOperations"], a["troveManager"], a["stabilityPool"], a["defaultPool"]),
        ),
        (
            "defaultPool",
            contracts["defaultPool"].setAddresses,
            (a["troveManager"], a["activePool"]),
        ),
        (
            "collSurplusPool",
            contracts["collSurplusPool"].setAddresses,
            (a["borrowerOperations"], a["troveManager"], a["activePool"]),
        ),
        (
            "hintHelpers",
            contracts["hintHelpers"].setAddresses,
            (a["sortedTroves"], a["troveManager"]),
        ),
        (
            "lqtyStaking",
            contracts["lqtyStaking"].setAddresses,
            (
                a["lqtyToken"],
                a["lusdToken"],
                a["troveManager"],
                a["borrowerOperations"],
                a["activePool"],
            ),
        ),
        (
            "lockupContractFactory",
            contracts["lockupContractFactory"].setLQTYTokenAddress,
            (a["lqtyToken"],),
        ),
        (
            "communityIssuance",
            contracts["communityIssuance"].setAddresses,
            (a["lqtyToken"], a["stabilityPool"]),
        ),
        (
            "unipool",
            contracts["unipool"].setParams,
            (a["lqtyToken"], a["uniToken"], UNIPOOL_DURATION),
        ),
    ]


def connect_contracts(
    contracts: Contracts,
    addresses: Dict[ContractKey, ChecksumAddress],
    deployer: AccountAPI,
    overrides: Optional[TransactionOverrides] = None,
    silent: bool = False,
) -> None:
    """
    Tells each deployed contract where its peers live. Transactions are sent
    one at a time so the deployer's nonce advances without gaps.
    """
    overrides = overrides or TransactionOverrides()
    connections = _connections(contracts, addresses)
    for i, (key, method, args) in enumerate(connections, start=1):
        receipt = method(*args, sender=deployer, **overrides.as_kwargs())
        receipt.await_confirmations()
        _log(f"Connected {key} ({i}/{len(connections)})", silent)


def deploy_and_setup_contracts(
    deployer: AccountAPI,
    get_contract_factory: ContractFactoryProvider,
    price_feed_is_testnet: bool = True,
    is_dev: bool = True,
    wiotx_address: Optional[ChecksumAddress] = None,
    overrides: Optional[TransactionOverrides] = None,
    silent: bool = False,
) -> DeploymentRecord:
    """
    Deploys and links the full Liquity system.

    Without a WIOTX address a mock ERC20 stands in for the Uniswap pair token.
    The returned record carries an 'unknown' version for the caller to stamp.
    """
    overrides = overrides or TransactionOverrides()
    chain_id = deployer.provider.chain_id

    _log("Deploying contracts...", silent)
    contracts, start_block = deploy_contracts(
        deployer,
        get_contract_factory,
        price_feed_is_testnet=price_feed_is_testnet,
        overrides=overrides,
        silent=silent,
    )

    addresses = OrderedDict((key, contract.address) for key, contract in contracts.items())
    if wiotx_address:
        addresses["uniToken"] = create_uniswap_v2_pair(
            deployer, wiotx_address, addresses["lusdToken"], overrides=overrides, silent=silent
        )
    else:
        addresses["uniToken"] = deploy_mock_uni_token(
            deployer, get_contract_factory, overrides=overrides, silent=silent
        )

    _log("Connecting contracts...", silent)
    connect_contracts(contracts, addresses, deployer, overrides=overrides, silent=silent)

    lqty_token_deployment_time = contracts["lqtyToken"].getDeploymentStartTime()
    bootstrap_period = contracts["troveManager"].BOOTSTRAP_PERIOD()
    total_stability_pool_lqty_reward = contracts["communityIssuance"].LQTYSupplyCap()
    liquidity_mining_lqty_reward_rate = contracts["unipool"].rewardRate()

    return DeploymentRecord(
        chain_id=chain_id,
        version=UNKNOWN_VERSION,
        deployment_date=int(lqty_token_deployment_time) * 1000,
        bootstrap_period=int(bootstrap_period),
        total_stability_pool_lqty_reward=_decimal_string(total_stability_pool_lqty_reward),
        liquidity_mining_lqty_reward_rate=_decimal_string(liquidity_mining_lqty_reward_rate),
        price_feed_is_testnet=price_feed_is_testnet,
        uni_token_is_mock=not wiotx_address,
        is_dev=is_dev,
        start_block=start_block,
        addresses=dict(addresses),
    )

