from pathlib import Path

import deployment

#
# Filesystem
#

DEPLOYMENT_DIR = Path(deployment.__file__).parent
PROJECT_ROOT = DEPLOYMENT_DIR.parent
NETWORKS_FILEPATH = DEPLOYMENT_DIR / "networks.yml"
DEPLOYMENTS_DIR = PROJECT_ROOT / "deployments"
LIVE_DIR = PROJECT_ROOT / "live"
ARTIFACTS_DIR = PROJECT_ROOT / ".build"
VERSION_FILENAME = "version"

#
# Environment
#

DEPLOYER_PRIVATE_KEY_ENVVAR = "DEPLOYER_PRIVATE_KEY"
DEPLOYER_PASSPHRASE_ENVVAR = "DEPLOYER_PASSPHRASE"
CHANNEL_ENVVAR = "CHANNEL"
NETWORK_ENVVAR = "NETWORK"
USE_LIVE_VERSION_ENVVAR = "USE_LIVE_VERSION"

DEFAULT_CHANNEL = "default"
FALSY_ENV_VALUES = ["false", "no", "0"]

#
# Networks
#

DEV = "dev"
TESTNET = "testnet"
MAINNET = "mainnet"

PRODUCTION_NETWORK = MAINNET
DEV_NETWORK = DEV

NUM_ACCOUNTS = 100

# Pre-funded account of the local dev chain
DEV_CHAIN_RICH_ACCOUNT = "0x4d5db4107d237df6a3d58ee5f70ae63d73d7658d4026f2eefd2f204c81682cb7"

DEPLOYER_ALIAS = "liquity-deployer"

#
# Contracts
#

PRICE_FEED = "PriceFeed"
PRICE_FEED_TESTNET = "PriceFeedTestnet"
TELLOR_CALLER = "TellorCaller"
ERC20_MOCK = "ERC20Mock"

# https://docs.uniswap.org/contracts/v2/reference/smart-contracts/v2-deployments
UNISWAP_V2_FACTORY_ADDRESS = "0x5C69bEe701ef814a2B6a3EDD4B1652CB9cc5aA6f"

UNISWAP_V2_FACTORY_ABI = [
    {
        "type": "function",
        "name": "createPair",
        "stateMutability": "nonpayable",
        "inputs": [
            {"name": "tokenA", "type": "address"},
            {"name": "tokenB", "type": "address"},
        ],
        "outputs": [{"name": "pair", "type": "address"}],
    },
    {
        "type": "function",
        "name": "getPair",
        "stateMutability": "view",
        "inputs": [
            {"name": "tokenA", "type": "address"},
            {"name": "tokenB", "type": "address"},
        ],
        "outputs": [{"name": "pair", "type": "address"}],
    },
]

# Unipool reward period: 2 months
UNIPOOL_DURATION = 2 * 30 * 24 * 60 * 60

SORTED_TROVES_MAX_SIZE = 10**6
