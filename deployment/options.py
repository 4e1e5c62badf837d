from pathlib import Path

import click

from deployment.constants import (
    CHANNEL_ENVVAR,
    DEFAULT_CHANNEL,
    DEPLOYMENTS_DIR,
    DEV_NETWORK,
    NETWORK_ENVVAR,
)
from deployment.types import GweiAmount

network_option = click.option(
    "--network",
    "-n",
    help="Network to deploy to, as declared in networks.yml",
    envvar=NETWORK_ENVVAR,
    default=DEV_NETWORK,
    show_default=True,
)

channel_option = click.option(
    "--channel",
    "-c",
    help="Deployment channel to deploy into",
    envvar=CHANNEL_ENVVAR,
    default=DEFAULT_CHANNEL,
    show_default=True,
)

gas_price_option = click.option(
    "--gas-price",
    help="Price to pay for 1 gas [Gwei]",
    type=GweiAmount(),
    default=None,
)

use_real_price_feed_option = click.option(
    "--use-real-price-feed",
    help="Deploy the production version of PriceFeed and connect it to Chainlink "
    "(default: only on mainnet)",
    type=click.BOOL,
    default=None,
)

create_uniswap_pair_option = click.option(
    "--create-uniswap-pair",
    help="Create a real Uniswap v2 WIOTX-LUSD pair instead of a mock ERC20 token",
    type=click.BOOL,
    default=None,
)

deployments_dir_option = click.option(
    "--deployments-dir",
    help="Directory holding the deployment channels",
    type=click.Path(file_okay=False, path_type=Path),
    default=DEPLOYMENTS_DIR,
    show_default=True,
)
