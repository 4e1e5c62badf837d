from decimal import Decimal, localcontext
from typing import Any, Dict, NamedTuple, Optional, Union

from eth_typing import ChecksumAddress
from eth_utils import to_hex, to_int, to_wei

from deployment.exceptions import DeploymentConfigError
from deployment.networks import NetworkName, NetworkResolver


class DeployParams(NamedTuple):
    """Options of a single `deploy` invocation; `None` means not given."""

    channel: str
    gas_price: Optional[Decimal] = None  # Gwei
    use_real_price_feed: Optional[bool] = None
    create_uniswap_pair: Optional[bool] = None


GasPrice = Union[Decimal, int, float, str]

MAX_GAS_PRICE_GWEI = Decimal(2**256 - 1).scaleb(-9)


def gwei_to_wei(gas_price: GasPrice) -> int:
    """Converts a Gwei amount to wei, which must be whole and fit in a uint256."""
    amount = Decimal(str(gas_price))
    if not amount.is_finite() or amount < 0 or amount > MAX_GAS_PRICE_GWEI:
        raise DeploymentConfigError(f"Gas price {gas_price} Gwei is out of range")

    with localcontext() as ctx:
        ctx.prec = 999
        wei = amount.scaleb(9)
        if wei != wei.to_integral_value():
            raise DeploymentConfigError(f"Gas price {gas_price} Gwei is not a whole number of wei")

    try:
        return to_wei(amount, "gwei")
    except ValueError:
        raise DeploymentConfigError(f"Gas price {gas_price} Gwei is out of range")


class TransactionOverrides(NamedTuple):
    """Transaction fields applied to every deployment transaction."""

    gas_price: Optional[str] = None  # hex-encoded wei

    @classmethod
    def from_gwei(cls, gas_price: Optional[GasPrice]) -> "TransactionOverrides":
        if gas_price is None:
            return cls()
        return cls(gas_price=to_hex(gwei_to_wei(gas_price)))

    def as_kwargs(self) -> Dict[str, Any]:
        """Returns the overrides as ape transaction keyword arguments."""
        kwargs = dict()
        if self.gas_price is not None:
            kwargs["gas_price"] = to_int(hexstr=self.gas_price)
        return kwargs


class ResolvedDeployParams(NamedTuple):
    channel: str
    use_real_price_feed: bool
    create_uniswap_pair: bool
    wiotx_address: Optional[ChecksumAddress]
    overrides: TransactionOverrides


def resolve_use_real_price_feed(
    use_real_price_feed: Optional[bool], network: NetworkName, resolver: NetworkResolver
) -> bool:
    """Real price feeds are the default on the production network only."""
    if use_real_price_feed is None:
        return resolver.is_production_network(network)
    return use_real_price_feed


def resolve_deploy_params(
    params: DeployParams, network: NetworkName, resolver: NetworkResolver
) -> ResolvedDeployParams:
    """
    Applies defaults to the deploy options and checks that the network
    supports what was asked for. Nothing is sent to the network here.
    """
    use_real_price_feed = resolve_use_real_price_feed(
        params.use_real_price_feed, network=network, resolver=resolver
    )
    if use_real_price_feed and not resolver.has_oracles(network):
        raise DeploymentConfigError(f"PriceFeed not supported on {network}")

    create_uniswap_pair = bool(params.create_uniswap_pair)
    if create_uniswap_pair and not resolver.has_wiotx(network):
        raise DeploymentConfigError(f"WIOTX not deployed on {network}")

    wiotx_address = resolver.wiotx_address(network) if create_uniswap_pair else None

    return ResolvedDeployParams(
        channel=params.channel,
        use_real_price_feed=use_real_price_feed,
        create_uniswap_pair=create_uniswap_pair,
        wiotx_address=wiotx_address,
        overrides=TransactionOverrides.from_gwei(params.gas_price),
    )
