from typing import Optional

from ape.api import AccountAPI
from ape.contracts import ContractInstance
from eth_typing import ChecksumAddress

from deployment.artifacts import ContractFactoryProvider
from deployment.contracts import deploy_tellor_caller
from deployment.networks import OracleAddresses
from deployment.params import TransactionOverrides


def wire_oracles(
    deployer: AccountAPI,
    get_contract_factory: ContractFactoryProvider,
    price_feed: ContractInstance,
    oracles: OracleAddresses,
    overrides: Optional[TransactionOverrides] = None,
    silent: bool = False,
) -> ChecksumAddress:
    """
    Connects the production PriceFeed to Chainlink, with Tellor as fallback.

    Tellor is reached through a freshly deployed TellorCaller adapter,
    whose address is returned.
    """
    overrides = overrides or TransactionOverrides()

    # deploy() returns once the adapter is mined; setAddresses needs its address
    tellor_caller = deploy_tellor_caller(
        deployer, get_contract_factory, oracles.tellor, overrides=overrides, silent=silent
    )

    if not silent:
        print("Hooking up PriceFeed with oracles ...")

    receipt = price_feed.setAddresses(
        oracles.chainlink,
        tellor_caller.address,
        sender=deployer,
        **overrides.as_kwargs(),
    )
    receipt.await_confirmations()

    return tellor_caller.address
