from ape import accounts
from ape.api import AccountAPI
from ape_accounts import import_account_from_private_key
from eth_account import Account

from deployment.constants import DEPLOYER_ALIAS
from deployment.exceptions import DeploymentConfigError


def load_deployer_account(
    private_key: str, passphrase: str, alias: str = DEPLOYER_ALIAS
) -> AccountAPI:
    """
    Returns the deployer as an ape account, importing its private key into
    the local keystore the first time it is used.
    """
    expected_address = Account.from_key(private_key).address

    if alias in list(accounts.aliases):
        account = accounts.load(alias)
    else:
        account = import_account_from_private_key(alias, passphrase, private_key)
        print(f"Account imported: {account.address}")

    if account.address != expected_address:
        raise DeploymentConfigError(
            f"Account '{alias}' ({account.address}) does not match "
            f"the configured deployer key ({expected_address})."
        )

    account.set_autosign(True, passphrase=passphrase)
    return account
