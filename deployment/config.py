import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

from dotenv import load_dotenv
from eth_account import Account
from eth_utils import to_hex

from deployment.artifacts import read_contracts_version
from deployment.constants import (
    ARTIFACTS_DIR,
    DEPLOYER_PASSPHRASE_ENVVAR,
    DEPLOYER_PRIVATE_KEY_ENVVAR,
    FALSY_ENV_VALUES,
    LIVE_DIR,
    USE_LIVE_VERSION_ENVVAR,
)


def parse_use_live_version(value: Optional[str]) -> bool:
    """Anything but an explicit 'false', 'no' or '0' enables the live contract build."""
    value = (value or "false").strip().lower()
    return value not in FALSY_ENV_VALUES


@dataclass(frozen=True)
class DeploymentSettings:
    """
    Process-wide deployment settings, resolved once at startup
    and handed to every component that needs them.
    """

    use_live_version: bool
    contracts_version: str
    deployer_private_key: str
    deployer_passphrase: str
    live_dir: Path = LIVE_DIR
    artifacts_dir: Path = ARTIFACTS_DIR

    @classmethod
    def from_env(
        cls,
        environ: Optional[Mapping[str, str]] = None,
        live_dir: Path = LIVE_DIR,
        artifacts_dir: Path = ARTIFACTS_DIR,
    ) -> "DeploymentSettings":
        if environ is None:
            load_dotenv()
            environ = os.environ

        use_live_version = parse_use_live_version(environ.get(USE_LIVE_VERSION_ENVVAR))
        version_dir = live_dir if use_live_version else artifacts_dir
        contracts_version = read_contracts_version(version_dir)

        # an unfunded throwaway deployer unless one is configured
        private_key = environ.get(DEPLOYER_PRIVATE_KEY_ENVVAR) or to_hex(Account.create().key)

        return cls(
            use_live_version=use_live_version,
            contracts_version=contracts_version,
            deployer_private_key=private_key,
            deployer_passphrase=environ.get(DEPLOYER_PASSPHRASE_ENVVAR, ""),
            live_dir=live_dir,
            artifacts_dir=artifacts_dir,
        )
