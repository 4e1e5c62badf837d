#!/usr/bin/python3

import click
from ape import networks
from dotenv import load_dotenv

from deployment.accounts import load_deployer_account
from deployment.config import DeploymentSettings
from deployment.deployer import Deployer
from deployment.exceptions import DeploymentError
from deployment.manifest import manifest_filepath, read_manifest, serialize_record
from deployment.networks import NetworkResolver
from deployment.options import (
    channel_option,
    create_uniswap_pair_option,
    deployments_dir_option,
    gas_price_option,
    network_option,
    use_real_price_feed_option,
)
from deployment.params import DeployParams, resolve_deploy_params


@click.group()
def cli():
    """Liquity deployment CLI"""
    load_dotenv()


@cli.command()
@network_option
@channel_option
@gas_price_option
@use_real_price_feed_option
@create_uniswap_pair_option
@deployments_dir_option
def deploy(network, channel, gas_price, use_real_price_feed, create_uniswap_pair, deployments_dir):
    """Deploys the contracts to the network."""
    params = DeployParams(
        channel=channel,
        gas_price=gas_price,
        use_real_price_feed=use_real_price_feed,
        create_uniswap_pair=create_uniswap_pair,
    )
    try:
        settings = DeploymentSettings.from_env()
        if settings.use_live_version:
            click.secho(
                f"Using live version of contracts ({settings.contracts_version}).", fg="cyan"
            )

        resolver = NetworkResolver.from_yaml(deployer_key=settings.deployer_private_key)
        network_config = resolver.network(network)

        # reject unsupported options before connecting to anything
        resolve_deploy_params(params, network=network, resolver=resolver)

        deployer = Deployer(
            settings=settings,
            resolver=resolver,
            network_name=network,
            deployments_dir=deployments_dir,
        )
        # endpoints come from networks.yml, not from ape's own network choices
        with networks.parse_network_choice(network_config.url):
            click.echo(f"Connected to {network} at {network_config.url}.")
            account = load_deployer_account(
                private_key=network_config.deployer_key, passphrase=settings.deployer_passphrase
            )
            record = deployer.deploy_and_persist(params, account)
    except DeploymentError as e:
        raise click.ClickException(str(e))

    click.echo()
    click.echo(serialize_record(record))
    click.echo()


@cli.command()
@network_option
@channel_option
@deployments_dir_option
def show(network, channel, deployments_dir):
    """Prints the deployment manifest of a network in a channel."""
    filepath = manifest_filepath(
        channel=channel, network_name=network, deployments_dir=deployments_dir
    )
    if not filepath.exists():
        raise click.ClickException(f"No deployment of {network} in channel '{channel}'.")
    click.echo(serialize_record(read_manifest(filepath)))


if __name__ == "__main__":
    cli()
