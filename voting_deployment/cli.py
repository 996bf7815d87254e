from pathlib import Path
from typing import Optional

import click
from ape.cli import ConnectedProviderCommand, account_option, network_option
from ape.exceptions import ApeException

from voting_deployment.constants import EXAMPLE_ADDRESS
from voting_deployment.frontend import ConfigDocument, update_contract_address
from voting_deployment.options import (
    autosign_option,
    config_filepath_option,
    confirmations_option,
    contract_key_option,
    deployment_option,
    deployments_dir_option,
    network_label_option,
    params_filepath_option,
)
from voting_deployment.params import Deployer, DeploymentParameters
from voting_deployment.records import read_records
from voting_deployment.utils import (
    InvalidAddressFormat,
    MissingArgument,
    get_contract_container,
    get_params_filepath,
)


@click.command(cls=ConnectedProviderCommand, name="deploy")
@network_option()
@account_option()
@deployment_option
@params_filepath_option
@autosign_option
@confirmations_option
def deploy(network, account, deployment_name, params_filepath, autosign, confirmations):
    """Deploy a voting contract, seed it and record the deployment."""
    if not (bool(deployment_name) ^ bool(params_filepath)):
        raise click.BadOptionUsage(
            option_name="--params",
            message=(
                f"Provide either '--params' or '--params-file'; "
                f"got {deployment_name}, {params_filepath}"
            ),
        )

    try:
        params_filepath = params_filepath or get_params_filepath(deployment_name)
        deployer = Deployer.from_yaml(
            filepath=params_filepath,
            account=account,
            autosign=autosign,
            confirmations=confirmations,
        )
        container = get_contract_container(deployer.parameters.contract)
        instance = deployer.deploy(container)
        deployer.finalize(instance)
    except (
        ApeException,
        DeploymentParameters.Invalid,
        Deployer.ConfirmationTimeout,
        OSError,
        ValueError,
    ) as e:
        raise click.ClickException(f"Deployment failed: {e}")


@click.command(name="update-frontend-config")
@click.argument("address", required=False)
@contract_key_option
@config_filepath_option
@click.pass_context
def update_frontend_config(
    ctx: click.Context, address: Optional[str], contract_key: str, config_filepath: Path
):
    """Write a deployed contract ADDRESS into the frontend configuration."""
    try:
        update_contract_address(
            address=address,
            filepath=config_filepath,
            contract_key=contract_key,
        )
    except MissingArgument as e:
        click.echo(ctx.get_usage(), err=True)
        click.echo(f"Example: {ctx.command_path} {EXAMPLE_ADDRESS}", err=True)
        raise click.ClickException(str(e))
    except (
        InvalidAddressFormat,
        ConfigDocument.Malformed,
        ConfigDocument.FieldNotFound,
        ConfigDocument.AmbiguousField,
        OSError,
    ) as e:
        raise click.ClickException(str(e))


@click.command(name="list-deployments")
@network_label_option
@deployments_dir_option
def list_deployments(network_label: Optional[str], deployments_dir: Path):
    """List recorded deployments. Optionally filter by network."""
    records = read_records(directory=deployments_dir, network=network_label)
    if not records:
        click.secho(f"No deployment records found in {deployments_dir}", fg="yellow")
        return

    networks = dict()
    for filepath, record in records.items():
        networks.setdefault(record.network, []).append((filepath, record))

    for network, entries in networks.items():
        click.secho(f"\n{network.capitalize()} Network", fg="green")
        for index, (filepath, record) in enumerate(entries, start=1):
            label = filepath.stem
            if label.startswith(f"{network}-"):
                label = label[len(network) + 1 :]
            click.secho(f"    {index}. {label} {record.contract_address}", fg="cyan")
            click.echo(
                f"       block {record.block_number}, deployed {record.deployed_at} "
                f"by {record.deployer_address}"
            )
            if record.product_count is not None:
                click.echo(f"       products: {record.product_count}")
