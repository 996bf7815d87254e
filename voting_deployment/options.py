from pathlib import Path

import click

from voting_deployment.constants import (
    CONTRACT_KEYS,
    DEPLOYMENTS_DIR,
    FRONTEND_CONFIG_FILEPATH,
    PRIVATE_VOTING_KEY,
    SUPPORTED_DEPLOYMENTS,
)

deployment_option = click.option(
    "--params",
    "-p",
    "deployment_name",
    help="Bundled deployment parameters to use.",
    type=click.Choice(SUPPORTED_DEPLOYMENTS),
    required=False,
)

params_filepath_option = click.option(
    "--params-file",
    "-f",
    "params_filepath",
    help="Deployment parameters YAML, if not using a bundled one.",
    type=click.Path(dir_okay=False, exists=True, path_type=Path),
    required=False,
)

autosign_option = click.option(
    "--autosign",
    help="Sign transactions without prompting for confirmation.",
    is_flag=True,
    default=False,
)

confirmations_option = click.option(
    "--confirmations",
    "-c",
    help="Confirmations to wait for after deployment; overrides the parameters file.",
    type=click.IntRange(min=0),
    required=False,
)

contract_key_option = click.option(
    "--contract-key",
    "-k",
    help="Entry of the CONTRACTS table to update.",
    type=click.Choice(CONTRACT_KEYS),
    default=PRIVATE_VOTING_KEY,
    show_default=True,
)

config_filepath_option = click.option(
    "--config-file",
    "config_filepath",
    help="Frontend configuration file to update.",
    type=click.Path(dir_okay=False, path_type=Path),
    default=FRONTEND_CONFIG_FILEPATH,
    show_default=True,
)

deployments_dir_option = click.option(
    "--deployments-dir",
    "deployments_dir",
    help="Directory holding deployment records.",
    type=click.Path(file_okay=False, path_type=Path),
    default=DEPLOYMENTS_DIR,
    show_default=True,
)

network_label_option = click.option(
    "--network",
    "-n",
    "network_label",
    help="Only show deployments for this network label (e.g. localhost, sepolia).",
    type=click.STRING,
    required=False,
)
