import json
from pathlib import Path
from typing import Optional

import yaml
from ape import project
from ape.contracts import ContractContainer
from eth_typing import ChecksumAddress
from eth_utils import to_checksum_address

from voting_deployment.constants import (
    ADDRESS_PATTERN,
    DEPLOYMENT_PARAMS_DIR,
    EXAMPLE_ADDRESS,
    EXPLORER_ADDRESS_URLS,
    PROJECT_ROOT,
)


class MissingArgument(ValueError):
    """Raised when a required command line argument was not supplied."""


class InvalidAddressFormat(ValueError):
    """Raised when a value is not a 0x-prefixed, 40 hex character address."""


def _load_yaml(filepath: Path) -> dict:
    """Loads a YAML file."""
    with open(filepath, "r") as file:
        return yaml.safe_load(file)


def _load_json(filepath: Path) -> dict:
    """Loads a JSON file."""
    with open(filepath, "r") as file:
        return json.load(file)


def is_hex_address(value) -> bool:
    return isinstance(value, str) and ADDRESS_PATTERN.fullmatch(value) is not None


def validate_address(value: Optional[str]) -> ChecksumAddress:
    """
    Validates a 20-byte hex address (case-insensitive) and returns its checksummed form.
    """
    if not value:
        raise MissingArgument(
            f"Please provide the contract address as argument, e.g. {EXAMPLE_ADDRESS}"
        )
    if not is_hex_address(value):
        raise InvalidAddressFormat(f"Invalid Ethereum address format: '{value}'")
    return to_checksum_address(value)


def resolve_project_path(path) -> Path:
    """Paths in parameter files are relative to the project root."""
    path = Path(path)
    if path.is_absolute():
        return path
    return PROJECT_ROOT / path


def get_params_filepath(deployment_name: str) -> Path:
    """Returns the bundled parameters file for a deployment name (e.g. 'private-voting')."""
    filepath = DEPLOYMENT_PARAMS_DIR / f"{deployment_name.replace('-', '_')}.yml"
    if not filepath.exists():
        raise ValueError(f"No deployment parameters found for '{deployment_name}'")
    return filepath


def get_contract_container(contract: str) -> ContractContainer:
    try:
        contract_container = getattr(project, contract)
    except AttributeError:
        raise ValueError(f"No contract found with name '{contract}'.")
    return contract_container


def get_explorer_url(network: str, address: str) -> Optional[str]:
    template = EXPLORER_ADDRESS_URLS.get(network)
    if not template:
        return None
    return template.format(address=address)

