import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Dict, NamedTuple, Optional

from ape.contracts import ContractInstance
from eth_typing import ChecksumAddress
from eth_utils import to_checksum_address

from voting_deployment.utils import _load_json

STANDARD_RECORD_JSON_FORMAT = {"indent": 2}


class DeploymentRecord(NamedTuple):
    """Represents the outcome of a single contract deployment on one network."""

    contract_address: ChecksumAddress
    deployer_address: ChecksumAddress
    network: str
    deployed_at: str
    block_number: int
    product_count: Optional[int] = None

    def to_dict(self) -> Dict:
        data = {
            "contractAddress": self.contract_address,
            "deployerAddress": self.deployer_address,
            "network": self.network,
            "deployedAt": self.deployed_at,
            "blockNumber": int(self.block_number),
        }
        if self.product_count is not None:
            data["productCount"] = int(self.product_count)
        return data

    @classmethod
    def from_dict(cls, data: Dict) -> "DeploymentRecord":
        return cls(
            contract_address=data["contractAddress"],
            deployer_address=data["deployerAddress"],
            network=data["network"],
            deployed_at=data["deployedAt"],
            block_number=data["blockNumber"],
            product_count=data.get("productCount"),
        )


def utc_timestamp(now: Optional[datetime] = None) -> str:
    """ISO-8601 UTC timestamp with millisecond precision, e.g. 2024-01-01T12:00:00.000Z"""
    now = now or datetime.now(tz=timezone.utc)
    return now.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def record_filepath(directory: Path, network: str, label: str) -> Path:
    return Path(directory) / f"{network}-{label}.json"


def record_from_deployment(
    contract_instance: ContractInstance,
    network: str,
    product_count: Optional[int] = None,
    deployed_at: Optional[str] = None,
) -> DeploymentRecord:
    receipt = contract_instance.receipt
    return DeploymentRecord(
        contract_address=to_checksum_address(contract_instance.address),
        deployer_address=to_checksum_address(receipt.transaction.sender),
        network=network,
        deployed_at=deployed_at or utc_timestamp(),
        block_number=receipt.block_number,
        product_count=product_count,
    )


def read_record(filepath: Path) -> DeploymentRecord:
    return DeploymentRecord.from_dict(_load_json(filepath))


def write_record(record: DeploymentRecord, filepath: Path, silent: bool = False) -> Path:
    """Writes a deployment record, replacing any previous record for the same network and label."""
    if record.block_number < 0:
        raise ValueError(f"Invalid block number {record.block_number} for deployment record.")

    # Create the parent directory if it does not exist
    filepath.parent.mkdir(parents=True, exist_ok=True)

    if not silent:
        if filepath.exists():
            print(f"Overwriting existing deployment record at {filepath}.")
        else:
            print(f"Creating new deployment record at {filepath}.")

    with open(filepath, "w") as file:
        json.dump(record.to_dict(), file, **STANDARD_RECORD_JSON_FORMAT)

    return filepath


def read_records(directory: Path, network: Optional[str] = None) -> Dict[Path, DeploymentRecord]:
    """Reads all deployment records in a directory, optionally only those of one network."""
    directory = Path(directory)
    if not directory.is_dir():
        return dict()

    records = dict()
    for filepath in sorted(directory.glob("*.json")):
        try:
            record = read_record(filepath)
        except (KeyError, TypeError, ValueError):
            print(f"Skipping {filepath}: not a deployment record.")
            continue
        if network and record.network != network:
            continue
        records[filepath] = record
    return records
