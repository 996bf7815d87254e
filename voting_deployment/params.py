import time
import typing
from collections import OrderedDict
from pathlib import Path
from typing import Any, List, Optional

from ape import chain
from ape.api import AccountAPI, ReceiptAPI
from ape.contracts.base import ContractContainer, ContractInstance, ContractTransactionHandler
from eth_utils import from_wei
from web3.auto import w3

from voting_deployment.confirm import _confirm_resolution, _confirm_seed_data, _continue
from voting_deployment.constants import (
    CONFIRMATION_POLL_INTERVAL,
    CONTRACT_KEYS,
    DEPLOYMENTS_DIR,
    REQUIRED_CONFIRMATIONS,
)
from voting_deployment.networks import NetworkContext, get_deployer_account
from voting_deployment.records import record_filepath, record_from_deployment, write_record
from voting_deployment.utils import _load_yaml, get_explorer_url, resolve_project_path

DEPLOYER_VARIABLE = "$deployer"


class SeedCall(typing.NamedTuple):
    """A single initialization transaction sent to a freshly deployed contract."""

    label: str
    args: typing.Tuple[Any, ...]


def _validate_method_args(method_abis, args: typing.Sequence[Any]) -> typing.Dict[str, Any]:
    """Validates the transaction arguments against the function ABI."""
    if len(method_abis) == 0:
        raise ValueError("No method abis provided for validation of args")

    abis_matching_args_length = [abi for abi in method_abis if len(abi.inputs) == len(args)]
    for abi in abis_matching_args_length:
        named_args = {}
        for arg, abi_input in zip(args, abi.inputs):
            if not w3.is_encodable(abi_input.type, arg):
                break
            named_args[abi_input.name] = arg
        else:
            return named_args
    raise ValueError(
        f"Could not find ABI for '{method_abis[0].name}' with {len(args)} arg(s) and given type(s)"
    )


class DeploymentParameters:
    """
    The contract to deploy, its constructor arguments and seed data,
    as described by a deployment parameters YAML file.
    """

    class Invalid(Exception):
        """Raised when the deployment parameters are invalid"""

    def __init__(
        self,
        name: str,
        contract: str,
        confirmations: int = REQUIRED_CONFIRMATIONS,
        constructor: Optional[OrderedDict] = None,
        seed_method: Optional[str] = None,
        seed_calls: Optional[List[SeedCall]] = None,
        artifacts_dir: Path = DEPLOYMENTS_DIR,
        frontend_key: Optional[str] = None,
    ):
        if not name:
            raise self.Invalid("Deployment name is not set in params file.")
        if not contract:
            raise self.Invalid("Contract name is not set in params file.")
        if not isinstance(confirmations, int) or confirmations < 0:
            raise self.Invalid(f"Invalid number of confirmations: {confirmations}")
        if seed_calls and not seed_method:
            raise self.Invalid("Seed records provided without a seed method.")
        if frontend_key and frontend_key not in CONTRACT_KEYS:
            raise self.Invalid(f"Unknown frontend contract key: {frontend_key}")

        self.name = name
        self.contract = contract
        self.confirmations = confirmations
        self.constructor = constructor or OrderedDict()
        self.seed_method = seed_method
        self.seed_calls = seed_calls or list()
        self.artifacts_dir = Path(artifacts_dir)
        self.frontend_key = frontend_key

    @property
    def has_seed_data(self) -> bool:
        return bool(self.seed_calls)

    @classmethod
    def from_config(cls, config: typing.Dict) -> "DeploymentParameters":
        print("Processing deployment parameters...")
        if not isinstance(config, dict):
            raise cls.Invalid("Malformed deployment parameters YAML.")

        deployment = config.get("deployment")
        if not deployment:
            raise cls.Invalid("deployment is not set in params file.")
        if not isinstance(deployment, dict):
            raise cls.Invalid("Malformed deployment section in params file.")

        artifacts_dir = DEPLOYMENTS_DIR
        artifacts = config.get("artifacts") or dict()
        if not isinstance(artifacts, dict):
            raise cls.Invalid("Malformed artifacts section in params file.")
        if artifacts.get("dir"):
            artifacts_dir = resolve_project_path(artifacts["dir"])

        constructor = config.get("constructor") or dict()
        if not isinstance(constructor, dict):
            raise cls.Invalid("Malformed constructor parameters YAML.")

        seed_method, seed_calls = cls._process_seed_data(config.get("seed"))
        return cls(
            name=deployment.get("name"),
            contract=deployment.get("contract"),
            confirmations=deployment.get("confirmations", REQUIRED_CONFIRMATIONS),
            constructor=OrderedDict(constructor),
            seed_method=seed_method,
            seed_calls=seed_calls,
            artifacts_dir=artifacts_dir,
            frontend_key=deployment.get("frontend_key"),
        )

    @classmethod
    def _process_seed_data(
        cls, seed_data: Optional[typing.Dict]
    ) -> typing.Tuple[Optional[str], List[SeedCall]]:
        if not seed_data:
            return None, list()
        if not isinstance(seed_data, dict):
            raise cls.Invalid("Malformed seed section in params file.")

        method = seed_data.get("method")
        arg_names = seed_data.get("args") or list()
        records = seed_data.get("records") or list()
        if not method:
            raise cls.Invalid("Seed method is not set in params file.")

        seed_calls = list()
        for position, record in enumerate(records, start=1):
            if not isinstance(record, dict):
                raise cls.Invalid(f"Malformed seed record at position {position}.")
            try:
                args = tuple(record[arg_name] for arg_name in arg_names)
            except KeyError as e:
                raise cls.Invalid(f"Seed record at position {position} is missing {e}.")
            label = str(args[0]) if args else f"#{position}"
            seed_calls.append(SeedCall(label=label, args=args))

        return method, seed_calls

    def resolve_constructor(self, deployer_address: str) -> OrderedDict:
        """Resolves the constructor arguments of the contract."""
        resolved = OrderedDict()
        for name, value in self.constructor.items():
            resolved[name] = deployer_address if value == DEPLOYER_VARIABLE else value
        return resolved


class Transactor:
    """
    Represents an ape account plus validated/annotated transaction execution.
    """

    def __init__(self, account: Optional[AccountAPI] = None, autosign: bool = False):
        if account is None:
            self._account = get_deployer_account()
        else:
            self._account = account
        if autosign:
            print("WARNING: Autosign is enabled. Transactions will be signed automatically.")
        self._autosign = autosign
        if hasattr(self._account, "set_autosign"):
            # only keyfile accounts prompt for signing
            self._account.set_autosign(autosign)

    def get_account(self) -> AccountAPI:
        """Returns the transactor account."""
        return self._account

    def transact(self, method: ContractTransactionHandler, *args) -> ReceiptAPI:
        named_args = _validate_method_args(method_abis=method.abis, args=args)
        base_message = (
            f"\nTransacting {method.contract.contract_type.name}"
            f"[{method.contract.address[:10]}].{method.abis[0].name}"
        )
        if named_args:
            pretty_args = "\n\t".join(f"{k}={v}" for k, v in named_args.items())
            message = f"{base_message} with arguments:\n\t{pretty_args}"
        else:
            message = f"{base_message} with no arguments"
        print(message)

        # blocks until the transaction is mined; reverts raise
        return method(*args, sender=self._account)


class Deployer(Transactor):
    """
    Deploys a single contract described by a deployment parameters file,
    sends its seed transactions in order, records the deployment and waits
    for confirmations.
    """

    class ConfirmationTimeout(Exception):
        """Raised when the deployment is not confirmed in time"""

    def __init__(
        self,
        parameters: DeploymentParameters,
        path: Optional[Path] = None,
        network: Optional[NetworkContext] = None,
        account: Optional[AccountAPI] = None,
        autosign: bool = False,
        confirmations: Optional[int] = None,
        poll_interval: float = CONFIRMATION_POLL_INTERVAL,
        timeout: Optional[float] = None,
        chain_manager=None,
    ):
        super().__init__(account, autosign)

        self.path = path
        self.parameters = parameters
        self.network = network or NetworkContext.from_provider()
        self.chain = chain_manager or chain
        self.confirmations = parameters.confirmations if confirmations is None else confirmations
        self.poll_interval = poll_interval
        self.timeout = timeout
        self.record_filepath = record_filepath(
            directory=parameters.artifacts_dir,
            network=self.network.label,
            label=parameters.name,
        )
        self._print_deployment_info()

        if not self._autosign:
            # Confirms the start of the deployment.
            _continue()

    @classmethod
    def from_yaml(cls, filepath: Path, *args, **kwargs) -> "Deployer":
        config = _load_yaml(filepath)
        parameters = DeploymentParameters.from_config(config)
        return cls(parameters, filepath, *args, **kwargs)

    def deploy(self, container: ContractContainer) -> ContractInstance:
        contract_name = container.contract_type.name
        print(f"\nDeploying {contract_name} contract...")
        self._print_balance()

        deployer_account = self.get_account()
        resolved_params = self.parameters.resolve_constructor(deployer_account.address)
        if not self._autosign:
            _confirm_resolution(resolved_params, contract_name)
            if self.parameters.has_seed_data:
                _confirm_seed_data(
                    self.parameters.seed_method, len(self.parameters.seed_calls)
                )

        # blocks until the contract creation transaction is mined
        instance = deployer_account.deploy(container, *resolved_params.values())
        print(f"{contract_name} deployed to: {instance.address}")

        self.seed(instance)
        return instance

    def seed(self, instance: ContractInstance) -> List[ReceiptAPI]:
        """Sends the seed transactions one at a time; nonce ordering forbids batching."""
        if not self.parameters.has_seed_data:
            return list()

        print(f"\nCreating initial data with {self.parameters.seed_method}...")
        method = getattr(instance, self.parameters.seed_method)
        receipts = list()
        for index, seed_call in enumerate(self.parameters.seed_calls, start=1):
            receipt = self.transact(method, *seed_call.args)
            receipts.append(receipt)
            print(f"Created product {index}: {seed_call.label}")
        return receipts

    def wait_for_confirmations(self, receipt: ReceiptAPI) -> int:
        """
        Blocks until the transaction has the required number of confirmations,
        counting the block that included it as the first one.
        Returns the block height observed.
        """
        if self.confirmations == 0:
            return self.chain.blocks.height

        target_height = receipt.block_number + self.confirmations - 1
        print(f"Waiting for {self.confirmations} confirmations...")

        if self.network.is_local:
            # nothing else is mining on a local development chain
            missing_blocks = target_height - self.chain.blocks.height
            if missing_blocks > 0:
                self.chain.mine(missing_blocks)

        started = time.monotonic()
        height = self.chain.blocks.height
        while height < target_height:
            if self.timeout is not None and time.monotonic() - started > self.timeout:
                raise self.ConfirmationTimeout(
                    f"Transaction {receipt.txn_hash} was not confirmed {self.confirmations} "
                    f"times within {self.timeout} seconds (height {height}, "
                    f"needed {target_height})."
                )
            time.sleep(self.poll_interval)
            height = self.chain.blocks.height
        return height

    def finalize(self, instance: ContractInstance) -> Path:
        """
        Writes the deployment record, then waits for the deployment to be confirmed.
        """
        product_count = None
        if self.parameters.has_seed_data:
            product_count = len(self.parameters.seed_calls)

        record = record_from_deployment(
            contract_instance=instance,
            network=self.network.label,
            product_count=product_count,
        )
        filepath = write_record(record=record, filepath=self.record_filepath)
        print(f"(i) Deployment info saved to {filepath}")

        self.wait_for_confirmations(instance.receipt)
        print(f"{instance.contract_type.name} deployed successfully!")
        print(f"Contract deployed to {self.network.label} network at: {instance.address}")

        explorer_url = get_explorer_url(self.network.label, instance.address)
        if explorer_url:
            print(f"You can view it on the block explorer: {explorer_url}")

        if self.parameters.frontend_key:
            print("\nTo update frontend config, run:")
            print(
                f"voting-update-config --contract-key {self.parameters.frontend_key} "
                f"{instance.address}"
            )
        return filepath

    def _print_balance(self) -> None:
        balance = self.get_account().balance
        print(f"Account balance: {from_wei(balance, 'ether')} ETH")

    def _print_deployment_info(self):
        print(
            f"Account: {self.get_account().address}",
            f"Config: {self.path}",
            f"Contract: {self.parameters.contract}",
            f"Record: {self.record_filepath}",
            f"Network: {self.network.label}",
            f"Chain ID: {self.network.chain_id}",
            f"Confirmations: {self.confirmations}",
            sep="\n",
        )
