import sys
from collections import OrderedDict


def _abort() -> None:
    print("Aborting deployment!")
    sys.exit(1)


def _confirm_deployment(contract_name: str) -> None:
    """Asks the user to confirm the deployment of a single contract."""
    answer = input(f"Deploy {contract_name} Y/N? ")
    if answer.lower().strip() == "n":
        _abort()


def _continue() -> None:
    """Asks the user to continue."""
    answer = input("Continue Y/N? ")
    if answer.lower().strip() == "n":
        _abort()


def _confirm_resolution(resolved_params: OrderedDict, contract_name: str) -> None:
    """Asks the user to confirm the resolved constructor arguments of the contract."""
    if len(resolved_params) == 0:
        print(f"\n(i) No constructor parameters for {contract_name}")
    else:
        print(f"\nConstructor parameters for {contract_name}")
        for name, resolved_value in resolved_params.items():
            print(f"\t{name}={resolved_value}")
    _confirm_deployment(contract_name)


def _confirm_seed_data(method_name: str, count: int) -> None:
    """Asks the user to confirm the seed transactions sent after deployment."""
    print(f"\n{count} {method_name} transaction(s) will be sent after deployment.")
    _continue()
