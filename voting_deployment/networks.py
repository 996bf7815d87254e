import os
from typing import NamedTuple

from ape import accounts, networks
from ape.api import AccountAPI
from ape.cli.choices import select_account

from voting_deployment.constants import DEPLOYER_ACCOUNT_ENVVAR, LOCAL_NETWORKS, NETWORK_LABELS


class NetworkContext(NamedTuple):
    """
    Explicit network selection for a deployment run.
    The label names the deployment record file (e.g. 'localhost', 'sepolia').
    """

    label: str
    chain_id: int
    is_local: bool

    @classmethod
    def from_provider(cls) -> "NetworkContext":
        network = networks.provider.network
        return cls(
            label=NETWORK_LABELS.get(network.name, network.name),
            chain_id=networks.provider.chain_id,
            is_local=network.name in LOCAL_NETWORKS,
        )


def is_local_network() -> bool:
    return networks.provider.network.name in LOCAL_NETWORKS


def get_deployer_account() -> AccountAPI:
    """
    Test account 0 on local networks, otherwise the account aliased by
    DEPLOYER_ACCOUNT, otherwise the operator is prompted to choose one.
    """
    if is_local_network():
        return accounts.test_accounts[0]

    alias = os.environ.get(DEPLOYER_ACCOUNT_ENVVAR)
    if alias:
        return accounts.load(alias)
    return select_account()
