#!/usr/bin/python3

from ape import project

from voting_deployment.constants import DEPLOYMENT_PARAMS_DIR
from voting_deployment.networks import is_local_network
from voting_deployment.params import Deployer

DEPLOYMENT_PARAMS_FILEPATH = DEPLOYMENT_PARAMS_DIR / "private_voting.yml"


def main():
    """
    Deploys the PrivateVotingSystem (FHE) contract and records it under
    deployments/<network>-private-voting.json

    ape run deploy_private_voting --network ethereum:local:test
    ape run deploy_private_voting --network ethereum:sepolia:infura
    """
    deployer = Deployer.from_yaml(filepath=DEPLOYMENT_PARAMS_FILEPATH, autosign=is_local_network())
    private_voting = deployer.deploy(project.PrivateVotingSystem)
    deployer.finalize(private_voting)
