#!/usr/bin/python3

from ape import project

from voting_deployment.constants import DEPLOYMENT_PARAMS_DIR
from voting_deployment.networks import is_local_network
from voting_deployment.params import Deployer

DEPLOYMENT_PARAMS_FILEPATH = DEPLOYMENT_PARAMS_DIR / "public_voting.yml"


def main():
    """
    Deploys the PublicVotingSystem contract, creates the initial products
    and records it under deployments/<network>-public-voting.json
    """
    deployer = Deployer.from_yaml(filepath=DEPLOYMENT_PARAMS_FILEPATH, autosign=is_local_network())
    public_voting = deployer.deploy(project.PublicVotingSystem)
    deployer.finalize(public_voting)
