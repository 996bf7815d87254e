#!/usr/bin/python3

from voting_deployment.cli import list_deployments as cli

if __name__ == "__main__":
    cli()
