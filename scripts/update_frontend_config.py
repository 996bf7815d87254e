#!/usr/bin/python3

from voting_deployment.cli import update_frontend_config as cli

if __name__ == "__main__":
    cli()
