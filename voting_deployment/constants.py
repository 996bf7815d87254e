import re
from pathlib import Path

import voting_deployment

#
# Filesystem
#

PACKAGE_DIR = Path(voting_deployment.__file__).parent
PROJECT_ROOT = PACKAGE_DIR.parent
DEPLOYMENT_PARAMS_DIR = PACKAGE_DIR / "deployment_params"
DEPLOYMENTS_DIR = PROJECT_ROOT / "deployments"
FRONTEND_CONFIG_FILEPATH = PROJECT_ROOT / "frontend" / "public" / "config.js"

#
# Networks
#

LOCALHOST = "localhost"
SEPOLIA = "sepolia"

# ape network name -> label used in deployment record filenames
NETWORK_LABELS = {
    "local": LOCALHOST,
}

LOCAL_NETWORKS = ["local", LOCALHOST]

EXPLORER_ADDRESS_URLS = {
    SEPOLIA: "https://sepolia.etherscan.io/address/{address}",
    "mainnet": "https://etherscan.io/address/{address}",
}

DEPLOYER_ACCOUNT_ENVVAR = "DEPLOYER_ACCOUNT"

#
# Deployment
#

REQUIRED_CONFIRMATIONS = 5
CONFIRMATION_POLL_INTERVAL = 2  # seconds

PRIVATE_VOTING = "private-voting"
PUBLIC_VOTING = "public-voting"

SUPPORTED_DEPLOYMENTS = [PRIVATE_VOTING, PUBLIC_VOTING]

#
# Frontend configuration
#

CONFIG_OBJECT_NAME = "CONFIG"
CONTRACTS_GROUP = "CONTRACTS"

PRIVATE_VOTING_KEY = "PRIVATE_VOTING"
PRODUCT_FEEDBACK_VOTING_KEY = "PRODUCT_FEEDBACK_VOTING"

CONTRACT_KEYS = [PRIVATE_VOTING_KEY, PRODUCT_FEEDBACK_VOTING_KEY]

# 20-byte hex address, any case
ADDRESS_PATTERN = re.compile(r"0x[0-9a-fA-F]{40}")

EXAMPLE_ADDRESS = "0x1234567890123456789012345678901234567890"
