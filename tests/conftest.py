import shutil
from pathlib import Path
from types import SimpleNamespace

import pytest
from ape.exceptions import ApeException

from voting_deployment.networks import NetworkContext
from voting_deployment.params import Deployer, DeploymentParameters, SeedCall

DEPLOYER_ADDRESS = "0xf39Fd6e51aad88F6F4ce6aB8827279cffFb92266"
CONTRACT_ADDRESS = "0x5FbDB2315678afecb367f032d93F642f64180aa3"
ONE_ETHER = 10**18

FRONTEND_CONFIG_FILEPATH = Path(__file__).parent.parent / "frontend" / "public" / "config.js"

PRODUCTS = [
    ("MetaMask Wallet Extension", "Browser extension for Ethereum wallet management"),
    ("Uniswap DEX Platform", "Decentralized exchange for swapping cryptocurrencies"),
    ("OpenSea NFT Marketplace", "Marketplace for buying, selling, and creating NFTs"),
]

CREATE_PRODUCT_ABI = SimpleNamespace(
    name="createProduct",
    inputs=[
        SimpleNamespace(name="name", type="string"),
        SimpleNamespace(name="description", type="string"),
    ],
)


# Fakes of the ape surface used by the deployer


class FakeBlocks:
    def __init__(self, height=0):
        self.height = height


class FakeChain:
    def __init__(self, height=0):
        self.blocks = FakeBlocks(height)
        self.mined = 0

    def mine(self, num_blocks=1):
        self.mined += num_blocks
        self.blocks.height += num_blocks

    def include(self, sender):
        """Mines one block holding a transaction from sender."""
        self.mine()
        return SimpleNamespace(
            block_number=self.blocks.height,
            txn_hash=f"0x{self.blocks.height:064x}",
            transaction=SimpleNamespace(sender=sender),
        )


class FakeMethod:
    def __init__(self, contract, abi, chain, fail_at=None):
        self.contract = contract
        self.abis = [abi]
        self.chain = chain
        self.fail_at = fail_at
        self.calls = list()

    def __call__(self, *args, sender=None):
        if self.fail_at is not None and len(self.calls) + 1 == self.fail_at:
            raise ApeException("Transaction reverted")
        self.calls.append(args)
        return self.chain.include(sender.address)


class FakeContractInstance:
    def __init__(self, name, address, receipt):
        self.contract_type = SimpleNamespace(name=name)
        self.address = address
        self.receipt = receipt


class FakeContainer:
    def __init__(self, name, chain, fail_seed_at=None):
        self.contract_type = SimpleNamespace(name=name)
        self.chain = chain
        self.fail_seed_at = fail_seed_at
        self.instance = None


class FakeAccount:
    def __init__(self, chain, address=DEPLOYER_ADDRESS, balance=2 * ONE_ETHER):
        self.chain = chain
        self.address = address
        self.balance = balance
        self.deployments = list()

    def deploy(self, container, *args):
        receipt = self.chain.include(self.address)
        instance = FakeContractInstance(container.contract_type.name, CONTRACT_ADDRESS, receipt)
        instance.createProduct = FakeMethod(
            contract=instance,
            abi=CREATE_PRODUCT_ABI,
            chain=self.chain,
            fail_at=container.fail_seed_at,
        )
        container.instance = instance
        self.deployments.append((container.contract_type.name, args))
        return instance


# Fixtures


@pytest.fixture
def chain():
    return FakeChain(height=10)


@pytest.fixture
def account(chain):
    return FakeAccount(chain)


@pytest.fixture
def localhost():
    return NetworkContext(label="localhost", chain_id=31337, is_local=True)


@pytest.fixture
def sepolia():
    return NetworkContext(label="sepolia", chain_id=11155111, is_local=False)


@pytest.fixture
def deployments_dir(tmp_path):
    # intentionally not created
    return tmp_path / "deployments"


@pytest.fixture
def private_voting_params(deployments_dir):
    return DeploymentParameters(
        name="private-voting",
        contract="PrivateVotingSystem",
        frontend_key="PRIVATE_VOTING",
        artifacts_dir=deployments_dir,
    )


@pytest.fixture
def public_voting_params(deployments_dir):
    seed_calls = [SeedCall(label=name, args=(name, description)) for name, description in PRODUCTS]
    return DeploymentParameters(
        name="public-voting",
        contract="PublicVotingSystem",
        seed_method="createProduct",
        seed_calls=seed_calls,
        frontend_key="PRODUCT_FEEDBACK_VOTING",
        artifacts_dir=deployments_dir,
    )


@pytest.fixture
def get_deployer(account, chain, localhost):
    def _get_deployer(parameters, network=localhost, **kwargs):
        kwargs.setdefault("poll_interval", 0)
        return Deployer(
            parameters,
            network=network,
            account=account,
            autosign=True,
            chain_manager=chain,
            **kwargs,
        )

    return _get_deployer


@pytest.fixture
def config_filepath(tmp_path):
    filepath = tmp_path / "config.js"
    shutil.copyfile(FRONTEND_CONFIG_FILEPATH, filepath)
    return filepath
