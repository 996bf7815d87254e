import pytest

from voting_deployment.constants import DEPLOYMENT_PARAMS_DIR, DEPLOYMENTS_DIR
from voting_deployment.params import DeploymentParameters
from voting_deployment.utils import _load_yaml, get_params_filepath


def test_bundled_private_voting_parameters():
    filepath = get_params_filepath("private-voting")
    assert filepath == DEPLOYMENT_PARAMS_DIR / "private_voting.yml"

    parameters = DeploymentParameters.from_config(_load_yaml(filepath))
    assert parameters.name == "private-voting"
    assert parameters.contract == "PrivateVotingSystem"
    assert parameters.confirmations == 5
    assert parameters.artifacts_dir == DEPLOYMENTS_DIR
    assert not parameters.has_seed_data
    assert parameters.frontend_key == "PRIVATE_VOTING"


def test_bundled_public_voting_parameters():
    config = _load_yaml(get_params_filepath("public-voting"))
    parameters = DeploymentParameters.from_config(config)

    assert parameters.name == "public-voting"
    assert parameters.contract == "PublicVotingSystem"
    assert parameters.frontend_key == "PRODUCT_FEEDBACK_VOTING"
    assert parameters.seed_method == "createProduct"
    assert [call.label for call in parameters.seed_calls] == [
        "MetaMask Wallet Extension",
        "Uniswap DEX Platform",
        "OpenSea NFT Marketplace",
        "Chainlink Oracle Network",
    ]
    for call, record in zip(parameters.seed_calls, config["seed"]["records"]):
        assert call.args == (record["name"], record["description"])


def test_unknown_deployment_name():
    with pytest.raises(ValueError, match="No deployment parameters"):
        get_params_filepath("secret-voting")


def test_artifacts_dir(tmp_path):
    config = {
        "deployment": {"name": "private-voting", "contract": "PrivateVotingSystem"},
        "artifacts": {"dir": str(tmp_path)},
    }
    parameters = DeploymentParameters.from_config(config)
    assert parameters.artifacts_dir == tmp_path
    assert parameters.confirmations == 5


def test_constructor_resolves_deployer():
    config = {
        "deployment": {"name": "voting", "contract": "Voting"},
        "constructor": {"_owner": "$deployer", "_title": "Product feedback"},
    }
    parameters = DeploymentParameters.from_config(config)
    resolved = parameters.resolve_constructor("0xf39Fd6e51aad88F6F4ce6aB8827279cffFb92266")
    assert list(resolved.items()) == [
        ("_owner", "0xf39Fd6e51aad88F6F4ce6aB8827279cffFb92266"),
        ("_title", "Product feedback"),
    ]


@pytest.mark.parametrize(
    "config, message",
    [
        ({}, "deployment is not set"),
        ({"deployment": "private-voting"}, "Malformed deployment section"),
        ({"deployment": {"contract": "PrivateVotingSystem"}}, "Deployment name"),
        ({"deployment": {"name": "private-voting"}}, "Contract name"),
        (
            {"deployment": {"name": "v", "contract": "V", "confirmations": -1}},
            "Invalid number of confirmations",
        ),
        (
            {"deployment": {"name": "v", "contract": "V", "frontend_key": "VOTING"}},
            "Unknown frontend contract key",
        ),
        (
            {"deployment": {"name": "v", "contract": "V"}, "artifacts": "deployments"},
            "Malformed artifacts section",
        ),
        (
            {"deployment": {"name": "v", "contract": "V"}, "seed": ["createProduct"]},
            "Malformed seed section",
        ),
        (
            {"deployment": {"name": "v", "contract": "V"}, "constructor": ["$deployer"]},
            "Malformed constructor",
        ),
        (
            {"deployment": {"name": "v", "contract": "V"}, "seed": {"records": [{"name": "a"}]}},
            "Seed method",
        ),
        (
            {
                "deployment": {"name": "v", "contract": "V"},
                "seed": {
                    "method": "createProduct",
                    "args": ["name", "description"],
                    "records": [{"name": "a"}],
                },
            },
            "missing 'description'",
        ),
        (
            {
                "deployment": {"name": "v", "contract": "V"},
                "seed": {"method": "createProduct", "args": ["name"], "records": ["a"]},
            },
            "Malformed seed record",
        ),
    ],
)
def test_invalid_parameters(config, message):
    with pytest.raises(DeploymentParameters.Invalid, match=message):
        DeploymentParameters.from_config(config)
