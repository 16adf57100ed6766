"""Integration tests for the command-line entry points."""

import json

import pytest

from evm_deploykit import cli
from evm_deploykit.deployer import run_deployment
from evm_deploykit.exceptions import VerificationTimeoutError

CONTRACT_ADDRESS = "0x5FbDB2315678afecb367f032d93F642f64180aa3"
TEST_PRIVATE_KEY = "0xac0974bec39a17e36ba4a6b4d238ff944bacb478cbed5efcae784d7bf4f2ff80"


@pytest.fixture
def env(monkeypatch, tmp_path):
    """Clean environment with a deployer key and a BSC testnet endpoint."""
    for name in (
        "PRIVATE_KEY",
        "NETWORK",
        "BSCSCAN_API_KEY",
        "ETHERSCAN_API_KEY",
        "BSC_MAINNET_RPC_URL",
        "BSC_TESTNET_RPC_URL",
        "ETH_MAINNET_RPC_URL",
        "ETH_SEPOLIA_RPC_URL",
    ):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("PRIVATE_KEY", TEST_PRIVATE_KEY)
    monkeypatch.setenv("BSC_TESTNET_RPC_URL", "http://bsc-testnet-rpc.example.com")
    return ["--env-file", str(tmp_path / "missing.env")]


@pytest.fixture
def mocked_chain(monkeypatch, web3_factory):
    """Route CLI deployments through the mocked Web3 factory."""

    def run(*args, **kwargs):
        kwargs["web3_factory"] = web3_factory
        return run_deployment(*args, **kwargs)

    monkeypatch.setattr(cli, "run_deployment", run)
    return web3_factory


class TestCompileMain:
    """Test evm-compile."""

    def test_success_exit_code(self, project_paths, monkeypatch):
        calls = []

        def compile_all(paths, solc_version=None):
            calls.append((paths.root, solc_version))
            return True

        monkeypatch.setattr(cli, "compile_all", compile_all)

        assert cli.compile_main(["--project-dir", str(project_paths.root)]) == 0
        assert calls == [(project_paths.root, "0.8.20")]

    def test_failure_exit_code(self, project_paths, monkeypatch):
        monkeypatch.setattr(cli, "compile_all", lambda paths, solc_version=None: False)

        assert cli.compile_main(["--project-dir", str(project_paths.root), "--solc-version", "0.8.24"]) == 1


class TestDeployMain:
    """Test evm-deploy."""

    def test_deploys_default_contract(self, env, compiled_project, mocked_chain, capsys):
        exit_code = cli.deploy_main(env + ["--project-dir", str(compiled_project.root)])

        assert exit_code == 0
        assert capsys.readouterr().out.strip() == CONTRACT_ADDRESS
        assert mocked_chain.calls["urls"] == ["http://bsc-testnet-rpc.example.com"]

        canonical = compiled_project.record_paths("bsc-testnet")[0]
        assert json.loads(canonical.read_text())["contractName"] == "SimpleStorage"

    def test_network_from_environment(self, env, compiled_project, mocked_chain, monkeypatch):
        monkeypatch.setenv("NETWORK", "sepolia")
        monkeypatch.setenv("ETH_SEPOLIA_RPC_URL", "http://sepolia-rpc.example.com")

        assert cli.deploy_main(env + ["--project-dir", str(compiled_project.root)]) == 0
        assert compiled_project.record_paths("sepolia")[0].exists()

    def test_constructor_arguments(self, env, compiled_project, mocked_chain):
        exit_code = cli.deploy_main(
            env
            + ["--project-dir", str(compiled_project.root), "Token", "bsc-testnet", "My Token", "1000"]
        )

        assert exit_code == 0
        record = json.loads(compiled_project.record_paths("bsc-testnet")[0].read_text())
        assert record["constructorArgs"] == ["My Token", "1000"]

    def test_reads_dotenv_file(self, env, compiled_project, mocked_chain, monkeypatch, tmp_path):
        monkeypatch.delenv("PRIVATE_KEY")
        env_file = tmp_path / "deploy.env"
        env_file.write_text(f"PRIVATE_KEY={TEST_PRIVATE_KEY}\n")
        monkeypatch.setattr(cli.os, "environ", dict(cli.os.environ))

        exit_code = cli.deploy_main(
            ["--env-file", str(env_file), "--project-dir", str(compiled_project.root)]
        )

        assert exit_code == 0

    def test_missing_private_key_fails(self, env, compiled_project, mocked_chain, monkeypatch):
        monkeypatch.delenv("PRIVATE_KEY")

        assert cli.deploy_main(env + ["--project-dir", str(compiled_project.root)]) == 1
        assert not compiled_project.record_paths("bsc-testnet")[0].exists()

    def test_unknown_network_fails(self, env, compiled_project, mocked_chain):
        exit_code = cli.deploy_main(
            env + ["--project-dir", str(compiled_project.root), "SimpleStorage", "polygon"]
        )

        assert exit_code == 1


class TestVerifyMain:
    """Test evm-verify."""

    def test_success(self, env, compiled_project, monkeypatch):
        calls = []
        monkeypatch.setattr(
            cli,
            "verify_contract",
            lambda config, contract, network, paths: calls.append((contract, network, paths.root)),
        )

        exit_code = cli.verify_main(
            env + ["--project-dir", str(compiled_project.root), "SimpleStorage", "bsc"]
        )

        assert exit_code == 0
        assert calls == [("SimpleStorage", "bsc", compiled_project.root)]

    def test_verification_error_exit_code(self, env, compiled_project, monkeypatch, caplog):
        def verify_contract(config, contract, network, paths):
            raise VerificationTimeoutError("Verification timeout after 20 checks")

        monkeypatch.setattr(cli, "verify_contract", verify_contract)

        assert cli.verify_main(env + ["--project-dir", str(compiled_project.root)]) == 1
        assert "Verification timeout after 20 checks" in caplog.text

    def test_missing_record_exit_code(self, env, compiled_project):
        assert cli.verify_main(env + ["--project-dir", str(compiled_project.root)]) == 1

    def test_undecodable_record_exit_code(self, env, compiled_project):
        canonical = compiled_project.record_paths("bsc-testnet")[0]
        canonical.parent.mkdir(parents=True)
        canonical.write_bytes(b'{"contractName": "\xff\xfe"}')

        exit_code = cli.verify_main(
            env + ["--project-dir", str(compiled_project.root), "SimpleStorage", "bsc-testnet"]
        )

        assert exit_code == 1
