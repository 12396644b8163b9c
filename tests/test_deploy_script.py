"""
Deploy Script Tests
End-to-end behaviour of scripts/deploy_contract.py with mocked network
"""

import sys
import json
import runpy
import pytest
from pathlib import Path
from unittest.mock import Mock, AsyncMock, patch
from loguru import logger

from blockchain import ArtifactNotFoundError, DeploymentError
import scripts.deploy_contract as deploy_script


CONFIG_PATH = Path(__file__).resolve().parent.parent / 'config' / 'deploy_config.json'

DEPLOYED_ADDRESS = '0x5FbDB2315678afecb367f032d93F642f64180aa3'

EXPECTED_ARGS = [
    '0x01BE23585060835E02B77ef475b0Cc51aA1e0709',
    '0xb3dCcb4Cf7a26f6cf6B120Cf5A73875B7BBc655B',
    '0x2ed0feb3e7fd2022120aa84fab1945545a9f2ffc9076fd6156fa96eaff4c1311'
]


@pytest.fixture(autouse=True)
def reset_logger():
    """Detach the sink main() binds to the captured stderr"""
    yield
    logger.remove()
    logger.add(sys.__stderr__)


@pytest.fixture
def config():
    """Shipped deployment config"""
    return deploy_script.load_deploy_config(str(CONFIG_PATH))


@pytest.fixture
def network_manager():
    """Mock network manager"""
    manager = Mock()
    manager.connect.return_value = Mock()
    manager.get_signer.return_value = None
    return manager


@pytest.fixture
def pending():
    """Pending deployment that confirms successfully"""
    deployment = Mock()
    deployment.deployed = AsyncMock(return_value=DEPLOYED_ADDRESS)
    return deployment


@pytest.fixture
def factory(pending):
    """Mock contract factory"""
    contract_factory = Mock()
    contract_factory.deploy.return_value = pending
    return contract_factory


@pytest.fixture
def run_main(config, network_manager, factory):
    """Run main() against mocked collaborators"""
    def _run():
        with patch.object(deploy_script, 'load_deploy_config', return_value=config), \
             patch.object(deploy_script, 'NetworkManager', return_value=network_manager), \
             patch.object(deploy_script.ContractFactory, 'from_artifact', return_value=factory):
            return deploy_script.main()
    return _run


class TestDeployConfig:
    """Test shipped configuration"""

    def test_contract_name(self, config):
        assert config['contract_name'] == 'WANNABENFT'

    def test_constructor_args_in_order(self, config):
        assert config['constructor_args'] == EXPECTED_ARGS

    def test_defaults_applied(self, tmp_path):
        path = tmp_path / 'deploy.json'
        path.write_text(json.dumps({'contract_name': 'Token', 'constructor_args': []}))

        config = deploy_script.load_deploy_config(str(path))

        assert config['artifacts_dir'] == 'artifacts'
        assert config['confirmation_timeout'] == 120
        assert config['compile_before_deploy'] is False

    def test_env_override(self, tmp_path, monkeypatch):
        path = tmp_path / 'deploy.json'
        path.write_text(json.dumps({'contract_name': 'Other', 'constructor_args': [1]}))
        monkeypatch.setenv('DEPLOY_CONFIG', str(path))

        assert deploy_script.load_deploy_config()['contract_name'] == 'Other'

    def test_missing_contract_name(self, tmp_path):
        path = tmp_path / 'deploy.json'
        path.write_text(json.dumps({'constructor_args': []}))

        with pytest.raises(ValueError):
            deploy_script.load_deploy_config(str(path))


class TestDeployContract:
    """Test deploy_contract coroutine"""

    @pytest.mark.asyncio
    async def test_passes_constructor_args(self, config, network_manager, factory):
        with patch.object(deploy_script.ContractFactory, 'from_artifact', return_value=factory) as from_artifact:
            address = await deploy_script.deploy_contract(config, network_manager)

        assert address == DEPLOYED_ADDRESS
        assert from_artifact.call_args.args[1] == 'WANNABENFT'
        factory.deploy.assert_called_once_with(*EXPECTED_ARGS)

    @pytest.mark.asyncio
    async def test_compiles_when_enabled(self, config, network_manager, factory):
        config['compile_before_deploy'] = True

        with patch.object(deploy_script.ContractFactory, 'from_artifact', return_value=factory), \
             patch.object(deploy_script.subprocess, 'run') as run:
            await deploy_script.deploy_contract(config, network_manager)

        run.assert_called_once_with(["npx", "hardhat", "compile"], check=True)

    @pytest.mark.asyncio
    async def test_skips_compile_by_default(self, config, network_manager, factory):
        with patch.object(deploy_script.ContractFactory, 'from_artifact', return_value=factory), \
             patch.object(deploy_script.subprocess, 'run') as run:
            await deploy_script.deploy_contract(config, network_manager)

        run.assert_not_called()


class TestMain:
    """Test exit codes and console output"""

    def test_success_prints_address(self, run_main, capsys):
        exit_code = run_main()
        out = capsys.readouterr().out

        assert exit_code == 0
        assert out == f"Greeter deployed to: {DEPLOYED_ADDRESS}\n"

    def test_unknown_contract_fails(self, config, network_manager, capsys):
        error = ArtifactNotFoundError('Artifact for contract WANNABENFT not found in artifacts')

        with patch.object(deploy_script, 'load_deploy_config', return_value=config), \
             patch.object(deploy_script, 'NetworkManager', return_value=network_manager), \
             patch.object(deploy_script.ContractFactory, 'from_artifact', side_effect=error):
            exit_code = deploy_script.main()

        captured = capsys.readouterr()

        assert exit_code == 1
        assert 'Greeter deployed to:' not in captured.out
        assert 'Artifact for contract WANNABENFT not found' in captured.err

    def test_confirmation_failure(self, run_main, pending, capsys):
        pending.deployed.side_effect = DeploymentError('Deployment of WANNABENFT reverted')

        exit_code = run_main()
        captured = capsys.readouterr()

        assert exit_code == 1
        assert captured.out == ''
        assert 'reverted' in captured.err

    def test_timeout_failure(self, run_main, pending, capsys):
        pending.deployed.side_effect = TimeoutError('no receipt after 120 seconds')

        exit_code = run_main()
        captured = capsys.readouterr()

        assert exit_code == 1
        assert captured.out == ''
        assert 'no receipt after 120 seconds' in captured.err

    def test_print_after_confirmation(self, run_main, pending, capsys):
        events = []

        async def confirm():
            events.append(('confirmed', capsys.readouterr().out))
            return DEPLOYED_ADDRESS

        pending.deployed.side_effect = confirm

        exit_code = run_main()

        assert exit_code == 0
        assert events == [('confirmed', '')]
        assert capsys.readouterr().out.startswith('Greeter deployed to:')

    def test_config_error_fails(self, capsys):
        with patch.object(deploy_script, 'load_deploy_config', side_effect=FileNotFoundError('deploy_config.json')):
            exit_code = deploy_script.main()

        assert exit_code == 1
        assert 'deploy_config.json' in capsys.readouterr().err


class TestDeployWrapper:
    """Test deploy.py"""

    def test_forwards_exit_code(self):
        with patch("subprocess.run") as run:
            run.return_value.returncode = 1

            with pytest.raises(SystemExit) as exc_info:
                runpy.run_path(str(CONFIG_PATH.parent.parent / "deploy.py"), run_name="__main__")

        assert exc_info.value.code == 1
        assert run.call_args.args[0][1] == "scripts/deploy_contract.py"


if __name__ == "__main__":
    pytest.main([__file__, '-v'])
