"""
Smart Contract Deployment Script
Deploys the WANNABENFT contract and prints its address
"""

import os
import sys
import json
import asyncio
import subprocess
from pathlib import Path
from typing import Dict
from loguru import logger
from dotenv import load_dotenv

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from blockchain import ContractFactory, TransactionBuilder  # noqa: E402
from utils import NetworkManager  # noqa: E402

load_dotenv()

DEFAULT_CONFIG_PATH = 'config/deploy_config.json'

LOG_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan> - <level>{message}</level>"
)


def setup_logging():
    """Send all log output to stderr so stdout only carries the address"""
    logger.remove()
    logger.add(sys.stderr, format=LOG_FORMAT, level=os.getenv('LOG_LEVEL', 'INFO'))


def load_deploy_config(path: str = None) -> Dict:
    """
    Load deployment settings

    Args:
        path: Config path (None = DEPLOY_CONFIG or config/deploy_config.json)

    Returns:
        Config dict
    """
    config_path = path or os.getenv('DEPLOY_CONFIG', DEFAULT_CONFIG_PATH)

    with open(config_path, 'r') as f:
        config = json.load(f)

    config.setdefault('artifacts_dir', 'artifacts')
    config.setdefault('confirmation_timeout', 120)
    config.setdefault('compile_before_deploy', False)

    if not config.get('contract_name'):
        raise ValueError(f"contract_name missing from {config_path}")

    if not isinstance(config.get('constructor_args'), list):
        raise ValueError(f"constructor_args must be a list in {config_path}")

    return config


def compile_contracts():
    """Run the Hardhat compile task"""
    logger.info("Compiling contracts...")
    subprocess.run(["npx", "hardhat", "compile"], check=True)


async def deploy_contract(config: Dict, network_manager: NetworkManager = None) -> str:
    """
    Deploy the configured contract and wait for confirmation

    Args:
        config: Deployment settings
        network_manager: Network to deploy to (None = from environment)

    Returns:
        Deployed contract address
    """
    if config['compile_before_deploy']:
        compile_contracts()

    network_manager = network_manager or NetworkManager()
    w3 = network_manager.connect()
    transaction_builder = TransactionBuilder(w3, network_manager.get_signer())

    factory = ContractFactory.from_artifact(
        w3,
        config['contract_name'],
        transaction_builder,
        artifacts_dir=config['artifacts_dir'],
        confirmation_timeout=config['confirmation_timeout']
    )

    contract = factory.deploy(*config['constructor_args'])
    return await contract.deployed()


def main() -> int:
    """Run the deployment; returns the process exit code"""
    setup_logging()

    try:
        config = load_deploy_config()
        address = asyncio.run(deploy_contract(config))
    except Exception as e:
        logger.exception(f"Deployment failed: {e!r}")
        return 1

    print(f"Greeter deployed to: {address}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
