"""
Network Manager
Selects the target network and deployer account from config + environment
"""

import os
import json
from typing import Optional, Dict
from web3 import Web3
from eth_account import Account
from eth_account.signers.local import LocalAccount
from loguru import logger
from dotenv import load_dotenv

from blockchain.exceptions import NetworkError

load_dotenv()

DEFAULT_NETWORK = 'localhost'
DEFAULT_CONFIG_PATH = 'config/network_config.json'


class NetworkManager:
    """
    Resolves one entry of config/network_config.json into a Web3 connection

    The active network is chosen with DEPLOY_NETWORK (default: localhost).
    Each network names the environment variables holding its RPC URL and
    deployer private key.
    """

    def __init__(
        self,
        network_name: Optional[str] = None,
        config_path: str = DEFAULT_CONFIG_PATH
    ):
        """
        Initialize Network Manager

        Args:
            network_name: Network key in config (None = DEPLOY_NETWORK or localhost)
            config_path: Path to the network config JSON
        """
        with open(config_path, 'r') as f:
            self.config = json.load(f)

        self.network_name = network_name or os.getenv('DEPLOY_NETWORK', DEFAULT_NETWORK)
        self.network = self._load_network(self.network_name)

        logger.info(f"Network selected: {self.network['name']} ({self.network_name})")

    def _load_network(self, network_name: str) -> Dict:
        """Look up a network entry and resolve its RPC URL"""
        networks = self.config['networks']

        if network_name not in networks:
            raise NetworkError(
                f"Unknown network '{network_name}' "
                f"(available: {', '.join(sorted(networks))})"
            )

        network_config = networks[network_name]
        http_url = os.getenv(network_config['http_url_env']) or network_config.get('default_url')

        if not http_url:
            raise NetworkError(f"{network_config['http_url_env']} must be set for network '{network_name}'")

        return {
            'name': network_config.get('name', network_name),
            'http_url': http_url,
            'chain_id': network_config.get('chain_id'),
            'private_key_env': network_config.get('private_key_env')
        }

    def connect(self) -> Web3:
        """
        Create a Web3 instance for the selected network

        Returns:
            Connected Web3 instance
        """
        w3 = Web3(Web3.HTTPProvider(self.network['http_url']))

        if not w3.is_connected():
            raise NetworkError(f"Failed to connect to {self.network['name']} at {self.network['http_url']}")

        chain_id = w3.eth.chain_id
        expected = self.network['chain_id']

        if expected is not None and chain_id != expected:
            raise NetworkError(f"Chain ID mismatch: expected {expected}, node reports {chain_id}")

        logger.success(f"Connected to {self.network['name']} (Chain ID: {chain_id})")
        return w3

    def get_signer(self) -> Optional[LocalAccount]:
        """
        Load the deployer account from its private key variable

        Returns:
            LocalAccount, or None to fall back to the node's unlocked account
        """
        key_env = self.network['private_key_env']
        private_key = os.getenv(key_env) if key_env else None

        if not private_key:
            logger.info("No deployer private key set - using node account")
            return None

        account = Account.from_key(private_key)
        logger.info(f"Deploying from: {account.address}")
        return account
