"""
Transaction Builder
Builds, signs and submits contract creation transactions
"""

import asyncio
from typing import Optional
from web3 import Web3
from web3.types import TxReceipt
from eth_account.signers.local import LocalAccount
from hexbytes import HexBytes
from loguru import logger


class TransactionBuilder:
    """
    Submits deployment transactions for a single deployer

    With a local signer the transaction is built and signed client side.
    Without one, the node's first unlocked account sends it (Hardhat node).
    """

    def __init__(self, w3: Web3, account: Optional[LocalAccount] = None):
        """
        Initialize Transaction Builder

        Args:
            w3: Web3 instance
            account: Local signer (None = node account)
        """
        self.w3 = w3
        self.account = account

    @property
    def sender(self) -> str:
        """Address the deployment is sent from"""
        if self.account is not None:
            return self.account.address

        if self.w3.eth.default_account:
            return self.w3.eth.default_account

        accounts = self.w3.eth.accounts
        if not accounts:
            raise ValueError("Node exposes no unlocked accounts and no private key is set")

        return accounts[0]

    def send_deployment(self, constructor) -> HexBytes:
        """
        Send a contract creation transaction

        Args:
            constructor: web3 ContractConstructor with bound arguments

        Returns:
            Transaction hash
        """
        sender = self.sender

        if self.account is None:
            tx_hash = constructor.transact({'from': sender})
        else:
            transaction = constructor.build_transaction({
                'from': sender,
                'nonce': self.w3.eth.get_transaction_count(sender, 'pending'),
                'chainId': self.w3.eth.chain_id
            })

            logger.debug(f"Gas limit: {transaction.get('gas')}")

            signed_tx = self.account.sign_transaction(transaction)
            tx_hash = self.w3.eth.send_raw_transaction(signed_tx.raw_transaction)

        logger.info(f"Transaction sent: {tx_hash.hex()}")
        return tx_hash

    async def wait_for_receipt(self, tx_hash: HexBytes, timeout: float = 120) -> TxReceipt:
        """
        Wait for a transaction to be mined

        Args:
            tx_hash: Transaction hash
            timeout: Seconds before web3 raises TimeExhausted

        Returns:
            Transaction receipt
        """
        logger.info("Waiting for confirmation...")

        # web3's receipt polling blocks, keep it off the event loop
        return await asyncio.to_thread(
            self.w3.eth.wait_for_transaction_receipt,
            tx_hash,
            timeout=timeout
        )
