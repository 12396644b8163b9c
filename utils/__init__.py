"""
Utilities Package
Network and signer selection
"""

from .network_manager import NetworkManager

__all__ = ['NetworkManager']
