"""
Utilities Package
Network connection management
"""

from .rpc_manager import RPCManager

__all__ = ['RPCManager']
