"""
Deployer Package
Configuration and orchestration for a single contract deployment
"""

from .config import DeployConfig, load_config
from .deployment_runner import DeploymentRunner, create_runner

__all__ = ['DeployConfig', 'load_config', 'DeploymentRunner', 'create_runner']
