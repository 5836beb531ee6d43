"""
Deploy functions for Tencent Cloud SCF.
Provides utilities for deploying functions to SCF and exposing them through API Gateway.
"""

from .adapter_config import AdapterConfig
from .deploy_with_sdk import (
    DeployContext,
    DeployResult,
    deploy_function_with_sdk,
    main,
)
from .reconcile import reconcile
from .status import wait_for_function_active

__all__ = [
    # Configuration
    'AdapterConfig',

    # Deployment
    'DeployContext',
    'DeployResult',
    'deploy_function_with_sdk',
    'main',

    # Building blocks
    'reconcile',
    'wait_for_function_active',
]
