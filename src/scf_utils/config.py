#!/usr/bin/env python3
"""
Configuration settings for SCF deployments.
Loads environment variables from .env and reads the adapter configuration file.
"""

import os
import logging
from pathlib import Path
from typing import Any, Dict

import yaml
from dotenv import load_dotenv

from scf_utils.errors import ConfigurationError

# Configure logging
logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(name)s - %(levelname)s - %(message)s')
logger = logging.getLogger(__name__)

# Find and load .env file
ENV_PATH = Path('.') / '.env'
load_dotenv(dotenv_path=ENV_PATH)

# Credential settings
SECRET_ID = os.getenv('TENCENTCLOUD_SECRET_ID', '')
SECRET_KEY = os.getenv('TENCENTCLOUD_SECRET_KEY', '')
SESSION_TOKEN = os.getenv('TENCENTCLOUD_SESSION_TOKEN', '')
REGION = os.getenv('TENCENTCLOUD_REGION', 'ap-guangzhou')

# Deployment defaults
DEFAULT_CONFIG_FILE = os.getenv('SCF_DEPLOY_CONFIG', 'malagu.yml')
DEFAULT_CODE_DIR = os.getenv('SCF_DEPLOY_CODE_DIR', '.malagu/dist')

# Function status polling
STATUS_POLL_INTERVAL = float(os.getenv('SCF_STATUS_POLL_INTERVAL', '0.2'))
STATUS_POLL_RETRIES = int(os.getenv('SCF_STATUS_POLL_RETRIES', '200'))

# Delay before retrying an API update that failed with InternalError
API_RETRY_DELAY = float(os.getenv('SCF_API_RETRY_DELAY', '1'))

# Sections under which the adapter configuration may be nested
ADAPTER_SECTIONS = ('deployConfig', 'scf')


def load_config(config_path: str) -> Dict[str, Any]:
    """
    Load configuration from a YAML file.

    Args:
        config_path (str): Path to the YAML configuration file

    Returns:
        dict: Configuration data

    Raises:
        ConfigurationError: If the file cannot be read or is not a mapping
    """
    path = Path(config_path)
    try:
        with open(path, 'r') as f:
            config = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as e:
        raise ConfigurationError(f"Could not read configuration file {path}: {e}") from e

    if not isinstance(config, dict):
        raise ConfigurationError(f"Configuration file {path} must contain a mapping")

    logger.info(f"Successfully loaded configuration from {path}")
    return config


def get_adapter_config(config: Dict[str, Any]) -> Dict[str, Any]:
    """
    Extract the adapter section from a loaded configuration.

    The section may sit at the top level or be nested under one of
    ADAPTER_SECTIONS.
    """
    for section in ADAPTER_SECTIONS:
        nested = config.get(section)
        if isinstance(nested, dict) and 'function' in nested:
            return nested
    return config
