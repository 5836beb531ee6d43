"""
Utils package for SCF deployments.
Provides utilities for configuration, credentials, client creation and progress reporting.
"""

from .config import (
    SECRET_ID,
    SECRET_KEY,
    SESSION_TOKEN,
    REGION,
    DEFAULT_CONFIG_FILE,
    DEFAULT_CODE_DIR,
    load_config,
    get_adapter_config,
)

from .errors import (
    ScfDeployError,
    ConfigurationError,
    AmbiguousResourceError,
    ResourceNotReadyError,
)

from .login import (
    Credentials,
    Profile,
    ProfileProvider,
    Clients,
    create_clients,
)

from .spinner import (
    Progress,
    spinner,
)

from .code_loader import CodeLoader

__all__ = [
    # Configuration
    'SECRET_ID',
    'SECRET_KEY',
    'SESSION_TOKEN',
    'REGION',
    'DEFAULT_CONFIG_FILE',
    'DEFAULT_CODE_DIR',
    'load_config',
    'get_adapter_config',

    # Errors
    'ScfDeployError',
    'ConfigurationError',
    'AmbiguousResourceError',
    'ResourceNotReadyError',

    # Credentials and clients
    'Credentials',
    'Profile',
    'ProfileProvider',
    'Clients',
    'create_clients',

    # Progress reporting
    'Progress',
    'spinner',

    # Code packaging
    'CodeLoader',
]
