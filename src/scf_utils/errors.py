#!/usr/bin/env python3
"""
Exceptions raised while deploying a function to SCF.
"""

from tencentcloud.common.exception.tencent_cloud_sdk_exception import TencentCloudSDKException

FUNCTION_NOT_FOUND = "ResourceNotFound.Function"
ALIAS_NOT_FOUND = "ResourceNotFound.Alias"
INTERNAL_ERROR = "InternalError"


class ScfDeployError(Exception):
    """Base class for deployment failures."""


class ConfigurationError(ScfDeployError):
    """The adapter configuration is missing or invalid."""


class AmbiguousResourceError(ScfDeployError):
    """More than one remote resource matches a name that must be unique."""

    def __init__(self, kind: str, name: str):
        self.kind = kind
        self.name = name
        super().__init__(f"There are two or more {kind}s named [{name}] in the remote account")


class ResourceNotReadyError(ScfDeployError):
    """A function did not reach the Active state within the retry budget."""

    def __init__(self, name: str, status: str = None):
        self.name = name
        self.status = status
        super().__init__(f"Please check function status: {name} (last status: {status})")


def error_code(error: Exception) -> str:
    """Return the provider error code of an SDK exception, or None."""
    if isinstance(error, TencentCloudSDKException):
        return error.code
    return None


def is_not_found(error: Exception, code: str) -> bool:
    return error_code(error) == code
