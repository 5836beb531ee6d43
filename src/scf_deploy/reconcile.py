#!/usr/bin/env python3
"""
Create-or-update reconciliation of remote resources.

Every managed resource type goes through ``reconcile``: look the resource up
by its natural key, refuse to guess when the key matches more than one
remote resource, then issue exactly one create or update.
"""

import json
import logging
from typing import Any, Callable, Dict, List

from tencentcloud.common.abstract_model import AbstractModel
from tencentcloud.common.exception.tencent_cloud_sdk_exception import TencentCloudSDKException

from scf_deploy.models import action_of, to_params
from scf_utils.errors import AmbiguousResourceError

logger = logging.getLogger(__name__)


def call(client, request: AbstractModel) -> Dict[str, Any]:
    """
    Send a typed request through a Tencent Cloud client.

    Args:
        client: ScfClient or ApigatewayClient
        request: The SDK request model to send

    Returns:
        dict: The body of the "Response" envelope
    """
    action = action_of(request)
    params = to_params(request)
    logger.debug(f"{action} request: {json.dumps(params, default=str)}")
    response = client.call_json(action, params)
    return response["Response"]


def reconcile(kind: str, name: str,
              lookup: Callable[[], List[Dict[str, Any]]],
              create: Callable[[], Any],
              update: Callable[[Dict[str, Any]], Any]) -> Any:
    """
    Create or update the resource named ``name``.

    Args:
        kind: Resource type, used in messages ("service", "api", ...)
        name: Natural key of the resource
        lookup: Returns every remote resource matching the key
        create: Creates the resource; called when nothing matches
        update: Updates the resource; called with the single match

    Returns:
        Whatever create or update returns

    Raises:
        AmbiguousResourceError: If two or more remote resources match
    """
    matches = lookup()
    if len(matches) > 1:
        raise AmbiguousResourceError(kind, name)

    if matches:
        logger.info(f"Found existing {kind} '{name}', updating")
        return update(matches[0])

    logger.info(f"No {kind} named '{name}' found, creating")
    return create()


def matching(items: List[Dict[str, Any]], key: str, name: str) -> List[Dict[str, Any]]:
    """Filter a listing down to the entries whose ``key`` equals ``name``."""
    return [item for item in items or [] if item.get(key) == name]


def lookup_one(get: Callable[[], Dict[str, Any]], not_found_code: str) -> List[Dict[str, Any]]:
    """
    Adapt a get-by-key call to the lookup contract of ``reconcile``.

    A ``not_found_code`` error means nothing matches. Any other error propagates.
    """
    try:
        return [get()]
    except TencentCloudSDKException as e:
        if e.code == not_found_code:
            return []
        raise
