#!/usr/bin/env python3
"""
Wait for a function to finish a state transition.
"""

import logging
import time
from typing import Any, Dict

from scf_deploy.models import build, scf
from scf_deploy.reconcile import call
from scf_utils.config import STATUS_POLL_INTERVAL, STATUS_POLL_RETRIES
from scf_utils.errors import ResourceNotReadyError

logger = logging.getLogger(__name__)

ACTIVE = "Active"


def get_function(client, namespace: str, function_name: str) -> Dict[str, Any]:
    return call(client, build(scf.GetFunctionRequest, FunctionName=function_name, Namespace=namespace))


def wait_for_function_active(client, namespace: str, function_name: str,
                             retries: int = None, interval: float = None) -> str:
    """
    Poll a function until its status is Active.

    SCF rejects version publishing, configuration updates and alias changes
    while a function is Updating, so callers wait here first.

    Args:
        client: ScfClient
        namespace: Namespace of the function
        function_name: Name of the function
        retries: Maximum number of status checks
        interval: Seconds to sleep between checks

    Returns:
        str: The final status

    Raises:
        ResourceNotReadyError: If the function is not Active after ``retries`` checks
    """
    retries = STATUS_POLL_RETRIES if retries is None else retries
    interval = STATUS_POLL_INTERVAL if interval is None else interval

    status = None
    for attempt in range(retries):
        status = get_function(client, namespace, function_name).get("Status")
        if status == ACTIVE:
            return status
        logger.debug(f"Function {function_name} is {status} (check {attempt + 1}/{retries})")
        if attempt + 1 < retries:
            time.sleep(interval)

    raise ResourceNotReadyError(function_name, status)
