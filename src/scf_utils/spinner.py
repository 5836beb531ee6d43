#!/usr/bin/env python3
"""
Progress reporting for deployment steps.

Each step prints a start line and always ends with exactly one terminal
line, either succeeded or failed. Errors are re-raised after the failure
line is printed.
"""

import logging
from typing import Any, Callable, Optional

logger = logging.getLogger(__name__)

SUCCEED_MARK = "✅"
FAIL_MARK = "❌"


class Progress:
    """
    Scoped status indicator for one deployment step.

    Usage:
        with Progress("Create demo namespace") as progress:
            ...
            progress.success_text = "Created demo namespace"
    """

    def __init__(self, text: str, success_text: Optional[str] = None, fail_text: Optional[str] = None):
        self.text = text
        self.success_text = success_text
        self.fail_text = fail_text
        self.state = None

    def start(self):
        self.state = "running"
        logger.debug(f"Started: {self.text}")
        print(f"  - {self.text}...", flush=True)

    def succeed(self, text: Optional[str] = None):
        self.state = "succeeded"
        message = text or self.success_text or self.text
        logger.info(message)
        print(f"  {SUCCEED_MARK} {message}", flush=True)

    def fail(self, text: Optional[str] = None, error: Optional[BaseException] = None):
        self.state = "failed"
        message = text or self.fail_text or self.text
        if error is not None:
            logger.error(f"{message}: {error}")
            print(f"  {FAIL_MARK} {message}: {error}", flush=True)
        else:
            logger.error(message)
            print(f"  {FAIL_MARK} {message}", flush=True)

    def __enter__(self) -> "Progress":
        self.start()
        return self

    def __exit__(self, exc_type, exc, tb) -> bool:
        if exc is None:
            self.succeed()
        else:
            self.fail(error=exc)
        return False


def spinner(text: str, action: Callable[[], Any], success_text: Optional[str] = None,
            fail_text: Optional[str] = None) -> Any:
    """
    Run a deployment step inside a Progress scope.

    Args:
        text: Label shown while the step runs
        action: Callable performing the step
        success_text: Label shown on success (defaults to text)
        fail_text: Label shown on failure (defaults to text)

    Returns:
        Whatever action returns
    """
    with Progress(text, success_text, fail_text):
        return action()
