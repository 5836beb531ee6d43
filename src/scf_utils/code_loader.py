#!/usr/bin/env python3
"""
Package function code for upload to SCF.
"""

import io
import logging
import os
import zipfile
from pathlib import Path

from scf_utils.errors import ConfigurationError

logger = logging.getLogger(__name__)


class CodeLoader:
    """Zip the directory named by the deploy context into an in-memory archive."""

    def load(self, context, adapter_config) -> bytes:
        code_dir = Path(context.code_dir)
        if not code_dir.is_dir():
            raise ConfigurationError(f"Code directory not found: {code_dir}")

        buffer = io.BytesIO()
        count = 0
        with zipfile.ZipFile(buffer, 'w', compression=zipfile.ZIP_DEFLATED) as z:
            for root, _dirs, files in os.walk(code_dir):
                for name in sorted(files):
                    src = Path(root) / name
                    z.write(src, arcname=src.relative_to(code_dir).as_posix())
                    count += 1

        logger.info(f"Packaged {count} files from {code_dir} for function {adapter_config.function.name}")
        return buffer.getvalue()
