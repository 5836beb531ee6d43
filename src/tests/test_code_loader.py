import io
import zipfile
from types import SimpleNamespace

import pytest

from scf_deploy.adapter_config import AdapterConfig
from scf_utils.code_loader import CodeLoader
from scf_utils.errors import ConfigurationError


def test_zips_code_directory(tmp_path, adapter_dict):
    (tmp_path / "index.py").write_text("def handler(event, context):\n    return 'ok'\n")
    (tmp_path / "lib").mkdir()
    (tmp_path / "lib" / "util.py").write_text("X = 1\n")

    archive = CodeLoader().load(SimpleNamespace(code_dir=str(tmp_path)), AdapterConfig.from_dict(adapter_dict))

    with zipfile.ZipFile(io.BytesIO(archive)) as z:
        assert sorted(z.namelist()) == ["index.py", "lib/util.py"]
        assert z.read("lib/util.py") == b"X = 1\n"


def test_missing_code_directory(tmp_path, adapter_dict):
    with pytest.raises(ConfigurationError):
        CodeLoader().load(SimpleNamespace(code_dir=str(tmp_path / "dist")), AdapterConfig.from_dict(adapter_dict))
