import pytest
from unittest.mock import MagicMock

from tencentcloud.common.exception.tencent_cloud_sdk_exception import TencentCloudSDKException

from scf_utils.login import Clients


def sdk_error(code, message="error"):
    return TencentCloudSDKException(code, message, "test-request")


def scripted_client(responses=None):
    """
    Build a fake Tencent Cloud client whose call_json answers from a script.

    Each value in ``responses`` is a response body, an exception to raise, or
    a list of those consumed one call at a time. Unscripted actions answer
    with an empty body.
    """
    script = {
        action: list(value) if isinstance(value, list) else value
        for action, value in (responses or {}).items()
    }

    def call_json(action, params):
        answer = script.get(action, {})
        if isinstance(answer, list):
            answer = answer.pop(0)
        if isinstance(answer, Exception):
            raise answer
        return {"Response": dict(answer, RequestId="test-request")}

    client = MagicMock()
    client.call_json.side_effect = call_json
    return client


def actions(client):
    """Names of the actions sent through a scripted client, in order."""
    return [c.args[0] for c in client.call_json.call_args_list]


def params_of(client, action):
    """Parameters of every call of ``action`` sent through a scripted client."""
    return [c.args[1] for c in client.call_json.call_args_list if c.args[0] == action]


def make_clients(scf=None, scf_ext=None, api=None):
    return Clients(
        scf=scripted_client(scf),
        scf_ext=scripted_client(scf_ext),
        api=scripted_client(api),
    )


@pytest.fixture(autouse=True)
def no_sleep(monkeypatch):
    """Replace time.sleep with a recorder so polling and retries run instantly."""
    sleeps = []
    monkeypatch.setattr("time.sleep", lambda seconds: sleeps.append(seconds))
    return sleeps


@pytest.fixture
def adapter_dict():
    return {
        "namespace": {"name": "demo"},
        "function": {
            "name": "hello",
            "runtime": "Python3.9",
            "handler": "index.handler",
            "memorySize": 128,
            "timeout": 15,
        },
        "alias": {"name": "live"},
    }
