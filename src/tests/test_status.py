import pytest

from scf_deploy.status import wait_for_function_active
from scf_utils.errors import ResourceNotReadyError

from conftest import scripted_client, params_of


def statuses(*values):
    return {"GetFunction": [{"Status": value} for value in values]}


class TestWaitForFunctionActive:
    """Polling a function until it leaves its transitional state."""

    def test_returns_once_active(self, no_sleep):
        client = scripted_client(statuses("Updating", "Updating", "Active"))

        status = wait_for_function_active(client, "demo", "hello", retries=200, interval=0.2)

        assert status == "Active"
        assert no_sleep == [0.2, 0.2]
        assert client.call_json.call_count == 3
        sent = params_of(client, "GetFunction")[0]
        assert (sent["FunctionName"], sent["Namespace"]) == ("hello", "demo")

    def test_does_not_wait_when_already_active(self, no_sleep):
        client = scripted_client(statuses("Active"))

        wait_for_function_active(client, "demo", "hello")

        assert no_sleep == []

    def test_gives_up_after_the_retry_budget_without_a_trailing_sleep(self, no_sleep):
        client = scripted_client(statuses(*["Updating"] * 8))

        with pytest.raises(ResourceNotReadyError) as excinfo:
            wait_for_function_active(client, "demo", "hello", retries=5, interval=0.2)

        assert excinfo.value.name == "hello"
        assert excinfo.value.status == "Updating"
        assert "hello" in str(excinfo.value)
        assert client.call_json.call_count == 5
        assert no_sleep == [0.2] * 4

    def test_other_states_are_transient(self, no_sleep):
        client = scripted_client(statuses("Creating", "Publishing", "Active"))

        assert wait_for_function_active(client, "demo", "hello", retries=3) == "Active"
        assert len(no_sleep) == 2
