import pytest

from scf_utils.spinner import Progress, spinner


class TestProgress:
    """Every step ends with exactly one terminal line."""

    def test_success_line(self, capsys):
        assert spinner("Create demo namespace", lambda: 42) == 42

        out = capsys.readouterr().out
        assert "- Create demo namespace..." in out
        assert "✅ Create demo namespace" in out
        assert "❌" not in out

    def test_step_can_override_success_text(self, capsys):
        with Progress("Publish Version") as progress:
            progress.success_text = "Publish Version 3"

        assert "✅ Publish Version 3" in capsys.readouterr().out
        assert progress.state == "succeeded"

    def test_failure_is_reported_and_reraised(self, capsys):
        def boom():
            raise RuntimeError("remote refused")

        with pytest.raises(RuntimeError):
            spinner("Update demo service", boom)

        out = capsys.readouterr().out
        assert "❌ Update demo service: remote refused" in out
        assert "✅" not in out

    def test_fail_text(self, capsys):
        with pytest.raises(ValueError):
            with Progress("Release test environment", fail_text="Release failed") as progress:
                raise ValueError("bad")

        assert progress.state == "failed"
        assert "❌ Release failed: bad" in capsys.readouterr().out
