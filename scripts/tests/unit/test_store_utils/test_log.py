"""Tests for the accounts file logger."""

from store_utils import log


class TestStoreLog:
    def test_first_message_starts_session(self, isolated_log):
        log.store_log("hello")
        lines = isolated_log.read_text().splitlines()
        assert "--- New Accounts Session ---" in lines[0]
        assert lines[-1].endswith("] hello")

    def test_disabled(self, isolated_log, monkeypatch):
        monkeypatch.setattr(log, "LOG", False)
        log.store_log("hello")
        assert not isolated_log.exists()

    def test_stderr_copy(self, isolated_log, monkeypatch, capsys):
        monkeypatch.setattr(log, "LOG_TO_STDERR", True)
        log.store_log("hello")
        assert "hello" in capsys.readouterr().err

    def test_print_and_clear(self, isolated_log, capsys):
        log.store_log_print()
        assert "does not exist" in capsys.readouterr().out
        log.store_log("hello")
        log.store_log_print()
        assert "hello" in capsys.readouterr().out
        log.store_log_clear()
        assert not isolated_log.exists()

    def test_record_save_is_logged(self, users, isolated_log):
        users.directory().create_record({"email": "a@example.com"}, "alice").save()
        assert "Saved users record 'alice'" in isolated_log.read_text()

    def test_creates_missing_log_folder(self, tmp_path, monkeypatch):
        target = tmp_path / "deep" / "nested" / "accounts.log"
        monkeypatch.setattr(log.conf, "LOG_FILE", target)
        log.store_log("hello")
        assert target.read_text().count("--- New Accounts Session ---") == 1
        assert target.read_text().rstrip().endswith("] hello")
