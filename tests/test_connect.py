"""Tests for session workflows.

screen is never run: listing, starting and attaching are mocked, while
host and label storage use a temporary config directory.
"""

import io
from unittest.mock import patch

import pytest

from schh.config import Host, get_last_label, load_hosts, set_last_label
from schh.connect import (
    ConnectError,
    add_host_entry,
    attach_last_session,
    print_host_sessions,
    print_hosts,
    remove_host_entry,
    resolve_host,
    run_interactive,
    run_named_session,
)
from schh.session import SessionInfo

WEB1 = Host("web1", "deploy@web1.example.com")


@pytest.fixture
def config_dir(tmp_path, monkeypatch):
    """Point the config directory at a temporary location."""
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path))
    return tmp_path / "schh"


@pytest.fixture
def mock_screen():
    """Mock all screen interactions used by the workflows."""
    with (
        patch("schh.connect.list_sessions") as list_mock,
        patch("schh.connect.start_detached_session") as start_mock,
        patch("schh.connect.attach_session") as attach_mock,
    ):
        list_mock.return_value = []
        yield list_mock, start_mock, attach_mock


class TestResolveHost:
    def test_configured_host(self, config_dir):
        add_host_entry("web1", "deploy@web1.example.com")

        assert resolve_host("web1") == WEB1

    def test_unknown_host(self, config_dir):
        """Test that the error suggests how to add the host."""
        with pytest.raises(ConnectError, match="schh host add web9"):
            resolve_host("web9")


class TestNamedSession:
    """Test `schh HOST NAME`."""

    def test_starts_missing_session_and_attaches(self, config_dir, mock_screen):
        """Test that a new name is canonicalized, started, remembered, attached."""
        list_mock, start_mock, attach_mock = mock_screen

        run_named_session(WEB1, "Deploy.Prod")

        start_mock.assert_called_once_with(
            "schh_web1_deploy-prod", "deploy@web1.example.com"
        )
        attach_mock.assert_called_once_with("schh_web1_deploy-prod")
        assert get_last_label("web1") == "deploy-prod"

    def test_existing_session_is_not_restarted(self, config_dir, mock_screen):
        list_mock, start_mock, attach_mock = mock_screen
        list_mock.return_value = [
            SessionInfo(id="4242.schh_web1_alpha", label="alpha")
        ]

        run_named_session(WEB1, "alpha")

        start_mock.assert_not_called()
        attach_mock.assert_called_once_with("schh_web1_alpha")

    def test_invalid_name(self, config_dir, mock_screen):
        _, start_mock, attach_mock = mock_screen

        with pytest.raises(ConnectError, match="Invalid session name"):
            run_named_session(WEB1, "???")

        start_mock.assert_not_called()
        attach_mock.assert_not_called()

    def test_label_write_failure_is_only_a_warning(
        self, config_dir, mock_screen, capsys
    ):
        """Test that failing to remember the label does not stop the attach."""
        _, _, attach_mock = mock_screen

        with patch("schh.connect.set_last_label", side_effect=OSError("read-only")):
            run_named_session(WEB1, "alpha")

        attach_mock.assert_called_once_with("schh_web1_alpha")
        assert "Warning" in capsys.readouterr().out


class TestLastSession:
    """Test `schh HOST --last`."""

    def test_reattaches_stored_label(self, config_dir, mock_screen):
        list_mock, start_mock, attach_mock = mock_screen
        set_last_label("web1", "alpha")
        list_mock.return_value = [
            SessionInfo(id="4242.schh_web1_alpha", label="alpha")
        ]

        attach_last_session(WEB1)

        start_mock.assert_not_called()
        attach_mock.assert_called_once_with("schh_web1_alpha")

    def test_restarts_stored_label_when_gone(self, config_dir, mock_screen):
        _, start_mock, attach_mock = mock_screen
        set_last_label("web1", "alpha")

        attach_last_session(WEB1)

        start_mock.assert_called_once_with("schh_web1_alpha", WEB1.target)
        attach_mock.assert_called_once_with("schh_web1_alpha")

    def test_nothing_stored(self, config_dir, mock_screen):
        with pytest.raises(ConnectError, match="No recent session"):
            attach_last_session(WEB1)


class TestInteractive:
    """Test the interactive flow with scripted input."""

    def test_cancel_does_nothing(self, config_dir, mock_screen):
        list_mock, start_mock, attach_mock = mock_screen
        list_mock.return_value = [SessionInfo(id="1.schh_web1_a", label="a")]

        run_interactive(WEB1, io.StringIO("q\n"), io.StringIO())

        start_mock.assert_not_called()
        attach_mock.assert_not_called()

    def test_attach_existing(self, config_dir, mock_screen):
        """Test attaching by pid.name and remembering the label."""
        list_mock, start_mock, attach_mock = mock_screen
        list_mock.return_value = [
            SessionInfo(id="1.schh_web1_a", label="a"),
            SessionInfo(id="2.schh_web1_b", label="b"),
        ]

        run_interactive(WEB1, io.StringIO("2\n"), io.StringIO())

        start_mock.assert_not_called()
        attach_mock.assert_called_once_with("2.schh_web1_b")
        assert get_last_label("web1") == "b"

    def test_create_typed_name(self, config_dir, mock_screen):
        """Test that a typed name is canonicalized when the id is built."""
        _, start_mock, attach_mock = mock_screen

        run_interactive(WEB1, io.StringIO("Nightly Build\n"), io.StringIO())

        start_mock.assert_called_once_with("schh_web1_nightlybuild", WEB1.target)
        attach_mock.assert_called_once_with("schh_web1_nightlybuild")
        assert get_last_label("web1") == "nightlybuild"

    def test_lists_sessions_once(self, config_dir, mock_screen):
        """Test that the listing is reused to decide whether to start."""
        list_mock, start_mock, _ = mock_screen
        list_mock.return_value = [SessionInfo(id="1.schh_web1_a", label="a")]

        run_interactive(WEB1, io.StringIO("2\nq\n2\na\n"), io.StringIO())

        list_mock.assert_called_once_with("web1")
        start_mock.assert_not_called()

    def test_create_invalid_name(self, config_dir, mock_screen):
        with pytest.raises(ConnectError, match="Invalid session name"):
            run_interactive(WEB1, io.StringIO("!!!\n"), io.StringIO())


class TestSessionListing:
    """Test `schh HOST --list` output."""

    def test_marks_last_used(self, config_dir, mock_screen, capsys):
        list_mock, _, _ = mock_screen
        list_mock.return_value = [
            SessionInfo(id="1.schh_web1_a", label="a"),
            SessionInfo(id="2.schh_web1_b", label="b"),
        ]
        set_last_label("web1", "b")

        print_host_sessions(WEB1)

        out = capsys.readouterr().out
        assert "Active sessions for web1:" in out
        assert "  - a\n" in out
        assert "  - b  (last used)" in out

    def test_no_sessions(self, config_dir, mock_screen, capsys):
        print_host_sessions(WEB1)

        assert "(none)" in capsys.readouterr().out


class TestHostEntries:
    """Test host management workflows."""

    def test_add_defaults_target_to_name(self, config_dir):
        host = add_host_entry("bastion")

        assert host == Host("bastion", "bastion")
        assert load_hosts() == [host]

    @pytest.mark.parametrize("name,target", [("my host", ""), ("web1", "a b")])
    def test_add_rejects_whitespace(self, config_dir, name, target):
        with pytest.raises(ConnectError, match="cannot contain spaces"):
            add_host_entry(name, target)

    def test_remove_clears_label(self, config_dir):
        add_host_entry("web1")
        set_last_label("web1", "alpha")

        assert remove_host_entry("web1") is True
        assert load_hosts() == []

    def test_remove_without_label(self, config_dir):
        add_host_entry("web1")

        assert remove_host_entry("web1") is False

    def test_print_hosts(self, config_dir, capsys):
        add_host_entry("web1", "deploy@web1.example.com")
        add_host_entry("db")

        print_hosts()

        out = capsys.readouterr().out
        assert "web1 -> deploy@web1.example.com" in out
        assert "  - db\n" in out

    def test_print_no_hosts(self, config_dir, capsys):
        print_hosts()

        assert "No hosts configured" in capsys.readouterr().out
