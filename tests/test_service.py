import subprocess
from unittest.mock import MagicMock

import pytest

from jenkins_tools import service
from jenkins_tools.config import Config
from jenkins_tools.service import Handlers, ServiceManager
from jenkins_tools.utils import ProvisionError


def systemctl(monkeypatch, active, enabled):
    calls = []

    def fake_run(command, check=True, input=None, cwd=None):
        calls.append(command)
        status = {"is-active": active, "is-enabled": enabled}.get(command[1], True)
        return subprocess.CompletedProcess(command, 0 if status else 3, "", "")

    monkeypatch.setattr(service, "run_command", fake_run)
    return calls


def test_starts_and_enables_stopped_service(monkeypatch):
    calls = systemctl(monkeypatch, active=False, enabled=False)
    assert ServiceManager("jenkins").ensure_started_enabled() is True
    assert ["systemctl", "enable", "jenkins"] in calls
    assert ["systemctl", "start", "jenkins"] in calls


def test_running_service_is_unchanged(monkeypatch):
    calls = systemctl(monkeypatch, active=True, enabled=True)
    assert ServiceManager("jenkins").ensure_started_enabled() is False
    assert [c[1] for c in calls] == ["is-enabled", "is-active"]


def test_flush_without_pending_restart():
    manager = MagicMock()
    handlers = Handlers(Config(), manager)
    assert handlers.flush() is False
    manager.restart.assert_not_called()


def test_flush_restarts_and_waits(monkeypatch):
    waited = []
    monkeypatch.setattr(service, "wait_for_http", lambda url, timeout: waited.append((url, timeout)) or True)
    manager = MagicMock()
    handlers = Handlers(Config(), manager)

    handlers.notify_restart()
    handlers.notify_restart()

    assert handlers.flush() is True
    manager.restart.assert_called_once_with()
    assert waited == [("http://localhost:8080/login", 300)]
    assert handlers.restart_pending is False
    assert handlers.flush() is False


def test_flush_timeout(monkeypatch):
    monkeypatch.setenv("JENKINS_STARTUP_TIMEOUT", "5")
    monkeypatch.setattr(service, "wait_for_http", lambda url, timeout: False)
    handlers = Handlers(Config(), MagicMock())
    handlers.notify_restart()
    with pytest.raises(ProvisionError, match="5s"):
        handlers.flush()
    assert handlers.restart_pending is True
