from unittest.mock import MagicMock

import pytest

from jenkins_tools import directories, health, packages, provision, service
from jenkins_tools.config import Config
from jenkins_tools.script_console import ScriptResult
from jenkins_tools.security import SecuritySettings
from jenkins_tools.utils import ProvisionError, VerificationError


class FakeConsole:
    """Records scripts; reports a change for the miscellaneous settings script only."""

    def __init__(self, connection):
        self.connection = connection
        self.scripts = []

    def run(self, script, args=None):
        self.scripts.append(script)
        changed = "slaveAgentPort" in script
        return ScriptResult("Changed: agent port configuration.\n" if changed else "", changed)

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return None


@pytest.fixture
def host(monkeypatch):
    """Stub out everything that touches the machine."""
    state = MagicMock()
    state.consoles = []
    state.settings = SecuritySettings("hudson.security.HudsonPrivateSecurityRealm", True)

    def fake_install(config, handlers):
        handlers.notify_restart()
        return True

    def from_connection(connection, timeout=30):
        console = FakeConsole(connection)
        state.consoles.append(console)
        return console

    monkeypatch.setattr(provision, "require_root", lambda: None)
    monkeypatch.setattr(packages, "install_packages", fake_install)
    monkeypatch.setattr(directories, "ensure_directory", lambda path, owner, group, mode: False)
    monkeypatch.setattr(provision, "detect_security", lambda config: state.settings)
    monkeypatch.setattr(provision.ScriptConsole, "from_connection", staticmethod(from_connection))
    monkeypatch.setattr(provision, "ServiceManager", lambda name: state.service)
    monkeypatch.setattr(service, "wait_for_http", lambda url, timeout: True)
    monkeypatch.setattr(health, "verify_web_ui", state.verify)
    state.service.ensure_started_enabled.return_value = False
    return state


def test_full_run(host, monkeypatch):
    monkeypatch.setenv("JENKINS_ADMIN_USERNAME", "admin")
    monkeypatch.setenv("JENKINS_ADMIN_PASSWORD", "s3cret")

    report = provision.provision(Config())

    assert [step.name for step in report.steps] == [
        "Install packages",
        "Create Jenkins home",
        "Flush handlers",
        "Create Jenkins init script directory",
        "Install plugins",
        "Configure Jenkins (miscellaneous settings)",
        "Configure security recommendations",
        "Flush handlers",
        "Ensure service is running",
        "Verify Jenkins web UI",
    ]
    assert [step.changed for step in report.steps] == [
        True, False, True, False, False, True, False, False, False, False,
    ]
    assert report.changed_count == 3
    host.service.restart.assert_called_once_with()
    host.verify.assert_called_once()

    (console,) = host.consoles
    assert console.connection.username == "admin"
    assert console.connection.password == "s3cret"
    assert "JenkinsLocationConfiguration" in console.scripts[0]
    assert "DefaultCrumbIssuer" in console.scripts[1]


def test_anonymous_before_security_is_enabled(host, monkeypatch):
    monkeypatch.setenv("JENKINS_ADMIN_USERNAME", "admin")
    host.settings = SecuritySettings("hudson.security.SecurityRealm$None", False)

    report = provision.provision(Config(), skip_packages=True, skip_plugins=True)

    assert report.connection.anonymous
    assert host.consoles[0].connection.username is None
    assert "Install packages" not in [step.name for step in report.steps]
    assert "Install plugins" not in [step.name for step in report.steps]
    host.service.restart.assert_not_called()


def test_missing_config_stops_the_run(host, monkeypatch):
    def missing(config):
        raise ProvisionError("Jenkins config file not found")

    monkeypatch.setattr(provision, "detect_security", missing)

    with pytest.raises(ProvisionError, match="not found"):
        provision.provision(Config())
    assert host.consoles == []


def test_failed_verification_propagates(host):
    host.verify.side_effect = VerificationError("does not contain 'Jenkins'")
    with pytest.raises(VerificationError):
        provision.provision(Config(), skip_packages=True)
