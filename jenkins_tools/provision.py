"""Full provisioning run: install, detect security, configure, verify."""

from dataclasses import dataclass, field
from typing import Optional

from . import directories, health, packages, plugins
from .config import Config, get_config
from .groovy import misc_settings_script, security_recommendations_script
from .script_console import ScriptConsole
from .security import ApiConnection, SecuritySettings, connection_for, detect_security
from .service import Handlers, ServiceManager
from .utils import require_root


@dataclass(frozen=True)
class StepResult:
    name: str
    changed: bool


@dataclass
class RunReport:
    """Outcome of a provisioning run."""

    steps: list[StepResult] = field(default_factory=list)
    security_settings: Optional[SecuritySettings] = None
    connection: Optional[ApiConnection] = None

    @property
    def changed_count(self) -> int:
        return sum(1 for step in self.steps if step.changed)

    def record(self, name: str, changed: bool) -> None:
        self.steps.append(StepResult(name, changed))
        print(f"{'changed' if changed else 'ok'}: {name}")


def _run_script(console: ScriptConsole, name: str, script: str) -> bool:
    print(f"\n▶ {name}")
    result = console.run(script)
    if result.output.strip():
        print(result.output.rstrip())
    return result.changed


def provision(
    config: Optional[Config] = None,
    skip_packages: bool = False,
    skip_plugins: bool = False,
) -> RunReport:
    """
    Install and configure Jenkins on this machine.

    Steps run in a fixed order and stop at the first failure:
    1. Install OS packages
    2. Create the Jenkins home
    3. Run pending restarts so config.xml exists
    4. Detect security settings and pick anonymous or admin API access
    5. Create the init script directory
    6. Install plugins
    7. Apply miscellaneous settings and security recommendations
    8. Run pending restarts, ensure the service is running
    9. Verify the login page

    Args:
        config: Config instance
        skip_packages: Skip OS package installation
        skip_plugins: Skip plugin installation

    Returns:
        RunReport with per-step change status

    Raises:
        ProvisionError: On the first failing step
    """
    config = config or get_config()
    require_root()

    report = RunReport()
    service = ServiceManager(config.service_name)
    handlers = Handlers(config, service)

    if not skip_packages:
        report.record("Install packages", packages.install_packages(config, handlers))

    report.record(
        "Create Jenkins home",
        directories.ensure_directory(
            config.jenkins_home, config.jenkins_user, config.jenkins_group, 0o755
        ),
    )

    report.record("Flush handlers", handlers.flush())

    settings = detect_security(config)
    connection = connection_for(config, settings)
    report.security_settings = settings
    report.connection = connection
    print(
        f"Security realm: {settings.security_realm or 'none'}, "
        f"security enabled: {settings.security_enabled}, "
        f"API access: {'anonymous' if connection.anonymous else connection.username}"
    )

    report.record(
        "Create Jenkins init script directory",
        directories.ensure_directory(
            config.init_script_dir, config.jenkins_user, config.jenkins_group, 0o755
        ),
    )

    with ScriptConsole.from_connection(connection, timeout=config.http_timeout) as console:
        if not skip_plugins:
            report.record("Install plugins", plugins.install_plugins(console, config, handlers))

        report.record(
            "Configure Jenkins (miscellaneous settings)",
            _run_script(console, "Miscellaneous settings", misc_settings_script(config)),
        )
        report.record(
            "Configure security recommendations",
            _run_script(
                console, "Security recommendations", security_recommendations_script(config)
            ),
        )

    report.record("Flush handlers", handlers.flush())
    report.record("Ensure service is running", service.ensure_started_enabled())

    health.verify_web_ui(config)
    report.record("Verify Jenkins web UI", False)

    print(f"\n✅ Jenkins provisioned ({report.changed_count} changed, {len(report.steps)} steps)")
    return report
