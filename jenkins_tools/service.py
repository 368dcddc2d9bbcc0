"""systemd service control and deferred restart handling."""

from .config import Config
from .utils import ProvisionError, run_command, wait_for_http


class ServiceManager:
    """Thin wrapper over systemctl for a single unit."""

    def __init__(self, name: str):
        self.name = name

    def is_active(self) -> bool:
        result = run_command(["systemctl", "is-active", "--quiet", self.name], check=False)
        return result.returncode == 0

    def is_enabled(self) -> bool:
        result = run_command(["systemctl", "is-enabled", "--quiet", self.name], check=False)
        return result.returncode == 0

    def ensure_started_enabled(self) -> bool:
        """
        Make sure the service is running and starts at boot.

        Returns:
            True if the service had to be started or enabled
        """
        changed = False
        if not self.is_enabled():
            print(f"Enabling service '{self.name}'...")
            run_command(["systemctl", "enable", self.name])
            changed = True
        if not self.is_active():
            print(f"Starting service '{self.name}'...")
            run_command(["systemctl", "start", self.name])
            changed = True
        return changed

    def restart(self) -> None:
        print(f"Restarting service '{self.name}'...")
        run_command(["systemctl", "restart", self.name])

    def daemon_reload(self) -> None:
        run_command(["systemctl", "daemon-reload"])


class Handlers:
    """
    Deferred restart: steps notify, and the restart happens once at flush time.
    """

    def __init__(self, config: Config, service: ServiceManager):
        self.config = config
        self.service = service
        self.restart_pending = False

    def notify_restart(self) -> None:
        self.restart_pending = True

    def flush(self) -> bool:
        """
        Run a pending restart and wait for Jenkins to answer again.

        Returns:
            True if a restart was performed

        Raises:
            ProvisionError: If Jenkins does not come back within the startup timeout
        """
        if not self.restart_pending:
            return False

        self.service.restart()
        print(f"Waiting for Jenkins to become ready at {self.config.login_url} ...")
        if not wait_for_http(self.config.login_url, timeout=self.config.startup_timeout):
            raise ProvisionError(
                f"Timeout waiting for Jenkins after restart ({self.config.startup_timeout}s)"
            )
        self.restart_pending = False
        print(f"✅ Service '{self.service.name}' restarted")
        return True
