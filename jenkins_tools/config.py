"""Configuration management for Jenkins Tools."""

import os
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

from .utils import ConfigError, split_list, str_to_bool


class Config:
    """Configuration class for managing environment variables and paths."""

    def __init__(self, env_file: Optional[str] = None):
        """
        Initialize configuration.

        Args:
            env_file: Optional path to .env file.
        """
        self.package_dir = Path(__file__).parent.resolve()
        self.template_dir = self.package_dir / "templates"

        if env_file:
            load_dotenv(env_file)

    def _int(self, name: str, default: str) -> int:
        raw = os.getenv(name, default)
        try:
            return int(raw)
        except ValueError as e:
            raise ConfigError(f"{name} must be an integer, got {raw!r}") from e

    def _optional(self, name: str) -> Optional[str]:
        value = os.getenv(name, "").strip()
        return value or None

    @property
    def jenkins_home(self) -> Path:
        """Jenkins home directory."""
        return Path(os.getenv("JENKINS_HOME", "/var/lib/jenkins"))

    @property
    def jenkins_port(self) -> int:
        """Jenkins HTTP port."""
        return self._int("JENKINS_PORT", "8080")

    @property
    def jenkins_context_path(self) -> str:
        """Context path Jenkins is served under (e.g. "/jenkins"), empty for root."""
        path = os.getenv("JENKINS_CONTEXT_PATH", "").strip()
        if path and not path.startswith("/"):
            path = "/" + path
        return path.rstrip("/")

    @property
    def jenkins_admin_username(self) -> Optional[str]:
        """Jenkins admin username, if any."""
        return self._optional("JENKINS_ADMIN_USERNAME")

    @property
    def jenkins_admin_password(self) -> Optional[str]:
        """Jenkins admin password, if any."""
        return self._optional("JENKINS_ADMIN_PASSWORD")

    @property
    def jenkins_url_external(self) -> str:
        """External (public) Jenkins URL; empty to leave it unset."""
        return os.getenv("JENKINS_URL_EXTERNAL", "").strip()

    @property
    def http_proxy_server(self) -> str:
        """Proxy host Jenkins should use; empty for no proxy."""
        return os.getenv("JENKINS_HTTP_PROXY_SERVER", "").strip()

    @property
    def http_proxy_port(self) -> str:
        """Proxy port, kept as text so Jenkins can report a bad value."""
        return os.getenv("JENKINS_HTTP_PROXY_PORT", "").strip()

    @property
    def http_proxy_no_proxy_hosts(self) -> list[str]:
        """Hosts that bypass the proxy."""
        return split_list(os.getenv("JENKINS_HTTP_PROXY_NO_PROXY_HOSTS", ""))

    @property
    def plugins(self) -> list[str]:
        """Plugins to install."""
        return split_list(os.getenv("JENKINS_PLUGINS", ""))

    @property
    def plugins_update(self) -> bool:
        """Whether installed plugins should be updated too."""
        return str_to_bool(os.getenv("JENKINS_PLUGINS_UPDATE", "false"))

    @property
    def jenkins_user(self) -> str:
        """OS user owning the Jenkins home."""
        return os.getenv("JENKINS_USER", "jenkins")

    @property
    def jenkins_group(self) -> str:
        """OS group owning the Jenkins home."""
        return os.getenv("JENKINS_GROUP", "jenkins")

    @property
    def service_name(self) -> str:
        """systemd service name."""
        return os.getenv("JENKINS_SERVICE_NAME", "jenkins")

    @property
    def os_family(self) -> Optional[str]:
        """OS family override ("Debian" or "RedHat"); None to detect."""
        return self._optional("JENKINS_OS_FAMILY")

    @property
    def release_line(self) -> str:
        """Jenkins package repository line: "stable" or "weekly"."""
        line = os.getenv("JENKINS_RELEASE_LINE", "stable").strip().lower()
        if line not in ("stable", "weekly"):
            raise ConfigError(f"JENKINS_RELEASE_LINE must be 'stable' or 'weekly', got {line!r}")
        return line

    @property
    def java_package(self) -> Optional[str]:
        """Java package override; None for the OS family default."""
        return self._optional("JENKINS_JAVA_PACKAGE")

    @property
    def http_timeout(self) -> int:
        """Timeout for API requests, in seconds."""
        return self._int("JENKINS_HTTP_TIMEOUT", "30")

    @property
    def startup_timeout(self) -> int:
        """How long to wait for Jenkins to come up after a restart, in seconds."""
        return self._int("JENKINS_STARTUP_TIMEOUT", "300")

    @property
    def jenkins_url_local(self) -> str:
        """Jenkins URL over localhost; all API traffic goes through here."""
        return f"http://localhost:{self.jenkins_port}{self.jenkins_context_path}"

    @property
    def login_url(self) -> str:
        """Jenkins login page URL."""
        return f"{self.jenkins_url_local}/login"

    @property
    def config_xml_path(self) -> Path:
        """Path to Jenkins' persisted configuration file."""
        return self.jenkins_home / "config.xml"

    @property
    def init_script_dir(self) -> Path:
        """Post-initialization script directory."""
        return self.jenkins_home / "init.groovy.d"

    def get_template_path(self, template_name: str) -> Path:
        """
        Get path to a template file.

        Args:
            template_name: Template name relative to templates directory
                          (e.g., "groovy/misc-settings.groovy")

        Returns:
            Path to template file

        Raises:
            FileNotFoundError: If template doesn't exist
        """
        template_path = self.template_dir / template_name
        if not template_path.exists():
            raise FileNotFoundError(f"Template not found: {template_path}")
        return template_path


# Global config instance
_config: Optional[Config] = None


def get_config(env_file: Optional[str] = None) -> Config:
    """
    Get or create the global configuration instance.

    Args:
        env_file: Optional path to .env file

    Returns:
        Config instance
    """
    global _config
    if _config is None:
        _config = Config(env_file)
    return _config


def reset_config() -> None:
    """Reset the global configuration instance."""
    global _config
    _config = None
