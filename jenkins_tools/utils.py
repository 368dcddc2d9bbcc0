"""Utility functions for HTTP requests, subprocess calls, and common helpers."""

import os
import subprocess
import time
from typing import Optional

import requests


class ProvisionError(Exception):
    """Base exception for Jenkins Tools errors."""
    pass


class ConfigError(ProvisionError):
    """Exception raised for invalid configuration values."""
    pass


class HTTPError(ProvisionError):
    """Exception raised for HTTP errors."""
    pass


class CommandError(ProvisionError):
    """Exception raised when an external command fails."""
    pass


class ScriptError(ProvisionError):
    """Exception raised when a Groovy script fails on the Jenkins side."""

    def __init__(self, message: str, status_code: Optional[int] = None, output: str = ""):
        super().__init__(message)
        self.status_code = status_code
        self.output = output


class VerificationError(ProvisionError):
    """Exception raised when a post-configuration check fails."""
    pass


_TRUE_VALUES = ("1", "true", "yes", "on")
_FALSE_VALUES = ("0", "false", "no", "off", "")


def str_to_bool(value: str) -> bool:
    """
    Parse a boolean from an environment-style string.

    Args:
        value: String such as "true", "yes", "0"

    Returns:
        Parsed boolean

    Raises:
        ConfigError: If the value is not a recognized boolean
    """
    normalized = value.strip().lower()
    if normalized in _TRUE_VALUES:
        return True
    if normalized in _FALSE_VALUES:
        return False
    raise ConfigError(f"Invalid boolean value: {value!r}")


def split_list(value: str) -> list[str]:
    """Split a comma-separated string, dropping blanks."""
    return [item.strip() for item in value.split(",") if item.strip()]


def require_root() -> None:
    """
    Ensure the current process runs as root.

    Raises:
        ProvisionError: If not running as root
    """
    if os.geteuid() != 0:
        raise ProvisionError("This operation must be run as root (try sudo)")


def wait_for_http(url: str, timeout: int = 60, interval: int = 2) -> bool:
    """
    Wait for an HTTP endpoint to become available.

    A 403 counts as available: a secured Jenkins answers most pages that way.
    Proxy environment variables are ignored; the target is always local.

    Args:
        url: The URL to check
        timeout: Maximum time to wait in seconds (default: 60)
        interval: Time between checks in seconds (default: 2)

    Returns:
        True if endpoint becomes available, False if timeout
    """
    session = requests.Session()
    session.trust_env = False
    elapsed = 0
    try:
        while elapsed < timeout:
            try:
                response = session.get(url, timeout=5, allow_redirects=True)
                if response.status_code in (200, 403):
                    return True
            except requests.exceptions.RequestException:
                pass

            time.sleep(interval)
            elapsed += interval
    finally:
        session.close()

    return False


def http_get(url: str, timeout: int = 30, trust_env: bool = True) -> requests.Response:
    """
    Perform an HTTP GET request.

    Args:
        url: The URL to request
        timeout: Request timeout in seconds
        trust_env: Whether proxy environment variables are honoured

    Returns:
        The response object

    Raises:
        HTTPError: If the request fails at the transport level
    """
    session = requests.Session()
    session.trust_env = trust_env
    try:
        return session.get(url, timeout=timeout)
    except requests.exceptions.RequestException as e:
        raise HTTPError(f"GET request failed: {e}") from e
    finally:
        session.close()


def run_command(
    command: list[str],
    check: bool = True,
    input: Optional[str] = None,
    cwd: Optional[str] = None,
) -> subprocess.CompletedProcess:
    """
    Run an external command.

    Args:
        command: Command and arguments as list
        check: Whether to raise on non-zero exit
        input: Optional text piped to stdin
        cwd: Working directory

    Returns:
        CompletedProcess instance

    Raises:
        CommandError: If check=True and the command fails, or it cannot be started
    """
    try:
        result = subprocess.run(
            command,
            cwd=cwd,
            input=input,
            capture_output=True,
            text=True,
            check=False,
        )
    except (OSError, subprocess.SubprocessError) as e:
        raise CommandError(f"Failed to run {' '.join(command)}: {e}") from e

    if check and result.returncode != 0:
        stderr = result.stderr.strip() if result.stderr else ""
        raise CommandError(
            f"Command {' '.join(command)} failed (exit code {result.returncode}): {stderr}"
        )
    return result
