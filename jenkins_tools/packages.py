"""OS package installation: Jenkins repository, Java, and Jenkins itself."""

from pathlib import Path
from string import Template
from typing import Optional

import requests

from .config import Config, get_config
from .service import Handlers, ServiceManager
from .utils import HTTPError, ProvisionError, run_command

OS_RELEASE = Path("/etc/os-release")

DEBIAN_KEYRING = Path("/usr/share/keyrings/jenkins-keyring.asc")
DEBIAN_SOURCES = Path("/etc/apt/sources.list.d/jenkins.list")
REDHAT_REPO = Path("/etc/yum.repos.d/jenkins.repo")
SYSTEMD_DIR = Path("/etc/systemd/system")

DEFAULT_JAVA_PACKAGES = {
    "Debian": "openjdk-17-jre-headless",
    "RedHat": "java-17-openjdk-headless",
}

_FAMILY_IDS = {
    "debian": "Debian",
    "ubuntu": "Debian",
    "rhel": "RedHat",
    "centos": "RedHat",
    "fedora": "RedHat",
    "rocky": "RedHat",
    "almalinux": "RedHat",
}


def parse_os_release(text: str) -> dict[str, str]:
    """Parse /etc/os-release style KEY=value lines."""
    values = {}
    for line in text.splitlines():
        line = line.strip()
        if line and not line.startswith("#") and "=" in line:
            key, value = line.split("=", 1)
            values[key.strip()] = value.strip().strip("\"'")
    return values


def detect_os_family(config: Optional[Config] = None, os_release: Path = OS_RELEASE) -> str:
    """
    Determine the OS family ("Debian" or "RedHat").

    Args:
        config: Config instance; JENKINS_OS_FAMILY takes precedence
        os_release: Path to the os-release file

    Returns:
        OS family name

    Raises:
        ProvisionError: If the family cannot be determined or is unsupported
    """
    config = config or get_config()
    if config.os_family:
        if config.os_family not in DEFAULT_JAVA_PACKAGES:
            raise ProvisionError(f"Unsupported OS family: {config.os_family}")
        return config.os_family

    if not os_release.exists():
        raise ProvisionError(f"Cannot detect OS family: {os_release} not found")

    info = parse_os_release(os_release.read_text())
    candidates = [info.get("ID", "")] + info.get("ID_LIKE", "").split()
    for candidate in candidates:
        family = _FAMILY_IDS.get(candidate.lower())
        if family:
            return family

    raise ProvisionError(f"Unsupported OS: {info.get('PRETTY_NAME', info.get('ID', 'unknown'))}")


def repo_urls(family: str, release_line: str) -> tuple[str, str]:
    """Return (repository URL, signing key URL) for a family and release line."""
    base = "debian" if family == "Debian" else "redhat"
    suffix = "-stable" if release_line == "stable" else ""
    repo_url = f"https://pkg.jenkins.io/{base}{suffix}"
    return repo_url, f"{repo_url}/jenkins.io-2023.key"


def write_if_changed(path: Path, content: str, mode: int = 0o644) -> bool:
    """
    Write a file only when its content differs.

    Returns:
        True if the file was written
    """
    if path.exists() and path.read_text() == content:
        return False
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content)
    path.chmod(mode)
    print(f"Wrote {path}")
    return True


def _render(config: Config, template_name: str, **values) -> str:
    with open(config.get_template_path(template_name)) as f:
        template = Template(f.read())
    return template.substitute(**values)


def _download(url: str, timeout: int) -> str:
    try:
        response = requests.get(url, timeout=timeout)
        response.raise_for_status()
    except requests.exceptions.RequestException as e:
        raise HTTPError(f"Failed to download {url}: {e}") from e
    return response.text


def is_installed(family: str, package: str) -> bool:
    """Whether an OS package is installed."""
    if family == "Debian":
        result = run_command(
            ["dpkg-query", "-W", "-f=${Status}", package], check=False
        )
        return result.returncode == 0 and "install ok installed" in result.stdout
    result = run_command(["rpm", "-q", package], check=False)
    return result.returncode == 0


def _configure_debian_repo(config: Config) -> bool:
    repo_url, key_url = repo_urls("Debian", config.release_line)
    changed = write_if_changed(DEBIAN_KEYRING, _download(key_url, config.http_timeout))
    changed |= write_if_changed(
        DEBIAN_SOURCES,
        _render(config, "repos/jenkins.list", keyring=DEBIAN_KEYRING, repo_url=repo_url),
    )
    if changed:
        print("Updating apt package index...")
        run_command(["apt-get", "update"])
    return changed


def _configure_redhat_repo(config: Config) -> bool:
    repo_url, key_url = repo_urls("RedHat", config.release_line)
    changed = write_if_changed(
        REDHAT_REPO,
        _render(
            config,
            "repos/jenkins.repo",
            release_line=config.release_line,
            repo_url=repo_url,
            key_url=key_url,
        ),
    )
    if changed:
        run_command(["rpm", "--import", key_url])
    return changed


def install_packages(config: Optional[Config] = None, handlers: Optional[Handlers] = None) -> bool:
    """
    Install Java and Jenkins from the Jenkins package repository.

    Args:
        config: Config instance
        handlers: Restart handlers to notify when something was installed

    Returns:
        True if anything changed

    Raises:
        ProvisionError: If the OS is unsupported or a package command fails
    """
    config = config or get_config()
    family = detect_os_family(config)
    print(f"Installing Jenkins packages for OS family {family} ({config.release_line})...")

    if family == "Debian":
        changed = _configure_debian_repo(config)
        install_cmd = ["apt-get", "install", "-y", "--no-install-recommends"]
    else:
        changed = _configure_redhat_repo(config)
        install_cmd = ["yum", "install", "-y"]

    java_package = config.java_package or DEFAULT_JAVA_PACKAGES[family]
    missing = [
        package
        for package in (java_package, "fontconfig", "jenkins")
        if not is_installed(family, package)
    ]
    if missing:
        print(f"Installing {', '.join(missing)}...")
        run_command(install_cmd + missing)
        changed = True
        if handlers:
            handlers.notify_restart()

    if configure_service(config, handlers):
        changed = True

    if changed:
        print("✅ Jenkins packages installed")
    return changed


def service_override(config: Config) -> str:
    """Render the systemd drop-in for home, port and context path."""
    content = _render(
        config,
        "systemd/override.conf",
        home=config.jenkins_home,
        port=config.jenkins_port,
    )
    if config.jenkins_context_path:
        content += f'Environment="JENKINS_PREFIX={config.jenkins_context_path}"\n'
    return content


def configure_service(config: Config, handlers: Optional[Handlers] = None) -> bool:
    """
    Write the systemd drop-in; reload systemd and notify a restart if it changed.

    Returns:
        True if the drop-in changed
    """
    path = SYSTEMD_DIR / f"{config.service_name}.service.d" / "override.conf"
    if not write_if_changed(path, service_override(config)):
        return False
    ServiceManager(config.service_name).daemon_reload()
    if handlers:
        handlers.notify_restart()
    return True
