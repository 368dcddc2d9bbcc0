"""Security detection from config.xml and API connection variables."""

import re
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from .config import Config
from .utils import ProvisionError

# Pattern-matching the XML instead of parsing it. Good enough for the two
# fields we need; both patterns are greedy, so the last occurrence wins.
_SECURITY_REALM_RE = re.compile(r'.*<securityRealm class="([^"]+)".*', re.DOTALL)
_USE_SECURITY_RE = re.compile(r".*<useSecurity>([^<].*)</useSecurity>.*", re.DOTALL)


@dataclass(frozen=True)
class SecuritySettings:
    """Security state as persisted in config.xml."""

    security_realm: Optional[str]
    security_enabled: bool


@dataclass(frozen=True)
class ApiConnection:
    """Where and as whom to talk to the Jenkins API."""

    url: str
    username: Optional[str] = None
    password: Optional[str] = None

    @property
    def anonymous(self) -> bool:
        return self.username is None


def read_config_xml(path: Path) -> str:
    """
    Read Jenkins' config.xml.

    Args:
        path: Path to config.xml

    Returns:
        File contents

    Raises:
        ProvisionError: If the file does not exist yet
    """
    if not path.exists():
        raise ProvisionError(
            f"Jenkins config file not found: {path} (has Jenkins been started at least once?)"
        )
    return path.read_text(encoding="utf-8")


def parse_security(xml_text: str) -> SecuritySettings:
    """
    Determine the active security settings from config.xml contents.

    Args:
        xml_text: Raw config.xml contents

    Returns:
        SecuritySettings with the realm class (None if absent) and
        whether useSecurity is exactly "true"
    """
    flattened = xml_text.replace("\n", "")

    realm_match = _SECURITY_REALM_RE.match(flattened)
    use_security_match = _USE_SECURITY_RE.match(flattened)

    return SecuritySettings(
        security_realm=realm_match.group(1) if realm_match else None,
        security_enabled=bool(use_security_match) and use_security_match.group(1) == "true",
    )


def detect_security(config: Config) -> SecuritySettings:
    """Read and parse config.xml from the configured Jenkins home."""
    return parse_security(read_config_xml(config.config_xml_path))


def connection_for(config: Config, settings: SecuritySettings) -> ApiConnection:
    """
    Calculate API connection variables.

    Admin credentials are only used once security is enabled, so that
    anonymous access works right after install.
    """
    if settings.security_enabled:
        return ApiConnection(
            url=config.jenkins_url_local,
            username=config.jenkins_admin_username,
            password=config.jenkins_admin_password,
        )
    return ApiConnection(url=config.jenkins_url_local)
