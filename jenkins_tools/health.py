"""Post-configuration health check against the Jenkins login page."""

from typing import Optional

from .config import Config, get_config
from .utils import VerificationError, http_get

EXPECTED_CONTENT = "Jenkins"


def fetch_login_page(config: Optional[Config] = None) -> str:
    """
    Fetch the Jenkins login page over localhost.

    A default Jenkins install requires auth, so the login page is the only
    page reachable without a 403. Proxy settings from the environment are
    ignored for localhost.

    Raises:
        VerificationError: If the page does not answer with HTTP 200
        HTTPError: If Jenkins cannot be reached
    """
    config = config or get_config()
    response = http_get(config.login_url, timeout=config.http_timeout, trust_env=False)
    if response.status_code != 200:
        raise VerificationError(
            f"Jenkins login page returned HTTP {response.status_code}: {config.login_url}"
        )
    return response.text


def verify_web_ui(config: Optional[Config] = None) -> None:
    """
    Verify the Jenkins web UI is up and serving Jenkins content.

    Raises:
        VerificationError: If the expected content is missing
    """
    config = config or get_config()
    content = fetch_login_page(config)
    if EXPECTED_CONTENT not in content:
        raise VerificationError(
            f"Jenkins web UI at {config.login_url} does not contain '{EXPECTED_CONTENT}'"
        )
    print(f"✅ Jenkins web UI is up at {config.login_url}")
