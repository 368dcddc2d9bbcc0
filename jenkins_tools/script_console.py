"""Jenkins script console client: run Groovy scripts over HTTP."""

from dataclasses import dataclass
from string import Template
from typing import Mapping, Optional

import requests
from requests.auth import HTTPBasicAuth

from .security import ApiConnection
from .utils import HTTPError, ScriptError

SCRIPT_TEXT = "scriptText"
CRUMB_URL = "crumbIssuer/api/json"


@dataclass(frozen=True)
class ScriptResult:
    """Output of a script run; changed if the script reported a change."""

    output: str
    changed: bool


def is_stacktrace(output: str) -> bool:
    """Whether script output is a Groovy exception trace rather than normal output."""
    return "Exception:" in output and "at java.lang.Thread" in output


class ScriptConsole:
    """Client for the /scriptText endpoint."""

    def __init__(
        self,
        url: str,
        username: Optional[str] = None,
        password: Optional[str] = None,
        timeout: int = 30,
    ):
        self.url = url.rstrip("/")
        self.timeout = timeout
        self.session = requests.Session()
        # Crumbs are tied to the session cookie, so both requests share one session.
        if username is not None:
            self.session.auth = HTTPBasicAuth(username, password or "")
        self._crumb: Optional[dict] = None
        self._crumb_checked = False

    @classmethod
    def from_connection(cls, connection: ApiConnection, timeout: int = 30) -> "ScriptConsole":
        return cls(connection.url, connection.username, connection.password, timeout=timeout)

    def _get_crumb(self) -> Optional[dict]:
        if self._crumb_checked:
            return self._crumb

        try:
            response = self.session.get(f"{self.url}/{CRUMB_URL}", timeout=self.timeout)
        except requests.exceptions.RequestException as e:
            raise HTTPError(f"Failed to fetch CSRF crumb: {e}") from e

        if response.status_code == 200:
            self._crumb = response.json()
        elif response.status_code == 404:
            self._crumb = None
        else:
            raise HTTPError(
                f"Failed to fetch CSRF crumb: HTTP {response.status_code}\n{response.text}"
            )
        self._crumb_checked = True
        return self._crumb

    def run(self, script: str, args: Optional[Mapping[str, str]] = None) -> ScriptResult:
        """
        Execute a Groovy script through the script console.

        Args:
            script: Groovy source
            args: Optional values substituted into the script with string.Template

        Returns:
            ScriptResult with the console output

        Raises:
            ScriptError: If Jenkins rejects the request or the script throws
            HTTPError: If Jenkins cannot be reached
        """
        if args:
            try:
                script = Template(script).substitute(args)
            except (KeyError, ValueError) as e:
                raise ScriptError(
                    f"Missing template argument: {e} (write literal Groovy $ as $$)"
                ) from e

        headers = {}
        crumb = self._get_crumb()
        if crumb:
            headers[crumb["crumbRequestField"]] = crumb["crumb"]

        try:
            response = self.session.post(
                f"{self.url}/{SCRIPT_TEXT}",
                data={"script": script},
                headers=headers,
                timeout=self.timeout,
            )
        except requests.exceptions.RequestException as e:
            raise HTTPError(f"Script console request failed: {e}") from e

        if response.status_code != 200:
            raise ScriptError(
                f"Script console returned HTTP {response.status_code}",
                status_code=response.status_code,
                output=response.text,
            )

        output = response.text
        if is_stacktrace(output):
            raise ScriptError(f"Script failed with stacktrace:\n{output}", 200, output)

        return ScriptResult(output=output, changed="Changed" in output)

    def close(self) -> None:
        self.session.close()

    def __enter__(self) -> "ScriptConsole":
        return self

    def __exit__(self, *exc) -> None:
        self.close()
