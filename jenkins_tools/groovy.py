"""Groovy configuration scripts rendered from templates."""

from string import Template
from typing import Iterable, Optional

from .config import Config, get_config

_ESCAPES = {
    "\\": "\\\\",
    "'": "\\'",
    "\n": "\\n",
    "\r": "\\r",
    "\t": "\\t",
}


def groovy_string(value: Optional[str]) -> str:
    """Render a Python string as a single-quoted (non-interpolating) Groovy literal."""
    if value is None:
        return "null"
    return "'" + "".join(_ESCAPES.get(ch, ch) for ch in value) + "'"


def groovy_list(values: Iterable[str]) -> str:
    """Render strings as a Groovy list literal."""
    return "[" + ", ".join(groovy_string(v) for v in values) + "]"


def _render(template_name: str, config: Config, **values: str) -> str:
    with open(config.get_template_path(f"groovy/{template_name}")) as f:
        template = Template(f.read())
    return template.substitute(**values)


def misc_settings_script(config: Optional[Config] = None) -> str:
    """
    Script enabling the agent port and applying the external URL and proxy.

    Args:
        config: Config instance (defaults to the global one)

    Returns:
        Groovy source
    """
    config = config or get_config()
    return _render(
        "misc-settings.groovy",
        config,
        external_url=groovy_string(config.jenkins_url_external),
        proxy_name=groovy_string(config.http_proxy_server),
        proxy_port=groovy_string(config.http_proxy_port),
        proxy_no_proxy_hosts=groovy_string("\n".join(config.http_proxy_no_proxy_hosts)),
    )


def security_recommendations_script(config: Optional[Config] = None) -> str:
    """Script disabling deprecated agent protocols and enabling agent access control and CSRF."""
    return _render("security-recommendations.groovy", config or get_config())


def plugins_script(names: Iterable[str], update: bool = False, config: Optional[Config] = None) -> str:
    """Script installing missing plugins (and updating outdated ones if requested)."""
    return _render(
        "plugins.groovy",
        config or get_config(),
        plugin_names=groovy_list(names),
        update_plugins="true" if update else "false",
    )
