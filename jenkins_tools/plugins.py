"""Jenkins plugin installation through the script console."""

from typing import Optional

from .config import Config, get_config
from .groovy import plugins_script
from .script_console import ScriptConsole
from .service import Handlers


def install_plugins(
    console: ScriptConsole,
    config: Optional[Config] = None,
    handlers: Optional[Handlers] = None,
) -> bool:
    """
    Install configured plugins, updating outdated ones when JENKINS_PLUGINS_UPDATE is set.

    New or updated plugins only load after a restart, so a change notifies
    the restart handler.

    Args:
        console: Script console to run against
        config: Config instance
        handlers: Restart handlers

    Returns:
        True if any plugin was installed or updated

    Raises:
        ScriptError: If a plugin is unknown or the install fails
    """
    config = config or get_config()
    names = config.plugins
    if not names:
        print("No plugins configured; skipping plugin installation.")
        return False

    print(f"Installing Jenkins plugins: {', '.join(names)}...")
    result = console.run(plugins_script(names, update=config.plugins_update, config=config))
    print(result.output.rstrip())

    if result.changed:
        if handlers:
            handlers.notify_restart()
        print("✅ Plugins installed")
    return result.changed
