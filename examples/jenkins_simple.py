#!/usr/bin/env python3
"""Simple Jenkins example: inspect security, then apply the configuration scripts."""

from jenkins_tools import config, groovy, health
from jenkins_tools.script_console import ScriptConsole
from jenkins_tools.security import connection_for, detect_security


def main():
    """Configure an already-installed Jenkins without touching OS packages."""
    cfg = config.get_config()

    print("🔍 Detecting security settings...")
    settings = detect_security(cfg)
    connection = connection_for(cfg, settings)
    print(f"   Realm: {settings.security_realm}")
    print(f"   API access: {'anonymous' if connection.anonymous else connection.username}")

    with ScriptConsole.from_connection(connection, timeout=cfg.http_timeout) as console:
        print("\n1️⃣ Applying miscellaneous settings...")
        result = console.run(groovy.misc_settings_script(cfg))
        print(result.output)

        print("2️⃣ Applying security recommendations...")
        result = console.run(groovy.security_recommendations_script(cfg))
        print(result.output)

    print("3️⃣ Verifying web UI...")
    health.verify_web_ui(cfg)

    print(f"\n📍 Jenkins is at: {cfg.jenkins_url_local}")


if __name__ == "__main__":
    main()
