"""Command-line interface for Jenkins Tools."""

import sys

import click

from . import config, health, plugins, provision
from .script_console import ScriptConsole
from .security import connection_for, detect_security
from .service import Handlers, ServiceManager
from .utils import ProvisionError


def _fail(e: Exception) -> None:
    click.echo(f"❌ Error: {e}", err=True)
    sys.exit(1)


def _console(cfg: config.Config) -> ScriptConsole:
    connection = connection_for(cfg, detect_security(cfg))
    return ScriptConsole.from_connection(connection, timeout=cfg.http_timeout)


@click.group()
@click.option("--env-file", type=click.Path(exists=True), help="Path to .env file")
@click.pass_context
def cli(ctx, env_file):
    """Jenkins Tools - Install, configure, and verify a local Jenkins."""
    ctx.ensure_object(dict)
    config.reset_config()
    ctx.obj["config"] = config.get_config(env_file)


@cli.command("provision")
@click.option("--skip-packages", is_flag=True, help="Do not install OS packages")
@click.option("--skip-plugins", is_flag=True, help="Do not install plugins")
@click.pass_context
def provision_cmd(ctx, skip_packages, skip_plugins):
    """Install and configure Jenkins on this machine."""
    try:
        provision.provision(
            ctx.obj["config"], skip_packages=skip_packages, skip_plugins=skip_plugins
        )
    except ProvisionError as e:
        _fail(e)


@cli.command("security")
@click.pass_context
def security_cmd(ctx):
    """Show the security settings detected from config.xml."""
    cfg = ctx.obj["config"]
    try:
        settings = detect_security(cfg)
    except ProvisionError as e:
        _fail(e)
        return
    connection = connection_for(cfg, settings)
    click.echo(f"Security realm:   {settings.security_realm or '(none)'}")
    click.echo(f"Security enabled: {'yes' if settings.security_enabled else 'no'}")
    click.echo(f"API access:       {'anonymous' if connection.anonymous else connection.username}")
    click.echo(f"API URL:          {connection.url}")


@cli.command("script")
@click.argument("script_file", type=click.File("r"))
@click.option("--arg", "-a", "args", multiple=True, help="Template argument as KEY=VALUE")
@click.pass_context
def script_cmd(ctx, script_file, args):
    """Run a Groovy script through the Jenkins script console."""
    values = {}
    for arg in args:
        if "=" not in arg:
            raise click.BadParameter(f"expected KEY=VALUE, got {arg!r}", param_hint="--arg")
        key, value = arg.split("=", 1)
        values[key] = value

    try:
        with _console(ctx.obj["config"]) as console:
            result = console.run(script_file.read(), values or None)
    except ProvisionError as e:
        _fail(e)
        return
    click.echo(result.output, nl=False)
    if result.changed:
        click.echo("changed", err=True)


@cli.command("plugins")
@click.pass_context
def plugins_cmd(ctx):
    """Install configured plugins and restart Jenkins if needed."""
    cfg = ctx.obj["config"]
    try:
        handlers = Handlers(cfg, ServiceManager(cfg.service_name))
        with _console(cfg) as console:
            plugins.install_plugins(console, cfg, handlers)
        handlers.flush()
    except ProvisionError as e:
        _fail(e)


@cli.command("verify")
@click.pass_context
def verify_cmd(ctx):
    """Check that the Jenkins login page is served."""
    try:
        health.verify_web_ui(ctx.obj["config"])
    except ProvisionError as e:
        _fail(e)


if __name__ == "__main__":
    cli()
