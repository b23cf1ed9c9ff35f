import click
from flask.cli import AppGroup

from .logics.registry import collect_all
from .services import PolicyEnforcer, migrate_legacy_settings

paranoia_cli = AppGroup('paranoia', help='Paranoia security hardening.')


@paranoia_cli.command('migrate-settings')
def migrate_settings_command():
    """Move legacy flat settings into the structured record."""
    if migrate_legacy_settings():
        click.echo('Legacy settings migrated.')
    else:
        click.echo('Nothing to migrate.')


@paranoia_cli.command('enforce')
def enforce_command():
    """Disable declared modules and strip hidden permissions now."""
    disabled = PolicyEnforcer.enforce_disabled_modules(notify=click.echo)
    removed = PolicyEnforcer.strip_risky_permissions()
    for role_name, permission in removed:
        click.echo(f"Revoked '{permission}' from '{role_name}'")
    if not disabled and not removed:
        click.echo('Nothing to enforce.')


@paranoia_cli.command('policy')
def policy_command():
    """Print the merged policy declarations."""
    for category, values in collect_all().items():
        click.echo(f"{category}: {', '.join(sorted(values)) or '-'}")


def register_commands(app):
    if 'paranoia' not in app.cli.commands:
        app.cli.add_command(paranoia_cli)
