"""Audit trail commands."""

import json

import click
from duoledger.domain.audit import AuditService
from duoledger.domain.entities import AuditAction


@click.group()
def audit_group():
    """Inspect the audit trail."""
    pass


@audit_group.command("list")
@click.option("--user", "username", help="Only entries of this user")
@click.option(
    "--action",
    type=click.Choice([action.value for action in AuditAction], case_sensitive=False),
    help="Only entries with this action",
)
@click.option("--limit", default=100, show_default=True, help="Maximum number of entries")
@click.option("--verbose", "-v", is_flag=True, help="Show the details recorded with each entry")
@click.pass_context
def list_entries(ctx, username: str | None, action: str | None, limit: int, verbose: bool):
    """List audit entries, newest first."""
    service = AuditService(ctx.obj["db"])
    entries = service.list_entries(
        username=username,
        action=AuditAction(action.upper()) if action else None,
        limit=limit,
    )

    if not entries:
        click.echo("No audit entries found.")
        return

    click.echo(f"\nFound {len(entries)} audit entr{'y' if len(entries) == 1 else 'ies'}:")
    click.echo("-" * 80)
    click.echo(f"{'ID':<6} {'Timestamp':<20} {'User':<16} {'Action':<8} {'Entity':<20}")
    click.echo("-" * 80)
    for entry in entries:
        entity = entry.entity_type or ""
        if entry.entity_id is not None:
            entity = f"{entity} {entry.entity_id}"
        click.echo(
            f"{entry.id:<6} {entry.timestamp:%Y-%m-%d %H:%M:%S} {entry.username[:16]:<16} "
            f"{entry.action.value:<8} {entity:<20}"
        )
        if verbose and entry.details:
            click.echo(f"       {json.dumps(entry.details, sort_keys=True)}")


@audit_group.command("activity")
@click.argument("username")
@click.option("--days", default=30, show_default=True, help="Number of days to look back")
@click.pass_context
def user_activity(ctx, username: str, days: int):
    """Summarise one user's recent actions."""
    service = AuditService(ctx.obj["db"])
    activity = service.user_activity(username, days=days)

    click.echo(f"\nActivity of {activity.username} over the last {activity.days} days")
    click.echo("-" * 40)
    for action, count in activity.counts.items():
        if count:
            click.echo(f"  {action.value:<10} {count:>6}")
    click.echo(f"  {'TOTAL':<10} {activity.total:>6}")

    if activity.recent:
        click.echo("\nRecent entries:")
        for entry in activity.recent:
            target = f" {entry.entity_id}" if entry.entity_id is not None else ""
            click.echo(f"  {entry.timestamp:%Y-%m-%d %H:%M:%S} {entry.action.value}{target}")


def register_commands(cli: click.Group) -> None:
    """Register audit commands with main CLI."""
    cli.add_command(audit_group, name="audit")
