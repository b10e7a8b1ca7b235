"""CLI commands for Flask application."""

import click
from flask import current_app
from flask.cli import with_appcontext


@click.group()
def catalog():
    """Card catalog commands."""
    pass


def _catalog():
    return current_app.extensions["gacha"].catalog


@catalog.command()
@with_appcontext
def seed():
    """Create the built-in card templates if the catalog is empty."""
    created = _catalog().seed()
    if created:
        click.echo(f"Seeded {created} card templates")
    else:
        click.echo("Catalog already seeded, nothing to do")


@catalog.command()
@with_appcontext
def stats():
    """Show template counts by rarity and series."""
    statistics = _catalog().statistics()

    click.echo(f"Total templates: {statistics['total']}")
    click.echo("By rarity (active / total):")
    for rarity, count in statistics["by_rarity"].items():
        click.echo(f"  {rarity}: {statistics['active'][rarity]} / {count}")
    click.echo("By series:")
    for series, count in sorted(statistics["by_series"].items()):
        click.echo(f"  {series}: {count}")


@catalog.command("add-template")
@click.argument("series")
@click.argument("character")
@click.option(
    "--rarity",
    type=click.Choice(["N", "R", "SR", "SSR"], case_sensitive=False),
    default="N",
    show_default=True,
)
@with_appcontext
def add_template(series, character, rarity):
    """Add one card template."""
    from unplug.models.card import Rarity

    template = _catalog().add_custom_template(series, character, Rarity(rarity.upper()))
    if template is None:
        click.echo("Template already exists")
        return
    click.echo(f"Added template {template.key} (id {template.id})")


@catalog.command()
@with_appcontext
def verify():
    """Fail unless every rarity has at least one active template."""
    from unplug.utils.exceptions import NoTemplateAvailable

    try:
        counts = _catalog().verify()
    except NoTemplateAvailable as e:
        raise click.ClickException(str(e))

    for rarity, count in counts.items():
        click.echo(f"  {rarity}: {count} active")
    click.echo("Catalog OK")
