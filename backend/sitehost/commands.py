# sitehost/commands.py
import click
from flask import Blueprint
from datetime import timedelta
from sitehost.application.site_history.prune import prune_site_history, purge_orphan_blobs

site_history_cli = Blueprint("site_history_cli", __name__, cli_group="site-history")


@site_history_cli.cli.command("prune")
@click.option("--site-id", default=None, help="Only prune this site.")
def prune_command(site_id):
    """Re-apply keep-count retention and purge evicted blobs."""
    evicted = prune_site_history(site_id=site_id)
    total = sum(len(blob_ids) for blob_ids in evicted.values())
    click.echo(f"Evicted {total} versions from {len(evicted)} sites")


@site_history_cli.cli.command("purge-orphans")
@click.option("--min-age-minutes", default=60, show_default=True, type=int,
              help="Skip blobs younger than this.")
def purge_orphans_command(min_age_minutes):
    """Purge stored blobs no site or version refers to."""
    purged = purge_orphan_blobs(min_age=timedelta(minutes=min_age_minutes))
    click.echo(f"Purged {len(purged)} orphan blobs")
