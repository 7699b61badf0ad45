import click
from flask.cli import with_appcontext
from app.search.services import SearchHistoryService


@click.command("list-search-history")
@click.option("--limit", default=20, show_default=True, help="Number of entries to show")
@with_appcontext
def list_search_history(limit):
    """Show the most recent searches."""

    entries = SearchHistoryService.get_recent(limit)
    if not entries:
        click.echo("📭 No searches recorded yet.")
        return

    click.echo("🔎 Recent Searches:")
    click.echo("=" * 50)
    for entry in entries:
        click.echo(f"{entry.created_at:%Y-%m-%d %H:%M}  {entry.title}")


@click.command("clear-search-history")
@click.option("--confirm", is_flag=True, help="Confirm deletion without prompting")
@with_appcontext
def clear_search_history(confirm):
    """Remove all recorded searches."""

    if not confirm:
        if not click.confirm("⚠️  Are you sure you want to delete ALL search history?"):
            click.echo("❌ Operation cancelled.")
            return

    count = SearchHistoryService.clear()
    click.echo(f"🗑️  Successfully deleted {count} search history entries.")


@click.command("init-db")
@with_appcontext
def init_db_command():
    """Create the database tables."""
    from flask import current_app
    from external.database import init_db

    init_db(current_app)
    click.echo("✅ Database tables created.")
