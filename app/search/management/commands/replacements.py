import click
from flask.cli import with_appcontext
from app.libs.errors import ValidationError
from app.search.services import SearchReplacementService


@click.command("add-search-replacement")
@click.argument("search")
@click.argument("replace")
@with_appcontext
def add_search_replacement(search, replace):
    """Search SEARCH (comma separated terms) also as REPLACE."""

    try:
        replacement = SearchReplacementService.add_replacement(search, replace)
    except ValidationError as e:
        raise click.BadParameter(e.message)

    click.echo(f"✅ {replacement.search} -> {replacement.replace}")


@click.command("list-search-replacements")
@with_appcontext
def list_search_replacements():
    """List configured search replacements."""

    replacements = SearchReplacementService.list_replacements()
    if not replacements:
        click.echo("📭 No search replacements configured.")
        return

    click.echo("🔁 Search Replacements:")
    click.echo("=" * 50)
    for replacement in replacements:
        click.echo(f"{replacement.id:>5}  {replacement.search} -> {replacement.replace}")
