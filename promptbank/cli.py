"""Promptbank CLI: manage and apply prompts for Claude and other LLM tools."""

from __future__ import annotations

import logging
from pathlib import Path

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from .clipboard import copy_to_clipboard
from .config import Config
from .errors import PromptBankError
from .integrations.claude import (
    InstallMode,
    install_prompt,
    list_installed,
    remove_installed,
)
from .integrations.community import (
    fetch_index,
    fetch_prompt,
    find_entry,
    repo_url,
    search_index,
    to_local_prompt,
)
from .models import STANDARD_CATEGORIES, Category, Prompt
from .storage import Storage
from .template import missing_variables

console = Console()
err_console = Console(stderr=True)

EDITOR_HINT = "# Enter your prompt content here\n"


def _setup_logging(verbose: bool) -> None:
    """Send promptbank logs to stderr through rich."""
    logger = logging.getLogger("promptbank")
    logger.setLevel(logging.DEBUG if verbose else logging.WARNING)

    # Clear existing handlers
    logger.handlers.clear()

    handler = RichHandler(console=err_console, show_path=False)
    logger.addHandler(handler)


class PromptBankGroup(click.Group):
    """Click group that reports PromptBankError on stderr and exits 1."""

    def invoke(self, ctx: click.Context):
        try:
            return super().invoke(ctx)
        except PromptBankError as e:
            err_console.print(f"[red]Error:[/red] {escape(e.message)}")
            ctx.exit(1)


def _parse_tags(raw: str) -> list[str]:
    return [t.strip() for t in raw.split(",") if t.strip()]


def _copy(text: str, quiet: bool = False) -> None:
    copy_to_clipboard(text)
    if not quiet:
        console.print("\n[green]✓[/green] Copied to clipboard!")


@click.group(cls=PromptBankGroup)
@click.version_option(package_name="promptbank")
@click.option(
    "--data-file",
    type=click.Path(dir_okay=False, path_type=Path),
    envvar="PROMPTBANK_DATA_FILE",
    default=None,
    help="Prompt bank JSON file",
)
@click.option(
    "--claude-dir",
    type=click.Path(file_okay=False, path_type=Path),
    envvar="CLAUDE_CONFIG_DIR",
    default=None,
    help="Claude Code configuration directory",
)
@click.option("--verbose", is_flag=True, help="Show debug logging")
@click.pass_context
def cli(ctx, data_file: Path | None, claude_dir: Path | None, verbose: bool):
    """Promptbank - manage and apply prompts for Claude AI."""
    _setup_logging(verbose)
    ctx.obj = Config.from_env(data_file=data_file, claude_dir=claude_dir)


@cli.command()
@click.option("--name", "-n", default=None, help="Name of the prompt")
@click.option(
    "--category",
    "-c",
    default=None,
    help="Category (system, skill, agent, role, task, template, custom:<name>)",
)
@click.option("--description", "-d", default=None, help="Description of the prompt")
@click.option("--tags", "-t", default=None, help="Tags (comma-separated)")
@click.option("--content", default=None, help="Prompt content (opens editor if omitted)")
@click.option(
    "--file",
    "-f",
    "file_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Read content from a file",
)
@click.pass_obj
def add(
    config: Config,
    name: str | None,
    category: str | None,
    description: str | None,
    tags: str | None,
    content: str | None,
    file_path: Path | None,
):
    """Add a new prompt."""
    # Resolve the category before anything interactive so a bad flag fails fast
    parsed_category = Category.parse(category) if category is not None else None

    if name is None:
        name = click.prompt("Prompt name")
    if not name.strip():
        raise PromptBankError.invalid_input("Prompt name must not be empty")

    if parsed_category is None:
        choice = click.prompt(
            "Select category",
            type=click.Choice(STANDARD_CATEGORIES),
            default=STANDARD_CATEGORIES[0],
        )
        parsed_category = Category.parse(choice)

    if description is None:
        description = click.prompt("Description")

    if tags is None:
        tags = click.prompt(
            "Tags (comma-separated, optional)", default="", show_default=False
        )

    if file_path is not None:
        try:
            content = file_path.read_text(encoding="utf-8")
        except OSError as e:
            raise PromptBankError.io_error(str(e)) from e
    elif content is None:
        edited = click.edit(EDITOR_HINT)
        if edited is not None:
            edited = edited.replace(EDITOR_HINT, "", 1)
        if not edited or not edited.strip():
            raise PromptBankError.invalid_input("No content provided")
        content = edited

    prompt = Prompt.create(
        name=name,
        category=parsed_category,
        description=description,
        content=content,
        tags=_parse_tags(tags),
    )

    storage = Storage(config.data_file)
    bank = storage.load()
    bank.add(prompt)
    storage.save(bank)

    console.print(
        f"[green]✓[/green] Prompt '{escape(name)}' added with ID: [cyan]{prompt.id}[/cyan]"
    )


def _prompt_table(prompts: list[Prompt], title: str) -> Table:
    table = Table(title=title)
    table.add_column("ID", style="cyan")
    table.add_column("Name", style="bold")
    table.add_column("Category", style="yellow")
    table.add_column("Description")
    table.add_column("Tags", style="blue")
    table.add_column("Variables", style="magenta")
    for p in prompts:
        table.add_row(
            p.id,
            escape(p.name),
            escape(str(p.category)),
            escape(p.description),
            escape(", ".join(p.tags)),
            escape(", ".join(p.variables)),
        )
    return table


def _print_prompt_panel(p: Prompt) -> None:
    console.print(
        Panel(
            Text(p.content),
            title=f"{p.id} {escape(p.name)} {escape(f'[{p.category}]')}",
            subtitle=escape(p.description) if p.description else None,
        )
    )


@cli.command("list")
@click.option("--category", "-c", default=None, help="Filter by category")
@click.option("--full", is_flag=True, help="Show full content")
@click.pass_obj
def list_prompts(config: Config, category: str | None, full: bool):
    """List all prompts."""
    bank = Storage(config.data_file).load()

    if category:
        prompts = bank.filter_by_category(Category.parse(category))
    else:
        prompts = bank.prompts

    if not prompts:
        console.print("[yellow]No prompts found.[/yellow]")
        return

    if full:
        console.print(f"[blue]→[/blue] [cyan]{len(prompts)}[/cyan] prompt(s) found:\n")
        for p in prompts:
            _print_prompt_panel(p)
    else:
        console.print(_prompt_table(prompts, f"{len(prompts)} prompt(s) found"))


def _print_prompt_full(p: Prompt) -> None:
    lines = [
        f"[bold]ID:[/bold] [cyan]{p.id}[/cyan] ([yellow]{escape(str(p.category))}[/yellow])",
        f"[bold]Name:[/bold] {escape(p.name)}",
        f"[bold]Description:[/bold] {escape(p.description)}",
    ]
    if p.tags:
        lines.append(f"[bold]Tags:[/bold] [blue]{escape(', '.join(p.tags))}[/blue]")
    if p.variables:
        lines.append(
            f"[bold]Variables:[/bold] [magenta]{escape(', '.join(p.variables))}[/magenta]"
        )
    lines.append(f"[bold]Created:[/bold] {p.created_at[:16].replace('T', ' ')}")
    lines.append(f"[bold]Updated:[/bold] {p.updated_at[:16].replace('T', ' ')}")

    console.print(Panel("\n".join(lines), title=escape(p.name)))
    console.print(Panel(Text(p.content), title="Content"))


@cli.command()
@click.argument("id_or_name")
@click.option("--copy", "-c", is_flag=True, help="Copy to clipboard")
@click.option("--raw", "-r", is_flag=True, help="Only output the content (for piping)")
@click.pass_obj
def get(config: Config, id_or_name: str, copy: bool, raw: bool):
    """Get a specific prompt by ID or name."""
    prompt = Storage(config.data_file).load().get(id_or_name)

    if raw:
        click.echo(prompt.content)
    else:
        _print_prompt_full(prompt)

    if copy:
        _copy(prompt.content, quiet=raw)


@cli.command()
@click.argument("id_or_name")
@click.option(
    "--var", "-v", "variables", multiple=True, help="Variable substitution (key=value)"
)
@click.option("--copy", "-c", is_flag=True, help="Copy to clipboard")
@click.option("--interactive", "-i", is_flag=True, help="Prompt for missing variables")
@click.pass_obj
def apply(
    config: Config,
    id_or_name: str,
    variables: tuple[str, ...],
    copy: bool,
    interactive: bool,
):
    """Apply a prompt (render with variables)."""
    prompt = Storage(config.data_file).load().get(id_or_name)

    substitutions: list[tuple[str, str]] = []
    for item in variables:
        key, sep, value = item.partition("=")
        if not sep:
            err_console.print(
                f"[yellow]Warning:[/yellow] ignoring '{escape(item)}', expected key=value"
            )
            continue
        substitutions.append((key, value))

    if interactive and prompt.variables:
        console.print(
            f"\n[blue]→[/blue] This prompt has {len(prompt.variables)} variable(s):\n"
        )
        supplied = {key for key, _ in substitutions}
        for var in prompt.variables:
            if var not in supplied:
                substitutions.append((var, click.prompt(f"  {var}")))

    rendered = prompt.render(substitutions)

    console.rule(style="dim")
    click.echo(rendered)
    console.rule(style="dim")

    unfilled = missing_variables(prompt.content, substitutions)
    if unfilled:
        err_console.print(
            f"[yellow]Unfilled variables:[/yellow] {escape(', '.join(unfilled))}"
        )

    if copy:
        _copy(rendered)


@cli.command()
@click.argument("id_or_name")
@click.pass_obj
def edit(config: Config, id_or_name: str):
    """Edit an existing prompt's content in $EDITOR."""
    storage = Storage(config.data_file)
    bank = storage.load()
    prompt = bank.get(id_or_name)

    new_content = click.edit(prompt.content)
    if new_content is None or new_content == prompt.content:
        console.print("[yellow]No changes made.[/yellow]")
        return

    prompt.update_content(new_content)
    storage.save(bank)

    console.print(f"[green]✓[/green] Prompt '{escape(id_or_name)}' updated.")


@cli.command()
@click.argument("id_or_name")
@click.option("--force", "-f", is_flag=True, help="Skip confirmation")
@click.pass_obj
def delete(config: Config, id_or_name: str, force: bool):
    """Delete a prompt."""
    storage = Storage(config.data_file)
    bank = storage.load()
    name = bank.get(id_or_name).name

    if not force and not click.confirm(f"Delete prompt '{name}'?", default=False):
        console.print("[yellow]Cancelled.[/yellow]")
        return

    before = len(bank.prompts)
    deleted = bank.delete(id_or_name)
    removed = before - len(bank.prompts)
    if not deleted:
        raise PromptBankError.prompt_not_found(id_or_name)
    storage.save(bank)

    console.print(f"[green]✓[/green] Prompt '{escape(name)}' deleted.")
    if removed > 1:
        console.print(f"  [dim]{removed} prompts matched '{escape(id_or_name)}'[/dim]")


@cli.command()
@click.argument("query")
@click.pass_obj
def search(config: Config, query: str):
    """Search prompts by name, description, tags and content."""
    prompts = Storage(config.data_file).load().search(query)

    if not prompts:
        console.print(f"[yellow]→[/yellow] No prompts matching '{escape(query)}'")
        return

    console.print(
        _prompt_table(prompts, f"{len(prompts)} result(s) for '{escape(query)}'")
    )


@cli.command()
@click.argument("output_path", type=click.Path(dir_okay=False, path_type=Path))
@click.pass_obj
def export(config: Config, output_path: Path):
    """Export prompts to a file."""
    storage = Storage(config.data_file)
    bank = storage.load()
    storage.export(bank, output_path)
    console.print(
        f"[green]✓[/green] Exported {len(bank.prompts)} prompts to {escape(str(output_path))}"
    )


@cli.command("import")
@click.argument("input_path", type=click.Path(dir_okay=False, path_type=Path))
@click.option("--merge", "-m", is_flag=True, help="Merge with existing prompts")
@click.pass_obj
def import_prompts(config: Config, input_path: Path, merge: bool):
    """Import prompts from a file."""
    storage = Storage(config.data_file)
    imported = storage.import_bank(input_path)
    count = len(imported.prompts)

    if merge:
        bank = storage.load()
        added = bank.merge(imported)
    else:
        bank = imported
        added = count

    storage.save(bank)
    console.print(
        f"[green]✓[/green] Imported {count} prompts from {escape(str(input_path))}"
    )
    if merge and added != count:
        console.print(f"  [dim]{count - added} skipped (id already present)[/dim]")


@cli.command()
@click.pass_obj
def info(config: Config):
    """Show storage info."""
    bank = Storage(config.data_file).load()

    console.print(
        Panel(
            f"Data file: {escape(str(config.data_file))}\n"
            f"Total prompts: {len(bank.prompts)}\n"
            f"Claude directory: {escape(str(config.claude_dir))}",
            title="Promptbank Info",
        )
    )

    counts = bank.category_counts()
    if counts:
        table = Table(title="By category")
        table.add_column("Category", style="yellow")
        table.add_column("Prompts", justify="right")
        for category, count in sorted(counts.items()):
            table.add_row(escape(category), str(count))
        console.print(table)


@cli.command()
@click.argument("id_or_name")
@click.option(
    "--as",
    "mode",
    type=click.Choice([m.value for m in InstallMode]),
    default=InstallMode.SKILL.value,
    help="Install as a skill or a slash command",
)
@click.option("--name", default=None, help="Install under a different name")
@click.pass_obj
def install(config: Config, id_or_name: str, mode: str, name: str | None):
    """Install a prompt into Claude Code."""
    prompt = Storage(config.data_file).load().get(id_or_name)
    path = install_prompt(
        prompt, InstallMode(mode), claude_dir=config.claude_dir, name=name
    )
    console.print(
        f"[green]✓[/green] Installed '{escape(prompt.name)}' as {mode}: {escape(str(path))}"
    )


@cli.command()
@click.pass_obj
def installed(config: Config):
    """List prompts installed into Claude Code."""
    skills, commands = list_installed(config.claude_dir)

    if not skills and not commands:
        console.print("[yellow]Nothing installed.[/yellow]")
        return

    table = Table(title="Installed in Claude Code")
    table.add_column("Name", style="cyan")
    table.add_column("Type")
    for skill in skills:
        table.add_row(escape(skill), "skill")
    for command in commands:
        table.add_row(escape(f"/{command}"), "command")
    console.print(table)


@cli.command()
@click.argument("name")
@click.pass_obj
def uninstall(config: Config, name: str):
    """Remove an installed skill or command from Claude Code."""
    if not remove_installed(name, config.claude_dir):
        raise PromptBankError.prompt_not_found(name)
    console.print(f"[green]✓[/green] Removed '{escape(name)}' from Claude Code.")


@cli.group()
def community():
    """Browse and pull prompts shared by the community."""


@community.command("search")
@click.argument("query", required=False)
@click.pass_obj
def community_search(config: Config, query: str | None):
    """Search the community index (lists everything without a query)."""
    index = fetch_index(config.community_url)
    entries = search_index(index, query) if query else index.prompts

    if not entries:
        console.print("[yellow]No community prompts found.[/yellow]")
        return

    table = Table(title="Community Prompts")
    table.add_column("Name", style="cyan")
    table.add_column("Category", style="yellow")
    table.add_column("Description")
    table.add_column("Author", style="dim")
    table.add_column("Downloads", justify="right")
    for entry in entries:
        table.add_row(
            escape(entry.name),
            escape(entry.category),
            escape(entry.description),
            escape(entry.author),
            str(entry.downloads),
        )
    console.print(table)
    console.print("\n[dim]Use: promptbank community pull <name>[/dim]")


@community.command("pull")
@click.argument("name")
@click.pass_obj
def community_pull(config: Config, name: str):
    """Download a community prompt into the local bank."""
    index = fetch_index(config.community_url)
    entry = find_entry(index, name)
    prompt = to_local_prompt(fetch_prompt(entry.path, config.community_url))

    storage = Storage(config.data_file)
    bank = storage.load()
    bank.add(prompt)
    storage.save(bank)

    console.print(
        f"[green]✓[/green] Pulled '{escape(prompt.name)}' with ID: [cyan]{prompt.id}[/cyan]"
    )


@community.command("repo")
def community_repo():
    """Show where to contribute prompts."""
    click.echo(repo_url())


def main():
    cli()


if __name__ == "__main__":
    main()
