"""BlockForge CLI - compile extension metadata into block definitions."""

import json
from pathlib import Path

import typer
import yaml  # type: ignore[import-untyped]
from pydantic import ValidationError
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from blockforge.constants import SEPARATOR
from blockforge.conversion import ConversionDriver, category_xml
from blockforge.entities import BlockDescriptor, CategoryInfo, ExtensionMetadata
from blockforge.errors import ConversionError
from blockforge.library import load_extension_file

app = typer.Typer(
    name="blockforge",
    help="BlockForge CLI - compile extension metadata into block definitions",
    no_args_is_help=True,
)
console = Console()


def get_driver() -> ConversionDriver:
    return ConversionDriver()


def _load(path: Path) -> ExtensionMetadata:
    if not path.exists():
        console.print(f"[red]✗[/red] File not found: {escape(str(path))}")
        raise typer.Exit(1)

    try:
        return load_extension_file(path)
    except (yaml.YAMLError, json.JSONDecodeError) as e:
        console.print(f"[red]✗[/red] Cannot parse {escape(path.name)}: {escape(str(e))}")
        raise typer.Exit(1)
    except (ValidationError, ValueError) as e:
        console.print(f"[red]✗[/red] {escape(path.name)} is invalid:")
        console.print(escape(str(e)))
        raise typer.Exit(1)


def _convert(metadata: ExtensionMetadata) -> CategoryInfo:
    try:
        return get_driver().convert(metadata).category_info
    except ConversionError as e:
        console.print(f"[red]✗[/red] Conversion failed: {escape(e.message)}")
        for key, value in e.detail.items():
            console.print(f"  {key}: {escape(str(value))}")
        raise typer.Exit(1)


@app.command()
def convert(
    path: Path = typer.Argument(..., help="Path to extension metadata (YAML or JSON)"),
    json_only: bool = typer.Option(False, "--json-only", help="Only print block definitions"),
    xml_only: bool = typer.Option(False, "--xml-only", help="Only print toolbox XML"),
    output: Path = typer.Option(None, "-o", "--output", help="Write to file instead of stdout"),
) -> None:
    """Convert an extension into block definitions and toolbox XML."""
    if json_only and xml_only:
        console.print("[red]✗[/red] --json-only and --xml-only are mutually exclusive")
        raise typer.Exit(1)

    category = _convert(_load(path))

    if xml_only:
        text = category_xml(category)
    elif json_only:
        text = json.dumps([b.block_json for b in category.blocks if b.block_json], indent=2)
    else:
        text = json.dumps(category.model_dump(mode="json", by_alias=True), indent=2)

    if output:
        output.write_text(text + "\n")
        console.print(f"[green]✓[/green] Wrote {escape(str(output))}")
    else:
        typer.echo(text)


@app.command()
def validate(
    path: Path = typer.Argument(..., help="Path to extension metadata (YAML or JSON)"),
) -> None:
    """Check that an extension converts without errors."""
    metadata = _load(path)
    category = _convert(metadata)

    scriptable = sum(1 for b in category.blocks if b.block_json is not None)
    console.print(f"[green]✓[/green] {escape(path.name)} is valid")
    console.print(f"  Extension: {escape(category.id)} ({escape(category.name)})")
    console.print(f"  Blocks: {scriptable} ({len(category.blocks) - scriptable} buttons/separators)")
    if category.custom_field_types:
        console.print(f"  Custom field types: {escape(', '.join(category.custom_field_types))}")


@app.command()
def blocks(
    path: Path = typer.Argument(..., help="Path to extension metadata (YAML or JSON)"),
) -> None:
    """List the converted blocks of an extension."""
    category = _convert(_load(path))

    table = Table(title=f"Blocks in {escape(category.name)}")
    table.add_column("#", style="dim")
    table.add_column("Type", style="cyan")
    table.add_column("Block Type", style="magenta")
    table.add_column("Message", style="green")

    for index, block in enumerate(category.blocks):
        if isinstance(block.info, BlockDescriptor) and block.block_json is not None:
            table.add_row(
                str(index),
                escape(block.block_json["type"]),
                escape(block.info.block_type),
                escape(block.block_json.get("message0", "")),
            )
        elif block.info == SEPARATOR:
            table.add_row(str(index), "", "separator", "")
        else:
            table.add_row(str(index), escape(str(block.info)), "button", "")

    console.print(table)


@app.command()
def toolbox(
    paths: list[Path] = typer.Argument(..., help="Extension metadata files"),
) -> None:
    """Print a toolbox XML document with one category per extension."""
    categories = [_convert(_load(path)) for path in paths]
    typer.echo("<xml>" + "".join(category_xml(c) for c in categories) + "</xml>")


@app.command()
def scaffold(
    name: str = typer.Argument(..., help="Extension name (e.g., My Robot)"),
    output: Path = typer.Option(Path("."), "-o", "--output", help="Output directory"),
) -> None:
    """Generate an extension metadata YAML file."""
    extension_id = "".join(part.capitalize() if i else part.lower() for i, part in enumerate(name.split()))
    output_path = output / f"{extension_id}.yaml"

    template = f'''id: {extension_id}
name: "{name}"
color1: "#0FBD8C"
color2: "#0DA57A"
color3: "#0B8E69"

blocks:
  - opcode: doSomething
    blockType: command
    text: "do something with [TEXT]"
    arguments:
      TEXT:
        type: string
        defaultValue: "hello"
  - opcode: getValue
    blockType: reporter
    text: "value"
'''

    output_path.write_text(template)
    console.print(f"[green]✓[/green] Created {escape(str(output_path))}")


if __name__ == "__main__":
    app()
