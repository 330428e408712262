"""CLI entry point for openapi-typegen."""

import logging
from pathlib import Path

import click

from openapi_typegen.config import DEFAULT_GROUP_EXTENSION, DEFAULT_REF_PREFIX, CodegenConfig
from openapi_typegen.generator.printer import render_components, render_operations
from openapi_typegen.generator.validator import validate_files
from openapi_typegen.parser.base import Documentation
from openapi_typegen.parser.documentation import build_documentation
from openapi_typegen.parser.errors import CodegenError
from openapi_typegen.parser.loader import load_document


def _build(doc_path: Path, config: CodegenConfig) -> Documentation:
    """Load the document and assemble its IR."""
    try:
        return build_documentation(load_document(doc_path), config)
    except CodegenError as e:
        raise click.ClickException(str(e)) from e


@click.group()
@click.option("--ref-prefix", default=DEFAULT_REF_PREFIX, show_default=True, help="Prefix stripped from component $refs.")
@click.option(
    "--group-extension",
    default=DEFAULT_GROUP_EXTENSION,
    show_default=True,
    envvar="OPENAPI_TYPEGEN_GROUP_EXTENSION",
    help="Operation extension holding the group name.",
)
@click.option("--tag-groups", is_flag=True, help="Use the first tag as group when the extension is missing.")
@click.option("-v", "--verbose", is_flag=True, help="Log debug output.")
@click.pass_context
def main(ctx: click.Context, ref_prefix: str, group_extension: str, tag_groups: bool, verbose: bool):
    """OpenAPI Typegen — build typed declarations from OpenAPI documents."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    ctx.obj = CodegenConfig(ref_prefix=ref_prefix, group_extension=group_extension, tag_groups=tag_groups)


@main.command()
@click.argument("doc_path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("-o", "--output", default=None, type=click.Path(dir_okay=False, path_type=Path), help="Write the IR JSON here instead of stdout.")
@click.pass_obj
def inspect(config: CodegenConfig, doc_path: Path, output: Path | None):
    """Dump the intermediate representation as JSON."""
    documentation = _build(doc_path, config)
    payload = documentation.model_dump_json(indent=2)

    if output is None:
        click.echo(payload)
        return
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(payload, encoding="utf-8")
    click.echo(f"IR saved to {output}")


@main.command()
@click.argument("doc_path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("-o", "--output", required=True, type=click.Path(file_okay=False, path_type=Path), help="Output directory for generated modules.")
@click.pass_obj
def generate(config: CodegenConfig, doc_path: Path, output: Path):
    """Generate component TypedDicts and operation stubs."""
    click.echo(f"Parsing {doc_path}...")
    documentation = _build(doc_path, config)
    click.echo(f"Found {len(documentation.components)} components and {len(documentation.operations)} operations.")

    files = {
        "__init__.py": "",
        "components.py": render_components(documentation),
        "operations.py": render_operations(documentation),
    }
    errors = validate_files(files)
    if errors:
        for filename, message in errors.items():
            click.echo(f"  {filename}: {message}", err=True)
        raise click.ClickException("generated code failed validation")

    output.mkdir(parents=True, exist_ok=True)
    for filename, content in files.items():
        file_path = output / filename
        file_path.write_text(content, encoding="utf-8")
        click.echo(f"  Created {file_path}")

    click.echo(f"Generated {len(files)} files in {output}")
