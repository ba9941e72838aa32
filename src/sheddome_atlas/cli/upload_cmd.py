"""Upload commands: map experimental peptide files onto curated structure.

Commands:
- upload: parse a .json or .csv file and annotate it
- demo: run the bundled demo uploads
- template: write the CSV template
"""

import logging
import sys
from pathlib import Path

import click
from pydantic import ValidationError

from sheddome_atlas.cli.common import echo_result, get_config
from sheddome_atlas.errors import SheddomeError
from sheddome_atlas.explorer import Explorer, ExplorerResult
from sheddome_atlas.ingest import CSV_TEMPLATE, DEMO_CSV, DEMO_JSON, format_from_filename
from sheddome_atlas.output import write_record_output

logger = logging.getLogger(__name__)


def _run_upload(ctx, raw_text, declared_format, annotate, output_dir) -> ExplorerResult:
    overrides = {'ai_service.annotate_uploads': True} if annotate else {}

    try:
        config = get_config(ctx, overrides)
        explorer = Explorer.from_config(config)
        result = explorer.upload(raw_text, declared_format)
    except (SheddomeError, FileNotFoundError, ValidationError) as e:
        click.echo(click.style(f"Error: {e}", fg='red'), err=True)
        logger.debug("Upload failed", exc_info=True)
        sys.exit(1)

    echo_result(result)

    if output_dir is not None:
        paths = write_record_output(
            result.record,
            output_dir,
            interpretation=result.interpretation,
            source=result.source,
            config_hash=config.config_hash(),
        )
        click.echo()
        click.echo(click.style(f"Record written to {paths['json']}", fg='green'))

    return result


@click.command('upload')
@click.argument('file', type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option(
    '--annotate',
    is_flag=True,
    help='Ask the AI service for domains when the protein is not curated'
)
@click.option(
    '--output-dir',
    type=click.Path(path_type=Path),
    default=None,
    help='Also write record JSON, peptide TSV and provenance to this directory'
)
@click.pass_context
def upload(ctx, file, annotate, output_dir):
    """Load experimental data from a .json or .csv file.

    CSV files need a peptide sequence column and a fluid intensity column;
    peptides are mapped onto the curated domains of the protein named in
    the first data row. JSON files with domains are displayed as-is.

    Examples:

        sheddome-atlas template shedding_template.csv

        sheddome-atlas upload my_peptides.csv --output-dir output/
    """
    try:
        declared_format = format_from_filename(file)
    except SheddomeError as e:
        click.echo(click.style(f"Error: {e}", fg='red'), err=True)
        sys.exit(1)

    click.echo(f"Reading {file} ({declared_format.upper()})...")
    click.echo()
    raw_text = file.read_text(encoding='utf-8')
    _run_upload(ctx, raw_text, declared_format, annotate, output_dir)


@click.command('demo')
@click.argument('kind', type=click.Choice(['csv', 'json']), default='csv')
@click.option(
    '--output-dir',
    type=click.Path(path_type=Path),
    default=None,
    help='Also write record JSON, peptide TSV and provenance to this directory'
)
@click.pass_context
def demo(ctx, kind, output_dir):
    """Run a bundled ACE2 demo upload (csv: 9 peptides mapped onto curated domains)."""
    raw_text = DEMO_CSV if kind == 'csv' else DEMO_JSON
    _run_upload(ctx, raw_text, kind, False, output_dir)


@click.command('template')
@click.argument(
    'path',
    type=click.Path(dir_okay=False, path_type=Path),
    default=Path('shedding_template.csv'),
)
def template(path):
    """Write the CSV upload template."""
    path.write_text(CSV_TEMPLATE, encoding='utf-8')
    click.echo(click.style(f"Template written to {path}", fg='green'))
