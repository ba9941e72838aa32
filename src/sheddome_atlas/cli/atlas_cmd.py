"""Atlas command: tabulate every curated record."""

import logging
import sys
from pathlib import Path

import click
from pydantic import ValidationError

from sheddome_atlas.cli.common import get_config
from sheddome_atlas.output import records_to_frame, write_atlas_output
from sheddome_atlas.records import load_curated_store

logger = logging.getLogger(__name__)


@click.command('atlas')
@click.option(
    '--output-dir',
    type=click.Path(path_type=Path),
    default=None,
    help='Output directory for atlas TSV/Parquet (default: output.output_dir from config)'
)
@click.option(
    '--no-write',
    is_flag=True,
    help='Only print the table'
)
@click.pass_context
def atlas(ctx, output_dir, no_write):
    """Global atlas: fluid vs tissue abundance and shedding metrics per record.

    Records with high fluid-to-tissue ratios are candidate shedding events.
    """
    try:
        config = get_config(ctx)
        store = load_curated_store(config.store.curated_path)
    except (FileNotFoundError, ValidationError) as e:
        click.echo(click.style(f"Error: {e}", fg='red'), err=True)
        sys.exit(1)

    df = records_to_frame(store)

    click.echo(click.style(f"=== Global Atlas ({df.height} records) ===", bold=True))
    for row in df.iter_rows(named=True):
        click.echo(
            f"  {row['gene_symbol']:<10} score={row['shedding_score']:>4.1f}  "
            f"fluid={row['fluid_ecto_abundance']:>12,.0f}  "
            f"tissue={row['tissue_abundance']:>12,.0f}  "
            f"ratio={row['fluid_tissue_ratio']:.2f}  role={row['role']}"
        )
    click.echo()

    if no_write:
        return

    output_dir = output_dir or config.output.output_dir
    paths = write_atlas_output(df, output_dir)
    click.echo(click.style(f"Atlas written to {paths['tsv']} and {paths['parquet']}", fg='green'))
