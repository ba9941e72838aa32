"""Search command: look up a protein in the curated store."""

import logging
import sys
from pathlib import Path

import click
from pydantic import ValidationError

from sheddome_atlas.cli.common import echo_result, get_config
from sheddome_atlas.errors import SheddomeError
from sheddome_atlas.explorer import Explorer
from sheddome_atlas.output import write_record_output

logger = logging.getLogger(__name__)


@click.command('search')
@click.argument('query')
@click.option(
    '--generate',
    is_flag=True,
    help='Generate an unverified record with the AI service when nothing is curated'
)
@click.option(
    '--output-dir',
    type=click.Path(path_type=Path),
    default=None,
    help='Also write record JSON, peptide TSV and provenance to this directory'
)
@click.pass_context
def search(ctx, query, generate, output_dir):
    """Find a curated record by protein name, gene symbol or UniProt ID.

    Matching is exact and case-insensitive.

    Examples:

        sheddome-atlas search ACE2

        sheddome-atlas search q9byf1 --output-dir output/ace2

        sheddome-atlas search ADAM10 --generate
    """
    overrides = {'ai_service.generate_on_miss': True} if generate else {}

    try:
        config = get_config(ctx, overrides)
        explorer = Explorer.from_config(config)
        result = explorer.search(query)
    except (SheddomeError, FileNotFoundError, ValidationError) as e:
        click.echo(click.style(f"Error: {e}", fg='red'), err=True)
        logger.debug("Search failed", exc_info=True)
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
