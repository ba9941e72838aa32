"""Main CLI entry point for sheddome-atlas.

Provides command group with global options and subcommands for searching
curated records, uploading experimental peptides and exporting the atlas.
"""

import logging
from pathlib import Path

import click
import structlog
from pydantic import ValidationError

from sheddome_atlas import __version__
from sheddome_atlas.cli.atlas_cmd import atlas
from sheddome_atlas.cli.common import get_config
from sheddome_atlas.cli.search_cmd import search
from sheddome_atlas.cli.upload_cmd import demo, template, upload
from sheddome_atlas.records import load_curated_store


# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)


@click.group()
@click.option(
    '--config',
    type=click.Path(exists=True, path_type=Path),
    default=None,
    help='Path to configuration YAML file (default: built-in defaults)'
)
@click.option(
    '--verbose',
    is_flag=True,
    help='Enable verbose logging (DEBUG level)'
)
@click.pass_context
def cli(ctx, config, verbose):
    """SheddomeAtlas: curated ectodomain shedding records and peptide mapping.

    Search curated shedding records, map experimental peptide uploads onto
    curated domain structure, and export the global atlas.
    """
    ctx.ensure_object(dict)
    ctx.obj['config_path'] = config
    ctx.obj['verbose'] = verbose

    level = logging.DEBUG if verbose else logging.WARNING
    # Route library events through stdlib logging; only warnings by default
    structlog.configure(
        processors=[
            structlog.processors.add_log_level,
            structlog.dev.ConsoleRenderer(colors=False),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        logger_factory=structlog.stdlib.LoggerFactory(),
    )

    if verbose:
        logging.getLogger().setLevel(logging.DEBUG)
        logging.debug("Verbose logging enabled")


@cli.command()
@click.pass_context
def info(ctx):
    """Display version, configuration and curated store summary."""
    config_path = ctx.obj['config_path']

    click.echo(f"SheddomeAtlas v{__version__}")
    click.echo(f"Config: {config_path or '(defaults)'}")
    click.echo()

    try:
        config = get_config(ctx)

        click.echo(f"Config Hash: {config.config_hash()[:16]}...")
        click.echo()

        store = load_curated_store(config.store.curated_path)
        click.echo(click.style("Curated Store:", bold=True))
        click.echo(f"  Source: {config.store.curated_path or 'bundled'}")
        click.echo(f"  Records: {len(store)}")
        click.echo()

        click.echo(click.style("AI Service:", bold=True))
        click.echo(f"  Annotate Uploads: {config.ai_service.annotate_uploads}")
        click.echo(f"  Generate On Miss: {config.ai_service.generate_on_miss}")
        click.echo(f"  Model: {config.ai_service.model}")
        click.echo(f"  API Key Variable: {config.ai_service.api_key_env}")
        click.echo(f"  Timeout: {config.ai_service.timeout_seconds}s")
        click.echo()

        click.echo(click.style("Output:", bold=True))
        click.echo(f"  Output Directory: {config.output.output_dir}")

    except (FileNotFoundError, ValidationError) as e:
        click.echo(click.style(f"Error loading config: {e}", fg='red'), err=True)
        ctx.exit(1)


# Register commands
cli.add_command(search)
cli.add_command(upload)
cli.add_command(demo)
cli.add_command(template)
cli.add_command(atlas)


if __name__ == '__main__':
    cli()
