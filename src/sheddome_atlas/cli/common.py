"""Helpers shared by CLI commands: config resolution and record display."""

from typing import Any

import click

from sheddome_atlas.config.loader import load_config_with_overrides
from sheddome_atlas.config.schema import AtlasConfig
from sheddome_atlas.explorer import ExplorerResult
from sheddome_atlas.metrics import summarize


def get_config(ctx: click.Context, overrides: dict[str, Any] | None = None) -> AtlasConfig:
    """Load the --config file (or defaults) with CLI overrides applied."""
    return load_config_with_overrides(ctx.obj['config_path'], overrides or {})


def echo_result(result: ExplorerResult) -> None:
    """Print a record summary, its domains, cleavage sites and metrics."""
    record = result.record
    metrics = summarize(record)

    title = f"{record.gene_symbol} - {record.name}"
    click.echo(click.style(title, bold=True))
    if result.generated:
        click.echo(click.style("  [AI-generated, unverified]", fg='yellow'))
    click.echo(f"  UniProt: {record.uniprot_id or 'n/a'}")
    click.echo(f"  Role: {record.role.value}")
    if record.known_substrates:
        click.echo(f"  Known Substrates: {', '.join(record.known_substrates)}")
    click.echo(f"  Length: {record.length} aa")
    click.echo(f"  Source: {result.source}")
    click.echo()

    click.echo(click.style("Metrics:", bold=True))
    click.echo(f"  Shedding Score: {record.shedding_score:.1f} / 10.0")
    click.echo(f"  Fluid Ecto Abundance: {record.fluid_ecto_abundance:,.0f}")
    click.echo(f"  Tissue Abundance: {record.tissue_abundance:,.0f}")
    click.echo(f"  Ecto/Cyto Ratio: {record.ecto_cto_ratio:.1f}")
    click.echo(f"  Fluid/Tissue log2: {metrics.fluid_tissue_log2:.3f}")
    click.echo(f"  Peptide Ecto/Cyto Ratio: {metrics.peptide_ecto_cyto_ratio:.2f}")
    click.echo(f"  Significant Peptides (p < 0.05): {metrics.significant_peptides}")
    click.echo()

    click.echo(click.style("Domains:", bold=True))
    for domain in record.domains:
        click.echo(f"  {domain.start:>5}-{domain.end:<5} {domain.type.value:<14} {domain.name}")
    if not record.domains:
        click.echo("  (none)")
    click.echo()

    click.echo(click.style(f"Peptides ({len(record.peptides)}):", bold=True))
    for location, count in metrics.peptide_counts.items():
        click.echo(f"  {location}: {count}")
    click.echo()

    click.echo(click.style("Cleavage Sites:", bold=True))
    for site in record.cleavage_sites:
        click.echo(f"  {site.position:>5} {site.protease} ({site.evidence})")
    if not record.cleavage_sites:
        click.echo("  (none)")
    click.echo()

    click.echo(click.style("Interpretation:", bold=True))
    click.echo(f"  {result.interpretation}")
