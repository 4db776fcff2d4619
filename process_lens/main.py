"""
Main CLI entry point for the Process Lens Analysis Engine.

Usage:
    process-lens generate --cases 500 --output events.json
    process-lens analyze --input events.json --output-dir ./output
"""

import click
import json
import logging
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from . import DEFAULT_CONFIG, __version__
from .behavior import segment_counts
from .exceptions import ProcessLensError
from .ingest import EventLogLoader
from .pipeline import run_pipeline
from .synthetic import EventLogGenerator, GeneratorConfig


class PipelineContext:
    """Holds configuration shared between CLI commands."""

    def __init__(self):
        self.config = DEFAULT_CONFIG.copy()


pass_context = click.make_pass_decorator(PipelineContext, ensure=True)


@click.group()
@click.version_option(version=__version__)
@click.option('--seed', default=DEFAULT_CONFIG['random_seed'],
              help='Random seed for reproducibility')
@click.option('--verbose', '-v', is_flag=True, help='Enable debug logging')
@click.pass_context
def cli(ctx, seed: int, verbose: bool):
    """Process Lens Analysis Engine

    Discovers a process model from an event log, scores every case
    against its ideal path, and segments the people executing it.
    """
    ctx.ensure_object(PipelineContext)
    ctx.obj.config['random_seed'] = seed

    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format='%(asctime)s %(levelname)s %(name)s: %(message)s'
        )


@cli.command()
@click.option('--cases', '-n', default=DEFAULT_CONFIG['synthetic_case_count'], type=int,
              help='Number of cases to generate')
@click.option('--output', '-o', required=True, type=click.Path(),
              help='Output JSON file for the event log')
@pass_context
def generate(ctx, cases: int, output: str):
    """Generate a synthetic loan application event log.

    Writes the normalized event records as JSON, ready for 'analyze'.
    """
    config = GeneratorConfig(seed=ctx.config['random_seed'], num_cases=cases)
    generator = EventLogGenerator(config)
    event_log = generator.generate()

    output_path = Path(output)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    with open(output_path, 'w', encoding='utf-8') as f:
        json.dump(event_log.to_dict(), f, indent=2)

    click.echo(f"Generated {len(event_log)} events across {cases} cases")
    click.echo(
        f"Injected deviations: {generator.stats['skip']} skip, "
        f"{generator.stats['reorder']} reorder, {generator.stats['loop']} loop"
    )
    click.echo(f"Saved event log to {output_path}")


@cli.command()
@click.option('--input', '-i', 'input_file', required=True, type=click.Path(exists=True),
              help='JSON file of normalized event records')
@click.option('--output-dir', '-o', required=True, type=click.Path(),
              help='Directory for analysis outputs')
@click.option('--max-variants', default=DEFAULT_CONFIG['max_variants'], type=int,
              help='Number of top variants to keep')
@pass_context
def analyze(ctx, input_file: str, output_dir: str, max_variants: int):
    """Run discovery, conformance checking and actor segmentation.

    Output files:
    - process_model.json - Activities, transitions, ideal path, variants
    - conformance.json   - Fitness and deviations per case
    - actors.json        - Metrics and segment per actor
    - summary.json       - Conformance summary and population statistics
    """
    output_path = Path(output_dir)
    output_path.mkdir(parents=True, exist_ok=True)

    try:
        event_log = EventLogLoader().load_json(input_file)
        result = run_pipeline(
            event_log,
            max_variants=max_variants,
            recent_cases_limit=ctx.config['recent_cases_limit'],
        )
    except (ProcessLensError, OSError) as exc:
        click.echo(f"Error: {exc}", err=True)
        sys.exit(1)

    metadata = event_log.metadata
    click.echo("=" * 60)
    click.echo(f"Event log: {metadata.name}")
    click.echo(f"Cases: {metadata.case_count}  Activities: {metadata.activity_count}  "
               f"Actors: {metadata.actor_count}")
    click.echo("=" * 60)

    click.echo(f"Ideal path: {' -> '.join(result.model.ideal_path)}")
    click.echo(f"Variants: {result.model.total_variants}")
    click.echo(f"Average fitness: {result.summary.average_fitness}")
    click.echo(f"Fully conformant cases: {result.summary.fully_conformant_cases}"
               f"/{result.summary.total_cases}")
    for segment, count in segment_counts(result.actors).items():
        click.echo(f"  {segment.value}: {count}")

    generated_at = datetime.now(timezone.utc).isoformat()

    _write_json(output_path / 'process_model.json', result.model.to_dict())
    _write_json(output_path / 'conformance.json',
                [r.to_dict() for r in result.conformance])
    _write_json(output_path / 'actors.json', [a.to_dict() for a in result.actors])
    _write_json(output_path / 'summary.json', {
        'metadata': {
            'generated_at': generated_at,
            'event_log': metadata.to_dict(),
            'max_variants': max_variants,
        },
        'conformance': result.summary.to_dict(),
        'stats': result.stats.to_dict(),
        'segments': {
            segment.value: count
            for segment, count in segment_counts(result.actors).items()
        },
    })

    click.echo(f"Analysis complete. Results saved to {output_path}")


def _write_json(path: Path, data: Any) -> None:
    with open(path, 'w', encoding='utf-8') as f:
        json.dump(data, f, indent=2, default=str)


def main():
    """Main entry point."""
    cli()


if __name__ == '__main__':
    main()
