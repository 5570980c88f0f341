"""
Knowledgenet CLI - Command-line interface for the knowledge node network.

Commands:
- init: Write a default configuration file
- parse: Parse a label or tag and show its variant
- show: Display the nodes of loaded knowledge files
- forward: Run forward search from classifier outputs
- backward: Run backward search from goal labels
"""

from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from .config import DEFAULT_CONFIG_NAME, EngineConfig, create_default_config, load_config
from .knn import KnowledgeNodeNetwork, load_knowledge_file, parse_label
from .knn.views import render_active_tags, tag_kind
from .utils.logging import setup_logging

app = typer.Typer(
    name="knowledgenet",
    help="Knowledge node network: symbolic activation and belief propagation",
    no_args_is_help=True,
    add_completion=False,
)

console = Console()


def _load_engine_config(config_path: Path) -> tuple[EngineConfig, Path | None]:
    """Load the config file if it exists, otherwise use defaults."""
    if config_path.exists():
        return load_config(config_path), config_path.parent
    return EngineConfig(), None


def _build_network(config_path: Path, knowledge: Optional[list[Path]]) -> tuple[KnowledgeNodeNetwork, EngineConfig]:
    """Create a network from the config's knowledge files plus any given on the command line."""
    config, base_path = _load_engine_config(config_path)
    setup_logging(level=config.logging.level, log_file=config.logging.file)

    files = config.knowledge.resolve_files(base_path) + list(knowledge or [])
    if not files:
        raise ValueError(
            f"No knowledge files given. Use --knowledge or list them in {DEFAULT_CONFIG_NAME}"
        )

    network = KnowledgeNodeNetwork(name=config.name)
    for path in files:
        load_knowledge_file(network, path, delimiter=config.knowledge.delimiter)
    return network, config


def _parse_outputs(labels: list[str]) -> list[tuple[str, int]]:
    """Split ``label:confidence`` arguments; a missing confidence means 10."""
    outputs = []
    for item in labels:
        label, sep, confidence = item.rpartition(":")
        if not sep or not confidence.strip().isdigit():
            outputs.append((item, 10))
        else:
            outputs.append((label, int(confidence)))
    return outputs


def _print(text: str) -> None:
    console.print(text, markup=False, highlight=False, soft_wrap=True)


@app.command()
def init(
    path: Path = typer.Option(Path.cwd(), "--path", "-p", help="Project directory"),
    name: str = typer.Option("default", "--name", "-n", help="Network name"),
    knowledge: Optional[list[str]] = typer.Option(
        None, "--knowledge", "-k", help="Knowledge file to list in the config (repeatable)"
    ),
) -> None:
    """
    Write a default knowledgenet.toml.

    Example:
        knowledgenet init --knowledge pets.txt
    """
    try:
        path.mkdir(parents=True, exist_ok=True)
        config_path = path / DEFAULT_CONFIG_NAME

        if config_path.exists():
            console.print(f"[yellow]Warning:[/yellow] {escape(str(config_path))} already exists.")
            raise typer.Exit(1)

        create_default_config(config_path, name=name, knowledge_files=knowledge)
        console.print(Panel.fit(
            f"[green]✓[/green] Wrote {escape(str(config_path))}\n\n"
            "[dim]Next steps:[/dim]\n"
            "1. List knowledge files under [knowledge] files\n"
            "2. Run: knowledgenet forward <label>:<confidence>",
            title="Configuration Created",
            border_style="green",
        ))
    except typer.Exit:
        raise
    except Exception as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(1)


@app.command()
def parse(
    text: str = typer.Argument(..., help="Label or tag text"),
) -> None:
    """
    Parse a label the way classifier outputs are parsed.

    Example:
        knowledgenet parse "friend(nice,kind) -> @meet(community,people>2)"
    """
    try:
        tag = parse_label(text)
    except ValueError as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(1)

    _print(f"{tag_kind(tag)}: {tag}")


@app.command()
def show(
    knowledge: Optional[list[Path]] = typer.Option(
        None, "--knowledge", "-k", help="Knowledge file (repeatable)"
    ),
    config: Path = typer.Option(Path(DEFAULT_CONFIG_NAME), "--config", "-c", help="Config file path"),
) -> None:
    """
    Show the knowledge nodes that would be loaded.

    Example:
        knowledgenet show -k pets.txt
    """
    try:
        network, _ = _build_network(config, knowledge)
    except Exception as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(1)

    table = Table(title=f"Knowledge nodes ({len(network)})")
    table.add_column("Kind")
    table.add_column("Input tag")
    table.add_column("Threshold", justify="right")
    table.add_column("Outputs")

    for node in network.nodes.values():
        outputs = ", ".join(f"{edge.tag} ({edge.weight})" for edge in node.outputs)
        table.add_row(
            tag_kind(node.input_tag),
            escape(str(node.input_tag)),
            str(node.threshold),
            escape(outputs) or "-",
        )

    console.print(table)


@app.command()
def forward(
    labels: list[str] = typer.Argument(..., help="Classifier outputs as label:confidence"),
    knowledge: Optional[list[Path]] = typer.Option(
        None, "--knowledge", "-k", help="Knowledge file (repeatable)"
    ),
    config: Path = typer.Option(Path(DEFAULT_CONFIG_NAME), "--config", "-c", help="Config file path"),
    score: Optional[float] = typer.Option(None, "--score", "-s", help="Minimum confidence (0-100)"),
) -> None:
    """
    Run forward search from classifier outputs.

    Example:
        knowledgenet forward husky:10 -k pets.txt
        knowledgenet forward husky:10 cat:8 --score 60
    """
    try:
        network, engine_config = _build_network(config, knowledge)
        inputs = network.get_input_for_forward_search(_parse_outputs(labels))
        network.forward_search(score if score is not None else engine_config.search.forward_score)
    except Exception as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(1)

    _print(render_active_tags(inputs, title="Input tags"))
    _print("")
    _print(render_active_tags(network.get_active_tags()))


@app.command()
def backward(
    labels: list[str] = typer.Argument(..., help="Goal labels as label:confidence"),
    knowledge: Optional[list[Path]] = typer.Option(
        None, "--knowledge", "-k", help="Knowledge file (repeatable)"
    ),
    config: Path = typer.Option(Path(DEFAULT_CONFIG_NAME), "--config", "-c", help="Config file path"),
    score: Optional[float] = typer.Option(None, "--score", "-s", help="Minimum confidence (0-100)"),
    depth: Optional[int] = typer.Option(None, "--depth", "-d", help="Maximum hops from a goal"),
) -> None:
    """
    Run backward search toward the antecedents of goal labels.

    Example:
        knowledgenet backward "@visitShelter(weekend)" -k pets.txt
    """
    try:
        network, engine_config = _build_network(config, knowledge)
        network.get_input_for_backward_search(_parse_outputs(labels))
        antecedents = network.backward_search(
            score if score is not None else engine_config.search.backward_score,
            max_depth=depth if depth is not None else engine_config.search.max_depth,
        )
    except Exception as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(1)

    _print(render_active_tags(antecedents, title="Antecedents"))


def main() -> None:
    """CLI entry point."""
    app()


if __name__ == "__main__":
    main()
