from __future__ import annotations
import logging
from pathlib import Path
from typing import List, Optional
import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table
from rich import box
from .annotator import make_annotator, noun_predicate
from .config import SummarizerConfig, load_config, write_default_config
from .counter import SENTINEL, build_corpus_frequency_map
from .errors import SummarizerError
from .storage import describe, load_counts, save_counts
from .summarizer import Summarizer

app = typer.Typer(help="Corpus document frequencies and TF-IDF extractive summaries")
console = Console()
err_console = Console(stderr=True)
log = logging.getLogger("df_summarizer")


def _fail(ex: Exception) -> None:
    err_console.print(f"[red]Error:[/red] {escape(str(ex))}", soft_wrap=True)
    raise typer.Exit(code=1)


def _load(config_path: Optional[Path]) -> SummarizerConfig:
    cfg = load_config(config_path)
    try:
        cfg.validate()
    except ValueError as ex:
        _fail(ex)
    return cfg


@app.callback()
def main_options(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging"),
):
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(message)s",
        handlers=[RichHandler(console=err_console, show_path=False)],
        force=True,
    )


@app.command()
def init(
    config_path: Path = typer.Option("df-summarizer.json", help="Where to create config"),
):
    """Create a default config file."""
    try:
        write_default_config(config_path)
    except FileExistsError as ex:
        _fail(ex)
    console.print(f"[green]Created[/green] {config_path}")


@app.command()
def count(
    files: List[Path] = typer.Argument(..., exists=True, dir_okay=False, help="Corpus files"),
    config_path: Optional[Path] = typer.Option(None, "--config-path", help="JSON config"),
    output: Optional[Path] = typer.Option(None, help="Override counts_path in config"),
    workers: Optional[int] = typer.Option(None, min=1, help="Worker pool size (default: CPU count)"),
    executor: Optional[str] = typer.Option(None, help="process|thread"),
    progress: bool = typer.Option(True, help="Show a progress bar"),
):
    """Build the document-frequency map of a corpus."""
    cfg = _load(config_path)
    if workers is not None:
        cfg.workers = workers
    if executor is not None:
        cfg.executor = executor
    out = output or Path(cfg.counts_path)

    try:
        annotator = make_annotator(cfg)
        counts = build_corpus_frequency_map(files, annotator, cfg, show_progress=progress)
        log.info("Saving to %s", out)
        save_counts(out, counts, files=[str(f) for f in files])
    except (SummarizerError, ValueError) as ex:
        _fail(ex)
    console.print(
        f"[green]Wrote[/green] {out}: {counts[SENTINEL]} documents, {len(counts) - 1} terms"
    )


@app.command()
def summarize(
    document: Path = typer.Argument(..., exists=True, dir_okay=False, help="Document to summarize"),
    counts_path: Optional[Path] = typer.Option(None, "--counts", help="Frequency map (default: counts_path in config)"),
    sentences: Optional[int] = typer.Option(None, min=0, help="Number of sentences"),
    config_path: Optional[Path] = typer.Option(None, "--config-path", help="JSON config"),
    explain: bool = typer.Option(False, help="Print every sentence with its score to stderr"),
):
    """Print an extractive summary of DOCUMENT."""
    cfg = _load(config_path)
    num = cfg.num_sentences if sentences is None else sentences
    try:
        counts = load_counts(counts_path or Path(cfg.counts_path))
        summarizer = Summarizer(counts, make_annotator(cfg), noun_predicate(cfg))
        ranked = summarizer.rank_document(document.read_text(encoding="utf-8"))
    except (SummarizerError, ValueError) as ex:
        _fail(ex)

    top = summarizer.select(ranked, num)
    if explain:
        table = Table(title="Ranked sentences", box=box.SIMPLE)
        table.add_column("Rank", justify="right")
        table.add_column("Index", justify="right")
        table.add_column("Score", justify="right")
        table.add_column("Sentence")
        for rank, item in enumerate(ranked, start=1):
            style = "bold" if rank <= len(top) else None
            table.add_row(str(rank), str(item.sentence.index), f"{item.score:.4f}", escape(item.sentence.text), style=style)
        err_console.print(table)
    typer.echo(" ".join(item.sentence.text for item in top))


@app.command("stats")
def stats_cmd(
    counts_path: Optional[Path] = typer.Option(None, "--counts", help="Frequency map (default: counts_path in config)"),
    config_path: Optional[Path] = typer.Option(None, "--config-path", help="JSON config"),
):
    """Show frequency map stats."""
    cfg = _load(config_path)
    try:
        s = describe(counts_path or Path(cfg.counts_path))
    except SummarizerError as ex:
        _fail(ex)
    table = Table(title="Frequency map", box=box.SIMPLE)
    table.add_column("Metric", style="bold")
    table.add_column("Value", justify="right")
    for k, v in s.items():
        table.add_row(k, v)
    console.print(table)


@app.command()
def terms(
    counts_path: Optional[Path] = typer.Option(None, "--counts", help="Frequency map (default: counts_path in config)"),
    limit: int = typer.Option(25, min=1),
    config_path: Optional[Path] = typer.Option(None, "--config-path", help="JSON config"),
):
    """List the terms found in the most documents."""
    cfg = _load(config_path)
    try:
        fm = load_counts(counts_path or Path(cfg.counts_path))
    except SummarizerError as ex:
        _fail(ex)
    if len(fm) <= 1:
        console.print("[yellow]No terms[/yellow]")
        return
    table = Table(box=box.MINIMAL_HEAVY_HEAD)
    table.add_column("Term")
    table.add_column("Documents", justify="right")
    table.add_column("Share", justify="right")
    for term, c in fm.top(limit):
        share = c / fm.documents if fm.documents else 0.0
        table.add_row(escape(term), str(c), f"{share:.1%}")
    console.print(table)


def main():
    app()

if __name__ == "__main__":
    main()
