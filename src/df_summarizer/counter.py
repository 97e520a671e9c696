from __future__ import annotations
import logging
import os
from collections import Counter
from concurrent.futures import Executor, ProcessPoolExecutor, ThreadPoolExecutor
from pathlib import Path
from typing import Callable, List, Sequence, Union
from rich.console import Console
from rich.progress import Progress, SpinnerColumn, BarColumn, TextColumn, TimeElapsedColumn
from .annotator import Annotator, noun_predicate
from .config import SummarizerConfig
from .errors import CorpusFileError, MalformedCorpusError
from .parser import read_corpus_file, strip_separators

# Reserved key holding the number of documents counted
SENTINEL = "__all__"

log = logging.getLogger(__name__)
console = Console(stderr=True)


def document_frequencies(
    text: str,
    annotator: Annotator,
    is_noun: Callable[[str], bool],
    lowercase: bool = False,
) -> Counter:
    """Presence counts for one document: +1 per distinct noun term, +1 on the sentinel."""
    terms = set()
    for sentence in annotator.annotate(strip_separators(text)):
        for tok in sentence.tokens:
            if is_noun(tok.tag):
                terms.add(tok.text.lower() if lowercase else tok.text)
    terms.discard(SENTINEL)  # reserved
    counts = Counter(terms)
    counts[SENTINEL] += 1
    return counts


def count_file(path: Path, annotator: Annotator, cfg: SummarizerConfig) -> Counter:
    """Sum of the per-document counts of every document in a corpus file."""
    is_noun = noun_predicate(cfg)
    try:
        documents = read_corpus_file(path, cfg)
    except MalformedCorpusError as ex:
        raise CorpusFileError(path, ex.doc_index, ex) from ex
    except (OSError, UnicodeDecodeError) as ex:
        raise CorpusFileError(path, None, ex) from ex

    counts: Counter = Counter()
    for i, text in enumerate(documents):
        try:
            counts.update(document_frequencies(text, annotator, is_noun, cfg.lowercase_counts))
        except Exception as ex:
            raise CorpusFileError(path, i, ex) from ex
    log.debug("%s: %d documents, %d terms", path, len(documents), len(counts) - 1)
    return counts


def merge_into(total: Counter, partial: Counter) -> None:
    # Counter.update adds and keeps zero entries, unlike `+`
    total.update(partial)


def _make_pool(cfg: SummarizerConfig) -> Executor:
    workers = cfg.workers or os.cpu_count() or 1
    if cfg.executor == "process":
        return ProcessPoolExecutor(max_workers=workers)
    return ThreadPoolExecutor(max_workers=workers)


def build_corpus_frequency_map(
    paths: Sequence[Union[str, Path]],
    annotator: Annotator,
    cfg: SummarizerConfig,
    show_progress: bool = True,
) -> Counter:
    """
    Count every file on a bounded worker pool and merge the results.
    Results are consumed in submission order; the first failure cancels
    whatever has not started yet and propagates.
    """
    cfg.validate()
    files: List[Path] = [Path(p) for p in paths]
    overall: Counter = Counter({SENTINEL: 0})

    with _make_pool(cfg) as pool:
        futures = [pool.submit(count_file, p, annotator, cfg) for p in files]
        with Progress(
            SpinnerColumn(),
            TextColumn("[bold]Counting[/bold]"),
            BarColumn(),
            TextColumn("{task.completed}/{task.total} files"),
            TimeElapsedColumn(),
            console=console,
            disable=not show_progress,
            expand=True,
        ) as progress:
            task = progress.add_task("count", total=len(files))
            try:
                for n, (path, fut) in enumerate(zip(files, futures), start=1):
                    log.debug("Polling future #%d / %d (%s)", n, len(files), path)
                    result = fut.result()
                    log.info("Finished future #%d / %d (%s)", n, len(files), path)
                    log.debug("Merging counter #%d (%s, %d documents)", n, path, result[SENTINEL])
                    merge_into(overall, result)
                    log.debug("Merged counter #%d; running total %d documents", n, overall[SENTINEL])
                    progress.update(task, advance=1)
            except BaseException:
                for fut in futures:
                    fut.cancel()
                raise

    log.info("Counted %d documents, %d distinct terms", overall[SENTINEL], len(overall) - 1)
    return overall
