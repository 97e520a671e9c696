"""Shared fixtures: pre-tagged corpora so no NLTK data is needed."""

from __future__ import annotations

from pathlib import Path
from typing import Callable, Sequence

import pytest

from df_summarizer.annotator import TaggedTextAnnotator
from df_summarizer.config import SummarizerConfig


@pytest.fixture()
def tagged_config() -> SummarizerConfig:
    return SummarizerConfig(annotator="tagged", executor="thread", workers=2)


@pytest.fixture()
def annotator() -> TaggedTextAnnotator:
    return TaggedTextAnnotator()


def render_corpus(documents: Sequence[str]) -> str:
    """Gigaword-style markup: one <DOC> per document, paragraphs in <P>."""

    parts = []
    for i, text in enumerate(documents):
        parts.append(
            f'<DOC id="doc-{i}" type="story">\n'
            f"<HEADLINE>\nHeadline {i}\n</HEADLINE>\n"
            f"<TEXT>\n<P>\n{text}\n</P>\n</TEXT>\n"
            "</DOC>\n"
        )
    return "".join(parts)


@pytest.fixture()
def write_corpus(tmp_path: Path) -> Callable[..., Path]:
    counter = {"n": 0}

    def _write(documents: Sequence[str], name: str | None = None) -> Path:
        counter["n"] += 1
        path = tmp_path / (name or f"corpus-{counter['n']}.sgml")
        path.write_text(render_corpus(documents), encoding="utf-8")
        return path

    return _write


# Four tiny pre-tagged documents; "gato" appears in two of them.
DOCS = [
    "El/da gato/nc duerme/vm ./fp\nEl/da gato/nc come/vm pescado/nc ./fp",
    "Un/di perro/nc ladra/vm ./fp",
    "La/da casa/nc tiene/vm un/di gato/nc ./fp",
    "La/da casa/nc es/vs grande/aq ./fp\nEl/da perro/nc corre/vm ./fp",
]


@pytest.fixture()
def docs() -> list[str]:
    return list(DOCS)
