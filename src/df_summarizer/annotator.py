from __future__ import annotations
import logging
from dataclasses import dataclass, field
from typing import List, Protocol
from .config import SummarizerConfig
from .errors import AnnotationError

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class Token:
    text: str
    tag: str


@dataclass
class Sentence:
    index: int  # position in the document
    text: str
    tokens: List[Token] = field(default_factory=list)


class Annotator(Protocol):
    def annotate(self, text: str) -> List[Sentence]:
        ...


@dataclass(frozen=True)
class NounPredicate:
    """Qualifying-term test: the tag begins with `prefix`."""

    prefix: str = "n"
    ignore_case: bool = True

    def __call__(self, tag: str) -> bool:
        if not tag:
            return False
        if self.ignore_case:
            return tag.lower().startswith(self.prefix.lower())
        return tag.startswith(self.prefix)


# NLTK data package name -> path searched by nltk.data.find
NLTK_RESOURCES = {
    "punkt_tab": "tokenizers/punkt_tab",
    "averaged_perceptron_tagger_eng": "taggers/averaged_perceptron_tagger_eng",
}


def ensure_nltk_data(download: bool = True) -> None:
    """Make sure the tokenizer and tagger models are installed, fetching them if allowed."""
    import nltk

    missing = []
    for name, path in NLTK_RESOURCES.items():
        try:
            nltk.data.find(path)
            continue
        except LookupError:
            pass
        if download:
            log.info("Downloading NLTK resource %s", name)
            nltk.download(name, quiet=True)
        try:
            nltk.data.find(path)
        except LookupError:
            missing.append(name)
    if missing:
        raise AnnotationError(
            f"NLTK resources missing: {', '.join(missing)} "
            f"(install with: python -m nltk.downloader {' '.join(missing)})"
        )


class NltkAnnotator:
    """
    Tokenize, split and POS-tag with NLTK:
    - sentences from the punkt model for `language`
    - tokens from the Treebank word tokenizer
    - tags from the averaged perceptron tagger (Penn tagset, nouns are NN*)
    The models are fetched on construction when missing, so build it once
    at startup and reuse it.
    """

    def __init__(self, language: str = "english", download: bool = True):
        self.language = language
        ensure_nltk_data(download=download)

    def annotate(self, text: str) -> List[Sentence]:
        import nltk

        try:
            raw_sentences = nltk.sent_tokenize(text, language=self.language)
            out: List[Sentence] = []
            for i, s in enumerate(raw_sentences):
                words = nltk.word_tokenize(s, language=self.language, preserve_line=True)
                tokens = [Token(text=w, tag=t) for w, t in nltk.pos_tag(words)]
                out.append(Sentence(index=i, text=s, tokens=tokens))
        except LookupError as ex:
            raise AnnotationError(
                f"NLTK resource missing for language {self.language!r} "
                f"(expected: {', '.join(NLTK_RESOURCES)}): {ex}"
            ) from ex
        return out


class TaggedTextAnnotator:
    """Reads pre-tagged text: one sentence per line, `word/TAG` pairs split on whitespace."""

    def __init__(self, separator: str = "/"):
        self.separator = separator

    def annotate(self, text: str) -> List[Sentence]:
        out: List[Sentence] = []
        for line in text.splitlines():
            pairs = line.split()
            if not pairs:
                continue
            tokens = []
            for pair in pairs:
                word, sep, tag = pair.rpartition(self.separator)
                if not sep or not word:
                    raise AnnotationError(f"Untagged token {pair!r} in sentence #{len(out)}")
                tokens.append(Token(text=word, tag=tag))
            out.append(Sentence(index=len(out), text=" ".join(t.text for t in tokens), tokens=tokens))
        return out


def make_annotator(cfg: SummarizerConfig) -> Annotator:
    if cfg.annotator == "nltk":
        return NltkAnnotator(language=cfg.language)
    if cfg.annotator == "tagged":
        return TaggedTextAnnotator(separator=cfg.tag_separator)
    raise ValueError(f"Unknown annotator: {cfg.annotator}")


def noun_predicate(cfg: SummarizerConfig) -> NounPredicate:
    return NounPredicate(prefix=cfg.noun_tag_prefix, ignore_case=cfg.ignore_tag_case)
