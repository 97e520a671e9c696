from __future__ import annotations
from pathlib import Path
from typing import List
import re
from bs4 import BeautifulSoup
from lxml import etree
from .config import SummarizerConfig
from .errors import MalformedCorpusError

HEADING_SEPARATOR = re.compile(r"[-=]{3,}")
COLLECTION_TAG = "docs"


def strip_separators(text: str) -> str:
    """Drop decorative rules (runs of 3+ '-' or '=')."""
    return HEADING_SEPARATOR.sub("", text)


def split_documents(markup: str, document_tag: str = "DOC", text_tag: str = "TEXT") -> List[str]:
    """
    Return the text payload of every <DOC> in `markup`:
    - a <docs> collection is synthesized around the content (corpus files
      usually concatenate documents without one)
    - the result must be well-formed XML; a stray '<' or an unclosed tag is
      an error rather than silently truncated text
    - each document must hold exactly one <TEXT>
    - paragraph markup inside <TEXT> is dropped, its text kept
    """
    wrapped = f"<{COLLECTION_TAG}>{markup}</{COLLECTION_TAG}>"
    # BeautifulSoup's xml builder recovers from errors, so check first
    try:
        etree.fromstring(wrapped)
    except etree.XMLSyntaxError as ex:
        raise MalformedCorpusError(f"not well-formed: {ex}") from ex

    soup = BeautifulSoup(wrapped, "xml")
    root = soup.find(COLLECTION_TAG)

    payloads: List[str] = []
    for i, doc in enumerate(root.find_all(document_tag)):
        texts = doc.find_all(text_tag)
        if len(texts) != 1:
            raise MalformedCorpusError(
                f"expected exactly one <{text_tag}> element, found {len(texts)}", doc_index=i
            )
        payloads.append(texts[0].get_text())
    return payloads


def read_corpus_file(path: Path, cfg: SummarizerConfig) -> List[str]:
    markup = Path(path).read_text(encoding="utf-8")
    return split_documents(markup, cfg.document_tag, cfg.text_tag)
