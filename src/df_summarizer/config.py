from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Dict, Optional
import json
from pathlib import Path

EXECUTORS = ("process", "thread")
ANNOTATORS = ("nltk", "tagged")


@dataclass
class SummarizerConfig:
    annotator: str = "nltk"  # "nltk" | "tagged"
    language: str = "english"
    tag_separator: str = "/"  # if annotator == "tagged"
    noun_tag_prefix: str = "n"
    ignore_tag_case: bool = True
    lowercase_counts: bool = False
    document_tag: str = "DOC"
    text_tag: str = "TEXT"
    workers: Optional[int] = None  # None -> os.cpu_count()
    executor: str = "process"  # "process" | "thread"
    counts_path: str = "df-counts.db"
    num_sentences: int = 3

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> "SummarizerConfig":
        # Simple dict→dataclass conversion; unknown keys are ignored
        workers = data.get("workers")
        return SummarizerConfig(
            annotator=data.get("annotator", "nltk"),
            language=data.get("language", "english"),
            tag_separator=data.get("tag_separator", "/"),
            noun_tag_prefix=data.get("noun_tag_prefix", "n"),
            ignore_tag_case=bool(data.get("ignore_tag_case", True)),
            lowercase_counts=bool(data.get("lowercase_counts", False)),
            document_tag=data.get("document_tag", "DOC"),
            text_tag=data.get("text_tag", "TEXT"),
            workers=int(workers) if workers is not None else None,
            executor=data.get("executor", "process"),
            counts_path=data.get("counts_path", "df-counts.db"),
            num_sentences=int(data.get("num_sentences", 3)),
        )

    @staticmethod
    def load(path: Path) -> "SummarizerConfig":
        return SummarizerConfig.load_json_str(Path(path).read_text(encoding="utf-8"))

    @staticmethod
    def load_json_str(s: str) -> "SummarizerConfig":
        return SummarizerConfig.from_dict(json.loads(s))

    def validate(self) -> None:
        if self.executor not in EXECUTORS:
            raise ValueError(f"Unknown executor: {self.executor} (expected one of {', '.join(EXECUTORS)})")
        if self.annotator not in ANNOTATORS:
            raise ValueError(f"Unknown annotator: {self.annotator} (expected one of {', '.join(ANNOTATORS)})")
        if self.workers is not None and self.workers < 1:
            raise ValueError("workers must be at least 1")
        if self.num_sentences < 0:
            raise ValueError("num_sentences must not be negative")

    def dump(self) -> str:
        data = {
            "annotator": self.annotator,
            "language": self.language,
            "tag_separator": self.tag_separator,
            "noun_tag_prefix": self.noun_tag_prefix,
            "ignore_tag_case": self.ignore_tag_case,
            "lowercase_counts": self.lowercase_counts,
            "document_tag": self.document_tag,
            "text_tag": self.text_tag,
            "workers": self.workers,
            "executor": self.executor,
            "counts_path": self.counts_path,
            "num_sentences": self.num_sentences,
        }
        return json.dumps(data, indent=2)


def load_config(path: Optional[Path]) -> SummarizerConfig:
    """Config from `path` when it exists, defaults otherwise."""
    if path is not None and Path(path).exists():
        cfg = SummarizerConfig.load(path)
    else:
        cfg = SummarizerConfig()
    return cfg


def write_default_config(path: Path) -> None:
    if path.exists():
        raise FileExistsError(f"{path} already exists")
    path.write_text(SummarizerConfig().dump())
