from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from .models import SummarizeRequest, SummaryDTO, SentenceDTO, StatsDTO
from ..annotator import Annotator, make_annotator, noun_predicate
from ..errors import AnnotationError
from ..config import SummarizerConfig, load_config
from ..storage import load_counts
from ..summarizer import Summarizer
from pathlib import Path
from typing import Optional
import logging
import os

log = logging.getLogger(__name__)

COUNTS_ENV = "DF_SUMMARIZER_COUNTS"
CONFIG_ENV = "DF_SUMMARIZER_CONFIG"


def create_app(
    counts_path: Optional[Path] = None,
    cfg: Optional[SummarizerConfig] = None,
    annotator: Optional[Annotator] = None,
) -> FastAPI:
    """
    Build the service around one frequency map, loaded before the app exists.
    Run with: uvicorn df_summarizer.server.main:create_app --factory
    """
    if cfg is None:
        config_path = os.environ.get(CONFIG_ENV)
        cfg = load_config(Path(config_path) if config_path else None)
    cfg.validate()
    if counts_path is None:
        counts_path = Path(os.environ.get(COUNTS_ENV, cfg.counts_path))

    counts = load_counts(counts_path)  # CorpusMapError aborts startup
    summarizer = Summarizer(counts, annotator or make_annotator(cfg), noun_predicate(cfg))
    log.info("Loaded %s: %d documents, %d terms", counts_path, counts.documents, len(counts) - 1)

    app = FastAPI(title="df-summarizer", version="0.1")

    @app.exception_handler(AnnotationError)
    async def annotation_failed(request: Request, ex: AnnotationError):
        return JSONResponse(status_code=422, content={"detail": str(ex)})

    @app.get("/health")
    def health():
        return {"ok": True}

    @app.get("/stats", response_model=StatsDTO)
    def stats():
        files = counts.meta.get("files")
        return StatsDTO(
            documents=counts.documents,
            terms=len(counts) - 1,
            built_at=counts.meta.get("built_at"),
            files=int(files) if files is not None else None,
        )

    @app.post("/summarize", response_model=SummaryDTO)
    def summarize(req: SummarizeRequest):
        num = cfg.num_sentences if req.num_sentences is None else req.num_sentences
        ranked = summarizer.rank_document(req.text)
        top = summarizer.select(ranked, num)
        return SummaryDTO(
            summary=" ".join(item.sentence.text for item in top),
            sentences=[
                SentenceDTO(index=item.sentence.index, text=item.sentence.text, score=item.score)
                for item in top
            ],
        )

    return app
