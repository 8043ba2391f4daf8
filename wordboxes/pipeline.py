"""
Word box pipeline orchestrator: PDF → frames → tokens → JSON / PNG.

Coordinates the full extraction workflow:

1. **Frame loading** — read each page of an already laid-out PDF and
   convert its character data into a frame tree (spans as text runs,
   grouped per block, per line, or not at all).
2. **Extraction** — walk the frame tree, split text runs into word,
   delimiter and whitespace tokens, and aggregate group tokens.
3. **Export** — write the tokens as word box JSON records.
4. **Rendering** — optionally render the pages into one merged image,
   with and without the token boxes drawn on top.

Usage::

    from wordboxes.pipeline import ExtractionConfig, WordBoxPipeline

    config = ExtractionConfig(include_delimiters=True)
    pipeline = WordBoxPipeline(config)
    result = pipeline.run("input.pdf", "words.json", render_boxes_path="boxes.png")
    print(result.summary())
"""

import logging
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Tuple

from PIL import Image
from tqdm import tqdm

from typeset.document.pdf_reader import PDFDocumentReader
from typeset.page.models import Document
from typeset.page.text_layer import GROUP_BY_BLOCK
from wordboxes.export import write_json
from wordboxes.extraction.models import Token, TokenKind
from wordboxes.extraction.walker import DEFAULT_PAGE_GAP, words_with_boxes
from wordboxes.render.overlay import BOX_COLOR, draw_token_boxes
from wordboxes.render.rasterizer import (
    DEFAULT_MAX_PAGE_SIZE,
    check_page_limits,
    render_merged,
)

logger = logging.getLogger(__name__)


# ------------------------------------------------------------------
# Configuration
# ------------------------------------------------------------------


@dataclass
class ExtractionConfig:
    """
    All tuneable parameters for the word box pipeline.

    Attributes:
        include_whitespace: Emit whitespace tokens.
        include_delimiters: Emit punctuation tokens.
        trim_words:         Strip surrounding whitespace from word labels.
        grouping:           Aggregate tokens per PDF "block", "line", or "none".
        page_gap:           Gap between stacked pages, in points.
        pixel_per_pt:       Render resolution for the PNG outputs.
        max_page_size:      Largest page side accepted for rendering, in points.
        page_range:         ``(start, end)`` 0-based inclusive, or ``None`` for all.
        include_kind:       Add ``kind``/``scope`` fields to the JSON records.
        box_color:          RGBA stroke colour for the overlay.
        disable_tqdm:       Suppress progress bars.
    """

    include_whitespace: bool = False
    include_delimiters: bool = False
    trim_words: bool = False
    grouping: str = GROUP_BY_BLOCK

    page_gap: float = DEFAULT_PAGE_GAP
    pixel_per_pt: float = 1.0
    max_page_size: float = DEFAULT_MAX_PAGE_SIZE

    page_range: Optional[Tuple[int, int]] = None

    include_kind: bool = False
    box_color: Tuple[int, int, int, int] = BOX_COLOR
    disable_tqdm: bool = False


# ------------------------------------------------------------------
# Result
# ------------------------------------------------------------------


@dataclass
class ExtractionResult:
    """
    Summary returned after extraction completes.

    The tokens themselves are kept so callers can inspect them without
    re-reading the JSON output.
    """

    output_path: str = ""
    render_path: Optional[str] = None
    render_boxes_path: Optional[str] = None
    total_pages: int = 0
    pages_processed: int = 0
    token_count: int = 0
    word_count: int = 0
    group_count: int = 0
    elapsed_seconds: float = 0.0

    time_load: float = 0.0
    time_extract: float = 0.0
    time_export: float = 0.0
    time_render: float = 0.0

    tokens: List[Token] = field(default_factory=list, repr=False)

    def summary(self) -> str:
        """Format a human-readable summary of the extraction run."""
        renders = [p for p in (self.render_path, self.render_boxes_path) if p]
        return (
            f"{'=' * 60}\n"
            f"EXTRACTION COMPLETE\n"
            f"{'=' * 60}\n"
            f"  Output:       {self.output_path}\n"
            f"  Renders:      {', '.join(renders) if renders else '-'}\n"
            f"  Pages:        {self.pages_processed} / {self.total_pages}\n"
            f"  Tokens:       {self.token_count} "
            f"({self.word_count} words, {self.group_count} groups)\n"
            f"\n"
            f"  Frame loading:    {self.time_load:.2f}s\n"
            f"  Extraction:       {self.time_extract:.3f}s\n"
            f"  JSON export:      {self.time_export:.3f}s\n"
            f"  Rendering:        {self.time_render:.2f}s\n"
            f"  Total wall time:  {self.elapsed_seconds:.2f}s\n"
            f"{'=' * 60}"
        )


# ------------------------------------------------------------------
# Pipeline
# ------------------------------------------------------------------


class WordBoxPipeline:
    """End-to-end word box extraction from a laid-out PDF."""

    def __init__(self, config: Optional[ExtractionConfig] = None):
        self.config = config or ExtractionConfig()

    def extract(self, document: Document) -> List[Token]:
        """Run extraction on an in-memory frame-tree document."""
        cfg = self.config
        return words_with_boxes(
            document,
            include_whitespace=cfg.include_whitespace,
            include_delimiters=cfg.include_delimiters,
            trim_words=cfg.trim_words,
            page_gap=cfg.page_gap,
        )

    def run(
        self,
        pdf_path: str,
        output_path: Optional[str] = None,
        render_path: Optional[str] = None,
        render_boxes_path: Optional[str] = None,
    ) -> ExtractionResult:
        """
        Extract word boxes from a PDF and write the requested outputs.

        Args:
            pdf_path:          Path to the input PDF.
            output_path:       Destination JSON file (``None`` to skip).
            render_path:       Merged page PNG (``None`` to skip).
            render_boxes_path: Merged page PNG with token boxes (``None`` to skip).

        Returns:
            :class:`ExtractionResult` with counts and timing.

        Raises:
            PageTooLargeError: When rendering is requested for oversized pages.
        """
        t_total = time.perf_counter()
        result = ExtractionResult(
            output_path=output_path or "",
            render_path=render_path,
            render_boxes_path=render_boxes_path,
        )

        with PDFDocumentReader(pdf_path) as reader:
            result.total_pages = reader.page_count

            # -- Phase 1: Frame loading ------------------------------------
            document = self._phase_load(reader, result)

            # -- Phase 2: Extraction ---------------------------------------
            tokens = self._phase_extract(document, result)

            # -- Phase 3: Export -------------------------------------------
            if output_path:
                self._phase_export(tokens, output_path, result)

            # -- Phase 4: Rendering ----------------------------------------
            if render_path or render_boxes_path:
                self._phase_render(
                    reader, document, tokens, render_path, render_boxes_path, result
                )

        result.elapsed_seconds = time.perf_counter() - t_total
        logger.info("\n%s", result.summary())
        return result

    # ------------------------------------------------------------------
    # Phase 1 — Frame loading
    # ------------------------------------------------------------------

    def _phase_load(
        self, reader: PDFDocumentReader, result: ExtractionResult
    ) -> Document:
        cfg = self.config
        t0 = time.perf_counter()
        logger.info("Phase 1: Loading page frames")

        pbar = tqdm(
            total=len(reader.page_indices(cfg.page_range)),
            desc="Loading frames",
            unit="page",
            disable=cfg.disable_tqdm,
        )

        def _advance(idx: int) -> None:
            pbar.set_postfix(page=f"{idx + 1}/{reader.page_count}")
            pbar.update(1)

        with pbar:
            document = reader.to_document(
                cfg.page_range, grouping=cfg.grouping, on_page=_advance
            )

        result.pages_processed = len(document)
        result.time_load = time.perf_counter() - t0
        logger.info(
            "Frames loaded: %d pages in %.2fs",
            result.pages_processed,
            result.time_load,
        )
        return document

    # ------------------------------------------------------------------
    # Phase 2 — Extraction
    # ------------------------------------------------------------------

    def _phase_extract(
        self, document: Document, result: ExtractionResult
    ) -> List[Token]:
        t0 = time.perf_counter()
        logger.info("Phase 2: Extracting word boxes")

        tokens = self.extract(document)

        result.tokens = tokens
        result.token_count = len(tokens)
        result.word_count = sum(1 for t in tokens if t.kind is TokenKind.WORD)
        result.group_count = sum(1 for t in tokens if t.is_group)
        result.time_extract = time.perf_counter() - t0

        logger.info(
            "Extraction complete: %d tokens (%d words, %d groups) in %.3fs",
            result.token_count,
            result.word_count,
            result.group_count,
            result.time_extract,
        )
        for token in tokens:
            logger.debug("%r", token)
        return tokens

    # ------------------------------------------------------------------
    # Phase 3 — Export
    # ------------------------------------------------------------------

    def _phase_export(
        self, tokens: List[Token], output_path: str, result: ExtractionResult
    ) -> None:
        t0 = time.perf_counter()
        out = write_json(tokens, output_path, include_kind=self.config.include_kind)
        result.time_export = time.perf_counter() - t0
        logger.info("Wrote word analysis to %s", out)

    # ------------------------------------------------------------------
    # Phase 4 — Rendering
    # ------------------------------------------------------------------

    def _phase_render(
        self,
        reader: PDFDocumentReader,
        document: Document,
        tokens: List[Token],
        render_path: Optional[str],
        render_boxes_path: Optional[str],
        result: ExtractionResult,
    ) -> None:
        cfg = self.config
        t0 = time.perf_counter()
        logger.info("Phase 4: Rendering merged pages")

        if not document.pages:
            logger.warning("No pages to render")
            return

        # Fail before rasterizing anything
        check_page_limits(document, cfg.max_page_size)

        page_images = [
            reader.render(page.number - 1, scale=cfg.pixel_per_pt)
            for page in tqdm(
                document.pages,
                desc="Rendering",
                unit="page",
                disable=cfg.disable_tqdm,
            )
        ]
        merged = render_merged(
            document,
            page_images,
            pixel_per_pt=cfg.pixel_per_pt,
            gap=cfg.page_gap,
            limit=cfg.max_page_size,
        )

        if render_path:
            _save_png(merged, render_path)
        if render_boxes_path:
            boxed = draw_token_boxes(
                merged, tokens, pixel_per_pt=cfg.pixel_per_pt, color=cfg.box_color
            )
            _save_png(boxed, render_boxes_path)

        result.time_render = time.perf_counter() - t0


def _save_png(image: Image.Image, path: str) -> None:
    out = Path(path)
    out.parent.mkdir(parents=True, exist_ok=True)
    image.save(str(out), format="PNG")
    logger.info("Rendered PNG to %s", out)
