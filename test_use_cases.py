"""Tests for ExtractDocumentUseCase and the download filename helper."""

import asyncio

import pytest

from features.extraction.application.dtos import ExtractDocumentRequestDTO
from features.extraction.application.use_cases import (
    ExtractDocumentUseCase,
    text_download_filename,
)
from features.extraction.domain.errors import UnsupportedFormatError


@pytest.mark.parametrize(
    "filename, expected",
    [
        ("scan.pdf", "scan.txt"),
        ("scan.final.pdf", "scan.final.txt"),
        ("photo", "photo.txt"),
        ("uploads/2024/photo.JPG", "photo.txt"),
        ("C:\\Users\\me\\invoice.png", "invoice.txt"),
        (".pdf", "extracted.txt"),
        ("", "extracted.txt"),
        (None, "extracted.txt"),
    ],
)
def test_text_download_filename(filename, expected):
    assert text_download_filename(filename) == expected


def test_execute_extracts_and_analyzes(pipeline_factory):
    fx = pipeline_factory(pages=["", "Notes about #ml models and more models."], ocr_texts={1: "Cover page #ML"})
    use_case = ExtractDocumentUseCase(pipeline=fx.pipeline)
    events = []

    dto = asyncio.run(
        use_case.execute(
            ExtractDocumentRequestDTO(data=b"%PDF", mime_hint="application/pdf", filename="deck.pdf"),
            on_progress=events.append,
        )
    )

    assert dto.text == "Cover page #ML\n\nNotes about #ml models and more models."
    assert dto.source_kind == "pdf"
    assert [(p.index, p.decision) for p in dto.pages] == [(1, "ocr_required"), (2, "native_text")]
    assert dto.analysis.hashtags == [("#ml", 2)]
    assert dto.analysis.top_words[0] == ("models", 2)
    assert dto.download_filename == "deck.txt"
    assert not dto.empty
    assert len(dto.progress) == len(events)
    assert dto.progress[-1].state == "done"


def test_execute_empty_text_gives_empty_analysis(pipeline_factory):
    fx = pipeline_factory(pages=[""], ocr_default="")
    use_case = ExtractDocumentUseCase(pipeline=fx.pipeline)

    dto = asyncio.run(use_case.execute(ExtractDocumentRequestDTO(data=b"%PDF", mime_hint="application/pdf")))

    assert dto.empty
    assert dto.analysis.hashtags == []
    assert dto.analysis.top_words == []
    assert dto.download_filename == "extracted.txt"


def test_execute_propagates_extraction_errors(pipeline_factory):
    use_case = ExtractDocumentUseCase(pipeline=pipeline_factory().pipeline)

    with pytest.raises(UnsupportedFormatError):
        asyncio.run(use_case.execute(ExtractDocumentRequestDTO(data=b"x", mime_hint="text/csv")))
