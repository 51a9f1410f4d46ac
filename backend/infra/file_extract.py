# backend/infra/file_extract.py
"""
업로드 파일 → 분석용 텍스트 추출.

- .pdf  : PyMuPDF 로 앞 PDF_MAX_PAGES(10) 페이지만 읽는다.
          페이지마다 단어 토큰을 공백 하나로 잇고, 페이지 끝에 줄바꿈을 붙인다.
          11페이지 이후는 조용히 무시 (오류 아님)
- .docx : python-docx 로 본문 문단 텍스트만 (서식 버림)
- 그 외 : UTF-8 텍스트로 디코딩

실패하면 사용자에게 그대로 보여줄 메시지를 담은 ExtractionError 를 던진다.
중간까지 뽑은 텍스트는 버린다.
"""

from __future__ import annotations

import io
import logging
from pathlib import PurePath

import docx
import fitz  # PyMuPDF

from backend.core.config import PDF_MAX_PAGES
from backend.exceptions import ExtractionError

logger = logging.getLogger(__name__)

PDF_ERROR = "Failed to parse PDF."
DOCX_ERROR = "Failed to parse Word document."
FILE_ERROR = "Failed to process file."

ACCEPTED_EXTENSIONS = (".pdf", ".docx", ".txt")


def extract_pdf_text(data: bytes, max_pages: int = PDF_MAX_PAGES) -> str:
    try:
        doc = fitz.open(stream=data, filetype="pdf")
    except Exception as e:
        logger.warning("PDF 열기 실패: %s", e)
        raise ExtractionError(PDF_ERROR) from e

    parts: list[str] = []
    try:
        for page_index in range(min(doc.page_count, max_pages)):
            page = doc.load_page(page_index)
            # (x0, y0, x1, y1, word, block_no, line_no, word_no)
            words = [w[4] for w in page.get_text("words")]
            parts.append(" ".join(words) + "\n")
    except Exception as e:
        logger.warning("PDF 페이지 추출 실패 (page=%s): %s", len(parts) + 1, e)
        raise ExtractionError(PDF_ERROR) from e
    finally:
        doc.close()

    return "".join(parts)


def extract_docx_text(data: bytes) -> str:
    try:
        document = docx.Document(io.BytesIO(data))
        return "\n".join(p.text for p in document.paragraphs)
    except Exception as e:
        logger.warning("Word 문서 추출 실패: %s", e)
        raise ExtractionError(DOCX_ERROR) from e


def extract_plain_text(data: bytes) -> str:
    try:
        return data.decode("utf-8")
    except UnicodeDecodeError as e:
        logger.warning("텍스트 디코딩 실패: %s", e)
        raise ExtractionError(FILE_ERROR) from e


def extract_text(filename: str, data: bytes) -> str:
    """확장자(소문자)로 추출기를 고른다. 알 수 없는 확장자는 텍스트로 취급."""
    suffix = PurePath(filename or "").suffix.lower()

    if suffix == ".pdf":
        return extract_pdf_text(data)
    if suffix == ".docx":
        return extract_docx_text(data)
    return extract_plain_text(data)
