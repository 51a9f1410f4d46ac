import io

import docx
import fitz
import pytest

from backend.exceptions import ExtractionError
from backend.infra.file_extract import (
    DOCX_ERROR,
    FILE_ERROR,
    PDF_ERROR,
    extract_text,
)


def make_pdf(page_texts):
    doc = fitz.open()
    for text in page_texts:
        page = doc.new_page()
        if text:
            page.insert_text((72, 72), text)
    data = doc.tobytes()
    doc.close()
    return data


def make_docx(paragraphs):
    document = docx.Document()
    for text in paragraphs:
        document.add_paragraph(text)
    buf = io.BytesIO()
    document.save(buf)
    return buf.getvalue()


class TestPdf:
    def test_only_first_ten_pages_each_newline_terminated(self):
        data = make_pdf([f"page{n} alpha beta" for n in range(1, 16)])

        text = extract_text("report.PDF", data)

        lines = text.split("\n")
        assert text.endswith("\n")
        assert lines[:-1] == [f"page{n} alpha beta" for n in range(1, 11)]
        assert "page11" not in text

    def test_words_joined_by_single_space(self):
        data = make_pdf(["spread    out     words"])
        assert extract_text("a.pdf", data) == "spread out words\n"

    def test_empty_page_still_terminated(self):
        data = make_pdf(["first", "", "third"])
        assert extract_text("a.pdf", data) == "first\n\nthird\n"

    def test_broken_pdf(self):
        with pytest.raises(ExtractionError) as exc:
            extract_text("broken.pdf", b"definitely not a pdf")
        assert str(exc.value) == PDF_ERROR


class TestDocx:
    def test_raw_paragraph_text(self):
        data = make_docx(["Quarterly results", "Revenue grew 12%."])
        assert extract_text("memo.docx", data) == "Quarterly results\nRevenue grew 12%."

    def test_broken_docx(self):
        with pytest.raises(ExtractionError) as exc:
            extract_text("memo.docx", b"PK-not-really-a-zip")
        assert str(exc.value) == DOCX_ERROR


class TestPlainText:
    def test_txt_read_as_is(self):
        assert extract_text("notes.txt", "héllo\nworld".encode("utf-8")) == "héllo\nworld"

    def test_unknown_extension_treated_as_text(self):
        assert extract_text("data.csv", b"a,b,c") == "a,b,c"

    def test_undecodable_bytes(self):
        with pytest.raises(ExtractionError) as exc:
            extract_text("notes.txt", b"\xff\xfe\xfa\xfb")
        assert str(exc.value) == FILE_ERROR
