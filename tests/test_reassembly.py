from pathlib import Path

import docx
import pytest

from docflow.segments import (
    DocumentSegment,
    UnsupportedFormatError,
    build_segments,
    extract,
    extract_document,
    reassemble,
)
from docflow.segments.reassembly import PDF_FOOTER, PDF_HEADER

THREE_CUES = (
    "1\n00:00:01,000 --> 00:00:02,000\nGood morning\neveryone\n\n"
    "2\n00:00:03,000 --> 00:00:04,000\nSecond cue\n\n"
    "3\n00:00:05,000 --> 00:00:06,000\nThird cue\nsplit over lines\n"
)


def _mirrored(texts: list[str]) -> list[DocumentSegment]:
    return [DocumentSegment(index=i, source_text=text, target_text=text) for i, text in enumerate(texts)]


def test_plain_text_output_prefers_target_text(tmp_path: Path) -> None:
    original = tmp_path / "source.txt"
    original.write_text("One. Two. Three.", encoding="utf-8")
    segments = [
        DocumentSegment(index=0, source_text="One.", target_text="Uno."),
        DocumentSegment(index=1, source_text="Two."),
        DocumentSegment(index=2, source_text="Three.", target_text=""),
    ]

    output = reassemble(original, segments, tmp_path / "out.txt")

    assert output.read_text(encoding="utf-8") == "Uno. Two. Three."


def test_segments_are_written_in_index_order(tmp_path: Path) -> None:
    original = tmp_path / "source.txt"
    original.write_text("A. B.", encoding="utf-8")
    segments = [
        DocumentSegment(index=1, source_text="B.", target_text="Second."),
        DocumentSegment(index=0, source_text="A.", target_text="First."),
    ]

    output = reassemble(original, segments, tmp_path / "out.txt")

    assert output.read_text(encoding="utf-8") == "First. Second."
    assert [segment.index for segment in segments] == [1, 0]


def test_plain_text_round_trip(tmp_path: Path) -> None:
    original = tmp_path / "story.txt"
    original.write_text("  It was late.  The road was empty!\nWho knew?  ", encoding="utf-8")

    output = reassemble(original, _mirrored(extract(original)), tmp_path / "story_out.txt")

    assert output.read_text(encoding="utf-8") == "It was late. The road was empty. Who knew."
    assert extract(output) == extract(original)


def test_subtitle_output_replaces_cue_text(tmp_path: Path) -> None:
    original = tmp_path / "movie.srt"
    original.write_text(THREE_CUES, encoding="utf-8")
    segments = [
        DocumentSegment(index=0, source_text="Good morning everyone", target_text="Guten Morgen alle"),
        DocumentSegment(index=1, source_text="Second cue", target_text="Zweiter"),
        DocumentSegment(index=2, source_text="Third cue split over lines", target_text="Dritter"),
    ]

    output = reassemble(original, segments, tmp_path / "movie_de.srt")

    assert output.read_text(encoding="utf-8") == (
        "1\n00:00:01,000 --> 00:00:02,000\nGuten Morgen alle\n\n"
        "2\n00:00:03,000 --> 00:00:04,000\nZweiter\n\n"
        "3\n00:00:05,000 --> 00:00:06,000\nDritter"
    )


def test_subtitle_output_keeps_original_lines_past_segment_count(tmp_path: Path) -> None:
    original = tmp_path / "movie.srt"
    original.write_text(THREE_CUES, encoding="utf-8")
    segments = [DocumentSegment(index=0, source_text="Good morning everyone", target_text="Bonjour")]

    output = reassemble(original, segments, tmp_path / "movie_fr.srt")

    assert output.read_text(encoding="utf-8") == (
        "1\n00:00:01,000 --> 00:00:02,000\nBonjour\n\n"
        "2\n00:00:03,000 --> 00:00:04,000\nSecond cue\n\n"
        "3\n00:00:05,000 --> 00:00:06,000\nThird cue\nsplit over lines"
    )


def test_subtitle_output_keeps_original_lines_without_translation(tmp_path: Path) -> None:
    original = tmp_path / "movie.srt"
    original.write_text(THREE_CUES, encoding="utf-8")
    segments = build_segments(extract(original))

    output = reassemble(original, segments, tmp_path / "copy.srt")

    assert output.read_text(encoding="utf-8") == THREE_CUES.strip()


def test_subtitle_output_drops_short_blocks(tmp_path: Path) -> None:
    original = tmp_path / "noisy.srt"
    original.write_text(
        "WEBVTT header\n\n1\n00:00:01,000 --> 00:00:02,000\nHello\n\n2\n00:00:03,000 --> 00:00:04,000\nWorld\n",
        encoding="utf-8",
    )
    segments = _mirrored(["Hallo", "Welt"])

    output = reassemble(original, segments, tmp_path / "clean.srt")

    assert output.read_text(encoding="utf-8") == (
        "1\n00:00:01,000 --> 00:00:02,000\nHallo\n\n2\n00:00:03,000 --> 00:00:04,000\nWelt"
    )


def test_subtitle_round_trip_is_equivalent(srt_file: Path, tmp_path: Path) -> None:
    output = reassemble(srt_file, _mirrored(extract(srt_file)), tmp_path / "again.srt")

    assert extract(output) == extract(srt_file) == ["Hello", "World"]


def test_subtitle_layout_passed_forward_skips_rereading_original(tmp_path: Path) -> None:
    original = tmp_path / "movie.srt"
    original.write_text(THREE_CUES, encoding="utf-8")
    document = extract_document(original)
    segments = document.to_segments()
    segments[1].target_text = "Translated"
    original.unlink()

    output = reassemble(original, segments, tmp_path / "out.srt", subtitle_blocks=document.subtitle_blocks)

    assert "2\n00:00:03,000 --> 00:00:04,000\nTranslated" in output.read_text(encoding="utf-8")


def test_unknown_output_extension_falls_back_to_plain_text(tmp_path: Path) -> None:
    original = tmp_path / "movie.srt"
    original.write_text(THREE_CUES, encoding="utf-8")
    segments = _mirrored(["a", "b", "c"])

    output = reassemble(original, segments, tmp_path / "result.xyz")

    assert output.read_text(encoding="utf-8") == "a b c"


def test_unknown_output_extension_never_raises_unsupported_format(tmp_path: Path) -> None:
    original = tmp_path / "source.txt"
    original.write_text("Hi.", encoding="utf-8")

    try:
        reassemble(original, _mirrored(["Hi."]), tmp_path / "result.weird")
    except UnsupportedFormatError:  # pragma: no cover - failure path
        pytest.fail("reassemble raised UnsupportedFormatError for an unknown extension")


def test_pdf_output_is_numbered_text_rendering(tmp_path: Path) -> None:
    original = tmp_path / "report.pdf"
    original.write_bytes(b"%PDF-1.4\n%%EOF")
    segments = [
        DocumentSegment(index=0, source_text="First.", target_text="Premier."),
        DocumentSegment(index=1, source_text="Second."),
    ]

    output = reassemble(original, segments, tmp_path / "translated_report.pdf")
    content = output.read_text(encoding="utf-8")

    assert content == PDF_HEADER + "1. Premier.\n\n2. Second." + PDF_FOOTER
    assert content.startswith("TRANSLATED DOCUMENT\n")


def test_docx_output_round_trip(tmp_path: Path) -> None:
    document = docx.Document()
    document.add_paragraph("Open the door. Close the window!")
    original = tmp_path / "memo.docx"
    document.save(original)

    segments = _mirrored(extract(original))
    output = reassemble(original, segments, tmp_path / "memo_out.docx")

    written = [p.text for p in docx.Document(output).paragraphs if p.text]
    assert written == ["Open the door.", "Close the window."]
    assert extract(output) == extract(original)


def test_reassemble_leaves_inputs_untouched(srt_file: Path, tmp_path: Path) -> None:
    before = srt_file.read_text(encoding="utf-8")
    segments = [DocumentSegment(index=0, source_text="Hello", target_text="Hej")]

    reassemble(srt_file, segments, tmp_path / "out.srt")

    assert srt_file.exists()
    assert srt_file.read_text(encoding="utf-8") == before
    assert segments == [DocumentSegment(index=0, source_text="Hello", target_text="Hej")]
