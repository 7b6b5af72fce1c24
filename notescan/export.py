"""Output artifacts for a finished transcription: plain text and a print-ready HTML page."""
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path

from jinja2 import Environment, FileSystemLoader, select_autoescape

from notescan.constants import (
    EXPORT_FILENAME,
    EXPORT_GENERATED_ON,
    EXPORT_MONTHS,
    EXPORT_REVIEW_NOTE,
    EXPORT_TITLE,
    EXPORT_WEEKDAYS,
    TELEGRAM_MAX_MESSAGE_LENGTH,
)
from notescan.session import TranscriptionResult

TEMPLATE_DIR = Path(__file__).parent / "templates"
PRINT_TEMPLATE = "print.html"


@dataclass(frozen=True)
class ExportFile:
    filename: str
    content: bytes
    mime_type: str


def export_filename(produced_at: datetime, extension: str) -> str:
    return EXPORT_FILENAME % (produced_at.strftime("%Y-%m-%d"), extension)


def format_long_date(value: datetime) -> str:
    """'lunes, 19 de octubre de 2026' without depending on the process locale."""
    weekday = EXPORT_WEEKDAYS[value.weekday()]
    month = EXPORT_MONTHS[value.month - 1]
    return f"{weekday}, {value.day} de {month} de {value.year}"


def to_text_file(result: TranscriptionResult) -> ExportFile:
    return ExportFile(
        filename=export_filename(result.produced_at, "txt"),
        content=result.text.encode("utf-8"),
        mime_type="text/plain",
    )


def to_print_file(result: TranscriptionResult) -> ExportFile:
    """Render the transcription as a standalone HTML page for Print → Save as PDF."""
    env = Environment(
        loader=FileSystemLoader(TEMPLATE_DIR),
        autoescape=select_autoescape(["html", "xml"]),
    )
    html = env.get_template(PRINT_TEMPLATE).render(
        title=EXPORT_TITLE,
        generated=EXPORT_GENERATED_ON % format_long_date(result.produced_at),
        text=result.text,
        review_note=EXPORT_REVIEW_NOTE,
    )
    return ExportFile(
        filename=export_filename(result.produced_at, "html"),
        content=html.encode("utf-8"),
        mime_type="text/html",
    )


def split_message(text: str, limit: int = TELEGRAM_MAX_MESSAGE_LENGTH) -> list[str]:
    """Split text into chunks no longer than ``limit``, preferring line breaks."""
    chunks: list[str] = []
    remaining = text
    while len(remaining) > limit:
        cut = remaining.rfind("\n", 0, limit)
        match cut:
            case -1 | 0:
                cut = limit
            case _:
                pass
        chunks.append(remaining[:cut])
        remaining = remaining[cut:].lstrip("\n")
    match remaining:
        case "":
            pass
        case rest:
            chunks.append(rest)
    return chunks
