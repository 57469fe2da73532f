"""Render an import result into a static HTML preview."""
from __future__ import annotations

from html import escape
from pathlib import Path
from typing import Iterable, List, Protocol, Sequence

from idml_importer.model.import_model import ImportResult, InfoTeaser, ParallaxItem, Teaser


class RecordConsumer(Protocol):
    """Anything that accepts a finished import result."""

    def render(self, result: ImportResult) -> None:
        ...


class HtmlRenderer:
    """Produce a reviewable HTML page of the extracted records and reports."""

    def __init__(self, output_path: Path) -> None:
        self._output_path = output_path

    def render(self, result: ImportResult) -> None:
        self._output_path.write_text(self.build_html(result), encoding="utf-8")

    def build_html(self, result: ImportResult) -> str:
        sections: List[str] = [
            f"  <h1>{escape(result.headline)}</h1>",
            f"  <p class=\"lead\">{escape(result.lead)}</p>",
        ]
        if result.teasers:
            sections.append(self._records("Teasers", result.teasers))
        if result.info_teasers:
            sections.append(self._records("Info teasers", result.info_teasers))
        if result.parallax_items:
            sections.append(self._records("Parallax items", result.parallax_items))
        if result.image_report:
            sections.append(
                self._table(
                    "Images",
                    ("Kind", "Label", "Expected file", "Attachment"),
                    ((row.kind, row.label, row.expected_file, str(row.attachment_id)) for row in result.image_report),
                )
            )
        if result.order_report:
            sections.append(
                self._table(
                    "Order",
                    ("Story", "Label", "Order"),
                    ((row.story_id, row.label, str(row.order)) for row in result.order_report),
                )
            )
        if result.warnings:
            items = "\n".join(f"    <li>{escape(warning)}</li>" for warning in result.warnings)
            sections.append(f"  <h2>Warnings</h2>\n  <ul class=\"warnings\">\n{items}\n  </ul>")

        body = "\n".join(sections)
        return f"""<!DOCTYPE html>
<html lang=\"de\">
<head>
  <meta charset=\"utf-8\" />
  <title>IDML Import Preview ({escape(result.layout)})</title>
  <style>
    body {{ font-family: sans-serif; margin: 2em; }}
    .record {{ border-top: 1px solid #ccc; padding: 0.5em 0; }}
    .warnings li {{ color: #a00; }}
    td, th {{ text-align: left; padding: 0.2em 0.6em; }}
  </style>
</head>
<body>
{body}
</body>
</html>
"""

    def _records(self, title: str, records: Sequence[object]) -> str:
        blocks = "\n".join(self._record_to_div(record) for record in records)
        return f"  <h2>{escape(title)}</h2>\n{blocks}"

    def _record_to_div(self, record: object) -> str:
        if isinstance(record, ParallaxItem):
            fields = [("Ort", record.location), ("Titel", record.title), ("Text", record.body)]
        elif isinstance(record, (Teaser, InfoTeaser)):
            fields = [
                ("Ort", record.location),
                ("Headline", record.headline),
                ("Intro", record.intro),
                ("URL", record.url),
            ]
        else:
            raise TypeError(f"Unsupported record type {type(record).__name__}")
        fields.append(("Bild", record.image_basename))
        rows = "\n".join(
            f"    <p><b>{label}:</b> {escape(value)}</p>" for label, value in fields if value
        )
        return f"  <div class=\"record\" data-story=\"{escape(record.story_id)}\">\n{rows}\n  </div>"

    def _table(self, title: str, header: Sequence[str], rows: Iterable[Sequence[str]]) -> str:
        head = "".join(f"<th>{escape(cell)}</th>" for cell in header)
        body = "\n".join("    <tr>" + "".join(f"<td>{escape(cell)}</td>" for cell in row) + "</tr>" for row in rows)
        return f"  <h2>{escape(title)}</h2>\n  <table>\n    <tr>{head}</tr>\n{body}\n  </table>"
