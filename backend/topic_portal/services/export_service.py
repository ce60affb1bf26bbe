"""
Submission export rendering.

Turns a list of stored submissions into a downloadable CSV table or a Word
report. Row layout and date formatting are shared by both formats so the
two exports always agree.
"""
import csv
import io
import logging
from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum
from typing import List, Optional, Sequence

import pytz
from docx import Document
from docx.enum.text import WD_ALIGN_PARAGRAPH
from docx.shared import Pt

from topic_portal.core.errors import NoSubmissionsError, UnsupportedExportFormatError
from topic_portal.models.submission import TopicSubmission, utcnow
from topic_portal.schemas.submission import Discipline

logger = logging.getLogger(__name__)

COLUMNS = ["S/N", "Full Name", "Matric Number", "Discipline", "Project Topic", "Date Submitted"]


class ExportFormat(str, Enum):
    CSV = "csv"
    DOCX = "docx"

    @property
    def media_type(self) -> str:
        if self is ExportFormat.CSV:
            return "text/csv"
        return "application/vnd.openxmlformats-officedocument.wordprocessingml.document"

    @classmethod
    def parse(cls, value: Optional[str]) -> "ExportFormat":
        try:
            return cls(value or cls.CSV.value)
        except ValueError:
            raise UnsupportedExportFormatError() from None


@dataclass
class ExportFile:
    filename: str
    media_type: str
    content: bytes


class ExportService:
    def __init__(self, timezone: str = "UTC"):
        self.tz = pytz.timezone(timezone)

    def format_datetime(self, value: datetime) -> str:
        """Render a stored UTC timestamp as e.g. 'October 19, 2026 at 02:30 PM'."""
        if value.tzinfo is None:
            value = pytz.utc.localize(value)
        local = value.astimezone(self.tz)
        return f"{local:%B} {local.day}, {local:%Y} at {local:%I:%M %p}"

    def build_rows(self, submissions: Sequence[TopicSubmission]) -> List[List[str]]:
        rows = []
        for index, item in enumerate(submissions, start=1):
            rows.append([
                str(index),
                item.full_name,
                item.matric_number,
                item.discipline.capitalize(),
                item.project_topic,
                self.format_datetime(item.created_at),
            ])
        return rows

    @staticmethod
    def build_filename(export_format: ExportFormat, discipline: Optional[Discipline], today: date) -> str:
        prefix = f"{discipline.value}-submissions" if discipline else "topic-submissions"
        return f"{prefix}-{today.isoformat()}.{export_format.value}"

    def render_csv(self, rows: List[List[str]]) -> bytes:
        output = io.StringIO()
        writer = csv.writer(output)
        writer.writerow(COLUMNS)
        writer.writerows(rows)
        return output.getvalue().encode("utf-8")

    def render_docx(self, rows: List[List[str]], discipline: Optional[Discipline], generated_at: datetime) -> bytes:
        label = discipline.label if discipline else "All Disciplines"
        doc = Document()

        title = doc.add_paragraph()
        title.alignment = WD_ALIGN_PARAGRAPH.CENTER
        title_run = title.add_run(f"Topic Submissions Report - {label}")
        title_run.bold = True
        title_run.font.size = Pt(16)

        generated = doc.add_paragraph()
        generated.alignment = WD_ALIGN_PARAGRAPH.CENTER
        generated_run = generated.add_run(f"Generated on: {self.format_datetime(generated_at)}")
        generated_run.font.size = Pt(10)

        doc.add_paragraph("")

        table = doc.add_table(rows=1, cols=len(COLUMNS))
        table.style = "Table Grid"
        for cell, heading in zip(table.rows[0].cells, COLUMNS):
            cell.paragraphs[0].add_run(heading).bold = True
        for row in rows:
            cells = table.add_row().cells
            for cell, value in zip(cells, row):
                cell.text = value

        buffer = io.BytesIO()
        doc.save(buffer)
        return buffer.getvalue()

    def export(
        self,
        submissions: Sequence[TopicSubmission],
        export_format: ExportFormat,
        discipline: Optional[Discipline] = None,
        now: Optional[datetime] = None,
    ) -> ExportFile:
        """
        Render submissions into an attachment.

        Args:
            submissions: records to export, already ordered
            export_format: csv or docx
            discipline: the filter that produced the records, used for the title and filename
            now: generation time (naive UTC), defaults to the current time

        Returns:
            ExportFile: filename, content type and rendered bytes

        Raises:
            NoSubmissionsError: nothing to export
        """
        if not submissions:
            raise NoSubmissionsError()
        now = now or utcnow()
        rows = self.build_rows(submissions)
        if export_format is ExportFormat.CSV:
            content = self.render_csv(rows)
        else:
            content = self.render_docx(rows, discipline, now)
        filename = self.build_filename(export_format, discipline, now.date())
        logger.info("Exported %d submissions as %s (%s)", len(rows), export_format.value, filename)
        return ExportFile(filename=filename, media_type=export_format.media_type, content=content)
