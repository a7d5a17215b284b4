from __future__ import annotations  # Styled PDF rendering for interview reports

import re
from datetime import datetime
from pathlib import Path
from typing import Any, List, Sequence, Tuple

from fpdf import FPDF
from fpdf.enums import XPos, YPos

from .models import InterviewReport, ReportComment


DEJAVU_SANS = "/usr/share/fonts/truetype/dejavu/DejaVuSans.ttf"  # System font
DEJAVU_SANS_BOLD = "/usr/share/fonts/truetype/dejavu/DejaVuSans-Bold.ttf"  # System font

ACCENT = (45, 115, 245)  # Palette accent
TEXT = (34, 34, 34)  # Primary text color
MUTED = (100, 100, 100)  # Secondary text color
RULE = (230, 230, 230)  # Divider color
SOFT_ACCENT_BG = (243, 248, 255)  # Highlight background
DANGER = (200, 60, 60)  # Red flag color

CATEGORY_LABELS: List[Tuple[str, str]] = [
    ("technical", "Technical"),
    ("communication", "Communication"),
    ("cultural_fit", "Cultural Fit"),
    ("experience", "Experience"),
    ("problem_solving", "Problem Solving"),
]


def _format_datetime(value: datetime | None) -> str:  # Format timestamp for display
    if not value:
        return "-"
    return value.strftime("%d %b %Y, %I:%M %p").lstrip("0").replace(" 0", " ")


def _effective_width(pdf: FPDF) -> float:  # Compute effective page width
    return float(pdf.w) - float(pdf.l_margin) - float(pdf.r_margin)


def _plain(text: str) -> str:  # Strip markdown emphasis from generated text
    return re.sub(r"\*\*(.+?)\*\*", r"\1", text or "").strip()


class ReportPDF(FPDF):  # PDF with custom header/footer styling
    def __init__(self, *args, accent: Tuple[int, int, int] = ACCENT, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self.accent = accent
        self.header_title = "Interview Report"
        self._font_regular = "Helvetica"
        self._font_bold = "Helvetica"
        self._supports_unicode = False

    def use_unicode_fonts(self) -> None:  # Switch to DejaVu when installed
        if not (Path(DEJAVU_SANS).exists() and Path(DEJAVU_SANS_BOLD).exists()):
            return
        self.add_font("DejaVu", "", DEJAVU_SANS)
        self.add_font("DejaVu", "B", DEJAVU_SANS_BOLD)
        self._font_regular = "DejaVu"
        self._font_bold = "DejaVu"
        self._supports_unicode = True

    def _prepare_text(self, text: Any) -> str:  # Sanitize text for non-unicode fonts
        value = "" if text is None else str(text)
        if self._supports_unicode:
            return value
        cleaned = value.replace("•", "-").replace("⚠️", "!").replace("…", "...")
        return cleaned.encode("latin-1", "ignore").decode("latin-1")

    def cell(self, w=None, h=None, text="", *args, **kwargs):  # Wrap base cell with text sanitisation
        return super().cell(w, h, self._prepare_text(text), *args, **kwargs)

    def multi_cell(self, w, h=None, text="", *args, **kwargs):  # Wrap base multi_cell with text sanitisation
        return super().multi_cell(w, h, self._prepare_text(text), *args, **kwargs)

    def header(self) -> None:  # Render header banner
        usable = _effective_width(self)
        if self.page_no() == 1:
            self.set_fill_color(*self.accent)
            self.rect(0, 0, self.w, 20, style="F")
            self.set_text_color(255, 255, 255)
            self.set_font(self._font_bold, "B", 16)
            self.set_xy(self.l_margin, 6)
            self.multi_cell(usable, 8, self.header_title)
            self.set_text_color(*TEXT)
            self.set_y(24)
        else:
            self.set_text_color(80, 80, 80)
            self.set_xy(self.l_margin, 8)
            self.set_font(self._font_bold, "B", 12)
            self.multi_cell(usable, 6, self.header_title)
            mark = self.get_y()
            self.set_draw_color(*self.accent)
            self.set_line_width(0.4)
            self.line(self.l_margin, mark + 1, self.w - self.r_margin, mark + 1)
            self.set_text_color(*TEXT)
            self.ln(4)

    def footer(self) -> None:  # Render footer with pagination
        self.set_y(-12)
        self.set_draw_color(*RULE)
        self.set_line_width(0.2)
        self.line(self.l_margin, self.get_y(), self.w - self.r_margin, self.get_y())
        self.set_text_color(120, 120, 120)
        self.set_font(self._font_regular, "", 9)
        self.cell(0, 10, f"Page {self.page_no()}/{{nb}}", align="R")


def _section_title(pdf: ReportPDF, title: str) -> None:  # Render styled section title
    pdf.set_text_color(*TEXT)
    pdf.set_x(pdf.l_margin)
    pdf.set_font(pdf._font_bold, "B", 13)
    pdf.cell(0, 9, title, new_x=XPos.LMARGIN, new_y=YPos.NEXT)
    pdf.set_draw_color(*RULE)
    pdf.set_line_width(0.2)
    y = pdf.get_y()
    pdf.line(pdf.l_margin, y, pdf.l_margin + _effective_width(pdf), y)
    pdf.ln(2)


def _meta_block(pdf: ReportPDF, rows: List[Tuple[str, str]]) -> None:  # Draw two-column metadata
    col = _effective_width(pdf) / 2.0
    line = 6
    for idx in range(0, len(rows), 2):
        left = rows[idx]
        right = rows[idx + 1] if idx + 1 < len(rows) else ("", "")
        pdf.set_x(pdf.l_margin)
        pdf.set_text_color(*MUTED)
        pdf.set_font(pdf._font_regular, "", 10)
        pdf.cell(col, line, left[0], new_x=XPos.RIGHT, new_y=YPos.TOP)
        pdf.cell(col, line, right[0], new_x=XPos.LMARGIN, new_y=YPos.NEXT)
        pdf.set_x(pdf.l_margin)
        pdf.set_text_color(*TEXT)
        pdf.set_font(pdf._font_bold, "B", 11)
        pdf.cell(col, line, left[1], new_x=XPos.RIGHT, new_y=YPos.TOP)
        pdf.cell(col, line, right[1], new_x=XPos.LMARGIN, new_y=YPos.NEXT)
    pdf.ln(2)


def _paragraph(pdf: ReportPDF, text: str, *, color: Tuple[int, int, int] = TEXT) -> None:  # Body text block
    pdf.set_x(pdf.l_margin)
    pdf.set_text_color(*color)
    pdf.set_font(pdf._font_regular, "", 11)
    pdf.multi_cell(_effective_width(pdf), 6, text or "-", new_x=XPos.LMARGIN, new_y=YPos.NEXT)
    pdf.set_text_color(*TEXT)
    pdf.ln(2)


def _bullet_list(pdf: ReportPDF, items: Sequence[str], *, empty: str, color: Tuple[int, int, int] = TEXT) -> None:
    if not items:
        _paragraph(pdf, empty, color=MUTED)
        return
    bullet = "•" if pdf._supports_unicode else "-"
    pdf.set_text_color(*color)
    pdf.set_font(pdf._font_regular, "", 11)
    for item in items:
        pdf.set_x(pdf.l_margin)
        pdf.multi_cell(_effective_width(pdf), 6, f"{bullet} {item}", new_x=XPos.LMARGIN, new_y=YPos.NEXT)
    pdf.set_text_color(*TEXT)
    pdf.ln(2)


def _render_score_table(pdf: ReportPDF, report: InterviewReport) -> None:  # Draw category score table
    widths = [_effective_width(pdf) * 0.6, _effective_width(pdf) * 0.4]
    pdf.set_x(pdf.l_margin)
    pdf.set_fill_color(*ACCENT)
    pdf.set_text_color(255, 255, 255)
    pdf.set_font(pdf._font_bold, "B", 10)
    pdf.cell(widths[0], 8, "Category", align="L", fill=True)
    pdf.cell(widths[1], 8, "Score", align="L", fill=True)
    pdf.ln(8)
    pdf.set_text_color(*TEXT)
    pdf.set_font(pdf._font_regular, "", 10)
    scores = report.analysis.category_scores
    for idx, (field, label) in enumerate(CATEGORY_LABELS):
        fill = idx % 2 == 0
        if fill:
            pdf.set_fill_color(247, 250, 255)
        pdf.set_x(pdf.l_margin)
        pdf.cell(widths[0], 7, label, border=0, fill=fill)
        pdf.cell(widths[1], 7, f"{getattr(scores, field)}/100", border=0, fill=fill)
        pdf.ln(7)
    pdf.ln(2)


def _render_overall(pdf: ReportPDF, report: InterviewReport) -> None:  # Highlighted overall score banner
    pdf.set_x(pdf.l_margin)
    pdf.set_fill_color(*SOFT_ACCENT_BG)
    pdf.rect(pdf.l_margin, pdf.get_y(), _effective_width(pdf), 16, style="F")
    pdf.set_xy(pdf.l_margin + 6, pdf.get_y() + 4)
    pdf.set_text_color(*MUTED)
    pdf.set_font(pdf._font_regular, "", 10)
    pdf.cell(_effective_width(pdf) - 12, 6, f"Overall Score ({report.analysis.recommendation.value})")
    pdf.set_xy(pdf.l_margin, pdf.get_y() - 2)
    pdf.set_text_color(*ACCENT)
    pdf.set_font(pdf._font_bold, "B", 14)
    pdf.cell(_effective_width(pdf) - 6, 8, f"{report.analysis.overall_score}/100", align="R")
    pdf.ln(12)
    pdf.set_text_color(*TEXT)


def _render_comments(pdf: ReportPDF, comments: Sequence[ReportComment]) -> None:  # Reviewer discussion
    for comment in comments:
        indent = 8 if comment.parent_id else 0
        pdf.set_x(pdf.l_margin + indent)
        pdf.set_text_color(*ACCENT)
        pdf.set_font(pdf._font_bold, "B", 10)
        stamp = _format_datetime(comment.created_at)
        edited = " (edited)" if comment.is_edited else ""
        pdf.cell(0, 6, f"{comment.user_name} - {stamp}{edited}", new_x=XPos.LMARGIN, new_y=YPos.NEXT)
        pdf.set_x(pdf.l_margin + indent)
        pdf.set_text_color(*TEXT)
        pdf.set_font(pdf._font_regular, "", 10)
        pdf.multi_cell(_effective_width(pdf) - indent, 5.5, comment.content, new_x=XPos.LMARGIN, new_y=YPos.NEXT)
        pdf.ln(1)


def generate_report_pdf(  # Build PDF payload for an interview report
    report: InterviewReport,
    comments: Sequence[ReportComment] = (),
) -> bytes:
    pdf = ReportPDF()
    pdf.use_unicode_fonts()
    pdf.alias_nb_pages()
    candidate = report.candidate_name or report.candidate_id
    role = report.job_title or report.job_id
    pdf.header_title = f"{role} - {candidate} - Interview Report"
    pdf.set_margins(15, 22, 15)
    pdf.set_auto_page_break(auto=True, margin=15)
    pdf.add_page()

    _section_title(pdf, "Report Overview")
    _meta_block(
        pdf,
        [
            ("Candidate", candidate),
            ("Role", role),
            ("Status", report.status.value),
            ("Version", str(report.version)),
            ("Created", _format_datetime(report.created_at)),
            ("Updated", _format_datetime(report.updated_at)),
            ("Finalized", _format_datetime(report.finalized_at)),
            ("Finalized By", report.finalized_by or "-"),
        ],
    )

    _render_overall(pdf, report)

    _section_title(pdf, "Executive Summary")
    _paragraph(pdf, report.executive_summary)

    _section_title(pdf, "Category Scores")
    _render_score_table(pdf, report)

    _section_title(pdf, "Strengths")
    _bullet_list(pdf, report.analysis.strengths, empty="No strengths recorded.")

    _section_title(pdf, "Concerns")
    _bullet_list(pdf, report.analysis.concerns, empty="No concerns recorded.")

    if report.analysis.red_flags:
        _section_title(pdf, "Red Flags")
        _bullet_list(pdf, report.analysis.red_flags, empty="", color=DANGER)

    _section_title(pdf, "Key Highlights")
    _bullet_list(
        pdf,
        [f'"{item.quote}" ({item.context})' for item in report.analysis.key_highlights],
        empty="No highlights captured.",
    )

    _section_title(pdf, "Recommendations")
    _paragraph(pdf, _plain(report.recommendations))

    _section_title(pdf, "Next Steps")
    _paragraph(pdf, report.next_steps)

    if comments:
        _section_title(pdf, "Reviewer Comments")
        _render_comments(pdf, comments)

    return bytes(pdf.output())


__all__ = ["ReportPDF", "generate_report_pdf"]
