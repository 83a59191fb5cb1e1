"""Text placement for certificates.

Positions are in PDF points with the origin at the bottom-left corner of the
page, which is what both ReportLab and the template PDF use. Widths come from
the standard Type 1 font metrics that ship with ReportLab, so the numbers
here match what ends up on the page.
"""
from dataclasses import dataclass
from typing import List

from reportlab.pdfbase.pdfmetrics import stringWidth


@dataclass(frozen=True)
class CertificateLayout:
    name_font: str = "Helvetica-Bold"
    name_size: float = 28
    name_y_ratio: float = 0.46

    line_font: str = "Helvetica"
    line_size: float = 16
    line_leading: float = 3
    bar_width_ratio: float = 0.78
    line_center_y_ratio: float = 0.24

    date_font: str = "Helvetica"
    date_size: float = 12
    date_x_ratio: float = 0.14
    date_y_ratio: float = 0.12

    @property
    def line_height(self):
        return self.line_size + self.line_leading


DEFAULT_LAYOUT = CertificateLayout()


@dataclass(frozen=True)
class PlacedText:
    text: str
    x: float
    y: float
    font_name: str
    font_size: float


def text_width(text, font_name, font_size):
    return stringWidth(text, font_name, font_size)


def center_x(width, page_width):
    return (page_width - width) / 2


def wrap_by_width(text, max_width, font_name, font_size) -> List[str]:
    """Greedy word wrap on measured width.

    Words are never split. A word wider than ``max_width`` on its own is
    placed alone on a line. Runs of whitespace are treated as a single
    separator, so ``" ".join(lines)`` equals ``" ".join(text.split())``,
    which is ``text`` itself whenever it is already whitespace-normalised.
    """
    lines = []
    current = ""
    for word in text.split():
        candidate = f"{current} {word}" if current else word
        if text_width(candidate, font_name, font_size) <= max_width:
            current = candidate
        else:
            if current:
                lines.append(current)
            current = word
    if current:
        lines.append(current)
    return lines


def block_line_ys(line_count, center_y, line_height) -> List[float]:
    """Baselines for ``line_count`` lines centred as a block on ``center_y``."""
    if line_count <= 0:
        return []
    top = center_y + line_height * (line_count - 1) / 2
    return [top - index * line_height for index in range(line_count)]


def layout_certificate(request, page_width, page_height, layout=DEFAULT_LAYOUT) -> List[PlacedText]:
    placements = []

    # Name
    name_width = text_width(request.name_text, layout.name_font, layout.name_size)
    placements.append(PlacedText(
        text=request.name_text,
        x=center_x(name_width, page_width),
        y=page_height * layout.name_y_ratio,
        font_name=layout.name_font,
        font_size=layout.name_size,
    ))

    # Completion line, wrapped to the bar and centred line by line
    lines = wrap_by_width(
        request.completion_line,
        page_width * layout.bar_width_ratio,
        layout.line_font,
        layout.line_size,
    )
    ys = block_line_ys(len(lines), page_height * layout.line_center_y_ratio, layout.line_height)
    for line, y in zip(lines, ys):
        width = text_width(line, layout.line_font, layout.line_size)
        placements.append(PlacedText(
            text=line,
            x=center_x(width, page_width),
            y=y,
            font_name=layout.line_font,
            font_size=layout.line_size,
        ))

    # Date sits left-aligned in its box
    placements.append(PlacedText(
        text=request.completion_date,
        x=page_width * layout.date_x_ratio,
        y=page_height * layout.date_y_ratio,
        font_name=layout.date_font,
        font_size=layout.date_size,
    ))
    return placements
