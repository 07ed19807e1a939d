# text_layout.py
from reportlab.lib.units import mm
from reportlab.pdfbase.pdfmetrics import stringWidth

ELLIPSIS = "..."


def text_width(text, font="Helvetica", size=9) -> float:
    """Width of `text` in page units (mm) using the built-in font metrics."""
    return stringWidth(str(text), font, size) / mm


def wrap_text(text, max_width, font="Helvetica", size=9) -> list[str]:
    """
    Greedy word wrap to `max_width` page units.
    - words are never split; a word wider than the column sits on its own line
    - explicit newlines always break
    - empty input gives [""], never []
    """
    raw = "" if text is None else str(text)
    lines: list[str] = []

    for paragraph in raw.splitlines() or [""]:
        current = ""
        for word in paragraph.split():
            test = current + (" " if current else "") + word
            if not current or text_width(test, font, size) <= max_width:
                current = test
            else:
                lines.append(current)
                current = word
        lines.append(current)

    return lines or [""]


def truncate_lines(lines, max_lines, font="Helvetica", size=9, max_width=None) -> list[str]:
    """Keep at most `max_lines`; the last kept line gets an ellipsis if anything was cut."""
    lines = list(lines)
    if max_lines <= 0:
        return []
    if len(lines) <= max_lines:
        return lines

    kept = lines[:max_lines]
    last = kept[-1].rstrip()
    if max_width is not None:
        while last and text_width(last + ELLIPSIS, font, size) > max_width:
            last = last[:-1].rstrip()
    kept[-1] = last + ELLIPSIS
    return kept
