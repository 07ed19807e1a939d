# pdf_canvas.py
from reportlab.lib.units import mm

from layout import Circle, Line, Link, Polygon, Rect, RoundRect, Text


def _rgb(c):
    r, g, b = c
    return r / 255.0, g / 255.0, b / 255.0


def draw_ops(pdf, ops, page_height):
    """
    Replay layout ops on a reportlab canvas.
    Ops are in mm from the top-left; reportlab wants points from the bottom-left.
    """

    def X(v):
        return v * mm

    def Y(v):
        return (page_height - v) * mm

    for op in ops:
        if isinstance(op, Rect):
            pdf.saveState()
            if op.alpha < 1.0:
                pdf.setFillAlpha(op.alpha)
            if op.fill is not None:
                pdf.setFillColorRGB(*_rgb(op.fill))
            if op.stroke is not None:
                pdf.setStrokeColorRGB(*_rgb(op.stroke))
                pdf.setLineWidth(op.line_width * mm)
            pdf.rect(X(op.x), Y(op.y + op.h), op.w * mm, op.h * mm,
                     stroke=int(op.stroke is not None), fill=int(op.fill is not None))
            pdf.restoreState()

        elif isinstance(op, RoundRect):
            pdf.saveState()
            if op.fill is not None:
                pdf.setFillColorRGB(*_rgb(op.fill))
            if op.stroke is not None:
                pdf.setStrokeColorRGB(*_rgb(op.stroke))
                pdf.setLineWidth(op.line_width * mm)
            pdf.roundRect(X(op.x), Y(op.y + op.h), op.w * mm, op.h * mm, op.radius * mm,
                          stroke=int(op.stroke is not None), fill=int(op.fill is not None))
            pdf.restoreState()

        elif isinstance(op, Circle):
            pdf.saveState()
            pdf.setFillAlpha(op.alpha)
            pdf.setFillColorRGB(*_rgb(op.fill))
            pdf.circle(X(op.cx), Y(op.cy), op.r * mm, stroke=0, fill=1)
            pdf.restoreState()

        elif isinstance(op, Polygon):
            pdf.saveState()
            pdf.setFillAlpha(op.alpha)
            pdf.setFillColorRGB(*_rgb(op.fill))
            path = pdf.beginPath()
            (x0, y0), rest = op.points[0], op.points[1:]
            path.moveTo(X(x0), Y(y0))
            for px, py in rest:
                path.lineTo(X(px), Y(py))
            path.close()
            pdf.drawPath(path, stroke=0, fill=1)
            pdf.restoreState()

        elif isinstance(op, Line):
            pdf.setStrokeColorRGB(*_rgb(op.color))
            pdf.setLineWidth(op.width * mm)
            pdf.line(X(op.x1), Y(op.y1), X(op.x2), Y(op.y2))

        elif isinstance(op, Text):
            pdf.setFont(op.font, op.size)
            pdf.setFillColorRGB(*_rgb(op.color))
            if op.align == "right":
                pdf.drawRightString(X(op.x), Y(op.y), op.text)
            elif op.align == "center":
                pdf.drawCentredString(X(op.x), Y(op.y), op.text)
            else:
                pdf.drawString(X(op.x), Y(op.y), op.text)

        elif isinstance(op, Link):
            pdf.linkURL(op.url, (X(op.x), Y(op.y + op.h), X(op.x + op.w), Y(op.y)), relative=0, thickness=0)

        else:
            raise TypeError(f"Unknown draw op: {type(op).__name__}")
