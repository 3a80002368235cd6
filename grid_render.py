"""Text and HTML layouts of a digit image.

Digits are laid out row-major: ``height`` rows of ``width`` digits, the same
mapping :mod:`image_digits` uses when it reads pixels, so position
``row * width + col`` always lands at ``(row, col)``.
"""

import html
from typing import Iterable

from digit_sequence import DigitSequence


def _check_shape(digits: DigitSequence, width: int, height: int) -> None:
    if width < 1 or height < 1:
        raise ValueError(f"Grid dimensions must be positive, got {width}x{height}")
    if width * height != len(digits):
        raise ValueError(
            f"A {width}x{height} grid needs {width * height} digits, got {len(digits)}"
        )


def render_text(digits: DigitSequence, width: int, height: int) -> str:
    _check_shape(digits, width, height)
    lines = ["".join(map(str, row)) for row in digits.rows(width)]
    lines.append(f"num = {digits}")
    return "\n".join(lines)


HTML_TEMPLATE = """<!DOCTYPE html>
<html>
<head>
<meta charset="utf-8">
<title>{title}</title>
<style>
body {{ background: #111; color: #ddd; font-family: monospace; }}
table.digits {{ border-collapse: collapse; line-height: 1; }}
table.digits td {{ padding: 0 1px; text-align: center; }}
table.digits td.changed {{ color: #ff5050; font-weight: bold; }}
p.num {{ word-break: break-all; max-width: 80ch; }}
</style>
</head>
<body>
<h1>{title}</h1>
<table class="digits">
{rows}
</table>
<p class="num">{num}</p>
</body>
</html>
"""


def render_html(digits: DigitSequence, width: int, height: int, *,
                title: str = "Prime portrait",
                highlight: Iterable[int] = ()) -> str:
    """Standalone HTML page with one table cell per digit.

    Positions in ``highlight`` (typically the digits the search changed) are
    marked with the ``changed`` class.
    """
    _check_shape(digits, width, height)
    marked = set(highlight)
    rows = []
    for r, row in enumerate(digits.rows(width)):
        cells = []
        for c, d in enumerate(row):
            if r * width + c in marked:
                cells.append(f'<td class="changed">{d}</td>')
            else:
                cells.append(f"<td>{d}</td>")
        rows.append(f"<tr>{''.join(cells)}</tr>")
    return HTML_TEMPLATE.format(title=html.escape(title), rows="\n".join(rows),
                                num=digits)
