"""RTF table export.

Renders a summary table (index = variable, columns = statistics) as a
Rich Text Format document that word processors open as a native table.
"""

from __future__ import annotations

import logging
from pathlib import Path

import numpy as np
import pandas as pd

logger = logging.getLogger(__name__)

# Widths in twips (1/1440 inch)
LABEL_WIDTH = 2400
CELL_WIDTH = 1100

MISSING = "."


def rtf_escape(text: str) -> str:
    """
    Escape text for inclusion in an RTF document.

    Backslash and braces are escaped; characters outside ASCII are
    written as a Unicode escape with the signed 16-bit UTF-16 code unit
    and a "?" fallback character.
    """
    out = []
    for ch in str(text):
        if ch in "\\{}":
            out.append("\\" + ch)
        elif ch == "\n":
            out.append("\\line ")
        elif ord(ch) < 128:
            out.append(ch)
        else:
            units = ch.encode("utf-16-le")
            for i in range(0, len(units), 2):
                code = int.from_bytes(units[i:i + 2], "little")
                if code > 32767:
                    code -= 65536
                out.append(f"\\u{code}?")
    return "".join(out)


def format_value(value: object, decimals: int = 3) -> str:
    """Format a table cell: integers as-is, floats to ``decimals``, NaN as '.'."""
    if value is None:
        return MISSING
    if isinstance(value, (bool, np.bool_)):
        return str(bool(value))
    if isinstance(value, (int, np.integer)):
        return str(int(value))
    if isinstance(value, (float, np.floating)):
        if np.isnan(value):
            return MISSING
        return f"{float(value):,.{decimals}f}"
    return str(value)


def _row(cells: list[str], bold: bool = False, top_border: bool = False, bottom_border: bool = False) -> str:
    parts = ["\\trowd\\trgaph108\\trleft0"]
    right = 0
    for i in range(len(cells)):
        right += LABEL_WIDTH if i == 0 else CELL_WIDTH
        if top_border:
            parts.append("\\clbrdrt\\brdrs\\brdrw10")
        if bottom_border:
            parts.append("\\clbrdrb\\brdrs\\brdrw10")
        parts.append(f"\\cellx{right}")
    parts.append("\n")
    for i, cell in enumerate(cells):
        align = "\\ql" if i == 0 else "\\qr"
        text = f"\\b {cell}\\b0" if bold else cell
        parts.append(f"\\pard\\intbl{align} {text}\\cell\n")
    parts.append("\\row\n")
    return "".join(parts)


def table_to_rtf(
    table: pd.DataFrame,
    title: str | None = None,
    decimals: int = 3,
    notes: str | None = None,
) -> str:
    """
    Render a DataFrame as an RTF document.

    Parameters
    ----------
    table : pd.DataFrame
        Table to render; the index becomes the first column.
    title : str | None
        Bold, centred title above the table.
    decimals : int, default 3
        Decimal places for float cells.
    notes : str | None
        Paragraph below the table.

    Returns
    -------
    str
        Complete RTF document.
    """
    if decimals < 0:
        raise ValueError(f"decimals must be >= 0, got {decimals}")

    lines = [
        "{\\rtf1\\ansi\\ansicpg1252\\deff0",
        "{\\fonttbl{\\f0\\froman Times New Roman;}}",
        "\\f0\\fs20",
    ]

    if title:
        lines.append(f"\\pard\\qc\\b {rtf_escape(title)}\\b0\\par")
        lines.append("\\pard\\par")

    label = table.index.name or ""
    header = [rtf_escape(label)] + [rtf_escape(c) for c in table.columns]
    lines.append(_row(header, bold=True, top_border=True, bottom_border=True).rstrip("\n"))

    n_rows = len(table)
    # itertuples keeps per-column dtypes, so integer counts stay integers
    for i, row in enumerate(table.itertuples(index=True, name=None)):
        idx, values = row[0], row[1:]
        cells = [rtf_escape(idx)] + [rtf_escape(format_value(v, decimals)) for v in values]
        lines.append(_row(cells, bottom_border=(i == n_rows - 1)).rstrip("\n"))

    if notes:
        lines.append("\\pard\\par")
        lines.append(f"\\pard\\ql\\fs16 {rtf_escape(notes)}\\fs20\\par")

    lines.append("}")
    return "\n".join(lines) + "\n"


def write_rtf(
    table: pd.DataFrame,
    path: str | Path,
    title: str | None = None,
    decimals: int = 3,
    notes: str | None = None,
) -> Path:
    """
    Write a table to an RTF file.

    Parameters
    ----------
    table : pd.DataFrame
        Table to render.
    path : str | Path
        Output file; parent directories are created.
    title, decimals, notes
        See :func:`table_to_rtf`.

    Returns
    -------
    Path
        The written path.
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    document = table_to_rtf(table, title=title, decimals=decimals, notes=notes)
    path.write_text(document, encoding="ascii")

    logger.info(f"Wrote RTF table ({len(table)} rows) to {path}")

    return path
