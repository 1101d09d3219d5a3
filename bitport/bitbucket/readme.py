"""Flatten line-oriented file content into a single text blob."""

from __future__ import annotations

import collections.abc as cabc
import typing as typ

from .models import ReadmeLine, readme_lines_from_raw

README_PATH = "README.md"
README_PAGE_SIZE = 500


def assemble_readme(
    lines: cabc.Sequence[ReadmeLine] | cabc.Sequence[cabc.Mapping[str, typ.Any]],
) -> str:
    """Join README lines in source order, each terminated by a newline.

    Parameters
    ----------
    lines
        ``ReadmeLine`` values or the raw ``{"text": ...}`` mappings returned
        by the ``browse`` endpoint. A missing or null ``text`` counts as an
        empty line.

    Returns
    -------
    str
        The concatenated text; ``""`` for no lines.

    Examples
    --------
    >>> assemble_readme([{"text": "a"}, {"text": "b"}])
    'a\\nb\\n'
    >>> assemble_readme([])
    ''

    """
    typed = [
        line if isinstance(line, ReadmeLine) else readme_lines_from_raw([line])[0]
        for line in lines
    ]
    return "".join(f"{line.text or ''}\n" for line in typed)
