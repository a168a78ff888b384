#
# Copyright (c) 2024-2025 LateGenXer
#
# SPDX-License-Identifier: AGPL-3.0-or-later
#


import sys
import textwrap


from typing import Sequence, Any, TextIO
from abc import ABC, abstractmethod
from decimal import Decimal


class Report(ABC):

    def start(self, title:str) -> None:
        pass

    @abstractmethod
    def write_heading(self, heading:str, level:int=1) -> None:  # pragma: no cover
        raise NotImplementedError

    @abstractmethod
    def write_paragraph(self, paragraph:str) -> None:  # pragma: no cover
        raise NotImplementedError

    @abstractmethod
    def write_table(self, rows:list[list], header:Sequence[Any]|None=None, footer:Sequence[Any]|None=None, just:Sequence[Any]|None=None, indent:str='') -> None:  # pragma: no cover
        raise NotImplementedError

    @staticmethod
    def format(field:Any) -> str:
        if field is None or field != field:
            return ''
        elif isinstance(field, Decimal):
            return f'{field:,.2f}'
        else:
            return str(field)

    def end(self) -> None:
        pass


class TextReport(Report):

    def __init__(self, stream:TextIO=sys.stdout):
        if sys.platform == 'win32' and not stream.isatty():
            stream.reconfigure(encoding='utf-8-sig')  # type: ignore[attr-defined]
        self.stream = stream
        self.heading_sep = ''

    def write_heading(self, heading:str, level:int=1) -> None:
        if level <= 1:
            heading = heading.upper()
        if sys.platform != 'win32' and self.stream.isatty():
            # Ansi escape
            _csi = '\33['
            normal = _csi + '0m'
            bold = _csi + '1m'
            heading = bold + heading + normal
        self.stream.write(self.heading_sep + heading + '\n\n')
        self.heading_sep = ''

    def write_paragraph(self, paragraph:str) -> None:
        paragraph = '\n'.join(textwrap.wrap(paragraph, width=120))
        self.stream.write(paragraph + '\n\n')
        self.heading_sep = '\n'

    def write_table(self, rows:list[list], header:Sequence[Any]|None=None, footer:Sequence[Any]|None=None, just:Sequence[Any]|None=None, indent:str='') -> None:
        stream = self.stream

        ncols = len(header) if header is not None else len(rows[0])
        columns:list[list[str]] = [[self.format(row[c]) for row in rows] for c in range(ncols)]
        header_cells = None if header is None else [self.format(h) for h in header]
        footer_cells = None if footer is None else [self.format(f) for f in footer]
        for cells in (header_cells, footer_cells):
            assert cells is None or len(cells) == ncols

        if just is None:
            justify = [str.center]*ncols
        else:
            assert len(just) == ncols
            m = {
                'c': str.center,
                'l': str.ljust,
                'r': str.rjust,
            }
            justify = [m[j] for j in just]

        widths = []
        for c in range(ncols):
            width = max((len(cell) for cell in columns[c]), default=0)
            if header_cells is not None:
                width = max(width, len(header_cells[c]))
            if footer_cells is not None:
                width = max(width, len(footer_cells[c]))
            widths.append(width)

        def line(cells:Sequence[str]) -> str:
            return indent + sep.join(j(cell, w) for j, cell, w in zip(justify, cells, widths)).rstrip() + '\n'

        sep = '  '
        rule = indent + '─' * len(sep.join(' '*width for width in widths)) + '\n'

        if header_cells is not None:
            stream.write(line(header_cells))
            stream.write(rule)
        for r in range(len(rows)):
            stream.write(line([column[r] for column in columns]))
        if footer_cells is not None:
            stream.write(rule)
            stream.write(line(footer_cells))

        stream.write('\n')

        self.heading_sep = '\n'
