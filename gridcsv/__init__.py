"""
gridcsv: label-indexed CSV documents with pluggable cell conversion (stdlib-only).

Contract (v0):
- A document is parsed eagerly into a grid of raw string cells.
- Quoting: a quote character (" or ') opens or closes quoting only when it is
  the first character of the cell being read. Quote characters are kept
  verbatim in cell text; "" is not an escape.
- Labels: one physical row may hold column names and one physical column may
  hold row names (LabelParams, -1 disables either). Callers address data by
  logical index (label row/column excluded) or by name.
- Line endings: CRLF vs LF is inferred on load unless fixed in
  SeparatorParams. A UTF-16 or UTF-8 byte-order mark is detected on load and
  written back on save.
- Typed access goes through a Converter: str, int, float, bool and datetime
  are built in, other types via Converter.register(). Invalid numbers raise
  ConversionError unless ConverterParams.has_default_converter is set.
- Writes past the current bounds grow the grid with empty cells. Structural
  changes (growth, insert, remove) rebuild the name indexes.

API:
- Document(source=None, ...) -> load from a path, a text/binary stream, or
  copy another Document
- Document.load(source), Document.save(target=None), Document.dumps()
- get_/set_ column, row, cell (by index or name)
- get_/set_ column_name, row_name; get_column_names(), get_row_names()
- insert_/remove_ column, row; get_column_count(), get_row_count()
- tokenize(), serialize(), build_index() for working on raw grids

Python: 3.10+
"""

from __future__ import annotations

import codecs
import io
import logging
import math
import operator
import os
from dataclasses import dataclass
from datetime import datetime
from enum import Enum, auto
from typing import IO, Any, Callable, Dict, Iterable, List, Optional, Sequence, Tuple, Union

logger = logging.getLogger(__name__)

__version__ = "0.1.0"

Key = Union[int, str]
Table = List[List[str]]
Source = Union[str, os.PathLike, IO[Any]]


# ----------------------------
# Exceptions
# ----------------------------

class GridCSVError(Exception):
    """Base class for gridcsv failures."""

    def __str__(self) -> str:
        # KeyError would otherwise repr() the message
        return str(self.args[0]) if self.args else ""


class NotFoundError(GridCSVError, KeyError):
    """Raised when a column or row name cannot be resolved."""

    def __init__(self, *, kind: str, name: Any, reason: str = "name not found") -> None:
        super().__init__(f"NotFoundError(kind={kind!r}, name={name!r}): {reason}")
        self.kind = kind        # "column" | "row"
        self.name = name
        self.reason = reason


class OutOfRangeError(GridCSVError, IndexError):
    """Raised when a physical coordinate falls outside the grid."""

    def __init__(self, *, kind: str, index: int, size: int) -> None:
        super().__init__(f"OutOfRangeError(kind={kind!r}, index={index}, size={size})")
        self.kind = kind        # "column" | "row"
        self.index = index      # physical index requested
        self.size = size        # physical bound at the time of access


class UnsupportedTypeError(GridCSVError, TypeError):
    """Raised when no codec is registered for the requested type."""

    def __init__(self, *, dtype: Any) -> None:
        name = getattr(dtype, "__name__", repr(dtype))
        super().__init__(f"UnsupportedTypeError(dtype={name}): unsupported conversion datatype")
        self.dtype = dtype


class ConversionError(GridCSVError, ValueError):
    """Raised when text cannot be converted to (or from) the requested type."""

    def __init__(self, *, dtype: Any, value: Any, reason: str) -> None:
        name = getattr(dtype, "__name__", repr(dtype))
        super().__init__(f"ConversionError(dtype={name}, value={value!r}): {reason}")
        self.dtype = dtype
        self.value = value
        self.reason = reason


# ----------------------------
# Configuration
# ----------------------------

QUOTE_CHARS: Tuple[str, ...] = ('"', "'")


@dataclass(frozen=True)
class LabelParams:
    """Which physical row holds column names and which column holds row names (-1 disables)."""

    column_name_idx: int = 0
    row_name_idx: int = -1

    def __post_init__(self) -> None:
        if self.column_name_idx < -1 or self.row_name_idx < -1:
            raise ValueError(
                f"label indexes must be >= -1, got ({self.column_name_idx}, {self.row_name_idx})"
            )

    @property
    def row_offset(self) -> int:
        return self.column_name_idx + 1

    @property
    def column_offset(self) -> int:
        return self.row_name_idx + 1


@dataclass(frozen=True)
class SeparatorParams:
    separator: str = ","
    trim: bool = False
    # None: infer from the loaded document (LF when nothing was loaded)
    has_cr: Optional[bool] = None
    quoted_linebreaks: bool = False

    def __post_init__(self) -> None:
        if len(self.separator) != 1:
            raise ValueError(f"separator must be a single character, got {self.separator!r}")
        if self.separator in QUOTE_CHARS or self.separator in "\r\n":
            raise ValueError(f"separator cannot be a quote or line break: {self.separator!r}")


@dataclass(frozen=True)
class LineReaderParams:
    skip_comment_lines: bool = False
    comment_prefix: str = "#"


@dataclass(frozen=True)
class ConverterParams:
    """How invalid numbers (including empty cells) are handled, plus bool literals."""

    has_default_converter: bool = False
    default_float: float = math.nan
    default_integer: int = 0
    # bool parsing (case-insensitive)
    bool_true: Tuple[str, ...] = ("true", "t", "yes", "y", "1")
    bool_false: Tuple[str, ...] = ("false", "f", "no", "n", "0")


DEFAULT_LABEL_PARAMS = LabelParams()
DEFAULT_SEPARATOR_PARAMS = SeparatorParams()
DEFAULT_LINE_READER_PARAMS = LineReaderParams()
DEFAULT_CONVERTER_PARAMS = ConverterParams()


# ----------------------------
# Converter
# ----------------------------

@dataclass(frozen=True)
class Codec:
    parse: Callable[[str], Any]
    format: Callable[[Any], str]
    # substitute for unparsable text when ConverterParams.has_default_converter is set
    default: Optional[Callable[[ConverterParams], Any]] = None


def _parse_bool(raw: str, params: ConverterParams) -> bool:
    s = raw.strip().lower()
    if s in params.bool_true:
        return True
    if s in params.bool_false:
        return False
    raise ValueError(f"Invalid bool literal: {raw!r}")


def _format_bool(v: Any) -> str:
    return "true" if bool(v) else "false"


class Converter:
    """
    Registry of text <-> value codecs keyed by Python type.

    Parsing requires a codec registered for exactly the requested type.
    Formatting walks the value type's MRO, so subclasses of a registered
    type format like their base. None always formats as "".
    """

    def __init__(self, params: ConverterParams = DEFAULT_CONVERTER_PARAMS) -> None:
        self.params = params
        self._codecs: Dict[type, Codec] = {}
        self.register(str, str, str)
        self.register(int, int, lambda v: str(int(v)), default=lambda p: p.default_integer)
        self.register(float, float, lambda v: repr(float(v)), default=lambda p: p.default_float)
        self.register(bool, lambda s: _parse_bool(s, self.params), _format_bool)
        self.register(datetime, datetime.fromisoformat, lambda dt: dt.isoformat())

    def register(
        self,
        dtype: type,
        parse: Callable[[str], Any],
        format: Callable[[Any], str],
        *,
        default: Optional[Callable[[ConverterParams], Any]] = None,
    ) -> None:
        """Add or replace the codec for `dtype`."""
        self._codecs[dtype] = Codec(parse=parse, format=format, default=default)

    def supports(self, dtype: type) -> bool:
        return dtype in self._codecs

    def _codec_for_parse(self, dtype: type) -> Codec:
        try:
            return self._codecs[dtype]
        except (KeyError, TypeError):
            raise UnsupportedTypeError(dtype=dtype) from None

    def _codec_for_format(self, dtype: type) -> Codec:
        for klass in getattr(dtype, "__mro__", (dtype,)):
            codec = self._codecs.get(klass)
            if codec is not None:
                return codec
        raise UnsupportedTypeError(dtype=dtype)

    def parser(self, dtype: type) -> Callable[[str], Any]:
        """Return a text -> `dtype` function honoring the default-value policy."""
        codec = self._codec_for_parse(dtype)

        def convert(text: str) -> Any:
            try:
                return codec.parse(text)
            except GridCSVError:
                raise
            except Exception as e:
                if self.params.has_default_converter and codec.default is not None:
                    return codec.default(self.params)
                raise ConversionError(dtype=dtype, value=text, reason=f"Parse failed: {e}") from e

        return convert

    def to_value(self, text: str, dtype: type = str) -> Any:
        return self.parser(dtype)(text)

    def to_text(self, value: Any, dtype: Optional[type] = None) -> str:
        if value is None:
            return ""
        codec = self._codec_for_format(dtype if dtype is not None else type(value))
        try:
            return codec.format(value)
        except GridCSVError:
            raise
        except Exception as e:
            raise ConversionError(dtype=dtype or type(value), value=value, reason=f"Format failed: {e}") from e


# ----------------------------
# Encoding (byte-order marks)
# ----------------------------

@dataclass(frozen=True)
class Encoding:
    codec: str = "utf-8"
    bom: bytes = b""
    # "surrogateescape" when undecodable bytes must survive a save
    errors: str = "strict"

    @property
    def is_utf16(self) -> bool:
        return self.codec.startswith("utf-16")


_BOMS: Tuple[Tuple[bytes, str], ...] = (
    (codecs.BOM_UTF8, "utf-8"),
    (codecs.BOM_UTF16_LE, "utf-16-le"),
    (codecs.BOM_UTF16_BE, "utf-16-be"),
)
_BOM_BY_CODEC: Dict[str, bytes] = {name: bom for bom, name in _BOMS}


def decode_document(data: Union[bytes, str], codec: str = "utf-8") -> Tuple[str, Encoding]:
    """
    Strip a leading byte-order mark and return (text, Encoding).
    A UTF-16 mark switches decoding to UTF-16; without a mark `codec` is used.
    Bytes that are not valid in `codec` are kept as lone surrogates and
    written back unchanged by encode_document().
    Text input is passed through, minus a leading U+FEFF.
    """
    if isinstance(data, str):
        if data.startswith("\ufeff"):
            return data[1:], Encoding(codec, _BOM_BY_CODEC.get(codecs.lookup(codec).name, b""))
        return data, Encoding(codec)

    for bom, name in _BOMS:
        if data.startswith(bom):
            return data[len(bom):].decode(name), Encoding(name, bom)
    return data.decode(codec, "surrogateescape"), Encoding(codec, errors="surrogateescape")


def encode_document(text: str, encoding: Encoding) -> bytes:
    return encoding.bom + text.encode(encoding.codec, encoding.errors)


# ----------------------------
# Tokenizer
# ----------------------------

class QuoteState(Enum):
    UNQUOTED = auto()
    SINGLE_QUOTED = auto()
    DOUBLE_QUOTED = auto()


_QUOTE_STATES: Dict[str, QuoteState] = {
    '"': QuoteState.DOUBLE_QUOTED,
    "'": QuoteState.SINGLE_QUOTED,
}


def tokenize(
    text: str,
    separator_params: SeparatorParams = DEFAULT_SEPARATOR_PARAMS,
    line_reader_params: LineReaderParams = DEFAULT_LINE_READER_PARAMS,
) -> Tuple[Table, int, int]:
    """
    Split `text` into rows of raw cells in one pass.

    Returns (rows, cr_count, lf_count); the counts feed line-ending inference.
    Empty lines produce no row. A line break inside quotes ends the row and
    drops the quoting, unless separator_params.quoted_linebreaks is set.
    """
    sep = separator_params.separator
    trim = separator_params.trim
    keep_linebreaks = separator_params.quoted_linebreaks
    skip_comments = line_reader_params.skip_comment_lines
    prefix = line_reader_params.comment_prefix

    rows: Table = []
    row: List[str] = []
    cell: List[str] = []
    state = QuoteState.UNQUOTED
    cr = 0
    lf = 0

    def finish_cell() -> None:
        value = "".join(cell)
        row.append(value.strip() if trim else value)
        cell.clear()

    def finish_row() -> None:
        nonlocal row
        if not (skip_comments and row[0].startswith(prefix)):
            rows.append(row)
        row = []

    for ch in text:
        if ch in _QUOTE_STATES:
            if not cell or cell[0] == ch:
                opened = _QUOTE_STATES[ch]
                state = QuoteState.UNQUOTED if state is opened else opened
            cell.append(ch)
        elif ch == sep:
            if state is QuoteState.UNQUOTED:
                finish_cell()
            else:
                cell.append(ch)
        elif ch == "\r":
            cr += 1
            if keep_linebreaks and state is not QuoteState.UNQUOTED:
                cell.append(ch)
        elif ch == "\n":
            lf += 1
            if keep_linebreaks and state is not QuoteState.UNQUOTED:
                cell.append(ch)
                continue
            if cell or row:
                finish_cell()
                finish_row()
            state = QuoteState.UNQUOTED
        else:
            cell.append(ch)

    # last line without a line break
    if cell or row:
        finish_cell()
        finish_row()

    return rows, cr, lf


def infer_has_cr(cr: int, lf: int) -> bool:
    """CRLF when carriage returns outnumber half the line feeds."""
    return cr > lf // 2


# ----------------------------
# Label index
# ----------------------------

def build_index(table: Sequence[Sequence[str]], label_params: LabelParams) -> Tuple[Dict[str, int], Dict[str, int]]:
    """
    Map column names -> physical column index and row names -> physical row index.
    Later duplicates overwrite earlier ones.
    """
    column_names: Dict[str, int] = {}
    row_names: Dict[str, int] = {}

    name_row = label_params.column_name_idx
    if name_row >= 0 and len(table) > name_row:
        for i, name in enumerate(table[name_row]):
            column_names[name] = i

    name_col = label_params.row_name_idx
    if name_col >= 0 and len(table) > label_params.row_offset:
        for i, row in enumerate(table):
            if name_col < len(row):
                row_names[row[name_col]] = i

    return column_names, row_names


# ----------------------------
# Serializer
# ----------------------------

def format_cell(cell: str, separator_params: SeparatorParams = DEFAULT_SEPARATOR_PARAMS) -> str:
    """Quote `cell` only when it would not survive tokenizing unquoted."""
    trimmed = cell.strip()
    if len(trimmed) >= 2 and trimmed[0] in QUOTE_CHARS and trimmed[-1] in QUOTE_CHARS:
        return cell

    needs_quotes = separator_params.separator in cell
    if separator_params.quoted_linebreaks and ("\n" in cell or "\r" in cell):
        needs_quotes = True
    if not needs_quotes:
        return cell

    quote = "'" if '"' in cell else '"'
    return f"{quote}{cell}{quote}"


def serialize(
    table: Iterable[Sequence[str]],
    separator_params: SeparatorParams = DEFAULT_SEPARATOR_PARAMS,
    has_cr: bool = False,
) -> str:
    terminator = "\r\n" if has_cr else "\n"
    sep = separator_params.separator
    out = io.StringIO()
    for row in table:
        out.write(sep.join(format_cell(c, separator_params) for c in row))
        out.write(terminator)
    return out.getvalue()


# ----------------------------
# Document
# ----------------------------

class Document:
    """
    CSV document held fully in memory.

    Cells are stored as a physical grid of strings. Logical coordinates skip
    the label row/column: physical = logical + offset, where the offsets come
    from LabelParams. Names resolve through two dict indexes derived from the
    label row/column; they are rebuilt whenever the grid changes shape.

    Passing another Document as `source` copies it, parameters included;
    the other constructor arguments are then ignored.
    """

    def __init__(
        self,
        source: Union[Source, "Document", None] = None,
        label_params: LabelParams = DEFAULT_LABEL_PARAMS,
        separator_params: SeparatorParams = DEFAULT_SEPARATOR_PARAMS,
        converter_params: ConverterParams = DEFAULT_CONVERTER_PARAMS,
        line_reader_params: LineReaderParams = DEFAULT_LINE_READER_PARAMS,
        *,
        converter: Optional[Converter] = None,
        encoding: str = "utf-8",
    ) -> None:
        if isinstance(source, Document):
            self._copy_from(source)
            return

        self.path: Optional[str] = None
        self.label_params = label_params
        self.separator_params = separator_params
        self.line_reader_params = line_reader_params
        self.converter = converter if converter is not None else Converter(converter_params)
        self.encoding = Encoding(encoding)
        self._default_codec = encoding
        self._has_cr = bool(separator_params.has_cr)
        self._data: Table = []
        self._column_names: Dict[str, int] = {}
        self._row_names: Dict[str, int] = {}

        if source is not None:
            self.load(source)

    def _copy_from(self, other: "Document") -> None:
        self.path = other.path
        self.label_params = other.label_params
        self.separator_params = other.separator_params
        self.line_reader_params = other.line_reader_params
        self.converter = other.converter
        self.encoding = other.encoding
        self._default_codec = other._default_codec
        self._has_cr = other._has_cr
        self._data = [list(row) for row in other._data]
        self._column_names = dict(other._column_names)
        self._row_names = dict(other._row_names)

    def copy(self) -> "Document":
        """Deep copy of the grid; the converter is shared."""
        return Document(self)

    __copy__ = copy

    @property
    def has_cr(self) -> bool:
        """True when save() terminates lines with CRLF."""
        return self._has_cr

    # ---- persistence ----

    def load(self, source: Source) -> None:
        """(Re)populate the grid from a path or a readable stream."""
        if isinstance(source, (str, os.PathLike)):
            self.path = os.fspath(source)
            with open(self.path, "rb") as f:
                data = f.read()
        else:
            data = source.read()

        text, self.encoding = decode_document(data, self._default_codec)
        self._data, cr, lf = tokenize(text, self.separator_params, self.line_reader_params)
        if self.separator_params.has_cr is None:
            self._has_cr = infer_has_cr(cr, lf)
        else:
            self._has_cr = self.separator_params.has_cr
        self._rebuild_index()

        logger.debug(
            "Loaded %d rows x %d columns (encoding=%s, bom=%s, crlf=%s)",
            len(self._data), self._width(), self.encoding.codec, bool(self.encoding.bom), self._has_cr,
        )

    def dumps(self) -> str:
        return serialize(self._data, self.separator_params, self._has_cr)

    def save(self, target: Optional[Source] = None) -> None:
        """
        Write the grid to a path, a text stream or a binary stream.
        With no target, overwrite the path the document was loaded from.
        """
        if target is None:
            if self.path is None:
                raise ValueError("Document has no path; pass a target to save()")
            target = self.path

        text = self.dumps()
        if isinstance(target, (str, os.PathLike)):
            self.path = os.fspath(target)
            with open(self.path, "wb") as f:
                f.write(encode_document(text, self.encoding))
        elif isinstance(target, io.TextIOBase):
            target.write(("\ufeff" if self.encoding.bom else "") + text)
        else:
            target.write(encode_document(text, self.encoding))

        logger.debug("Saved %d rows (encoding=%s, crlf=%s)", len(self._data), self.encoding.codec, self._has_cr)

    def clear(self) -> None:
        self._data = []
        self._column_names = {}
        self._row_names = {}

    # ---- coordinate translation ----

    def _width(self) -> int:
        return len(self._data[0]) if self._data else 0

    def _rebuild_index(self) -> None:
        self._column_names, self._row_names = build_index(self._data, self.label_params)

    def get_column_index(self, name: str) -> Optional[int]:
        """Logical index of column `name`, or None when no such column exists."""
        if self.label_params.column_name_idx < 0:
            raise NotFoundError(kind="column", name=name, reason="column labels are disabled")
        physical = self._column_names.get(name)
        offset = self.label_params.column_offset
        if physical is None or physical < offset:
            return None
        return physical - offset

    def get_row_index(self, name: str) -> Optional[int]:
        """Logical index of row `name`, or None when no such row exists."""
        if self.label_params.row_name_idx < 0:
            raise NotFoundError(kind="row", name=name, reason="row labels are disabled")
        physical = self._row_names.get(name)
        offset = self.label_params.row_offset
        if physical is None or physical < offset:
            return None
        return physical - offset

    def _column_position(self, column: Key) -> int:
        offset = self.label_params.column_offset
        if isinstance(column, str):
            logical = self.get_column_index(column)
            if logical is None:
                raise NotFoundError(kind="column", name=column)
        else:
            logical = operator.index(column)
            if logical < 0:
                raise OutOfRangeError(kind="column", index=logical + offset, size=self._width())
        return logical + offset

    def _row_position(self, row: Key) -> int:
        offset = self.label_params.row_offset
        if isinstance(row, str):
            logical = self.get_row_index(row)
            if logical is None:
                raise NotFoundError(kind="row", name=row)
        else:
            logical = operator.index(row)
            if logical < 0:
                raise OutOfRangeError(kind="row", index=logical + offset, size=len(self._data))
        return logical + offset

    def _physical_row(self, r: int) -> List[str]:
        if r >= len(self._data):
            raise OutOfRangeError(kind="row", index=r, size=len(self._data))
        return self._data[r]

    def _cell(self, r: int, c: int) -> str:
        row = self._physical_row(r)
        if c >= len(row):
            raise OutOfRangeError(kind="column", index=c, size=len(row))
        return row[c]

    # ---- growth ----

    def _grow(self, rows: int, columns: int) -> None:
        """Extend the grid to at least rows x columns with empty cells."""
        height, width = len(self._data), self._width()
        if rows <= height and columns <= width:
            return

        self._data.extend([""] * width for _ in range(rows - height))
        if columns > width:
            for row in self._data:
                if len(row) < columns:
                    row.extend([""] * (columns - len(row)))
        self._rebuild_index()
        logger.debug("Grew grid from %dx%d to %dx%d", height, width, len(self._data), self._width())

    def _store(self, r: int, c: int, text: str) -> None:
        row = self._data[r]
        if c >= len(row):
            row.extend([""] * (c + 1 - len(row)))
        row[c] = text

    # ---- columns ----

    def get_column(self, column: Key, dtype: type = str) -> List[Any]:
        c = self._column_position(column)
        if c >= self._width():
            raise OutOfRangeError(kind="column", index=c, size=self._width())
        convert = self.converter.parser(dtype)
        return [convert(self._cell(r, c)) for r in range(self.label_params.row_offset, len(self._data))]

    def set_column(self, column: Key, values: Iterable[Any], dtype: Optional[type] = None) -> None:
        c = self._column_position(column)
        texts = [self.converter.to_text(v, dtype) for v in values]
        start = self.label_params.row_offset
        self._grow(start + len(texts), c + 1)
        for i, text in enumerate(texts):
            self._store(start + i, c, text)

    def insert_column(
        self,
        column: Key,
        values: Iterable[Any] = (),
        name: Optional[str] = None,
        dtype: Optional[type] = None,
    ) -> None:
        """Insert a column before `column` (logical index or name; == count appends)."""
        c = self._column_position(column)
        if c > self._width():
            raise OutOfRangeError(kind="column", index=c, size=self._width())

        texts = [self.converter.to_text(v, dtype) for v in values]
        start = self.label_params.row_offset
        rows_needed = start + len(texts)
        if len(self._data) < rows_needed:
            width = self._width()
            self._data.extend([""] * width for _ in range(rows_needed - len(self._data)))

        for r, row in enumerate(self._data):
            if len(row) < c:
                row.extend([""] * (c - len(row)))
            i = r - start
            row.insert(c, texts[i] if 0 <= i < len(texts) else "")

        if name is not None and self.label_params.column_name_idx >= 0:
            self._data[self.label_params.column_name_idx][c] = name
        self._rebuild_index()

    def remove_column(self, column: Key) -> None:
        c = self._column_position(column)
        if c >= self._width():
            raise OutOfRangeError(kind="column", index=c, size=self._width())
        for row in self._data:
            if c < len(row):
                del row[c]
        self._rebuild_index()

    def get_column_count(self) -> int:
        return max(0, self._width() - self.label_params.column_offset)

    # ---- rows ----

    def get_row(self, row: Key, dtype: type = str) -> List[Any]:
        cells = self._physical_row(self._row_position(row))
        convert = self.converter.parser(dtype)
        return [convert(cell) for cell in cells[self.label_params.column_offset:]]

    def set_row(self, row: Key, values: Iterable[Any], dtype: Optional[type] = None) -> None:
        r = self._row_position(row)
        texts = [self.converter.to_text(v, dtype) for v in values]
        start = self.label_params.column_offset
        self._grow(r + 1, start + len(texts))
        for i, text in enumerate(texts):
            self._store(r, start + i, text)

    def insert_row(
        self,
        row: Key,
        values: Iterable[Any] = (),
        name: Optional[str] = None,
        dtype: Optional[type] = None,
    ) -> None:
        """Insert a row before `row` (logical index or name; == count appends)."""
        r = self._row_position(row)
        offset = self.label_params.row_offset
        if len(self._data) < offset:
            width = self._width()
            self._data.extend([""] * width for _ in range(offset - len(self._data)))
        if r > len(self._data):
            raise OutOfRangeError(kind="row", index=r, size=len(self._data))

        texts = [self.converter.to_text(v, dtype) for v in values]
        start = self.label_params.column_offset
        width = max(self._width(), start + len(texts))
        new_row = [""] * width
        new_row[start:start + len(texts)] = texts
        if name is not None and self.label_params.row_name_idx >= 0:
            new_row[self.label_params.row_name_idx] = name

        for existing in self._data:
            if len(existing) < width:
                existing.extend([""] * (width - len(existing)))
        self._data.insert(r, new_row)
        self._rebuild_index()

    def remove_row(self, row: Key) -> None:
        r = self._row_position(row)
        self._physical_row(r)
        del self._data[r]
        self._rebuild_index()

    def get_row_count(self) -> int:
        return max(0, len(self._data) - self.label_params.row_offset)

    # ---- cells ----

    def get_cell(self, column: Key, row: Key, dtype: type = str) -> Any:
        c = self._column_position(column)
        r = self._row_position(row)
        return self.converter.to_value(self._cell(r, c), dtype)

    def set_cell(self, column: Key, row: Key, value: Any, dtype: Optional[type] = None) -> None:
        c = self._column_position(column)
        r = self._row_position(row)
        text = self.converter.to_text(value, dtype)
        self._grow(r + 1, c + 1)
        self._store(r, c, text)

    # ---- labels ----

    def get_column_names(self) -> List[str]:
        name_row = self.label_params.column_name_idx
        if name_row < 0 or name_row >= len(self._data):
            return []
        return list(self._data[name_row][self.label_params.column_offset:])

    def get_row_names(self) -> List[str]:
        name_col = self.label_params.row_name_idx
        if name_col < 0:
            return []
        return [self._cell(r, name_col) for r in range(self.label_params.row_offset, len(self._data))]

    def get_column_name(self, column: int) -> str:
        if self.label_params.column_name_idx < 0:
            raise NotFoundError(kind="column", name=column, reason="column labels are disabled")
        return self._cell(self.label_params.column_name_idx, self._column_position(column))

    def get_row_name(self, row: int) -> str:
        if self.label_params.row_name_idx < 0:
            raise NotFoundError(kind="row", name=row, reason="row labels are disabled")
        return self._cell(self._row_position(row), self.label_params.row_name_idx)

    def set_column_name(self, column: Key, name: str) -> None:
        """
        Write `name` into the label row and index it. The previous name keeps
        resolving until the next structural change rebuilds the index.
        """
        name_row = self.label_params.column_name_idx
        if name_row < 0:
            raise NotFoundError(kind="column", name=name, reason="column labels are disabled")
        c = self._column_position(column)
        self._grow(name_row + 1, c + 1)
        self._store(name_row, c, name)
        self._column_names[name] = c

    def set_row_name(self, row: Key, name: str) -> None:
        """Write `name` into the label column and index it (see set_column_name)."""
        name_col = self.label_params.row_name_idx
        if name_col < 0:
            raise NotFoundError(kind="row", name=name, reason="row labels are disabled")
        r = self._row_position(row)
        self._grow(r + 1, name_col + 1)
        self._store(r, name_col, name)
        self._row_names[name] = r


__all__ = [
    "GridCSVError",
    "NotFoundError",
    "OutOfRangeError",
    "UnsupportedTypeError",
    "ConversionError",
    "LabelParams",
    "SeparatorParams",
    "LineReaderParams",
    "ConverterParams",
    "Codec",
    "Converter",
    "Encoding",
    "decode_document",
    "encode_document",
    "QuoteState",
    "tokenize",
    "infer_has_cr",
    "build_index",
    "format_cell",
    "serialize",
    "Document",
    "__version__",
]
