"""Legacy Word (97-2003 ``.doc``) extractor.

The binary format stores text in pieces listed by the piece table (PlcPcd)
inside the Clx structure of the table stream. The FIB at the start of the
``WordDocument`` stream says which table stream is live and where the Clx
lives. Each piece is either "compressed" (one cp1252 byte per character)
or UTF-16LE.
"""

from __future__ import annotations

import logging
import re
import struct
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Iterator, Mapping

import olefile

from recipefinder.extraction.base import ContentExtractor
from recipefinder.utils.text import normalize_whitespace, strip_control_chars

LOGGER = logging.getLogger(__name__)

WORD_IDENT = 0xA5EC
F_ENCRYPTED = 0x0100
F_WHICH_TBL_STM = 0x0200
FC_COMPRESSED = 0x40000000
FC_MASK = 0x3FFFFFFF

_FIB_BASE_SIZE = 32
_CCP_TEXT_INDEX = 3
_CLX_INDEX = 33

# Field instructions sit between 0x13 and 0x14; the displayed result follows up to 0x15.
_FIELD_WITH_RESULT = re.compile("\x13[^\x13\x14\x15]*\x14")
_FIELD_WITHOUT_RESULT = re.compile("\x13[^\x13\x14\x15]*\x15")
_WORD_MARKS = str.maketrans(
    {
        "\r": "\n",
        "\x07": "\n",
        "\x0b": "\n",
        "\x0c": "\n",
        "\x1e": "-",
        "\x1f": None,
        "\x14": None,
        "\x15": None,
    }
)


class WordFormatError(Exception):
    """The stream does not look like a readable Word 97-2003 document."""


@dataclass(slots=True)
class WordFib:
    flags: int
    ccp_text: int
    fc_clx: int
    lcb_clx: int

    @property
    def encrypted(self) -> bool:
        return bool(self.flags & F_ENCRYPTED)

    @property
    def table_stream(self) -> str:
        return "1Table" if self.flags & F_WHICH_TBL_STM else "0Table"


def parse_fib(word: bytes) -> WordFib:
    """Read the parts of the File Information Block needed to find the text."""
    try:
        (ident,) = struct.unpack_from("<H", word, 0)
        if ident != WORD_IDENT:
            raise WordFormatError(f"bad FIB identifier 0x{ident:04X}")
        (flags,) = struct.unpack_from("<H", word, 0x0A)

        offset = _FIB_BASE_SIZE
        (csw,) = struct.unpack_from("<H", word, offset)
        offset += 2 + csw * 2

        (cslw,) = struct.unpack_from("<H", word, offset)
        offset += 2
        if cslw <= _CCP_TEXT_INDEX:
            raise WordFormatError("FIB has no ccpText entry")
        (ccp_text,) = struct.unpack_from("<i", word, offset + _CCP_TEXT_INDEX * 4)
        offset += cslw * 4

        (cb_rg_fc_lcb,) = struct.unpack_from("<H", word, offset)
        offset += 2
        if cb_rg_fc_lcb <= _CLX_INDEX:
            raise WordFormatError("FIB has no Clx entry")
        fc_clx, lcb_clx = struct.unpack_from("<II", word, offset + _CLX_INDEX * 8)
    except struct.error as exc:
        raise WordFormatError(f"truncated FIB: {exc}") from exc

    if ccp_text < 0:
        raise WordFormatError("negative ccpText")
    return WordFib(flags=flags, ccp_text=ccp_text, fc_clx=fc_clx, lcb_clx=lcb_clx)


def find_piece_table(clx: bytes) -> bytes:
    """Skip the Prc entries of a Clx and return the PlcPcd bytes."""
    pos = 0
    try:
        while pos < len(clx):
            clxt = clx[pos]
            if clxt == 0x01:
                (cb_grpprl,) = struct.unpack_from("<h", clx, pos + 1)
                if cb_grpprl < 0:
                    raise WordFormatError("negative Prc size")
                pos += 3 + cb_grpprl
            elif clxt == 0x02:
                (lcb,) = struct.unpack_from("<I", clx, pos + 1)
                plc = clx[pos + 5 : pos + 5 + lcb]
                if len(plc) != lcb:
                    raise WordFormatError("piece table extends past the Clx")
                return plc
            else:
                raise WordFormatError(f"unexpected Clx entry type 0x{clxt:02X}")
    except struct.error as exc:
        raise WordFormatError(f"truncated Clx: {exc}") from exc
    raise WordFormatError("piece table not found")


def iter_pieces(plc: bytes) -> Iterator[tuple[int, int, int, bool]]:
    """Yield ``(cp_start, cp_end, fc, compressed)`` for every piece."""
    if len(plc) < 4 or (len(plc) - 4) % 12:
        raise WordFormatError(f"malformed piece table of {len(plc)} bytes")
    count = (len(plc) - 4) // 12
    cps = struct.unpack_from(f"<{count + 1}I", plc, 0)
    pcd_base = 4 * (count + 1)
    for index in range(count):
        (fc_value,) = struct.unpack_from("<I", plc, pcd_base + 8 * index + 2)
        yield cps[index], cps[index + 1], fc_value & FC_MASK, bool(fc_value & FC_COMPRESSED)


def decode_pieces(word: bytes, plc: bytes, ccp_text: int) -> str:
    """Concatenate the main-document text described by the piece table."""
    parts: list[str] = []
    for cp_start, cp_end, fc, compressed in iter_pieces(plc):
        if cp_start >= ccp_text:
            break
        chars = min(cp_end, ccp_text) - cp_start
        if chars <= 0:
            continue
        if compressed:
            start = fc // 2
            raw = word[start : start + chars]
            expected = chars
            encoding = "cp1252"
        else:
            raw = word[fc : fc + 2 * chars]
            expected = 2 * chars
            encoding = "utf-16-le"
        if len(raw) != expected:
            raise WordFormatError("piece extends past the WordDocument stream")
        parts.append(raw.decode(encoding, errors="replace"))
    return "".join(parts)


def clean_word_text(text: str) -> str:
    """Drop field instructions and map Word control marks to plain text."""
    previous = None
    while previous != text:
        previous = text
        text = _FIELD_WITH_RESULT.sub("", text)
        text = _FIELD_WITHOUT_RESULT.sub("", text)
    text = strip_control_chars(text.translate(_WORD_MARKS))
    return normalize_whitespace(text.splitlines())


def decode_word_text(word: bytes, tables: Mapping[str, bytes]) -> str:
    """Extract the main document text from raw ``WordDocument`` and table streams."""
    fib = parse_fib(word)
    if fib.encrypted:
        raise WordFormatError("document is encrypted")
    table = tables.get(fib.table_stream)
    if table is None:
        raise WordFormatError(f"missing {fib.table_stream} stream")
    if fib.lcb_clx == 0:
        raise WordFormatError("document has no Clx")
    clx = table[fib.fc_clx : fib.fc_clx + fib.lcb_clx]
    if len(clx) != fib.lcb_clx:
        raise WordFormatError("Clx extends past the table stream")
    return clean_word_text(decode_pieces(word, find_piece_table(clx), fib.ccp_text))


def _summary_title(ole: olefile.OleFileIO) -> str | None:
    try:
        title = ole.get_metadata().title
    except Exception as exc:  # pragma: no cover - depends on damaged property sets
        LOGGER.debug("Could not read summary information: %s", exc)
        return None
    if isinstance(title, bytes):
        title = title.decode("cp1252", errors="replace")
    title = (title or "").strip("\x00").strip()
    return title or None


def read_word_document(path: Path) -> tuple[str | None, str]:
    """Read ``(title, body)`` from a Word 97-2003 file."""
    if not olefile.isOleFile(str(path)):
        raise WordFormatError("not an OLE2 compound document")
    with olefile.OleFileIO(str(path)) as ole:
        if not ole.exists("WordDocument"):
            raise WordFormatError("missing WordDocument stream")
        word = ole.openstream("WordDocument").read()
        tables = {
            name: ole.openstream(name).read()
            for name in ("0Table", "1Table")
            if ole.exists(name)
        }
        title = _summary_title(ole)
    return title, decode_word_text(word, tables)


class WordExtractor(ContentExtractor):
    name = "word"
    suffixes = frozenset({".doc"})

    def __init__(self, reader: Callable[[Path], tuple[str | None, str]] = read_word_document) -> None:
        self._reader = reader

    def read(self, path: Path) -> tuple[str | None, str]:
        return self._reader(path)
