"""Trace file reader.

A trace is a text file with one memory operation per line:

    R: 0x<hex address>
    W: 0x<hex address>

Whitespace is tolerated around the operation letter and the colon, blank
lines are skipped. Reading stops at the first line that does not follow this
grammar: the records before it are kept, and the offending line is reported
in the result (and raised as TraceFormatError in strict mode).
"""
import logging
import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, List, NamedTuple, Optional

from ..core.errors import TraceFormatError

logger = logging.getLogger(__name__)

_RECORD_RE = re.compile(r"^\s*([RW])[ \t]*:\s*0x([0-9a-fA-F]+)\s*$")


class Operation(Enum):
    READ = 'R'
    WRITE = 'W'


class TraceRecord(NamedTuple):
    operation: Operation
    address: int

    @property
    def is_write(self) -> bool:
        return self.operation is Operation.WRITE


@dataclass
class TraceReadResult:
    records: List[TraceRecord] = field(default_factory=list)
    # 1-based number and text of the first malformed line, if any
    error_line: Optional[int] = None
    error_text: Optional[str] = None

    @property
    def truncated(self) -> bool:
        return self.error_line is not None


def _display(text: str) -> str:
    # undecodable bytes arrive as surrogate escapes; show them as \xNN
    return text.encode('utf-8', 'surrogateescape').decode('utf-8', 'backslashreplace')


def parse_line(text: str) -> Optional[TraceRecord]:
    """Parse one trace line; None if it does not match the grammar."""
    m = _RECORD_RE.match(text)
    if m is None:
        return None
    return TraceRecord(Operation(m.group(1)), int(m.group(2), 16))


def parse_trace(lines: Iterable[str], strict: bool = False) -> TraceReadResult:
    result = TraceReadResult()
    for lineno, raw in enumerate(lines, start=1):
        text = raw.rstrip('\r\n')
        if not text.strip():
            continue
        record = parse_line(text)
        if record is None:
            text = _display(text)
            if strict:
                raise TraceFormatError(lineno, text)
            logger.warning("trace truncated at line %d (%r); %d records kept",
                           lineno, text, len(result.records))
            result.error_line = lineno
            result.error_text = text
            break
        result.records.append(record)
    return result


def read_trace(path: str, strict: bool = False) -> TraceReadResult:
    """Read and parse a trace file. I/O errors propagate to the caller.

    Bytes that are not valid UTF-8 do not abort the read: the line holding
    them is malformed like any other, so the records before it are kept.
    """
    with open(path, 'r', encoding='utf-8', errors='surrogateescape') as fh:
        result = parse_trace(fh, strict=strict)
    logger.info("read %d records from %s", len(result.records), path)
    return result
