"""
Escaping for the ledger's line-oriented data file.

Free-text fields may contain the field delimiter, backslashes and line
breaks. Each field is escaped before the fields of a record are joined:

    \\   -> \\\\
    |    -> \\|
    LF   -> \\n
    CR   -> \\r

Decoding scans left to right in one pass, so a literal backslash followed by
"n" is never confused with an escaped newline.
"""

from typing import Iterable, List, Optional

DELIMITER = "|"
ESCAPE_CHAR = "\\"

_ENCODE = [
	# backslash must go first so later escapes are not doubled
	(ESCAPE_CHAR, ESCAPE_CHAR + ESCAPE_CHAR),
	(DELIMITER, ESCAPE_CHAR + DELIMITER),
	("\n", ESCAPE_CHAR + "n"),
	("\r", ESCAPE_CHAR + "r"),
]

_DECODE = {
	ESCAPE_CHAR: ESCAPE_CHAR,
	DELIMITER: DELIMITER,
	"n": "\n",
	"r": "\r",
}


def escape(text: Optional[str]) -> str:
	"""Encode text into a delimiter-safe token."""
	if text is None:
		return ""
	for raw, escaped in _ENCODE:
		text = text.replace(raw, escaped)
	return text


def unescape(token: Optional[str]) -> str:
	"""Inverse of escape()."""
	if not token:
		return ""
	out: List[str] = []
	chars = iter(token)
	for ch in chars:
		if ch != ESCAPE_CHAR:
			out.append(ch)
			continue
		nxt = next(chars, None)
		if nxt is None:
			# dangling escape at end of token
			out.append(ESCAPE_CHAR)
		else:
			out.append(_DECODE.get(nxt, nxt))
	return "".join(out)


def split_fields(line: str) -> List[str]:
	"""
	Split a record line on unescaped delimiters.

	Empty trailing fields are kept. The returned fields are still escaped.
	"""
	fields: List[str] = []
	current: List[str] = []
	escaped = False
	for ch in line:
		if escaped:
			current.append(ch)
			escaped = False
		elif ch == ESCAPE_CHAR:
			current.append(ch)
			escaped = True
		elif ch == DELIMITER:
			fields.append("".join(current))
			current = []
		else:
			current.append(ch)
	fields.append("".join(current))
	return fields


def join_fields(fields: Iterable[str]) -> str:
	return DELIMITER.join(fields)


def encode_record(tag: str, *values: str) -> str:
	"""Build one record line: the tag followed by escaped values."""
	return join_fields([tag] + [escape(v) for v in values])
