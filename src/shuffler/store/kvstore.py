"""
Flat `KEY: VALUE` text persistence.

Every settings, session and stats file uses this format so the operator can
inspect or hand-edit them. Values are typed on load: exact `true`/`false`
become booleans, numeric text becomes int/float, everything else stays a
string.
"""
from __future__ import annotations

import logging
import math
import re
from pathlib import Path
from typing import Dict, Mapping, Optional, Union

from ..errors import PersistenceError

logger = logging.getLogger(__name__)

Value = Union[bool, int, float, str]

_LINE = re.compile(r"^(\w+): (.+)$")
_KEY = re.compile(r"^\w+$")


def decode_value(text: str) -> Value:
    if text == "true":
        return True
    if text == "false":
        return False
    # a number is only taken when it writes back as the same text, so
    # "007", "1e3" and " 5" stay strings
    try:
        number = int(text)
    except ValueError:
        pass
    else:
        return number if encode_value(number) == text else text
    try:
        real = float(text)
    except ValueError:
        return text
    # "nan"/"inf" would not survive a round trip as numbers
    if not math.isfinite(real) or encode_value(real) != text:
        return text
    return real


def encode_value(value: Value) -> str:
    # bool before int: True is an int too
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return repr(value)
    return str(value)


def parse(text: str) -> Dict[str, Value]:
    data: Dict[str, Value] = {}
    for line in text.splitlines():
        m = _LINE.match(line)
        if m is None:
            continue
        data[m.group(1)] = decode_value(m.group(2))
    return data


def load(path: Path) -> Optional[Dict[str, Value]]:
    """
    Returns the entries of the file at PATH, or None when it doesn't exist.

    Hand-edited files may not be UTF-8; undecodable bytes are replaced
    rather than failing the load.
    """
    path = Path(path)
    if not path.exists():
        logger.debug("Missing path: %s", path)
        return None
    return parse(path.read_text(encoding="utf-8", errors="replace"))


def dumps(data: Mapping[str, Value]) -> str:
    lines = []
    for key, value in data.items():
        if not _KEY.match(str(key)):
            raise ValueError(f"Key must be word characters only: {key!r}")
        text = encode_value(value)
        # an empty value is written as "KEY: ", which loads back as absent
        if "\n" in text or "\r" in text:
            raise ValueError(f"Value for {key!r} cannot be stored on one line: {value!r}")
        lines.append(f"{key}: {text}\n")
    return "".join(lines)


def save(path: Path, data: Mapping[str, Value]) -> None:
    """
    Writes DATA to PATH, one `KEY: VALUE` line per entry.

    Any existing file is overwritten. Write failures raise PersistenceError.
    """
    path = Path(path)
    content = dumps(data)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with path.open("w", encoding="utf-8") as f:
            f.write(content)
    except OSError as e:
        raise PersistenceError(f"Failed to write {path}: {e}") from e
