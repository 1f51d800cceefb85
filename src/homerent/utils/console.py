import sys
from typing import Any, TextIO

_ERRORS = "backslashreplace"


def _encoding_of(stream: TextIO) -> str:
    return getattr(stream, "encoding", None) or "utf-8"


def safe_str(value: Any, encoding: str = "utf-8") -> str:
    """Render ``value`` so that it can be written to a stream using ``encoding``."""
    if isinstance(value, bytes):
        return value.decode("utf-8", errors=_ERRORS)
    text = str(value)
    try:
        text.encode(encoding)
        return text
    except UnicodeEncodeError:
        return text.encode(encoding, errors=_ERRORS).decode(encoding)
    except LookupError:
        return text.encode("ascii", errors=_ERRORS).decode("ascii")


def safe_print(*args: Any, sep: str = " ", end: str = "\n", file: TextIO = None) -> None:
    """print() that never dies on a console that cannot show OMR or emoji glyphs."""
    stream = file if file is not None else sys.stdout
    encoding = _encoding_of(stream)
    text = sep.join(safe_str(arg, encoding) for arg in args) + end
    try:
        stream.write(text)
    except UnicodeEncodeError:
        stream.write(text.encode(encoding, errors=_ERRORS).decode(encoding, errors=_ERRORS))


def rule(char: str = "=", width: int = 60, file: TextIO = None) -> None:
    safe_print(char * width, file=file)
