"""
mkpw.encoding
Convert candidate bytes and generated output between UTF-8 text and a named encoding.
"""

import codecs


class UnsupportedEncodingError(ValueError):
    def __init__(self, encoding: str):
        self.encoding = encoding
        super().__init__(f"Unsupported encoding: {encoding}")


def _lookup(encoding: str) -> codecs.CodecInfo:
    try:
        info = codecs.lookup(encoding)
    except LookupError:
        raise UnsupportedEncodingError(encoding) from None
    # codecs like rot13 or base64 map bytes to bytes, not text
    if not getattr(info, "_is_text_encoding", True):
        raise UnsupportedEncodingError(encoding)
    return info


def check_encoding(encoding: str) -> None:
    """Raise UnsupportedEncodingError unless `encoding` is a usable text encoding."""
    _lookup(encoding)


def decode(data: bytes, encoding: str) -> str:
    """
    Decode `data` with `encoding`. Malformed sequences become U+FFFD.
    """
    return _lookup(encoding).decode(data, "replace")[0]


def encode(text: str, encoding: str) -> bytes:
    """
    Encode `text` with `encoding`. Characters the encoding cannot represent
    are written as numeric character references (&#128512;).
    """
    return _lookup(encoding).encode(text, "xmlcharrefreplace")[0]
