"""
Compact encodings used in stored template keys and data URLs.
"""

import base64
import re
from urllib.parse import unquote_to_bytes

ENCODING_BASE = "!#$%&'()*+,-./0123456789:;<=>?@ABCDEFGHIJKLMNOPQRSTUVWXYZ[]^_`abcdefghijklmnopqrstuvwxyz{|}~"
"Alphabet for author ids. Contains neither space nor double quote, so ids are safe inside store keys."

DATA_URL = re.compile(r"^data:(?P<media_type>[\w.+-]+/[\w.+-]+)?(?P<base64>;base64)?,(?P<data>.*)$", re.DOTALL)


def number_to_encoded(number: int, encoding: str = ENCODING_BASE) -> str:
    """
    Encode a non-negative integer using the characters of ``encoding`` as digits.
    """
    if number < 0:
        raise ValueError(f"Cannot encode negative number {number}")

    if number == 0:
        return encoding[0]

    base = len(encoding)
    digits = []

    while number > 0:
        number, remainder = divmod(number, base)
        digits.append(encoding[remainder])

    return "".join(reversed(digits))


def encoded_to_number(encoded: str, encoding: str = ENCODING_BASE) -> int:
    base = len(encoding)
    number = 0

    for character in encoded:
        digit = encoding.find(character)
        if digit < 0:
            raise ValueError(f"Character {character!r} is not in the encoding")
        number = number * base + digit

    return number


def bytes_to_data_url(data: bytes, media_type: str = "image/png") -> str:
    return f"data:{media_type};base64,{base64.b64encode(data).decode('ascii')}"


def data_url_to_bytes(url: str) -> bytes:
    match = DATA_URL.match(url)

    if match is None:
        raise ValueError("Not a data URL")

    if match.group("base64"):
        return base64.b64decode(match.group("data"))

    return unquote_to_bytes(match.group("data"))
