"""
Level wire format.

A level code is base64 text wrapping a raw deflate stream. The inflated bytes
start with a format version byte followed by ``(tag, payload)`` records.
"""

import base64
import binascii
import logging
import math
import struct
import zlib

from toggle_solver.bits import BitVector
from toggle_solver.core import Level

logger = logging.getLogger(__name__)

WIDTH_TAG = 0x01
HEIGHT_TAG = 0x02
SUBTYPES_TAG = 0x03
STATES_TAG = 0x04
MIN_CLICKS_TAG = 0x05
CREATOR_TAG = 0x06

FORMAT_VERSION = 1


class LevelFormatError(ValueError):
    """Raised when a level code cannot be decoded."""


def decode_level(text: str) -> Level:
    try:
        compressed = base64.b64decode(text.strip(), validate=True)
    except binascii.Error as e:
        raise LevelFormatError(f"level code is not valid base64: {e}") from e

    try:
        raw = zlib.decompress(compressed, -zlib.MAX_WBITS)
    except zlib.error as e:
        raise LevelFormatError(f"level code is not a deflate stream: {e}") from e

    return parse_level_bytes(raw)


def _take(data: bytes, start: int, count: int, what: str) -> bytes:
    end = start + count
    if end > len(data):
        raise LevelFormatError(
            f"truncated {what}: needed {count} bytes at offset {start}, "
            f"only {len(data) - start} left"
        )
    return data[start:end]


def parse_level_bytes(data: bytes) -> Level:
    if not data:
        raise LevelFormatError("empty level data")

    logger.debug("Level format version %d", data[0])

    width = None
    height = None
    subtypes = None
    states = None
    min_clicks = 0

    i = 1
    while i < len(data):
        tag = data[i]
        i += 1

        if tag == WIDTH_TAG:
            width = _take(data, i, 1, "width")[0]
            i += 1
        elif tag == HEIGHT_TAG:
            height = _take(data, i, 1, "height")[0]
            i += 1
        elif tag == SUBTYPES_TAG:
            if width is None or height is None:
                raise LevelFormatError("subtypes record appears before width and height")
            subtypes = _take(data, i, width * height, "subtypes")
            i += width * height
        elif tag == STATES_TAG:
            if subtypes is None:
                raise LevelFormatError("states record appears before subtypes")
            num_bytes = math.ceil(width * height / 8)
            states = BitVector.from_bytes(_take(data, i, num_bytes, "states"))
            i += num_bytes
        elif tag == MIN_CLICKS_TAG:
            (min_clicks,) = struct.unpack("<I", _take(data, i, 4, "minimum clicks"))
            i += 4
        elif tag == CREATOR_TAG:
            break
        else:
            logger.debug("Skipping unknown tag 0x%02x at offset %d", tag, i - 1)

    if subtypes is None:
        raise LevelFormatError("level has no subtypes record")
    if states is None:
        raise LevelFormatError("level has no states record")

    logger.debug(
        "Decoded %dx%d level, minimum clicks %d", width, height, min_clicks
    )
    return Level(
        width=width,
        height=height,
        subtypes=bytes(subtypes),
        states=states,
        min_clicks=min_clicks,
    )


def encode_level_bytes(level: Level, version: int = FORMAT_VERSION) -> bytes:
    num_bytes = math.ceil(level.width * level.height / 8)
    states = bytes(level.states.data[:num_bytes]).ljust(num_bytes, b"\0")

    out = bytearray([version])
    out += bytes([WIDTH_TAG, level.width, HEIGHT_TAG, level.height])
    out += bytes([SUBTYPES_TAG]) + bytes(level.subtypes)
    out += bytes([STATES_TAG]) + states
    out += bytes([MIN_CLICKS_TAG]) + struct.pack("<I", level.min_clicks)
    out += bytes([CREATOR_TAG])
    return bytes(out)


def encode_level(level: Level) -> str:
    compressor = zlib.compressobj(wbits=-zlib.MAX_WBITS)
    compressed = compressor.compress(encode_level_bytes(level)) + compressor.flush()
    return base64.b64encode(compressed).decode("ascii")
