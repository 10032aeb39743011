"""Build an asset file from a CSV table of asset paths and tags.

Each CSV line names an asset file and the tag it is stored under. The output
starts with the packed header from :mod:`itfliesby.asset_format`, followed by
each asset's data in table order. Text and model files are stored with a
terminating NUL byte. Images are stored as width and height, each a
little-endian signed 32-bit integer, followed by RGBA pixels with the bottom
row first.
"""

from __future__ import annotations

import argparse
import io
import logging
import re
import struct
import sys
from dataclasses import dataclass
from enum import IntEnum
from pathlib import Path
from typing import Iterable

from PIL import Image, UnidentifiedImageError

from .asset_format import (
    IMAGE_DATA_OFFSET,
    TAG_SIZE,
    AssetFileHeader,
    AssetFileType,
    AssetIndex,
    classify_path,
    header_size,
    image_allocation_size_bytes,
)

__all__ = [
    "ReturnCode",
    "BuilderError",
    "BuilderArguments",
    "CsvEntry",
    "parse_arguments",
    "parse_csv",
    "encode_image",
    "build_asset_file",
    "main",
]

log = logging.getLogger(__name__)

_DIMENSIONS = struct.Struct("<ii")
_LEADING_INTEGER = re.compile(r"\s*([+-]?\d+)")


class ReturnCode(IntEnum):
    SUCCESS = 0x00000000
    MEMORY_ALLOCATION_ERROR = 0x80000000
    INVALID_ARGUMENTS = 0x80000001
    INVALID_INPUT_FILE = 0x80000002
    OUT_OF_MEMORY = 0x80000003
    CSV_READ_FAILURE = 0x80000004
    ASSET_FILE_CREATE_FAILURE = 0x80000005
    INVALID_TYPE = 0x80000006

    @property
    def message(self) -> str:
        return _MESSAGES[self]


_MESSAGES = {
    ReturnCode.SUCCESS: "ASSET FILE BUILT SUCCESSFULLY",
    ReturnCode.MEMORY_ALLOCATION_ERROR: "ERROR: FAILED TO ALLOCATE MEMORY",
    ReturnCode.INVALID_ARGUMENTS: "ERROR: ARGUMENTS INVALID",
    ReturnCode.INVALID_INPUT_FILE: "ERROR: INPUT FILE INVALID",
    ReturnCode.OUT_OF_MEMORY: "ERROR: OUT OF MEMORY",
    ReturnCode.CSV_READ_FAILURE: "ERROR: COULD NOT READ CSV FILE",
    ReturnCode.ASSET_FILE_CREATE_FAILURE: "ERROR: FAILED TO CREATE ASSET FILE",
    ReturnCode.INVALID_TYPE: "ERROR: ASSET FILE TYPE INVALID",
}


class BuilderError(Exception):
    """Building the asset file failed; ``code`` says why."""

    def __init__(self, code: ReturnCode, detail: str = "") -> None:
        self.code = ReturnCode(code)
        text = self.code.message if not detail else f"{self.code.message}: {detail}"
        super().__init__(text)


@dataclass(frozen=True)
class BuilderArguments:
    csv_path: Path
    asset_file_path: Path
    asset_file_type: AssetFileType


@dataclass(frozen=True)
class CsvEntry:
    asset_path: str
    asset_tag: str
    asset_type: AssetFileType


def _leading_integer(text: str) -> int:
    """Parse the leading decimal integer of ``text``; 0 when there is none."""
    match = _LEADING_INTEGER.match(text)
    return int(match.group(1)) if match else 0


def parse_arguments(argv) -> BuilderArguments:
    """Read the CSV path, the output path and the asset file type."""
    argv = list(argv)
    if len(argv) != 3:
        raise BuilderError(
            ReturnCode.INVALID_ARGUMENTS, f"expected 3 arguments, got {len(argv)}"
        )
    csv_path, asset_file_path, type_text = argv
    file_type = _leading_integer(str(type_text))
    if file_type <= AssetFileType.INVALID or file_type >= AssetFileType.COUNT:
        raise BuilderError(ReturnCode.INVALID_TYPE, f"unknown asset type {type_text!r}")
    return BuilderArguments(Path(csv_path), Path(asset_file_path), AssetFileType(file_type))


def parse_csv(text: str) -> list[CsvEntry]:
    """Read ``path,tag`` lines; empty lines and empty fields are skipped."""
    entries = []
    for line in text.split("\n"):
        line = line.rstrip("\r")
        fields = [field for field in line.split(",") if field]
        if not fields:
            continue
        if len(fields) < 2:
            raise BuilderError(
                ReturnCode.INVALID_INPUT_FILE, f"line {line!r} has no asset tag"
            )
        path, tag = fields[0], fields[1]
        if len(tag.encode("utf-8")) >= TAG_SIZE:
            raise BuilderError(
                ReturnCode.INVALID_INPUT_FILE, f"tag {tag!r} is too long"
            )
        entries.append(CsvEntry(path, tag, classify_path(path)))
    return entries


def _image_dimensions(data: bytes) -> tuple[int, int]:
    try:
        with Image.open(io.BytesIO(data)) as image:
            return image.size
    except (UnidentifiedImageError, OSError) as error:
        raise BuilderError(
            ReturnCode.ASSET_FILE_CREATE_FAILURE, f"cannot read image: {error}"
        ) from error


def encode_image(data: bytes) -> bytes:
    """Decode an image file and store it as dimensions and bottom-up RGBA pixels."""
    try:
        with Image.open(io.BytesIO(bytes(data))) as image:
            image.load()
            rgba = image.convert("RGBA").transpose(Image.Transpose.FLIP_TOP_BOTTOM)
    except (UnidentifiedImageError, OSError) as error:
        raise BuilderError(
            ReturnCode.ASSET_FILE_CREATE_FAILURE, f"cannot decode image: {error}"
        ) from error
    width, height = rgba.size
    encoded = _DIMENSIONS.pack(width, height) + rgba.tobytes()
    assert len(encoded) - IMAGE_DATA_OFFSET == 4 * width * height
    return encoded


def _read_asset(path: str) -> bytes | None:
    try:
        return Path(path).read_bytes()
    except OSError:
        return None


def build_asset_file(entries: Iterable[CsvEntry], output_path) -> AssetFileHeader:
    """Write the asset file for ``entries`` and return its header.

    Assets that cannot be opened are logged and skipped; their index keeps an
    empty tag and zero sizes, and the following assets' offsets do not count
    them.
    """
    entries = list(entries)
    indexes = []
    offset = header_size(len(entries))

    for position, entry in enumerate(entries):
        contents = _read_asset(entry.asset_path)
        if contents is None:
            log.warning("FAILED TO CREATE INDEX FOR [%s]", entry.asset_path)
            indexes.append(AssetIndex(""))
            continue
        file_size = len(contents)
        if entry.asset_type is AssetFileType.IMAGE:
            width, height = _image_dimensions(contents)
            allocation_size = image_allocation_size_bytes(width, height)
        else:
            allocation_size = file_size + 1
        index = AssetIndex(entry.asset_tag, file_size, allocation_size, offset)
        log.info(
            "CREATING INDEX [%d] - SIZE:[%d], TAG:[%s], TYPE:[%s]",
            position,
            file_size,
            index.tag,
            entry.asset_type.label,
        )
        indexes.append(index)
        offset += allocation_size

    header = AssetFileHeader(indexes)
    try:
        output = open(output_path, "wb")
    except OSError as error:
        raise BuilderError(ReturnCode.ASSET_FILE_CREATE_FAILURE, str(error)) from error

    with output:
        output.write(header.pack())
        log.info("HEADER CONSTRUCTED, WRITING ASSET DATA")
        for entry in entries:
            contents = _read_asset(entry.asset_path)
            if contents is None:
                log.warning("CANNOT OPEN ASSET FILE [%s]", entry.asset_path)
                continue
            if entry.asset_type is AssetFileType.IMAGE:
                asset_data = encode_image(contents)
            else:
                asset_data = contents + b"\x00"
            log.info(
                "WRITING ASSET [%s] TO OUTPUT FILE SIZE: [%d]",
                entry.asset_path,
                len(asset_data),
            )
            output.write(asset_data)

    return header


def main(argv=None) -> int:
    """Build an asset file; returns the numeric result code."""
    if argv is None:
        argv = sys.argv[1:]
    parser = argparse.ArgumentParser(
        prog="itfliesby-asset-file-builder",
        description="Pack the assets listed in a CSV file into one asset file.",
        add_help=False,
    )
    parser.add_argument("arguments", nargs="*")
    args, extra = parser.parse_known_args(list(argv))
    arguments = list(args.arguments) + list(extra)

    code = ReturnCode.SUCCESS
    try:
        parsed = parse_arguments(arguments)
        try:
            csv_text = parsed.csv_path.read_bytes().decode("utf-8", errors="replace")
        except OSError as error:
            raise BuilderError(ReturnCode.INVALID_INPUT_FILE, str(error)) from error
        entries = parse_csv(csv_text)
        log.info("CSV FILE CONTAINS [%d] ENTRIES", len(entries))
        build_asset_file(entries, parsed.asset_file_path)
    except BuilderError as error:
        code = error.code
        print(str(error), file=sys.stderr)
    else:
        print(code.message)
    return int(code)