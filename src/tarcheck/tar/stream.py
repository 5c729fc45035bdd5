"""Compression detection for archive input streams."""

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import BinaryIO

import zstandard as zstd

from ..exceptions import ArchiveReadError, DecompressionError

logger = logging.getLogger(__name__)

# zstd frame magic number (little-endian 0xFD2FB528)
ZSTD_MAGIC = b"\x28\xb5\x2f\xfd"


def is_zstd_header(header: bytes) -> bool:
    """Check if a stream prefix is the zstd frame magic."""
    return header[: len(ZSTD_MAGIC)] == ZSTD_MAGIC


def read_header(source: BinaryIO) -> bytes:
    """Read the magic-number prefix and rewind the source to offset 0.

    Args:
        source: Seekable binary file object positioned at its start

    Returns:
        Up to four header bytes

    Raises:
        ArchiveReadError: If the source is empty or cannot be read or rewound
    """
    try:
        header = source.read(len(ZSTD_MAGIC))
    except OSError as e:
        raise ArchiveReadError(f"read header: {e}") from e

    if not header:
        raise ArchiveReadError("read header: empty input")

    try:
        source.seek(0)
    except OSError as e:
        raise ArchiveReadError(f"seek to start: {e}") from e

    return header


def detect_stream(source: BinaryIO) -> tuple[BinaryIO, bool]:
    """Wrap a source in a zstd decompressor if it starts with the zstd magic.

    Args:
        source: Seekable binary file object

    Returns:
        Tuple of (tar byte stream, whether it is zstd-compressed)

    Raises:
        ArchiveReadError: If the header cannot be read or the source rewound
        DecompressionError: If the decompressor cannot be created
    """
    header = read_header(source)
    if not is_zstd_header(header):
        logger.debug("No zstd magic found, reading as raw tar")
        return source, False

    logger.debug("zstd magic found, decompressing stream")
    try:
        dctx = zstd.ZstdDecompressor()
        return dctx.stream_reader(source, closefd=False), True
    except zstd.ZstdError as e:
        raise DecompressionError(f"zstd new reader: {e}") from e


@contextmanager
def open_archive(path: Path) -> Iterator[BinaryIO]:
    """아카이브 파일을 열고 압축 해제된 tar 스트림을 제공합니다.

    zstd 매직 넘버로 압축 여부를 판별하며, 파일과 압축 해제 스트림은
    정상 종료와 예외 발생 모두에서 닫힙니다.

    Args:
        path: tar 또는 tar.zst 파일 경로
            - Path 객체: Path("/var/tmp/images/nginx.tar")
            - zstd 압축 파일: Path("./exports/app.tar.zst")

    Yields:
        BinaryIO: 순차적으로 읽을 수 있는 tar 바이트 스트림

    Raises:
        ArchiveReadError: 파일을 열거나 읽을 수 없는 경우
        DecompressionError: zstd 스트림이 손상된 경우

    Examples:
        with open_archive(Path("nginx.tar.zst")) as stream:
            archive = index_archive(stream)
    """
    try:
        source = open(path, "rb")
    except OSError as e:
        raise ArchiveReadError(f"open: {e}") from e

    with source:
        stream, compressed = detect_stream(source)
        try:
            yield stream
        except zstd.ZstdError as e:
            raise DecompressionError(f"zstd decode: {e}") from e
        finally:
            if compressed:
                stream.close()
