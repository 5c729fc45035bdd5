"""Single-pass tar archive indexer."""

import logging
import tarfile
from typing import BinaryIO

from ..exceptions import ArchiveReadError, TarReadError
from .models import ArchiveIndex, entry_basename

logger = logging.getLogger(__name__)

DOCKER_MANIFEST_NAME = "manifest.json"
OCI_INDEX_NAME = "index.json"


class StrictTarInfo(tarfile.TarInfo):
    """TarInfo that fails on a corrupt header anywhere in the stream.

    TarFile.next() only raises for a bad header at offset 0 and treats
    later ones as end of archive.
    """

    @classmethod
    def fromtarfile(cls, tar):
        try:
            return super().fromtarfile(tar)
        except (tarfile.InvalidHeaderError, tarfile.TruncatedHeaderError) as e:
            raise tarfile.ReadError(f"{e} at offset {tar.offset}") from e


def read_member_content(tar: tarfile.TarFile, member: tarfile.TarInfo) -> bytes:
    """Read the full content of the current stream member."""
    # directories, links and device entries carry no content
    if not member.isreg():
        return b""
    member_file = tar.extractfile(member)
    if member_file is None:
        return b""
    with member_file:
        return member_file.read()


def index_archive(stream: BinaryIO) -> ArchiveIndex:
    """tar 스트림을 한 번만 순회하며 엔트리 이름과 매니페스트를 수집합니다.

    Args:
        stream: 순차 읽기용 tar 바이트 스트림 (압축 해제 완료)

    Returns:
        ArchiveIndex: 정규화된 엔트리 이름 집합과 manifest.json /
            index.json 원본 바이트 (여러 개인 경우 마지막 엔트리)

    Raises:
        TarReadError: tar 헤더가 손상되었거나 스트림을 읽을 수 없는 경우

    Examples:
        with open_archive(Path("nginx.tar")) as stream:
            archive = index_archive(stream)
        print(f"엔트리 수: {len(archive)}")
    """
    archive = ArchiveIndex()

    try:
        with tarfile.open(fileobj=stream, mode="r|", tarinfo=StrictTarInfo) as tar:
            for member in tar:
                name = archive.add(member.name)
                basename = entry_basename(name)

                if basename == DOCKER_MANIFEST_NAME:
                    archive.manifest_bytes = read_member_content(tar, member)
                    logger.debug("Captured %s (%d bytes)", name, len(archive.manifest_bytes))
                elif basename == OCI_INDEX_NAME:
                    archive.index_bytes = read_member_content(tar, member)
                    logger.debug("Captured %s (%d bytes)", name, len(archive.index_bytes))
    except tarfile.TarError as e:
        raise TarReadError(f"tar read: {e}") from e
    except OSError as e:
        raise ArchiveReadError(f"read: {e}") from e

    logger.debug("Indexed %d archive entries", len(archive))
    return archive
