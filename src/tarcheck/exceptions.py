"""Custom exceptions for tarcheck."""


class TarCheckError(Exception):
    """Base exception for all fatal archive-check errors."""

    pass


class ArchiveReadError(TarCheckError):
    """Raised when the archive cannot be opened, read or rewound."""

    pass


class DecompressionError(TarCheckError):
    """Raised when a zstd-compressed archive cannot be decompressed."""

    pass


class TarReadError(TarCheckError):
    """Raised when unable to read or parse the tar stream."""

    pass


class ManifestParseError(TarCheckError):
    """Raised when manifest.json or index.json is malformed."""

    def __init__(self, filename: str, message: str) -> None:
        super().__init__(f"parse {filename}: {message}")
        self.filename = filename
