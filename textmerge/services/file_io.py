"""
Reading version files and writing the merged text.

Versions are read in the order given. A file that cannot serve as a
version (missing, unreadable, too large, not text) raises
`VersionReadError` naming the file and its position, so callers can stop
at the first bad input.
"""

from __future__ import annotations

import logging
import os
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Optional

import chardet

DEFAULT_MAX_VERSION_SIZE = 10 * 1024 * 1024

# Below this chardet guess confidence the text is decoded as UTF-8
MIN_DETECTION_CONFIDENCE = 0.7


class VersionReadError(OSError):
    """Raised when a version file cannot be used as merge input."""

    def __init__(self, path: Path, reason: str, position: Optional[int] = None):
        self.path = path
        self.reason = reason
        self.position = position
        where = f"version {position} " if position is not None else ""
        super().__init__(f"Cannot read {where}({path}): {reason}")


@dataclass(frozen=True)
class VersionText:
    """Decoded content of one version file."""
    path: Path
    text: str
    encoding: str


class VersionReader:
    """
    Decodes version files to text.

    Without an explicit encoding, chardet guesses one (BOMs included);
    undecodable bytes then fall back to latin-1, which accepts anything.
    """

    FALLBACK_ENCODING = 'latin-1'

    def __init__(
        self,
        encoding: Optional[str] = None,
        max_size: int = DEFAULT_MAX_VERSION_SIZE
    ):
        self.encoding = encoding
        self.max_size = max_size

    def read(self, path: Path | str, position: Optional[int] = None) -> VersionText:
        """
        Read one version file.

        Raises:
            VersionReadError: If the file is unusable as merge input
        """
        path = Path(path)

        try:
            raw = path.read_bytes()
        except FileNotFoundError:
            raise VersionReadError(path, "file not found", position) from None
        except OSError as e:
            raise VersionReadError(path, e.strerror or str(e), position) from e

        if len(raw) > self.max_size:
            raise VersionReadError(
                path,
                f"{len(raw)} bytes exceeds the {self.max_size} byte limit",
                position
            )

        text, encoding = self._decode(path, raw, position)

        # Decoded text never contains NUL; binary data almost always does
        if '\x00' in text:
            raise VersionReadError(path, "not a text file", position)

        logging.debug(f"VersionReader - Read {path} as {encoding} ({len(text)} chars)")
        return VersionText(path=path, text=text, encoding=encoding)

    def read_all(self, paths: Iterable[Path | str]) -> list[VersionText]:
        """Read versions in order; raises on the first unusable file."""
        return [self.read(path, position) for position, path in enumerate(paths, start=1)]

    def _decode(self, path: Path, raw: bytes, position: Optional[int]) -> tuple[str, str]:
        if self.encoding:
            try:
                return raw.decode(self.encoding), self.encoding
            except (UnicodeDecodeError, LookupError) as e:
                raise VersionReadError(path, f"not valid {self.encoding}: {e}", position) from e

        encoding = self._guess_encoding(raw)
        try:
            return raw.decode(encoding), encoding
        except (UnicodeDecodeError, LookupError):
            logging.debug(
                f"VersionReader - {path} is not valid {encoding}, "
                f"decoding as {self.FALLBACK_ENCODING}"
            )
            return raw.decode(self.FALLBACK_ENCODING), self.FALLBACK_ENCODING

    @staticmethod
    def _guess_encoding(raw: bytes) -> str:
        if not raw:
            return 'utf-8'
        guess = chardet.detect(raw)
        encoding = (guess.get('encoding') or '').lower()
        if not encoding or guess.get('confidence', 0) < MIN_DETECTION_CONFIDENCE:
            return 'utf-8'
        # ASCII is a subset of UTF-8
        return 'utf-8' if encoding == 'ascii' else encoding


def write_text_atomic(path: Path | str, text: str, encoding: str = 'utf-8') -> int:
    """
    Write text through a temporary file in the target directory.

    Returns:
        Number of bytes written
    """
    path = Path(path)
    data = text.encode(encoding)
    path.parent.mkdir(parents=True, exist_ok=True)

    fd, temp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.")
    try:
        with os.fdopen(fd, 'wb') as f:
            f.write(data)
        os.replace(temp_name, path)
    except OSError:
        logging.error(f"write_text_atomic - Failed to write {path}")
        if os.path.exists(temp_name):
            os.unlink(temp_name)
        raise

    return len(data)
