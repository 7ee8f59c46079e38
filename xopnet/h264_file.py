"""Reading an H.264 Annex B elementary stream one access unit at a time."""

from __future__ import annotations

from typing import BinaryIO, Iterator, NamedTuple, Optional, Tuple

__all__ = ["H264File", "H264Frame"]

_START_CODE = b"\x00\x00\x01"
_SLICE_TYPES = (0x1, 0x5)
_PARAMETER_TYPES = (0x6, 0x7, 0x8)


class H264Frame(NamedTuple):
    """Bytes of one frame and whether it was the last in the file."""

    data: bytes
    end_of_stream: bool


def _start_codes(buf: bytes, begin: int, limit: int) -> Iterator[Tuple[int, int]]:
    """Yield (start of the start code, position of the NAL header)."""
    pos = begin
    while True:
        found = buf.find(_START_CODE, pos)
        if found < 0:
            return
        start = found - 1 if found - 1 >= pos and buf[found - 1] == 0 else found
        if start >= limit:
            return
        yield start, found + 3
        pos = found + 1


def _is_first_slice(buf: bytes, header: int) -> bool:
    return (buf[header] & 0x1F) in _SLICE_TYPES and bool(buf[header + 1] & 0x80)


class H264File:
    """Reads frames from an H.264 file, starting over when it runs out."""

    def __init__(self, buf_size: int = 5000000) -> None:
        self.buf_size = buf_size
        self._file: Optional[BinaryIO] = None
        self._bytes_used = 0
        self._count = 0

    def open(self, path: str) -> bool:
        """Open ``path`` for reading; False if it cannot be opened."""
        self.close()
        try:
            self._file = open(path, "rb")
        except OSError:
            self._file = None
            return False
        return True

    def close(self) -> None:
        if self._file is not None:
            self._file.close()
            self._file = None
            self._count = 0
            self._bytes_used = 0

    def is_opened(self) -> bool:
        return self._file is not None

    def read_frame(self, max_size: int) -> H264Frame:
        """Return the next frame, truncated to ``max_size`` bytes.

        Raises ValueError if the file is not open, and EOFError (closing the
        file) if no complete frame can be found.
        """
        if self._file is None:
            raise ValueError("H.264 file is not open")

        buf = self._file.read(self.buf_size)
        if not buf:
            self._file.seek(0)
            self._count = 0
            self._bytes_used = 0
            buf = self._file.read(self.buf_size)
            if not buf:
                self.close()
                raise EOFError("H.264 file is empty")

        length = len(buf)
        limit = length - 5

        position = 0
        found_start = False
        for start, header in _start_codes(buf, 0, limit):
            if _is_first_slice(buf, header):
                found_start = True
                position = start + 4
                break

        found_end = False
        if found_start:
            for start, header in _start_codes(buf, position, limit):
                if (buf[header] & 0x1F) in _PARAMETER_TYPES or _is_first_slice(buf, header):
                    found_end = True
                    position = start
                    break

        last = False
        if found_start and not found_end and self._count > 0:
            last = found_end = True
            position = length

        if not found_start or not found_end:
            self.close()
            raise EOFError("no complete H.264 frame found")

        data = buf[:min(position, max_size)]
        if last:
            self._count = 0
            self._bytes_used = 0
        else:
            self._count += 1
            self._bytes_used += position

        self._file.seek(self._bytes_used)
        return H264Frame(data, last)

    def __enter__(self) -> "H264File":
        return self

    def __exit__(self, *exc) -> None:
        self.close()