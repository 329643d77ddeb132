"""
Readable binary content for file uploads.

File updates accept raw bytes, a filesystem path or an already opened binary stream.
``open_content`` turns any of them into a readable stream for the multipart encoder.
"""

import io
import os
from contextlib import contextmanager
from pathlib import Path
from typing import BinaryIO, Union


__all__ = ["ContentSource", "open_content", "filename_from_id"]


ContentSource = Union[bytes, bytearray, str, os.PathLike, BinaryIO]


@contextmanager
def open_content(source):
    # type: (ContentSource) -> BinaryIO
    """
    Open content as a readable binary stream.

    Paths are opened and closed by this context manager. Streams passed in by the
    caller are left open.

    :param source: Bytes, path (str or PathLike) or readable binary stream
    :return: Readable binary stream
    :raises TypeError: If source is of an unsupported type
    :raises OSError: If a path can not be opened
    """
    if isinstance(source, (bytes, bytearray)):
        yield io.BytesIO(source)
    elif isinstance(source, (str, os.PathLike)):
        with open(Path(source), "rb") as stream:
            yield stream
    elif hasattr(source, "read"):
        yield source
    else:
        raise TypeError(f"Unsupported content type: {type(source).__name__}")


def filename_from_id(id):
    # type: (str) -> str
    """
    Derive the upload filename from a document id.

    Both ``/`` and ``\\`` are treated as separators, e.g. ``a/b/report.pdf`` -> ``report.pdf``.
    """
    return id.replace("\\", "/").rsplit("/", 1)[-1]
