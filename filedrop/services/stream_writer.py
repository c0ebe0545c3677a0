# filedrop/services/stream_writer.py
from pathlib import Path
from typing import AsyncIterable, Awaitable, Callable

import anyio

from filedrop.services.errors import FileCreateError, FileWriteError

StreamWriter = Callable[[Path, AsyncIterable[bytes]], Awaitable[int]]


async def write_stream(path: Path, chunks: AsyncIterable[bytes]) -> int:
    """
    Schrijf chunks één voor één naar `path` (aanmaken of truncaten).
    Retourneert het aantal geschreven bytes.

    Bij een fout blijft het half geschreven bestand gewoon staan; de
    aanroeper beslist wat ermee gebeurt.
    """
    try:
        fp = await anyio.open_file(path, "wb")
    except OSError as e:
        # stream is dan nog niet aangeraakt
        raise FileCreateError(path, e) from e

    written = 0
    try:
        async for chunk in chunks:
            await fp.write(chunk)
            written += len(chunk)
    except OSError as e:
        raise FileWriteError(path, e) from e
    finally:
        # ook bij deadline-cancel de file descriptor sluiten
        with anyio.CancelScope(shield=True):
            try:
                await fp.aclose()
            except OSError as e:
                raise FileWriteError(path, e) from e
    return written
