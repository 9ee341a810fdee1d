"""Chunked upload and download of release assets."""

import io
import logging
import mimetypes
import os
import stat
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from typing import BinaryIO

from rich.console import Console
from rich.progress import (
    Progress,
    BarColumn,
    DownloadColumn,
    TransferSpeedColumn,
    TimeRemainingColumn,
)

from ghrelease.core.github import GitHubClient
from ghrelease.models.release import Asset, Release

logger = logging.getLogger(__name__)

CHUNK_SIZE = 8192

ChunkCallback = Callable[[int], None]


def stream_length(source: BinaryIO) -> int | None:
    """Return the number of bytes left in ``source``, or None if unknowable.

    Regular files and seekable streams have a known length; pipes, sockets and
    terminals do not.
    """
    try:
        fileno = source.fileno()
    except (AttributeError, OSError, io.UnsupportedOperation):
        fileno = None

    if fileno is not None:
        info = os.fstat(fileno)
        if not stat.S_ISREG(info.st_mode):
            return None
        try:
            return max(info.st_size - source.tell(), 0)
        except OSError:
            return info.st_size

    seekable = getattr(source, "seekable", None)
    if seekable is not None and seekable():
        position = source.tell()
        end = source.seek(0, os.SEEK_END)
        source.seek(position)
        return end - position
    return None


def iter_chunks(
    source: BinaryIO,
    chunk_size: int = CHUNK_SIZE,
    on_chunk: ChunkCallback | None = None,
) -> Iterator[bytes]:
    """Yield ``source`` in chunks of at most ``chunk_size`` bytes."""
    while True:
        chunk = source.read(chunk_size)
        if not chunk:
            return
        if on_chunk:
            on_chunk(len(chunk))
        yield chunk


def upload_url(release: Release) -> str:
    """Strip the URI template suffix, e.g. ``.../assets{?name,label}``."""
    return release.upload_url.split("{", 1)[0]


def upload_asset(
    client: GitHubClient,
    release: Release,
    name: str,
    source: BinaryIO,
    label: str | None = None,
    length: int | None = None,
    content_type: str | None = None,
    chunk_size: int = CHUNK_SIZE,
    on_chunk: ChunkCallback | None = None,
) -> Asset:
    """Upload ``source`` as asset ``name`` of ``release``.

    The body is read lazily from ``source``, one chunk at a time. Without a
    known length the request goes out with chunked transfer encoding.

    Returns:
        The created asset
    """
    if length is None:
        length = stream_length(source)
    if content_type is None:
        content_type = mimetypes.guess_type(name)[0] or "application/octet-stream"

    headers = {"Content-Type": content_type}
    if length is not None:
        headers["Content-Length"] = str(length)

    params = {"name": name}
    if label:
        params["label"] = label

    logger.info(
        "Uploading %s to release %s (%s)",
        name,
        release.tag_name,
        f"{length} bytes" if length is not None else "unknown size",
    )
    data = client.request(
        "POST",
        upload_url(release),
        params=params,
        content=iter_chunks(source, chunk_size, on_chunk),
        headers=headers,
    )
    return Asset.from_api_response(data, release_id=release.id)


def download_asset(
    client: GitHubClient,
    asset: Asset,
    destination: BinaryIO,
    chunk_size: int = CHUNK_SIZE,
    on_chunk: ChunkCallback | None = None,
) -> int:
    """Write the content of ``asset`` to ``destination``.

    The API URL is used rather than the browser URL so private repositories
    work; GitHub redirects it to the storage host.

    Returns:
        Number of bytes written
    """
    logger.info("Downloading %s (%d bytes)", asset.name, asset.size)
    written = 0
    with client.stream(
        "GET",
        asset.url,
        headers={"Accept": "application/octet-stream"},
        follow_redirects=True,
    ) as response:
        for chunk in response.iter_bytes(chunk_size=chunk_size):
            destination.write(chunk)
            written += len(chunk)
            if on_chunk:
                on_chunk(len(chunk))
    destination.flush()
    logger.debug("Wrote %d bytes of %s", written, asset.name)
    return written


@contextmanager
def transfer_progress(
    description: str,
    total: int | None,
    enabled: bool = True,
    console: Console | None = None,
) -> Iterator[ChunkCallback | None]:
    """Show a progress bar while the block runs.

    Yields a callback to pass as ``on_chunk``, or None when disabled.
    """
    if not enabled:
        yield None
        return

    with Progress(
        "[progress.description]{task.description}",
        BarColumn(),
        DownloadColumn(),
        TransferSpeedColumn(),
        TimeRemainingColumn(),
        console=console or Console(stderr=True),
        transient=True,
    ) as progress:
        task = progress.add_task(description, total=total)
        yield lambda n: progress.update(task, advance=n)
