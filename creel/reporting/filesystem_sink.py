r"""Filesystem adapter for the ReleaseSink protocol.

Writes rendered releases with a predictable layout::

    {base_path}/{version}.{ext}
    {base_path}/latest.{ext}

Path separators in the version tag are replaced with ``-`` so a tag such as
``release/1.2`` stays a single file.

Usage
-----
>>> import asyncio
>>> from pathlib import Path
>>> from creel.reporting import OutputFormat
>>> from creel.reporting.filesystem_sink import FilesystemReleaseSink
>>>
>>> sink = FilesystemReleaseSink(Path("releases"))
>>> asyncio.run(
...     sink.write_release("# Release v1.2.0\n", version="v1.2.0",
...                        fmt=OutputFormat.MARKDOWN)
... )
PosixPath('releases/v1.2.0.md')

"""

from __future__ import annotations

import asyncio
import typing as typ

if typ.TYPE_CHECKING:
    from pathlib import Path

    from .formats import OutputFormat


def _safe_stem(version: str) -> str:
    stem = version.strip().replace("/", "-").replace("\\", "-")
    if not stem or stem in {".", ".."}:
        msg = f"Cannot derive a file name from version {version!r}"
        raise ValueError(msg)
    return stem


class FilesystemReleaseSink:
    """Write rendered releases to the local filesystem.

    Parameters
    ----------
    base_path
        Output directory; created on first write.

    """

    def __init__(self, base_path: Path) -> None:
        """Initialise the sink with a base directory path."""
        self._base_path = base_path

    async def write_release(
        self,
        content: str,
        *,
        version: str,
        fmt: OutputFormat,
    ) -> Path:
        """Write ``content`` to ``{version}.{ext}`` and ``latest.{ext}``."""
        await asyncio.to_thread(self._base_path.mkdir, parents=True, exist_ok=True)

        versioned_path = self._base_path / f"{_safe_stem(version)}.{fmt.extension}"
        latest_path = self._base_path / f"latest.{fmt.extension}"

        await asyncio.to_thread(versioned_path.write_text, content, "utf-8")
        await asyncio.to_thread(latest_path.write_text, content, "utf-8")
        return versioned_path
