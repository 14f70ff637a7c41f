"""ReleaseSink protocol for writing rendered release documents.

Adapters implement this protocol to persist rendered output; the CLI uses
the filesystem adapter.

Usage
-----
>>> from pathlib import Path
>>> from creel.reporting.filesystem_sink import FilesystemReleaseSink
>>> isinstance(FilesystemReleaseSink(Path(".")), ReleaseSink)
True

"""

from __future__ import annotations

import typing as typ

if typ.TYPE_CHECKING:
    from pathlib import Path

    from .formats import OutputFormat


@typ.runtime_checkable
class ReleaseSink(typ.Protocol):
    """Protocol for writing rendered release documents to storage."""

    async def write_release(
        self,
        content: str,
        *,
        version: str,
        fmt: OutputFormat,
    ) -> Path:
        """Persist ``content`` and return where the versioned copy lives.

        Parameters
        ----------
        content
            The rendered document.
        version
            Release version tag, used to name the output.
        fmt
            Output format, used to pick the file extension.

        """
        ...
