"""JSON rendering of aggregated releases.

Component statuses are a tagged union: each carries ``"type": "released"``
or ``"type": "no_release"`` so consumers can decode the document back into
:class:`~creel.releases.models.AggregatedRelease` with ``msgspec``.
"""

from __future__ import annotations

import msgspec

from creel.releases.models import AggregatedRelease

_ENCODER = msgspec.json.Encoder()
_DECODER = msgspec.json.Decoder(AggregatedRelease)


def render_release_json(release: AggregatedRelease, *, indent: int = 2) -> str:
    """Encode ``release`` as pretty-printed JSON."""
    encoded = _ENCODER.encode(release)
    return msgspec.json.format(encoded, indent=indent).decode("utf-8")


def decode_release_json(payload: str | bytes) -> AggregatedRelease:
    """Decode a document produced by :func:`render_release_json`.

    Raises
    ------
    msgspec.ValidationError
        If the payload does not describe an aggregated release.

    """
    return _DECODER.decode(payload)
