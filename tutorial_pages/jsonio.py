"""JSON artifact reading and writing built on ``msgspec``."""

from __future__ import annotations

import typing as typ
from pathlib import Path

import msgspec

_encoder = msgspec.json.Encoder()


class ArtifactDecodeError(ValueError):
    """Raised when an artifact on disk is not valid JSON."""


def encode_json(payload: typ.Any) -> bytes:
    """Return ``payload`` as indented UTF-8 JSON terminated by a newline."""
    return msgspec.json.format(_encoder.encode(payload), indent=2) + b"\n"


def write_json(path: Path, payload: typ.Any) -> int:
    """Write ``payload`` to ``path`` and return the number of bytes written.

    The document is written to a sibling temporary file first and moved into
    place, so readers never observe a half-written artifact.
    """
    data = encode_json(payload)
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp_path = path.with_name(f".{path.name}.tmp")
    tmp_path.write_bytes(data)
    tmp_path.replace(path)
    return len(data)


def read_json(path: Path) -> typ.Any:
    """Decode the JSON document stored at ``path``.

    Raises
    ------
    OSError
        If the file cannot be read.
    ArtifactDecodeError
        If the file content is not valid JSON.
    """
    raw = path.read_bytes()
    try:
        return msgspec.json.decode(raw)
    except msgspec.DecodeError as exc:
        msg = f"Artifact '{path.name}' is not valid JSON: {exc}"
        raise ArtifactDecodeError(msg) from exc


__all__ = ["ArtifactDecodeError", "encode_json", "read_json", "write_json"]
