"""Host-boundary export of parsed frames.

Frames leave the engine as JSON arrays of records with exactly four fields:
``function_name``, ``file_name``, ``line_number`` and ``column_number``.
A serialization failure yields an empty array instead of an exception.
"""

from __future__ import annotations

import json
from collections.abc import Iterable
from typing import Any

from perflite.models.frame import StackFrame
from perflite.utils.diagnostics import DiagnosticSink
from perflite.utils.errors import ExportError

EMPTY_RESULT = "[]"

RECORD_FIELDS = ("function_name", "file_name", "line_number", "column_number")


def frame_to_record(frame: StackFrame) -> dict[str, Any]:
    """Convert a frame to its four-field export record."""
    return {
        "function_name": frame.function_name,
        "file_name": frame.file_name,
        "line_number": frame.line_number,
        "column_number": frame.column_number,
    }


def frames_to_records(frames: Iterable[StackFrame]) -> list[dict[str, Any]]:
    return [frame_to_record(frame) for frame in frames]


def frames_from_records(records: Iterable[dict[str, Any]]) -> list[StackFrame]:
    """Rebuild frames from exported records.

    Raises:
        ExportError: If a record lacks one of the four fields
    """
    frames: list[StackFrame] = []
    for record in records:
        missing = [name for name in RECORD_FIELDS if name not in record]
        if missing:
            raise ExportError(f"Record missing fields: {', '.join(missing)}")
        frames.append(StackFrame(**{name: record[name] for name in RECORD_FIELDS}))
    return frames


def _serialize(frames: Iterable[StackFrame]) -> str:
    try:
        return json.dumps(
            frames_to_records(frames),
            ensure_ascii=False,
            allow_nan=False,
            separators=(",", ":"),
        )
    except (TypeError, ValueError) as e:
        raise ExportError(f"Could not serialize frames: {e}") from e


def export_frames(frames: Iterable[StackFrame], sink: DiagnosticSink | None = None) -> str:
    """Serialize frames to a JSON array.

    Args:
        frames: Frames to export
        sink: Optional receiver for the failure report

    Returns:
        JSON text, or ``"[]"`` if serialization failed
    """
    try:
        return _serialize(frames)
    except ExportError as e:
        if sink is not None:
            sink.report("serialization_failed", error=str(e))
        return EMPTY_RESULT


def export_frames_bytes(
    frames: Iterable[StackFrame],
    sink: DiagnosticSink | None = None,
) -> bytes:
    """Serialize frames to UTF-8 encoded JSON.

    Text recovered from undecodable input may hold lone surrogates that
    cannot be encoded; those exports yield ``b"[]"``.
    """
    try:
        text = _serialize(frames)
        return text.encode("utf-8")
    except (ExportError, UnicodeEncodeError) as e:
        if sink is not None:
            sink.report("serialization_failed", error=str(e))
        return EMPTY_RESULT.encode("utf-8")
