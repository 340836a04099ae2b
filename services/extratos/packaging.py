from __future__ import annotations

import json
from dataclasses import dataclass, field

from domain.models import DraftSubmission

FILE_FIELD = "data"


@dataclass
class MultipartPayload:
    """Scalar fields + file parts, in the shapes httpx expects for data= and files=."""

    data: dict[str, str] = field(default_factory=dict)
    files: list[tuple[str, tuple[str, bytes, str]]] = field(default_factory=list)


def build_payload(draft: DraftSubmission) -> MultipartPayload:
    payload = MultipartPayload()

    for index, f in enumerate(draft.files):
        payload.files.append((FILE_FIELD, (f.name, f.data, f.content_type or "application/octet-stream")))
        payload.data[f"filename_{index}"] = f.name
        payload.data[f"mimetype_{index}"] = f.content_type
        payload.data[f"size_{index}"] = str(f.size)

    payload.data["cliente"] = draft.client
    # selection order, not sorted
    payload.data["tipos"] = json.dumps([t.value for t in draft.statement_types])
    payload.data["instituicao"] = draft.institution
    payload.data["competencia"] = draft.competence
    return payload
