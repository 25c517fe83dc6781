from __future__ import annotations

import json
from datetime import datetime
from decimal import Decimal
from typing import Any
from uuid import UUID


class _Encoder(json.JSONEncoder):
    def default(self, o: object) -> Any:
        if isinstance(o, UUID):
            return str(o)
        if isinstance(o, datetime):
            return o.isoformat()
        if isinstance(o, Decimal):
            return str(o)
        return super().default(o)


def serialize_notification(event_type: str, data: dict[str, Any], sent_at: datetime) -> str:
    envelope = {"event": event_type, "data": data, "sent_at": sent_at}
    return json.dumps(envelope, cls=_Encoder)


def deserialize_notification(raw: str | bytes) -> tuple[str, dict[str, Any]]:
    envelope = json.loads(raw)
    return envelope["event"], envelope["data"]
