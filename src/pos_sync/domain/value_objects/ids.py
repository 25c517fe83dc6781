from __future__ import annotations

import uuid
from typing import NewType

IdempotencyKey = NewType("IdempotencyKey", str)


def new_idempotency_key() -> IdempotencyKey:
    return IdempotencyKey(str(uuid.uuid4()))
