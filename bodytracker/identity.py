# -*- coding: utf-8 -*-
"""Request identity — a plain user id, no authentication protocol."""

from __future__ import annotations

import re

from fastapi import HTTPException, Request

from .config import settings

USER_HEADER = "x-user-id"

_USER_ID_RE = re.compile(r"^[A-Za-z0-9_.@-]{1,128}$")


def get_user_id(request: Request) -> str:
    raw = (request.headers.get(USER_HEADER) or "").strip()
    if not raw:
        return settings.default_user_id
    if not _USER_ID_RE.match(raw):
        raise HTTPException(status_code=400, detail=f"Invalid {USER_HEADER} header")
    return raw
