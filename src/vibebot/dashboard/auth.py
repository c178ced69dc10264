from __future__ import annotations

import os
from dataclasses import dataclass

from fastapi import HTTPException, Request


@dataclass(frozen=True)
class TokenPolicy:
    required: bool
    expected: str | None

    def allows(self, provided: str | None) -> bool:
        if not self.required:
            return True
        # a required but unset token locks every write endpoint
        return self.expected is not None and (provided or "") == self.expected


def load_token_policy() -> TokenPolicy:
    flag = os.getenv("DASHBOARD_REQUIRE_TOKEN", "true").strip().lower()
    expected = (os.getenv("DASHBOARD_TOKEN") or "").strip() or None
    return TokenPolicy(required=flag not in ("0", "false", "no", "n"), expected=expected)


def request_token(req: Request) -> str | None:
    return req.headers.get("token") or req.headers.get("x-dashboard-token") or req.query_params.get("token")


def require_token(req: Request) -> None:
    if not load_token_policy().allows(request_token(req)):
        raise HTTPException(status_code=401, detail="Unauthorized")
