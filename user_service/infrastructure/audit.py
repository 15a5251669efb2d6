# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Security audit trail for account events, written to the application log."""

from __future__ import annotations

from collections.abc import Mapping
from enum import Enum
from typing import Any

from user_service.shared.logging import logger


class AuditAction(str, Enum):
    REGISTER = "register"
    LOGIN_SUCCESS = "login_success"
    LOGIN_FAILED = "login_failed"
    TOKEN_REFRESHED = "token_refreshed"
    PROFILE_UPDATED = "profile_updated"
    PASSWORD_CHANGED = "password_changed"
    ACCOUNT_DELETED = "account_deleted"


_SENSITIVE_KEYS = ("password", "token", "secret", "hash", "key")


def _sanitize_details(details: Mapping[str, Any]) -> dict[str, Any]:
    return {
        key: "***REDACTED***" if any(s in key.lower() for s in _SENSITIVE_KEYS) else value
        for key, value in details.items()
    }


class AuditLogger:
    """Emits one ``AUDIT:`` line per event; failures go out at WARNING."""

    def log(
        self,
        action: AuditAction,
        user_id: str | None = None,
        ip_address: str | None = None,
        details: Mapping[str, Any] | None = None,
        success: bool = True,
    ) -> None:
        parts = [
            f"AUDIT: {action.value}",
            f"user_id={user_id or '-'}",
            f"ip={ip_address or '-'}",
            f"success={str(success).lower()}",
        ]
        if details:
            parts.append(f"details={_sanitize_details(details)}")

        bound = logger.bind(audit_action=action.value)
        if success:
            bound.info(" ".join(parts))
        else:
            bound.warning(" ".join(parts))


audit = AuditLogger()


def audit_log(
    action: AuditAction,
    user_id: str | None = None,
    ip_address: str | None = None,
    details: Mapping[str, Any] | None = None,
    success: bool = True,
) -> None:
    audit.log(action, user_id, ip_address, details, success)


__all__ = ["AuditAction", "AuditLogger", "audit", "audit_log"]
