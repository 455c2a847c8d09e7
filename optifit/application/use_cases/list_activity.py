from __future__ import annotations

from optifit.application.dto.users import ActivityLogOutput
from optifit.application.ports.accounts_port import AccountsPort


MAX_ACTIVITY_LIMIT = 100


class ListActivityUseCase:
    def __init__(self, *, auth_port: AccountsPort):
        self._auth_port = auth_port

    def execute(self, *, user_id: str, limit: int = 20) -> list[ActivityLogOutput]:
        if limit <= 0 or limit > MAX_ACTIVITY_LIMIT:
            raise ValueError(f"limit must be between 1 and {MAX_ACTIVITY_LIMIT}.")
        entries = self._auth_port.list_activity_logs(user_id=user_id, limit=limit)
        return [
            ActivityLogOutput(
                id=entry.id,
                event_type=entry.event_type,
                event_data=entry.event_data,
                created_at=entry.created_at,
            )
            for entry in entries
        ]
