from __future__ import annotations

from typing import Any, Dict, Mapping, Optional, Sequence

from ..api.client import ApiClient
from ..api.wire import optional_int, status_from_wire, status_to_wire, unwrap_list
from ..common.datetime_utils import parse_iso_date, parse_optional_datetime
from ..core.enums import EventStatus
from ..core.exceptions import ApiError, InconsistentDataError, ValidationError
from ..users.repository import UserRepository
from .model import AbsenceEvent, DateRange, EventDraft
from .repository import EventRepository


class ApiEventRepository(EventRepository):
    """Events stored by the remote API (`/api/eventos`).

    The API's event record does not always carry the owner's group; when it
    is missing it is resolved through the user repository so manager checks
    compare real group ids.
    """

    def __init__(self, client: ApiClient, users: Optional[UserRepository] = None):
        self._client = client
        self._users = users

    def _owner_group(self, owner_id: int, cache: Dict[int, Optional[int]]) -> Optional[int]:
        if owner_id in cache:
            return cache[owner_id]
        group_id = None
        if self._users is not None:
            user = self._users.get_by_cpf(owner_id)
            group_id = user.group_id if user else None
        cache[owner_id] = group_id
        return group_id

    def _to_event(self, row: Mapping[str, Any], cache: Optional[Dict[int, Optional[int]]] = None) -> AbsenceEvent:
        try:
            event_id = int(row["id"])
            owner_id = int(row["cpf_usuario"])
            date_range = DateRange(parse_iso_date(row["data_inicio"]), parse_iso_date(row["data_fim"]))
            absence_type_id = int(row.get("id_tipo_ausencia") or 0)
        except (KeyError, TypeError, ValueError, ValidationError) as e:
            raise InconsistentDataError(f"Malformed event record from API: {e}") from e

        group_id = optional_int(row.get("grupo_id"))
        if group_id is None:
            group_id = self._owner_group(owner_id, cache if cache is not None else {})

        return AbsenceEvent(
            event_id=event_id,
            owner_id=owner_id,
            owner_group_id=group_id,
            status=status_from_wire(row.get("status")),
            date_range=date_range,
            absence_type_id=absence_type_id,
            uf=row.get("UF") or row.get("uf"),
            owner_name=row.get("usuario_nome"),
            absence_type_desc=row.get("tipo_ausencia_desc"),
            decided_by=optional_int(row.get("aprovado_por")),
            decided_by_name=row.get("aprovado_por_nome"),
            created_at=parse_optional_datetime(row.get("criado_em")),
        )

    @staticmethod
    def _draft_payload(draft: EventDraft) -> dict:
        return {
            "cpf_usuario": int(draft.owner_id),
            "data_inicio": draft.date_range.start.isoformat(),
            "data_fim": draft.date_range.end.isoformat(),
            "total_dias": draft.date_range.total_days,
            "id_tipo_ausencia": int(draft.absence_type_id),
            "UF": draft.uf,
        }

    def get_by_id(self, event_id: int) -> Optional[AbsenceEvent]:
        try:
            row = self._client.get(f"/api/eventos/{int(event_id)}")
        except ApiError as e:
            if e.status_code == 404:
                return None
            raise
        if not row:
            return None
        return self._to_event(row)

    def list_events(
        self,
        *,
        owner_id: Optional[int] = None,
        group_id: Optional[int] = None,
        status: Optional[EventStatus] = None,
    ) -> Sequence[AbsenceEvent]:
        data = self._client.get(
            "/api/eventos",
            params={
                "cpf_usuario": owner_id,
                "grupo_id": group_id,
                "status": status_to_wire(status) if status else None,
            },
        )
        cache: Dict[int, Optional[int]] = {}
        # Owner groups come from the owner's record, never from the listing filter.
        return [self._to_event(row, cache) for row in unwrap_list(data, "eventos")]

    def create(self, draft: EventDraft) -> AbsenceEvent:
        payload = self._draft_payload(draft)
        payload["status"] = status_to_wire(EventStatus.PENDING)
        return self._to_event(self._client.post("/api/eventos", payload))

    def update(self, event_id: int, draft: EventDraft) -> AbsenceEvent:
        return self._to_event(self._client.put(f"/api/eventos/{int(event_id)}", self._draft_payload(draft)))

    def delete_by_id(self, event_id: int) -> bool:
        try:
            self._client.delete(f"/api/eventos/{int(event_id)}")
        except ApiError as e:
            if e.status_code == 404:
                return False
            raise
        return True

    def decide(
        self,
        *,
        event_id: int,
        status: EventStatus,
        decided_by: int,
        note: Optional[str] = None,
    ) -> AbsenceEvent:
        action = {EventStatus.APPROVED: "aprovar", EventStatus.REJECTED: "rejeitar"}.get(status)
        if action is None:
            raise ValueError(f"Not a decision: {status!r}")
        payload = {"aprovador_cpf": int(decided_by), "observacoes": note or ""}
        return self._to_event(self._client.post(f"/api/eventos/{int(event_id)}/{action}", payload))
