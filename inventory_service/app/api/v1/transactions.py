from __future__ import annotations

from fastapi import APIRouter, Depends

from ...models.transaction import Transaction
from ...services.records_service import RecordsService, get_records_service
from ..routing import ErrorBoundaryRoute
from ..schemas.records import InsertResult
from ..session_cookie import require_user_id


router = APIRouter(route_class=ErrorBoundaryRoute)


@router.get(
    "/getTransactions", response_model=list[Transaction], summary="트랜잭션 목록 조회"
)
def get_transactions(
    service: RecordsService = Depends(get_records_service),
) -> list[Transaction]:
    return service.list_transactions()


@router.post(
    "/addNewTransaction",
    response_model=InsertResult,
    summary="트랜잭션 추가 (user_id 는 세션 사용자로 기록)",
)
def add_new_transaction(
    body: Transaction,
    user_id: str = Depends(require_user_id),
    service: RecordsService = Depends(get_records_service),
) -> InsertResult:
    inserted_id = service.add_transaction(body, user_id=user_id)
    return InsertResult(inserted_id=inserted_id)
