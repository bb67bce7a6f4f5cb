from __future__ import annotations

from fastapi import APIRouter, Depends

from ...models.product import Product
from ...services.records_service import RecordsService, get_records_service
from ..routing import ErrorBoundaryRoute
from ..schemas.records import DeleteProductRequest, DeleteResult, InsertResult


router = APIRouter(route_class=ErrorBoundaryRoute)


@router.get("/getProducts", response_model=list[Product], summary="상품 목록 조회")
def get_products(
    service: RecordsService = Depends(get_records_service),
) -> list[Product]:
    return service.list_products()


@router.post("/addNewProduct", response_model=InsertResult, summary="상품 추가")
def add_new_product(
    body: Product,
    service: RecordsService = Depends(get_records_service),
) -> InsertResult:
    inserted_id = service.add_product(body)
    return InsertResult(inserted_id=inserted_id)


@router.post("/deleteProduct", response_model=DeleteResult, summary="상품 삭제")
def delete_product(
    body: DeleteProductRequest,
    service: RecordsService = Depends(get_records_service),
) -> DeleteResult:
    deleted = service.delete_product(body.id)
    return DeleteResult(deleted_count=deleted)
