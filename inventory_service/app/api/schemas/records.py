from __future__ import annotations

from pydantic import BaseModel

from common.types.objectid import ObjectIdStr


class InsertResult(BaseModel):
    acknowledged: bool = True
    inserted_id: str


class DeleteProductRequest(BaseModel):
    id: ObjectIdStr


class DeleteResult(BaseModel):
    acknowledged: bool = True
    deleted_count: int
