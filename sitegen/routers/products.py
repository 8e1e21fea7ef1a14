from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlalchemy.orm import Session

from sitegen.auth.dependencies import EditorContext, require_editor
from sitegen.db.deps import get_session
from sitegen.db.repositories.products import ProductsRepository
from sitegen.schemas.catalog import ProductCreateRequest, ProductUpdateRequest, RecordsByIdsRequest
from sitegen.services.identifiers import coerce_uuid, require_uuid
from sitegen.services.records import product_record

router = APIRouter(prefix="/products", tags=["products"])


@router.get("")
def list_products(
    category: Optional[str] = None,
    session: Session = Depends(get_session),
):
    repo = ProductsRepository(session)
    products = repo.list_by_category(category=category) if category else repo.list()
    return [product_record(product) for product in products]


@router.post("/by-ids")
def get_products_by_ids(
    payload: RecordsByIdsRequest,
    session: Session = Depends(get_session),
):
    ids = [uuid for uuid in (coerce_uuid(value) for value in payload.ids) if uuid is not None]
    found = {product.id: product for product in ProductsRepository(session).get_many(product_ids=ids)}
    return [product_record(found[product_id]) for product_id in ids if product_id in found]


@router.get("/{product_id}")
def get_product(
    product_id: str,
    session: Session = Depends(get_session),
):
    product = ProductsRepository(session).get(product_id=require_uuid(product_id, label="product_id"))
    if not product:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Product not found")
    return product_record(product)


@router.post("", status_code=status.HTTP_201_CREATED)
def create_product(
    payload: ProductCreateRequest,
    auth: EditorContext = Depends(require_editor),
    session: Session = Depends(get_session),
):
    product = ProductsRepository(session).create(
        name=payload.name,
        category=payload.category,
        price=payload.price,
        description=payload.description,
        image=payload.image,
    )
    return product_record(product)


@router.patch("/{product_id}")
def update_product(
    product_id: str,
    payload: ProductUpdateRequest,
    auth: EditorContext = Depends(require_editor),
    session: Session = Depends(get_session),
):
    fields_set = payload.model_fields_set
    fields: dict[str, object] = {}
    if "name" in fields_set:
        if payload.name is None:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="name cannot be null.")
        fields["name"] = payload.name
    for key in ("category", "price", "description", "image"):
        if key in fields_set:
            fields[key] = getattr(payload, key)

    updated = ProductsRepository(session).update(
        product_id=require_uuid(product_id, label="product_id"), **fields
    )
    if not updated:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Product not found")
    return product_record(updated)


@router.delete("/{product_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_product(
    product_id: str,
    auth: EditorContext = Depends(require_editor),
    session: Session = Depends(get_session),
):
    deleted = ProductsRepository(session).delete(product_id=require_uuid(product_id, label="product_id"))
    if not deleted:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Product not found")
    return Response(status_code=status.HTTP_204_NO_CONTENT)
