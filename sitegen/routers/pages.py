from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from sitegen.auth.dependencies import EditorContext, require_editor
from sitegen.db.deps import get_session
from sitegen.db.enums import PageDataModeEnum
from sitegen.db.repositories.pages import PagesRepository, select_page_data
from sitegen.schemas.pages import PageDraftRequest, PagePublishRequest

router = APIRouter(prefix="/pages", tags=["pages"])


def _page_response(page, mode: PageDataModeEnum) -> dict:
    return {
        "path": page.path,
        "data": select_page_data(page, mode),
        "hasDraft": page.draft_data is not None,
        "isPublished": page.published_data is not None,
        "updatedAt": page.updated_at.isoformat() if page.updated_at else None,
    }


@router.get("")
def list_pages(session: Session = Depends(get_session)):
    return [
        {"path": page.path, "isPublished": page.published_data is not None}
        for page in PagesRepository(session).list()
    ]


@router.get("/by-path")
def get_page(
    path: str,
    mode: PageDataModeEnum = PageDataModeEnum.published,
    session: Session = Depends(get_session),
):
    page = PagesRepository(session).get_by_path(path=path)
    if not page or select_page_data(page, mode) is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Page not found")
    return _page_response(page, mode)


@router.put("/draft")
def save_page_draft(
    payload: PageDraftRequest,
    auth: EditorContext = Depends(require_editor),
    session: Session = Depends(get_session),
):
    page = PagesRepository(session).save_draft(path=payload.path, data=payload.data.model_dump(mode="json"))
    return _page_response(page, PageDataModeEnum.draft)


@router.post("/publish")
def publish_page(
    payload: PagePublishRequest,
    auth: EditorContext = Depends(require_editor),
    session: Session = Depends(get_session),
):
    page = PagesRepository(session).publish(path=payload.path, data=payload.data.model_dump(mode="json"))
    return {"path": page.path, "revalidatePaths": [page.path]}
