from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlalchemy.orm import Session

from sitegen.auth.dependencies import EditorContext, require_editor
from sitegen.db.deps import get_session
from sitegen.db.repositories.articles import ArticlesRepository
from sitegen.schemas.catalog import ArticleCreateRequest, ArticleUpdateRequest, RecordsByIdsRequest
from sitegen.services.identifiers import coerce_uuid, require_uuid
from sitegen.services.records import article_record

router = APIRouter(prefix="/articles", tags=["articles"])

_ARTICLE_FIELD_COLUMNS = {
    "category": "category",
    "datePosted": "date_posted",
    "content": "content",
    "contentSummary": "content_summary",
    "image": "image",
}


@router.get("")
def list_articles(
    category: Optional[str] = None,
    session: Session = Depends(get_session),
):
    repo = ArticlesRepository(session)
    articles = repo.list_by_category(category=category) if category else repo.list()
    return [article_record(article) for article in articles]


@router.post("/by-ids")
def get_articles_by_ids(
    payload: RecordsByIdsRequest,
    session: Session = Depends(get_session),
):
    ids = [uuid for uuid in (coerce_uuid(value) for value in payload.ids) if uuid is not None]
    found = {article.id: article for article in ArticlesRepository(session).get_many(article_ids=ids)}
    return [article_record(found[article_id]) for article_id in ids if article_id in found]


@router.get("/{article_id}")
def get_article(
    article_id: str,
    session: Session = Depends(get_session),
):
    article = ArticlesRepository(session).get(article_id=require_uuid(article_id, label="article_id"))
    if not article:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Article not found")
    return article_record(article)


@router.post("", status_code=status.HTTP_201_CREATED)
def create_article(
    payload: ArticleCreateRequest,
    auth: EditorContext = Depends(require_editor),
    session: Session = Depends(get_session),
):
    fields: dict[str, object] = {}
    for key, column in _ARTICLE_FIELD_COLUMNS.items():
        value = getattr(payload, key)
        if value is not None:
            fields[column] = value
    article = ArticlesRepository(session).create(title=payload.title, **fields)
    return article_record(article)


@router.patch("/{article_id}")
def update_article(
    article_id: str,
    payload: ArticleUpdateRequest,
    auth: EditorContext = Depends(require_editor),
    session: Session = Depends(get_session),
):
    fields_set = payload.model_fields_set
    fields: dict[str, object] = {}
    if "title" in fields_set:
        if payload.title is None:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="title cannot be null.")
        fields["title"] = payload.title
    if "datePosted" in fields_set and payload.datePosted is None:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="datePosted cannot be null.")
    for key, column in _ARTICLE_FIELD_COLUMNS.items():
        if key in fields_set:
            fields[column] = getattr(payload, key)

    updated = ArticlesRepository(session).update(
        article_id=require_uuid(article_id, label="article_id"), **fields
    )
    if not updated:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Article not found")
    return article_record(updated)


@router.delete("/{article_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_article(
    article_id: str,
    auth: EditorContext = Depends(require_editor),
    session: Session = Depends(get_session),
):
    deleted = ArticlesRepository(session).delete(article_id=require_uuid(article_id, label="article_id"))
    if not deleted:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Article not found")
    return Response(status_code=status.HTTP_204_NO_CONTENT)
