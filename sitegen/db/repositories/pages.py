from __future__ import annotations

from typing import Any, Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from sitegen.db.enums import PageDataModeEnum
from sitegen.db.models import Page, PageGroup


def select_page_data(
    record: Page | PageGroup | None, mode: PageDataModeEnum = PageDataModeEnum.published
) -> Optional[dict[str, Any]]:
    if record is None:
        return None
    if mode == PageDataModeEnum.draft:
        return record.draft_data if record.draft_data is not None else record.published_data
    return record.published_data if record.published_data is not None else record.draft_data


class PagesRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def list(self) -> list[Page]:
        stmt = select(Page).order_by(Page.path.asc())
        return list(self.session.scalars(stmt).all())

    def get_by_path(self, *, path: str) -> Optional[Page]:
        stmt = select(Page).where(Page.path == path)
        return self.session.scalars(stmt).first()

    def save_draft(self, *, path: str, data: dict[str, Any]) -> Page:
        page = self.get_by_path(path=path)
        if page:
            page.draft_data = data
        else:
            page = Page(path=path, draft_data=data)
            self.session.add(page)
        self.session.commit()
        self.session.refresh(page)
        return page

    def publish(self, *, path: str, data: dict[str, Any]) -> Page:
        page = self.get_by_path(path=path)
        if page:
            page.draft_data = data
            page.published_data = data
        else:
            page = Page(path=path, draft_data=data, published_data=data)
            self.session.add(page)
        self.session.commit()
        self.session.refresh(page)
        return page


class PageGroupsRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def get_by_slug(self, *, slug: str) -> Optional[PageGroup]:
        stmt = select(PageGroup).where(PageGroup.slug == slug)
        return self.session.scalars(stmt).first()

    def ensure(self, *, slug: str, commit: bool = True) -> PageGroup:
        group = self.get_by_slug(slug=slug)
        if group:
            return group
        group = PageGroup(slug=slug)
        self.session.add(group)
        if commit:
            self.session.commit()
            self.session.refresh(group)
        return group

    def save_draft(self, *, slug: str, data: dict[str, Any]) -> PageGroup:
        group = self.ensure(slug=slug, commit=False)
        group.draft_data = data
        self.session.commit()
        self.session.refresh(group)
        return group

    def publish(self, *, slug: str, data: dict[str, Any]) -> PageGroup:
        group = self.ensure(slug=slug, commit=False)
        group.draft_data = data
        group.published_data = data
        self.session.commit()
        self.session.refresh(group)
        return group
