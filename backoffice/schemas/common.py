from typing import Generic, List, Optional, TypeVar

from pydantic import BaseModel, Field

ItemT = TypeVar("ItemT")


class ListPage(BaseModel, Generic[ItemT]):
    items: List[ItemT] = Field(default_factory=list)
    total: int = 0
    page: int = 1
    page_size: int = 20
    pages: int = 0
    error: Optional[str] = None
    error_kind: Optional[str] = None


def page_response(page, item_model) -> ListPage:
    """Wrap a service page (records or rows) in the response model."""
    return ListPage[item_model](
        items=[item_model.model_validate(item) for item in page.items],
        total=page.total,
        page=page.page,
        page_size=page.page_size,
        pages=page.pages,
        error=page.error,
        error_kind=page.error_kind,
    )
