"""
routes.py - FastAPI layer exposing the winquery query engine.

Endpoints:
- GET  /windows            filter -> sort -> select over the current snapshot
- GET  /windows/{index}    look up one window by its snapshot index
- POST /windows/refresh    re-enumerate the desktop into a new snapshot

The router reads the `WindowStore` from `request.app.state.store`, which
`winquery.main.create_app` installs.
"""
from __future__ import annotations

import asyncio

from fastapi import APIRouter, Depends, HTTPException, Query as QueryParam, Request, status
from pydantic import BaseModel, Field

from winquery.errors import ParseError, ProviderError
from winquery.logger import get_logger
from winquery.models import WindowRecord
from winquery.pipeline import Query
from winquery.store import WindowStore

logger = get_logger(__name__)

router = APIRouter(prefix="/windows", tags=["Window Queries"])


class PositionModel(BaseModel):
    x: int
    y: int
    width: int = 0
    height: int = 0


class WindowModel(BaseModel):
    index: int = Field(description="1-based index of the window in the snapshot.")
    handle: int | str = Field(description="Native window handle/ID (HWND, XID, CGWindowID).")
    pid: int
    title: str
    class_name: str
    process_name: str
    process_file_path: str
    position: PositionModel

    @classmethod
    def from_record(cls, record: WindowRecord) -> WindowModel:
        return cls.model_validate(record.to_dict())


class RefreshResponse(BaseModel):
    window_count: int = Field(description="Number of windows in the new snapshot.")


def get_store(request: Request) -> WindowStore:
    return request.app.state.store


@router.get(
    "",
    response_model=list[WindowModel],
    summary="Query Windows",
    description=(
        "Filters, sorts and selects windows from the current snapshot. "
        "Selection indices refer to positions in the filtered and sorted result."
    ),
)
async def api_query_windows(
    store: WindowStore = Depends(get_store),
    pid: int | None = QueryParam(None, description="Exact process ID."),
    title: str | None = QueryParam(None, description="Substring of the window title."),
    class_name: str | None = QueryParam(None, description="Substring of the window class name."),
    process_name: str | None = QueryParam(None, description="Substring of the process name."),
    process_file: str | None = QueryParam(None, description="Substring of the executable path."),
    sort_pid: str | None = QueryParam(None, description="PID order: 1, -1 or 0."),
    sort_title: str | None = QueryParam(None, description="Title order: 1, -1 or 0."),
    sort_position: str | None = QueryParam(None, description="Position order, e.g. 'x1|y-1'."),
    select: str | None = QueryParam(None, description="Selection, e.g. 'all', '1,3', '2-5'."),
    case_sensitive: bool | None = QueryParam(None, description="Override the configured substring policy."),
) -> list[WindowModel]:
    try:
        query = Query.parse(
            pid=pid, title=title, class_name=class_name, process_name=process_name,
            process_file=process_file, sort_pid=sort_pid, sort_title=sort_title,
            sort_position=sort_position, select=select,
        )
    except ParseError as e:
        logger.info(f"Rejected window query: {e!s}")
        raise HTTPException(status_code=422, detail=e.to_dict())

    policy = store.case_sensitive if case_sensitive is None else case_sensitive
    records = query.run(store.current, case_sensitive=policy)
    logger.debug(f"Window query {query} returned {len(records)} windows.")
    return [WindowModel.from_record(r) for r in records]


@router.post(
    "/refresh",
    response_model=RefreshResponse,
    summary="Refresh Snapshot",
    description="Re-enumerates the desktop windows and replaces the current snapshot.",
)
async def api_refresh_windows(store: WindowStore = Depends(get_store)) -> RefreshResponse:
    logger.info("API refresh request received.")
    try:
        new_snapshot = await asyncio.to_thread(store.refresh)
    except ProviderError as e:
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail={"error_type": "provider_error", "code": e.code, "message": str(e)},
        )
    return RefreshResponse(window_count=len(new_snapshot))


@router.get(
    "/{index}",
    response_model=WindowModel,
    summary="Get Window By Index",
    description="Returns the window at the given 1-based index of the current snapshot.",
)
async def api_get_window(index: int, store: WindowStore = Depends(get_store)) -> WindowModel:
    record = store.lookup_by_index(index)
    if record is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail={
                "error_type": "window_not_found",
                "message": f"No window at index {index}; snapshot holds {len(store.current)} windows.",
            },
        )
    return WindowModel.from_record(record)
