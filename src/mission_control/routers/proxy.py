"""JSON pass-through to the upstream antfarm and brain APIs.

The upstream token is attached server-side and never reaches the client.
"""

from typing import Any

from fastapi import APIRouter, Body, Depends, Request
from fastapi.responses import JSONResponse

from mission_control.dependencies import get_upstream_client
from mission_control.services.upstream import (
    UpstreamClient,
    UpstreamNotConfiguredError,
    UpstreamUnavailableError,
)

router = APIRouter(prefix="/v1", tags=["proxy"])


async def _forward(
    upstream: UpstreamClient,
    method: str,
    path: str,
    params: Any = None,
    payload: Any = None,
) -> JSONResponse:
    try:
        data = await upstream.request_json(method, path, params=params, payload=payload)
    except UpstreamNotConfiguredError as exc:
        return JSONResponse(status_code=500, content={"error": str(exc)})
    except UpstreamUnavailableError as exc:
        return JSONResponse(
            status_code=exc.status_code or 502,
            content={"error": str(exc), "details": exc.details},
        )
    return JSONResponse(content=data)


@router.get("/antfarm/{path:path}")
async def antfarm_get(
    path: str,
    request: Request,
    upstream: UpstreamClient = Depends(get_upstream_client),
) -> JSONResponse:
    return await _forward(
        upstream, "GET", f"antfarm/{path}", params=list(request.query_params.multi_items())
    )


@router.post("/antfarm/{path:path}")
async def antfarm_post(
    path: str,
    payload: Any = Body(...),
    upstream: UpstreamClient = Depends(get_upstream_client),
) -> JSONResponse:
    return await _forward(upstream, "POST", f"antfarm/{path}", payload=payload)


@router.get("/brain/{path:path}")
async def brain_get(
    path: str,
    request: Request,
    upstream: UpstreamClient = Depends(get_upstream_client),
) -> JSONResponse:
    return await _forward(
        upstream, "GET", f"brain/{path}", params=list(request.query_params.multi_items())
    )
