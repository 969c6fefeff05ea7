from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from careerchat.dependencies import get_chat_proxy_service
from careerchat.services.chat_proxy_service import ChatProxyService

router = APIRouter()

# Every verb is routed here so non-POST requests get the same error shape.
_ALL_METHODS = ["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS", "HEAD"]


@router.api_route("/chat", methods=_ALL_METHODS)
async def chat_endpoint(
    request: Request,
    proxy_service: ChatProxyService = Depends(get_chat_proxy_service),
) -> JSONResponse:
    body = await request.body() if request.method == "POST" else None
    reply = await proxy_service.handle(
        method=request.method,
        body=body,
        headers=request.headers,
    )
    return JSONResponse(
        status_code=reply.status_code,
        content=reply.body,
        headers=reply.headers,
    )
