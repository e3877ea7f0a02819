"""
FastAPI front controller for Keel
Bootstraps the web services once, then dispatches every request through a
request-scope view of the container
"""
from typing import Any

from fastapi import FastAPI, Request
from fastapi.responses import HTMLResponse, JSONResponse, Response

from .. import __version__
from ..core.bootstrap import REQUEST_SCOPED, WebBootstrap, get_container
from ..core.config import Config
from ..mvc.controller import ActionResult
from ..utils.logger import get_logger
from .routes import router

logger = get_logger(__name__)

app = FastAPI(title="Keel", version=__version__)

# Introspection routes first, the catch-all dispatch route last
app.include_router(router)


@app.on_event("startup")
async def startup():
    """Build the container unless one was provided"""
    if getattr(app.state, "container", None) is None:
        app.state.container = get_container(bootstrap_class=WebBootstrap)


def to_response(value: Any) -> Response:
    """Convert an action's return value into an HTTP response"""
    if isinstance(value, ActionResult):
        if isinstance(value.body, (dict, list)):
            return JSONResponse(value.body, status_code=value.status_code, headers=value.headers)
        return Response(
            content="" if value.body is None else str(value.body),
            status_code=value.status_code,
            media_type=value.media_type,
            headers=value.headers
        )
    if isinstance(value, (dict, list)):
        return JSONResponse(value)
    if value is None:
        return Response(status_code=204)
    return HTMLResponse(str(value))


@app.api_route("/{path:path}", methods=["GET", "POST", "PUT", "PATCH", "DELETE"])
def dispatch(request: Request, path: str):
    """Route and dispatch one request"""
    container = request.app.state.container.scoped(REQUEST_SCOPED)

    session = None
    if container.has("session"):
        session = container.resolve("session")
        session.start(request.cookies.get(session.name))

    match = container.resolve("router").match(request.method, path)
    result = container.resolve("dispatcher").dispatch(
        match.handler,
        match.action,
        match.params,
        match.namespace
    )
    response = to_response(result.value)

    if container.has("cookies") and container.is_resolved("cookies"):
        cookies = container.resolve("cookies")
        for cookie in cookies.items():
            response.set_cookie(
                cookie.name,
                cookie.value,
                max_age=cookie.max_age,
                path=cookie.path,
                secure=cookie.secure,
                httponly=cookie.httponly
            )
        for name in cookies.deleted:
            response.delete_cookie(name)
    if session is not None and session.started:
        response.set_cookie(session.name, session.session_id, httponly=True)
    return response


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host=Config.API_HOST, port=Config.API_PORT)
