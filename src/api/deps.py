from typing import Annotated

from fastapi import Depends, HTTPException, Request, Response, status

from src.app_shell.context import SiteContext
from src.app_shell.sessions import VisitorSession
from src.domain.entities import ContentKind


def get_context(request: Request) -> SiteContext:
    context: SiteContext | None = getattr(request.app.state, "context", None)
    if context is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Site context is not ready",
        )
    return context


ContextDep = Annotated[SiteContext, Depends(get_context)]


# --- Sessions ---
def get_session(request: Request, response: Response, context: ContextDep) -> VisitorSession:
    """Visitor session from the cookie; unknown or missing cookies start a new one."""
    cookie_name = context.rules.sessions.cookie_name
    session = context.sessions.get(request.cookies.get(cookie_name))
    if session is None:
        session = context.sessions.open()
        # Set HttpOnly Cookie
        response.set_cookie(
            key=cookie_name,
            value=session.id,
            httponly=True,
            samesite="lax",
        )
    return session


SessionDep = Annotated[VisitorSession, Depends(get_session)]


def parse_kind(kind: str) -> ContentKind:
    try:
        return ContentKind(kind)
    except ValueError as err:
        raise HTTPException(status_code=404, detail=f"Unknown content kind: {kind}") from err
