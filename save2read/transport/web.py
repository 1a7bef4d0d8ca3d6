import logging
from typing import Optional

from fastapi import APIRouter, Depends, FastAPI, HTTPException, Request
from fastapi.responses import RedirectResponse
from pydantic import BaseModel
from starlette.middleware.sessions import SessionMiddleware

from shared.auth import TokenStorage

from ..core.models import Article
from ..core.repository import ArticleRepository
from ..infra.db import get_connection
from ..infra.repo_sql import PostgresArticleRepository

logger = logging.getLogger(__name__)

APP_NAME = "Save to read"
SESSION_KEY = "user"


class LinkView(BaseModel):
    id: int
    url: str
    title: str


class LinkListResponse(BaseModel):
    app_name: str = APP_NAME
    page: str
    user_id: int
    links: list[LinkView]


class StatusResponse(BaseModel):
    status: str = "ok"


def get_repository():
    conn = get_connection()
    try:
        yield PostgresArticleRepository(conn)
    finally:
        conn.close()


def session_user_id(request: Request) -> Optional[int]:
    user = request.session.get(SESSION_KEY)
    if not isinstance(user, dict):
        return None
    user_id = user.get("user_id")
    if isinstance(user_id, bool) or not isinstance(user_id, int):
        return None
    return user_id


def require_user(request: Request) -> int:
    user_id = session_user_id(request)
    if user_id is None:
        raise HTTPException(status_code=403, detail="Forbidden")
    return user_id


def _link_view(article: Article) -> LinkView:
    return LinkView(id=article.id, url=article.url, title=article.display_title())


def create_router(*, token_storage: TokenStorage) -> APIRouter:
    router = APIRouter(tags=["links"])

    @router.get("/auth/{token}")
    def redeem_auth_token(token: str, request: Request):
        """
        Exchange a one-time token from the bot for a browser session.

        Always redirects home; an unknown, expired or already used token
        just leaves the visitor logged out.
        """
        try:
            user_id = token_storage.redeem(token)
        except Exception as e:
            logger.exception("Failed redeeming auth token")
            raise HTTPException(status_code=500, detail=str(e))

        if user_id is not None:
            request.session[SESSION_KEY] = {"user_id": user_id}
            logger.info("Web session started for user %s", user_id)
        else:
            logger.info("Auth token not redeemable; redirecting without session")

        return RedirectResponse(url="/", status_code=302)

    @router.get("/", response_model=LinkListResponse)
    def pending_list(
        user_id: int = Depends(require_user),
        repo: ArticleRepository = Depends(get_repository),
    ):
        links = _call_repo(lambda: repo.pending_list(user_id), "listing pending links")
        return LinkListResponse(
            page="pending",
            user_id=user_id,
            links=[_link_view(a) for a in links],
        )

    @router.get("/archived", response_model=LinkListResponse)
    def archived_list(
        user_id: int = Depends(require_user),
        repo: ArticleRepository = Depends(get_repository),
    ):
        links = _call_repo(lambda: repo.archived_list(user_id), "listing archived links")
        return LinkListResponse(
            page="archived",
            user_id=user_id,
            links=[_link_view(a) for a in links],
        )

    @router.post("/archive/{link_id}", response_model=StatusResponse)
    def archive(
        link_id: int,
        user_id: int = Depends(require_user),
        repo: ArticleRepository = Depends(get_repository),
    ):
        pending = _call_repo(lambda: repo.get_pending(link_id), "loading pending link")
        if not pending or pending.user_id != user_id:
            raise HTTPException(status_code=404, detail="Link not found")

        archived_id = _call_repo(lambda: repo.archive(user_id, link_id), "archiving link")
        if archived_id is None:
            raise HTTPException(status_code=404, detail="Link not found")
        return StatusResponse()

    @router.delete("/pending/delete/{link_id}", response_model=StatusResponse)
    def delete_pending(
        link_id: int,
        user_id: int = Depends(require_user),
        repo: ArticleRepository = Depends(get_repository),
    ):
        _call_repo(lambda: repo.delete_pending(user_id, link_id), "deleting pending link")
        return StatusResponse()

    @router.delete("/archived/delete/{link_id}", response_model=StatusResponse)
    def delete_archived(
        link_id: int,
        user_id: int = Depends(require_user),
        repo: ArticleRepository = Depends(get_repository),
    ):
        _call_repo(lambda: repo.delete_archived(user_id, link_id), "deleting archived link")
        return StatusResponse()

    return router


def _call_repo(fn, action: str):
    try:
        return fn()
    except Exception as e:
        logger.exception("Failed %s", action)
        raise HTTPException(status_code=500, detail=str(e))


def create_app(*, token_storage: TokenStorage, session_secret: str) -> FastAPI:
    app = FastAPI(title=APP_NAME)
    app.add_middleware(
        SessionMiddleware,
        secret_key=session_secret,
        same_site="lax",
        https_only=False,
    )
    app.include_router(create_router(token_storage=token_storage))

    @app.get("/health")
    def health() -> dict:
        return {"status": "ok"}

    return app
