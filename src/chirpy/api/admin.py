"""Admin API — file server metrics and development-only reset.

GET /admin/metrics reports how often the static site under /app was hit.
POST /admin/reset wipes users, chirps and refresh tokens and zeroes the
hit counter. It refuses to run outside the development environment.
"""

from fastapi import APIRouter, Depends, Request
from fastapi.responses import HTMLResponse
from sqlalchemy.ext.asyncio import AsyncSession

from chirpy.db.engine import get_db
from chirpy.errors import ForbiddenError
from chirpy.services.user_service import UserService

router = APIRouter(prefix="/admin")

METRICS_PAGE = """<html>
  <body>
    <h1>Welcome, Chirpy Admin</h1>
    <p>Chirpy has been visited {hits} times!</p>
  </body>
</html>
"""


@router.get("/metrics", response_class=HTMLResponse)
async def metrics(request: Request):
    return METRICS_PAGE.format(hits=request.app.state.fileserver_hits.hits)


@router.post("/reset")
async def reset(request: Request, db: AsyncSession = Depends(get_db)):
    if not request.app.state.settings.is_development:
        raise ForbiddenError("reset is only available in development")
    await UserService(db).remove_all()
    request.app.state.fileserver_hits.reset()
    return {"reset": True}
