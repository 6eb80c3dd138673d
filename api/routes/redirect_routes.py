"""Mirror redirect routes.

Clients ask for ``/redirect?version=2.401.3&path=update-center.json`` and are
sent to the mirror bucket serving that version's release line, e.g.
``https://updates.jenkins-ci.org/stable-2.401/update-center.json``.

``/redirect.php`` is kept so clients still using the old script URL keep working.
"""

import logging

from fastapi import APIRouter, HTTPException, Request
from fastapi.responses import RedirectResponse
from starlette import status

from core.config import Settings, get_settings
from services.version_router import InvalidVersionError, route

logger = logging.getLogger(__name__)

router = APIRouter(tags=["redirect"])


def _host_prefix(request: Request, settings: Settings) -> str:
    """Secure clients stay on HTTPS; everyone else goes to the mirror network."""
    if request.url.scheme == "https":
        return settings.secure_host
    return settings.mirror_host


@router.get("/redirect", response_class=RedirectResponse, status_code=302)
@router.get(
    "/redirect.php",
    response_class=RedirectResponse,
    status_code=302,
    include_in_schema=False,
)
async def mirror_redirect(
    request: Request, version: str = "", path: str = ""
) -> RedirectResponse:
    """Redirect to ``<host><bucket>/<path>`` for the requested version.

    Returns 503 while the rule table is unavailable, and 400 for malformed
    versions when STRICT_VERSIONS is enabled.
    """
    rules = getattr(request.app.state, "rules", None)
    if rules is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Mirror rules are not loaded",
        )

    settings = get_settings()
    try:
        bucket = route(
            version,
            rules,
            settings.resolved_fallback,
            strict=settings.strict_versions,
        )
    except InvalidVersionError as e:
        logger.warning(
            "mirror.invalid_version",
            extra={"version": e.version, "token": e.token},
        )
        raise HTTPException(status_code=400, detail=str(e))

    target_url = f"{_host_prefix(request, settings)}{bucket}/{path}"
    logger.info(
        "mirror.redirect",
        extra={"version": version, "bucket": bucket, "path": path},
    )
    return RedirectResponse(url=target_url, status_code=302)
