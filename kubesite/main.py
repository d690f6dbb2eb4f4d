import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from kubesite import config
from kubesite.routers.meta import router as meta_router
from kubesite.routers.pages import limiter, router as pages_router

config.configure_logging()

logger = logging.getLogger(__name__)

app = FastAPI(
    title="kubesite – Kubernetes Community content server",
    description="Serves markdown articles with canonical SEO metadata and their pre-rendered snapshots.",
    version="1.0.0",
)

# Rate-limiting state
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)


@app.exception_handler(Exception)
async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled exception for %s", request.url)
    return JSONResponse(status_code=500, content={"detail": "An unexpected error occurred."})


app.include_router(pages_router)
app.include_router(meta_router)


@app.get("/health", summary="Health check")
async def health() -> dict:
    return {"status": "ok", "site": config.SITE_NAME}


# Markdown sources back the runtime fallback; everything else comes from the build
# output.  Directories that do not exist yet (before the first build) are not mounted.
if config.CONTENT_ROOT.is_dir():
    app.mount("/content", StaticFiles(directory=config.CONTENT_ROOT), name="content")
if config.OUTPUT_ROOT.is_dir():
    app.mount("/", StaticFiles(directory=config.OUTPUT_ROOT, html=True), name="site")
