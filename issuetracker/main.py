import os
import time
from fastapi import FastAPI, Request
from fastapi.responses import HTMLResponse, RedirectResponse
from dotenv import load_dotenv

load_dotenv()

from issuetracker.logging_config import setup_logging, set_request_id, set_username, generate_request_id
from issuetracker.db import init_db
from issuetracker.exceptions import TrackerError, LoginRequired, StorageError
from issuetracker.accounts import routes as accounts
from issuetracker.accounts.routes import clear_session
from issuetracker.projects import routes as projects
from issuetracker import views

logger = setup_logging()

app = FastAPI(title="Issues")
app.include_router(accounts.router)
app.include_router(projects.router)


@app.on_event("startup")
async def startup():
    init_db()
    logger.info("Issues server is online.")


@app.middleware("http")
async def request_context(request: Request, call_next):
    set_request_id(generate_request_id())
    set_username("")
    started = time.perf_counter()
    response = await call_next(request)
    duration_ms = (time.perf_counter() - started) * 1000
    logger.info("%s %s - %d (%.1fms)", request.method, request.url.path, response.status_code, duration_ms)
    return response


@app.exception_handler(LoginRequired)
async def login_required_handler(request: Request, exc: LoginRequired):
    # Treated as a logout
    return clear_session(RedirectResponse(url="/account/login", status_code=303))


@app.exception_handler(TrackerError)
async def tracker_error_handler(request: Request, exc: TrackerError):
    extra = {"error": exc.to_dict()}
    if isinstance(exc, StorageError):
        logger.error("%s %s aborted: %s", request.method, request.url.path, exc.message, extra=extra)
    else:
        logger.info("%s %s -> %d %s", request.method, request.url.path, exc.status_code, exc.message, extra=extra)
    return HTMLResponse(views.error_page(exc.status_code, exc.message), status_code=exc.status_code)


@app.get("/", response_class=RedirectResponse)
async def root():
    return RedirectResponse(url="/projects")


def run():
    import uvicorn
    uvicorn.run(
        "issuetracker.main:app",
        host=os.getenv("HOST", "127.0.0.1"),
        port=int(os.getenv("PORT", "8000")),
    )


if __name__ == "__main__":
    run()
