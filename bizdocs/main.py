import logging

from fastapi import FastAPI, Request
from fastapi.responses import HTMLResponse
from fastapi.staticfiles import StaticFiles
from fastapi.templating import Jinja2Templates

from .config import settings
from .routes import api_router
from .services.kinds import KINDS

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

app = FastAPI(title="bizdocs")

app.include_router(api_router)
app.mount("/static", StaticFiles(directory="bizdocs/static"), name="static")

templates = Jinja2Templates(directory="bizdocs/templates")


@app.get("/health", tags=["health"])
def health_check() -> dict:
    return {"status": "ok"}


@app.get("/", response_class=HTMLResponse)
def index(request: Request) -> HTMLResponse:
    return templates.TemplateResponse(
        request, "index.html", {"request": request, "kinds": list(KINDS.values())}
    )
