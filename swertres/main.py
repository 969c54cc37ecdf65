# swertres/main.py — form + dashboard server
from __future__ import annotations
import logging
from typing import List

from fastapi import Depends, FastAPI, File, Request, UploadFile
from fastapi.exceptions import RequestValidationError
from fastapi.responses import HTMLResponse, JSONResponse, Response
from fastapi.staticfiles import StaticFiles

from . import config
from .errors import BatchRejected, LottoError
from .games import GAMES
from .predictor import make_requestor
from .schemas import DrawText, GameOut, GameSelect, PredictionResult, SessionView
from .state import LottoSession

logging.basicConfig(level=config.LOG_LEVEL, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
log = logging.getLogger("swertres")

app = FastAPI(title="SWERTRES Predict", version="1.0.0")
if config.STATIC_DIR.exists():
    app.mount("/static", StaticFiles(directory=str(config.STATIC_DIR)), name="static")

# one in-process session, like a single open browser tab
app.state.session = LottoSession(make_requestor(config.API_KEY))

def get_session(request: Request) -> LottoSession:
    return request.app.state.session

@app.exception_handler(LottoError)
async def lotto_error_handler(request: Request, exc: LottoError):
    body = {"error": exc.message}
    if isinstance(exc, BatchRejected) and exc.errors:
        body["lines"] = [{"line": no, "input": e.raw_text, "reason": e.reason} for no, e in exc.errors]
    return JSONResponse(body, status_code=exc.status_code)

@app.exception_handler(RequestValidationError)
async def request_error_handler(request: Request, exc: RequestValidationError):
    problems = []
    for err in exc.errors():
        field = ".".join(str(p) for p in err.get("loc", ()) if p != "body")
        problems.append(f"{field}: {err.get('msg')}" if field else str(err.get("msg")))
    return JSONResponse({"error": "Invalid request. " + "; ".join(problems)}, status_code=400)

# ---- page ----
@app.get("/", response_class=HTMLResponse)
async def root():
    html = config.STATIC_DIR / "index.html"
    return html.read_text(encoding="utf-8") if html.exists() else "<h1>index.html not found</h1>"

@app.get("/favicon.ico")
async def favicon():
    svg = "<svg xmlns='http://www.w3.org/2000/svg' viewBox='0 0 16 16'><rect width='16' height='16' rx='3' fill='#7c3aed'/><text x='8' y='11' text-anchor='middle' font-size='9' fill='white'>3D</text></svg>"
    return Response(content=svg, media_type="image/svg+xml")

@app.get("/healthz")
async def healthz(session: LottoSession = Depends(get_session)):
    return {"ok": True, "ai_enabled": session.requestor.enabled, "model": session.requestor.model}

# ---- catalog / state ----
@app.get("/api/games", response_model=List[GameOut])
async def api_games():
    return [GameOut.of(g) for g in GAMES]

@app.get("/api/state", response_model=SessionView)
async def api_state(session: LottoSession = Depends(get_session)):
    return session.snapshot()

@app.post("/api/game", response_model=SessionView)
async def api_game(body: GameSelect, session: LottoSession = Depends(get_session)):
    session.switch_game(body.game_id)
    return session.snapshot()

# ---- draws ----
@app.post("/api/draws", response_model=SessionView)
async def api_add_draw(body: DrawText, session: LottoSession = Depends(get_session)):
    session.add_draw_text(body.text)
    return session.snapshot()

@app.post("/api/draws/bulk", response_model=SessionView)
async def api_add_bulk(body: DrawText, session: LottoSession = Depends(get_session)):
    session.add_batch_text(body.text, source="pasted data")
    return session.snapshot()

@app.post("/api/draws/upload", response_model=SessionView)
async def api_upload(file: UploadFile = File(...), session: LottoSession = Depends(get_session)):
    raw = await file.read()
    try:
        text = raw.decode("utf-8-sig")
    except UnicodeDecodeError:
        raise BatchRejected("Could not read file content.") from None
    n = session.add_batch_text(text, source="CSV file")
    log.info("uploaded %s: %d draws", file.filename, n)
    return session.snapshot()

@app.post("/api/draws/sample", response_model=SessionView)
async def api_sample(session: LottoSession = Depends(get_session)):
    session.load_sample()
    return session.snapshot()

@app.delete("/api/draws/{index}", response_model=SessionView)
async def api_remove_draw(index: int, session: LottoSession = Depends(get_session)):
    session.remove_draw(index)
    return session.snapshot()

@app.delete("/api/draws", response_model=SessionView)
async def api_clear(session: LottoSession = Depends(get_session)):
    session.clear()
    return session.snapshot()

# ---- AI ----
@app.post("/api/predict", response_model=PredictionResult)
async def api_predict(session: LottoSession = Depends(get_session)):
    return await session.predict()
