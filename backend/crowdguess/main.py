import logging
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, Request
from fastapi.responses import JSONResponse

from . import config, service
from .errors import (
    AlreadyGuessed,
    GameSessionNotFound,
    HistoryNotFound,
    InvalidGuess,
    PresetPromptNotFound,
    PromptNotFound,
    PromptsExhausted,
    StoreUnavailable,
)
from .models import (
    AnswerRequest,
    CloseResponse,
    ConsensusResults,
    CreatePromptRequest,
    CustomPrompt,
    GameStartRequest,
    GameStartResponse,
    GuessRequest,
    GuessResultResponse,
    GuessSubmittedResponse,
    HistoricalResults,
    NextPromptRequest,
    NextPromptResponse,
    PresetPromptView,
    PromptView,
)
from .prompts import has_user_guessed
from .store import KeyValueStore, create_store

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    app.state.store = create_store(config.REDIS_URL)
    yield


app = FastAPI(lifespan=lifespan)


def get_store(request: Request) -> KeyValueStore:
    return request.app.state.store


# ---------------------------------------------------------------------------
# Error mapping
# ---------------------------------------------------------------------------


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"status": "error", "message": message})


@app.exception_handler(PromptNotFound)
@app.exception_handler(HistoryNotFound)
@app.exception_handler(GameSessionNotFound)
@app.exception_handler(PresetPromptNotFound)
@app.exception_handler(PromptsExhausted)
async def not_found(request: Request, exc: Exception):
    return _error(404, str(exc))


@app.exception_handler(InvalidGuess)
async def invalid_guess(request: Request, exc: InvalidGuess):
    return _error(400, str(exc))


@app.exception_handler(AlreadyGuessed)
async def already_guessed(request: Request, exc: AlreadyGuessed):
    return _error(400, "You have already guessed on this post")


@app.exception_handler(StoreUnavailable)
async def store_unavailable(request: Request, exc: StoreUnavailable):
    logger.error("[api] %s %s: %s", request.method, request.url.path, exc)
    return _error(503, f"Service temporarily unavailable: {exc}")


# ---------------------------------------------------------------------------
# API routes
# ---------------------------------------------------------------------------


@app.post("/api/posts/{post_id}/prompt", response_model=CustomPrompt)
def create_prompt(
    post_id: str, body: CreatePromptRequest, store: KeyValueStore = Depends(get_store)
):
    return service.create_prompt(
        store, post_id, body.description, body.answer, body.created_by
    )


@app.get("/api/posts/{post_id}/prompt", response_model=PromptView)
def get_prompt(post_id: str, username: str = "", store: KeyValueStore = Depends(get_store)):
    """Prompt description for players; the answer is never exposed here."""
    prompt = service.require_prompt(store, post_id)
    return PromptView(
        post_id=post_id,
        description=prompt.description,
        has_guessed=bool(username) and has_user_guessed(store, post_id, username),
    )


@app.post("/api/posts/{post_id}/guess", response_model=GuessSubmittedResponse)
def post_guess(post_id: str, body: GuessRequest, store: KeyValueStore = Depends(get_store)):
    outcome = service.submit_guess(store, post_id, body.username, body.guess)
    return GuessSubmittedResponse(
        success=True,
        message=(
            "Guess submitted successfully"
            if outcome.all_succeeded
            else "Guess submitted with partial success"
        ),
    )


@app.get("/api/posts/{post_id}/results", response_model=ConsensusResults)
def get_results(post_id: str, username: str = "", store: KeyValueStore = Depends(get_store)):
    return service.get_results(store, post_id, username or None)


@app.post("/api/posts/{post_id}/close", response_model=CloseResponse)
def close_prompt(post_id: str, store: KeyValueStore = Depends(get_store)):
    snapshot = service.close_prompt(store, post_id)
    if snapshot is None:
        return CloseResponse(closed=False)
    return CloseResponse(
        closed=True,
        total_players=snapshot.total_players,
        total_guesses=snapshot.total_guesses,
    )


@app.get("/api/posts/{post_id}/history", response_model=HistoricalResults)
def get_history(post_id: str, store: KeyValueStore = Depends(get_store)):
    results = service.get_historical_results(store, post_id)
    if results is None:
        raise HistoryNotFound(post_id)
    return results


# -- preset-prompt game -------------------------------------------------------


@app.post("/api/posts/{post_id}/game/start", response_model=GameStartResponse)
def start_game(
    post_id: str,
    body: GameStartRequest | None = None,
    store: KeyValueStore = Depends(get_store),
):
    username = (body or GameStartRequest()).username
    session_id = service.start_game(store, post_id, username)
    return GameStartResponse(session_id=session_id, username=username)


@app.post("/api/game/next-prompt", response_model=NextPromptResponse)
def next_prompt(body: NextPromptRequest, store: KeyValueStore = Depends(get_store)):
    """Next unused preset prompt for the session; answers are not included."""
    prompt = service.next_prompt(store, body.session_id)
    return NextPromptResponse(
        prompt=PresetPromptView(
            id=prompt.id,
            prompt_text=prompt.prompt_text,
            difficulty=prompt.difficulty,
            category=prompt.category,
        )
    )


@app.post("/api/game/submit-guess", response_model=GuessResultResponse)
def submit_game_guess(body: AnswerRequest, store: KeyValueStore = Depends(get_store)):
    return service.answer_prompt(store, body.session_id, body.prompt_id, body.guess)
