"""FastAPI server that exposes the room page and its JSON endpoints."""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
import logging

from fastapi import Depends, FastAPI, HTTPException, Request, Response
from fastapi.responses import HTMLResponse, RedirectResponse
from pydantic import BaseModel
import uvicorn

from quiz_rooms.config import Settings, load_settings
from quiz_rooms.constants.about import APP_ABOUT_TEXT, APP_NAME, APP_VERSION
from quiz_rooms.constants.network_constants import IDENTITY_COOKIE, IDENTITY_COOKIE_MAX_AGE
from quiz_rooms.core.document_store import DocumentStore
from quiz_rooms.core.errors import (
    AlreadyJoinedError,
    IncorrectPasswordError,
    LoginRequiredError,
    MissingFieldsError,
    QuizRoomsError,
    RoomNotFoundError,
    SessionStateError,
    StoreError,
)
from quiz_rooms.core.identity import IdentityProvider
from quiz_rooms.core.markdown_math_renderer import renderer
from quiz_rooms.core.models import Identity, QuizResult, RoomSummary
from quiz_rooms.core.room_controller import RoomController, RoomControllerRegistry
from quiz_rooms.server.pages import LOGIN_PAGE_HTML, ROOM_PAGE_HTML

logger = logging.getLogger(__name__)

_ERROR_STATUS: list[tuple[type[QuizRoomsError], int]] = [
    (LoginRequiredError, 401),
    (IncorrectPasswordError, 403),
    (RoomNotFoundError, 404),
    (AlreadyJoinedError, 409),
    (SessionStateError, 409),
    (MissingFieldsError, 422),
    (StoreError, 503),
]


class LoginPayload(BaseModel):
    """Payload schema for signing in."""

    display_name: str | None = None


class JoinPayload(BaseModel):
    """Payload schema for the enter-room form."""

    name: str = ""
    password: str = ""


class AnswerPayload(BaseModel):
    """Payload schema for selecting an option (1-based)."""

    option: int


def _to_http_error(exc: QuizRoomsError) -> HTTPException:
    status_code = next((code for kind, code in _ERROR_STATUS if isinstance(exc, kind)), 400)
    if isinstance(exc, StoreError):
        logger.error("Document store failure: %s", exc)
        return HTTPException(status_code=status_code, detail="The room service is unavailable.")
    return HTTPException(status_code=status_code, detail=str(exc))


def _summary_to_dict(summary: RoomSummary) -> dict[str, object]:
    return {
        "id": summary.id,
        "subject": summary.subject,
        "owner_name": summary.owner_name,
        "quiz_duration": summary.quiz_duration,
    }


def _result_to_dict(result: QuizResult | None) -> dict[str, object] | None:
    if result is None:
        return None
    return {
        "correct": result.correct,
        "incorrect": result.incorrect,
        "percentage": round(result.percentage, 2),
        "formatted_percentage": result.format_percentage(),
    }


def _quiz_state_to_dict(controller: RoomController) -> dict[str, object]:
    snapshot = controller.get_quiz_snapshot()
    question = snapshot.question if snapshot.quiz_visible else None
    return {
        "state": snapshot.state.name.lower(),
        "room_id": snapshot.room.id if snapshot.room else None,
        "room_subject": snapshot.room.subject if snapshot.room else None,
        "join_modal_open": controller.is_join_modal_open(),
        "quiz_visible": snapshot.quiz_visible,
        "review_visible": snapshot.review_visible,
        "result_visible": snapshot.result_visible,
        "needs_unload_warning": snapshot.needs_unload_warning,
        "current_index": snapshot.current_index,
        "question_count": snapshot.question_count,
        "question_html": renderer.render_fragment(question.question_text) if question else None,
        "options": [renderer.render_inline(option) for option in question.options] if question else [],
        "current_answer": snapshot.current_answer,
        "is_last_question": snapshot.is_last_question,
        "remaining_seconds": snapshot.remaining_seconds,
        "time_remaining": snapshot.formatted_time,
    }


def create_api_app(store: DocumentStore, settings: Settings | None = None) -> FastAPI:
    """Create a FastAPI application wired to the provided document store."""
    settings = settings or load_settings()
    identities = IdentityProvider()
    controllers = RoomControllerRegistry(store, tick_interval=settings.tick_interval_seconds)

    @asynccontextmanager
    async def lifespan(_: FastAPI) -> AsyncIterator[None]:
        yield
        controllers.shutdown()

    app = FastAPI(
        title=f"{APP_NAME} API",
        description=APP_ABOUT_TEXT,
        version=APP_VERSION,
        lifespan=lifespan,
    )
    app.state.identities = identities
    app.state.controllers = controllers
    app.state.store = store

    def current_identity(request: Request) -> Identity:
        try:
            return identities.require(request.cookies.get(IDENTITY_COOKIE))
        except LoginRequiredError as exc:
            raise _to_http_error(exc) from exc

    def current_controller(identity: Identity = Depends(current_identity)) -> RoomController:
        return controllers.get(identity)

    @app.get("/", response_class=HTMLResponse, response_model=None)
    def serve_room_page(request: Request) -> str | RedirectResponse:
        try:
            identities.require(request.cookies.get(IDENTITY_COOKIE))
        except LoginRequiredError:
            return RedirectResponse(url="/login", status_code=303)
        return ROOM_PAGE_HTML

    @app.get("/login", response_class=HTMLResponse)
    def serve_login_page() -> str:
        return LOGIN_PAGE_HTML

    @app.post("/login", status_code=201)
    def login(payload: LoginPayload, response: Response) -> dict[str, object]:
        identity = identities.sign_in(payload.display_name)
        response.set_cookie(
            key=IDENTITY_COOKIE,
            value=identity.uid,
            max_age=IDENTITY_COOKIE_MAX_AGE,
            samesite="lax",
            httponly=True,
            secure=settings.secure_cookies,
        )
        logger.info("Signed in %s", identity.uid)
        return {"uid": identity.uid, "display_name": identity.display_name}

    @app.post("/logout")
    def logout(request: Request, response: Response) -> dict[str, object]:
        uid = request.cookies.get(IDENTITY_COOKIE)
        if uid:
            controllers.discard(uid)
            identities.sign_out(uid)
        response.delete_cookie(IDENTITY_COOKIE)
        return {"signed_out": bool(uid)}

    @app.get("/identity")
    def get_identity(identity: Identity = Depends(current_identity)) -> dict[str, object]:
        return {"uid": identity.uid, "display_name": identity.display_name}

    @app.get("/rooms")
    def list_rooms(
        search: str = "",
        controller: RoomController = Depends(current_controller),
    ) -> dict[str, object]:
        try:
            controller.refresh_rooms()
        except StoreError as exc:
            raise _to_http_error(exc) from exc
        summaries = controller.search_rooms(search)
        return {"search": search, "rooms": [_summary_to_dict(summary) for summary in summaries]}

    @app.post("/rooms/{room_id}/enter")
    def enter_room(room_id: str, controller: RoomController = Depends(current_controller)) -> dict[str, object]:
        controller.open_join_modal(room_id)
        return {"room_id": room_id, "join_modal_open": True}

    @app.post("/join", status_code=201)
    def join_room(payload: JoinPayload, controller: RoomController = Depends(current_controller)) -> dict[str, object]:
        controller.set_join_form(payload.name, payload.password)
        try:
            outcome = controller.join()
        except QuizRoomsError as exc:
            raise _to_http_error(exc) from exc
        return {
            "room_id": outcome.room.id,
            "participant_id": outcome.participant.id,
            "question_count": len(outcome.questions),
            "quiz_duration": outcome.room.quiz_duration,
        }

    @app.post("/join/close")
    def close_join_modal(controller: RoomController = Depends(current_controller)) -> dict[str, object]:
        controller.close_join_modal()
        return {"join_modal_open": False}

    @app.get("/quiz")
    def get_quiz(controller: RoomController = Depends(current_controller)) -> dict[str, object]:
        return _quiz_state_to_dict(controller)

    @app.post("/quiz/answer")
    def select_answer(payload: AnswerPayload, controller: RoomController = Depends(current_controller)) -> dict[str, object]:
        try:
            answers = controller.select_answer(payload.option)
        except ValueError as exc:
            raise HTTPException(status_code=422, detail=str(exc)) from exc
        except QuizRoomsError as exc:
            raise _to_http_error(exc) from exc
        return {"answers": answers}

    @app.post("/quiz/next")
    def next_question(controller: RoomController = Depends(current_controller)) -> dict[str, object]:
        try:
            index = controller.next_question()
        except QuizRoomsError as exc:
            raise _to_http_error(exc) from exc
        return {"current_index": index}

    @app.post("/quiz/prev")
    def previous_question(controller: RoomController = Depends(current_controller)) -> dict[str, object]:
        try:
            index = controller.previous_question()
        except QuizRoomsError as exc:
            raise _to_http_error(exc) from exc
        return {"current_index": index}

    @app.post("/quiz/submit")
    def submit_quiz(controller: RoomController = Depends(current_controller)) -> dict[str, object]:
        try:
            result = controller.submit_quiz()
        except QuizRoomsError as exc:
            raise _to_http_error(exc) from exc
        return {"result": _result_to_dict(result)}

    @app.post("/quiz/close")
    def close_quiz(controller: RoomController = Depends(current_controller)) -> dict[str, object]:
        controller.close_quiz()
        return {"quiz_visible": False}

    @app.get("/quiz/review")
    def get_review(controller: RoomController = Depends(current_controller)) -> dict[str, object]:
        rows = controller.get_review()
        return {
            "rows": [
                {
                    "question": row.question_text,
                    "your_answer": row.your_answer,
                    "correct_answer": row.correct_answer,
                }
                for row in rows
            ]
        }

    @app.get("/result")
    def get_result(controller: RoomController = Depends(current_controller)) -> dict[str, object]:
        return {
            "visible": controller.is_result_visible(),
            "result": _result_to_dict(controller.get_result()),
        }

    @app.post("/result/close")
    def close_result(controller: RoomController = Depends(current_controller)) -> dict[str, object]:
        controller.close_result()
        return {"visible": False}

    return app


def run_api_server(app: FastAPI, settings: Settings) -> None:
    """Serve ``app`` with uvicorn in the foreground until interrupted."""
    config = uvicorn.Config(
        app=app,
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )
    uvicorn.Server(config).run()
