from __future__ import annotations  # FastAPI server for the mock-interview service

import logging
from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncIterator, Optional

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from ai_services import (
    AnswerEvaluation,
    CandidateSummary,
    GeneratedQuestion,
    ParsedResume,
    evaluate_answer_with_config,
    generate_question_with_config,
    generate_summary_with_config,
    parse_resume_with_config,
)
from api.routes import candidates_router, router as session_router
from api.schemas import (
    ErrorResp,
    EvaluateAnswerReq,
    GenerateQuestionReq,
    GenerateSummaryReq,
    ParseResumeReq,
)
from candidate_management import CandidateArchive
from config import settings
from flow_manager import DirectInterviewApi, HttpInterviewApi, InterviewApi, InterviewFlow
from interview_session import SessionStore
from storage import StateFile, bind_persistence


logger = logging.getLogger(__name__)

ROOT = Path(__file__).resolve().parent
CONFIG_PATH = Path(settings.CONFIG_PATH) if Path(settings.CONFIG_PATH).is_absolute() else ROOT / settings.CONFIG_PATH

_ERROR_RESPONSES = {500: {"model": ErrorResp}}


def build_api() -> InterviewApi:  # Remote endpoints when configured, in-process services otherwise
    if settings.AI_API_BASE_URL:
        return HttpInterviewApi(settings.AI_API_BASE_URL, timeout=settings.AI_API_TIMEOUT_S)
    return DirectInterviewApi(CONFIG_PATH)


def build_flow(api: Optional[InterviewApi] = None) -> InterviewFlow:  # Wire stores, persistence and AI client
    store = SessionStore()
    archive = CandidateArchive()
    if settings.PERSIST_STATE:
        state_file = StateFile(ROOT / settings.STATE_DIR, settings.PERSIST_NAMESPACE)
        persisted = state_file.load()
        if persisted is not None:
            store = SessionStore(persisted.interview)
            archive = CandidateArchive(persisted.candidates)
            logger.info(
                "Rehydrated state status=%s candidates=%d", persisted.interview.status, len(persisted.candidates)
            )
        bind_persistence(state_file, store, archive)
    return InterviewFlow(store, archive, api or build_api())


def create_app(flow: Optional[InterviewFlow] = None) -> FastAPI:  # Application factory
    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        active = flow or build_flow()
        app.state.flow = active
        active.resume()
        try:
            yield
        finally:
            await active.aclose()
            closer = getattr(active.api, "aclose", None)
            if closer is not None:
                await closer()

    app = FastAPI(title="Mock Interview API", lifespan=lifespan)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    if flow is not None:
        app.state.flow = flow

    app.add_exception_handler(StarletteHTTPException, _http_error)
    app.add_exception_handler(RequestValidationError, _validation_error)

    app.post("/api/parse-resume", response_model=ParsedResume, responses=_ERROR_RESPONSES)(parse_resume)
    app.post("/api/generate-question", response_model=GeneratedQuestion, responses=_ERROR_RESPONSES)(generate_question)
    app.post("/api/evaluate-answer", response_model=AnswerEvaluation, responses=_ERROR_RESPONSES)(evaluate_answer)
    app.post("/api/generate-summary", response_model=CandidateSummary, responses=_ERROR_RESPONSES)(generate_summary)
    app.include_router(session_router)
    app.include_router(candidates_router)
    return app


async def _http_error(request: Request, exc: StarletteHTTPException) -> JSONResponse:  # Uniform error body
    return JSONResponse({"error": exc.detail}, status_code=exc.status_code, headers=exc.headers)


async def _validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:  # Malformed input is a 400
    return JSONResponse(
        {"error": "Invalid request body", "details": jsonable_encoder(exc.errors())},
        status_code=400,
    )


def _server_error(message: str) -> JSONResponse:
    return JSONResponse({"error": message}, status_code=500)


def parse_resume(payload: ParseResumeReq):  # Extract name/email/phone from resume text
    try:
        return parse_resume_with_config(payload.resumeText, config_path=CONFIG_PATH)
    except Exception:  # noqa: BLE001
        logger.exception("Error parsing resume")
        return _server_error("Failed to parse resume")


def generate_question(payload: GenerateQuestionReq):  # Generate one question for a difficulty
    try:
        return generate_question_with_config(payload.difficulty, config_path=CONFIG_PATH)
    except Exception:  # noqa: BLE001
        logger.exception("Error generating question")
        return _server_error("Failed to generate question")


def evaluate_answer(payload: EvaluateAnswerReq):  # Score an answer from 1 to 10
    try:
        return evaluate_answer_with_config(payload.question, payload.answer, config_path=CONFIG_PATH)
    except Exception:  # noqa: BLE001
        logger.exception("Error evaluating answer")
        return _server_error("Failed to evaluate answer")


def generate_summary(payload: GenerateSummaryReq):  # Summarize a finished transcript
    try:
        return generate_summary_with_config(payload.transcript, config_path=CONFIG_PATH)
    except Exception:  # noqa: BLE001
        logger.exception("Error generating summary")
        return _server_error("Failed to generate summary")


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("api_server:app", host="0.0.0.0", port=8000)
