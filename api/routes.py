"""FastAPI routes for the interview session and the candidate dashboard."""
from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends, HTTPException, Request

from api.schemas import AnswerReq, CandidateListItem, DraftReq, SessionResp, StartSessionReq
from candidate_management import CandidateRecord
from flow_manager import InterviewFlow, SessionConflictError, time_limit
from interview_session import SessionState


router = APIRouter(prefix="/api/session")
candidates_router = APIRouter(prefix="/api/candidates")


def get_flow(request: Request) -> InterviewFlow:
    return request.app.state.flow


def _resp(state: SessionState) -> SessionResp:
    question = state.current_question
    return SessionResp(
        state=state,
        resumable=state.status in ("active", "loading"),
        time_limit=time_limit(question.difficulty) if question is not None else None,
    )


@router.get("", response_model=SessionResp)
async def read_session(flow: InterviewFlow = Depends(get_flow)) -> SessionResp:
    return _resp(flow.state)


@router.post("/resume", response_model=SessionResp)
async def start_session(req: StartSessionReq, flow: InterviewFlow = Depends(get_flow)) -> SessionResp:
    try:
        state = await flow.start_from_resume(req.resume_text)
    except SessionConflictError as exc:
        raise HTTPException(status_code=409, detail=str(exc)) from exc
    return _resp(state)


@router.post("/answer", response_model=SessionResp)
async def submit_answer(req: AnswerReq, flow: InterviewFlow = Depends(get_flow)) -> SessionResp:
    return _resp(await flow.submit_answer(req.text))


@router.put("/draft", response_model=SessionResp)
async def update_draft(req: DraftReq, flow: InterviewFlow = Depends(get_flow)) -> SessionResp:
    flow.update_draft(req.text)
    return _resp(flow.state)


@router.post("/reset", response_model=SessionResp)
async def reset_session(flow: InterviewFlow = Depends(get_flow)) -> SessionResp:
    return _resp(flow.reset())


@candidates_router.get("", response_model=List[CandidateListItem])
async def list_candidates(flow: InterviewFlow = Depends(get_flow)) -> List[CandidateListItem]:
    return [
        CandidateListItem(
            id=record.id,
            name=record.details.name,
            email=record.details.email,
            total_score=record.total_score,
            completed_at=record.completed_at,
        )
        for record in flow.archive.list_records()
    ]


@candidates_router.get("/{candidate_id}", response_model=CandidateRecord)
async def read_candidate(candidate_id: str, flow: InterviewFlow = Depends(get_flow)) -> CandidateRecord:
    try:
        return flow.archive.get_record(candidate_id)
    except KeyError as exc:
        raise HTTPException(status_code=404, detail="Candidate not found") from exc
