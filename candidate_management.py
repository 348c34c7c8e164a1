from __future__ import annotations  # Archive of completed interview records

import logging
from datetime import datetime, timezone
from typing import Callable, Iterable, List, Optional, Sequence, Tuple
from uuid import uuid4

from pydantic import BaseModel, ConfigDict

from interview_session import InterviewQuestion
from validation import CandidateDetails


logger = logging.getLogger(__name__)


class CandidateRecord(BaseModel):  # Immutable snapshot of one finished session
    model_config = ConfigDict(frozen=True)

    id: str
    details: CandidateDetails
    questions: Tuple[InterviewQuestion, ...]
    total_score: Optional[int] = None
    final_summary: Optional[str] = None
    completed_at: str


RecordListener = Callable[[CandidateRecord], None]


class CandidateArchive:  # Append-only in-memory candidate archive
    def __init__(self, records: Iterable[CandidateRecord] = ()) -> None:  # Optionally rehydrate prior records
        self._records: List[CandidateRecord] = list(records)
        self._listeners: List[RecordListener] = []

    def subscribe(self, listener: RecordListener) -> None:  # Observe newly appended records
        self._listeners.append(listener)

    def add_record(
        self,
        *,
        details: CandidateDetails,
        questions: Sequence[InterviewQuestion],
        total_score: Optional[int],
        final_summary: Optional[str],
    ) -> CandidateRecord:  # Stamp id and completion time, then append
        record = CandidateRecord(
            id=uuid4().hex,
            details=details,
            questions=tuple(questions),
            total_score=total_score,
            final_summary=final_summary,
            completed_at=datetime.now(timezone.utc).isoformat(timespec="seconds"),
        )
        self._records.append(record)
        for listener in list(self._listeners):
            try:
                listener(record)
            except Exception:  # noqa: BLE001
                logger.exception("Archive listener failed record=%s", record.id)
        return record

    def list_records(self) -> List[CandidateRecord]:  # Records in insertion order
        return list(self._records)

    def get_record(self, record_id: str) -> CandidateRecord:  # Lookup by id
        for record in self._records:
            if record.id == record_id:
                return record
        raise KeyError(record_id)

    def __len__(self) -> int:
        return len(self._records)


__all__ = ["CandidateArchive", "CandidateRecord"]
