# src/api/main.py
import logging
import os
import uuid
from datetime import date
from typing import Any, Dict, Optional

from dotenv import load_dotenv
from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import ValidationError

from api.logger import log_event
from api.store import InMemoryStayStore, StayStore
from engine import (
    InvalidDateError,
    calculate_all_statuses,
    default_rule_table,
    diff_corrections,
    reconcile_all,
    reconcile_insert,
    remove_duplicate_stays,
)
from models.schemas import (
    ReconcileRequest,
    ReconcileResponse,
    RuleTableResponse,
    StaysResponse,
    VisaStatusResponse,
)

load_dotenv()

logger = logging.getLogger(__name__)

DEFAULT_PASSPORT = os.getenv("DEFAULT_PASSPORT", "US").upper()
CORS_ALLOW_ORIGINS = [origin.strip() for origin in os.getenv("CORS_ALLOW_ORIGINS", "*").split(",") if origin.strip()]


app = FastAPI()

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ALLOW_ORIGINS,
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)

store: StayStore = InMemoryStayStore()
rules = default_rule_table(DEFAULT_PASSPORT)


def _unprocessable(exc: Exception) -> HTTPException:
    return HTTPException(status_code=422, detail=str(exc))


@app.get("/stays/{user_id}", response_model=StaysResponse)
async def list_stays(user_id: str) -> StaysResponse:
    """Load a user's stays, drop duplicates, reconcile and persist whatever changed."""
    loaded = store.list_stays(user_id)
    stays = remove_duplicate_stays(loaded)
    kept = {stay.id for stay in stays}
    removed = [stay.id for stay in loaded if stay.id not in kept]
    resolved = reconcile_all(stays)
    corrections = diff_corrections(stays, resolved)
    if removed or corrections:
        store.save_stays(user_id, resolved)
    if removed:
        logger.info("Removed %d duplicate stays for user %s", len(removed), user_id)
        log_event(user_id, "duplicates_removed", {"stay_ids": removed})
    if corrections:
        logger.info("Reconciled %d stays for user %s", len(corrections), user_id)
        log_event(user_id, "reconciled", {"corrections": [c.model_dump(mode="json") for c in corrections]})
    return StaysResponse(user_id=user_id, stays=resolved, corrections=corrections, removed=removed)


@app.post("/stays/{user_id}", response_model=StaysResponse, status_code=201)
async def add_stay(user_id: str, record: Dict[str, Any]) -> StaysResponse:
    record = dict(record)
    record.setdefault("id", uuid.uuid4().hex)
    existing = store.list_stays(user_id)
    try:
        resolved = reconcile_insert(existing, record)
    except (InvalidDateError, ValidationError) as exc:
        raise _unprocessable(exc) from exc
    corrections = diff_corrections(existing, resolved)
    store.save_stays(user_id, resolved)
    log_event(
        user_id,
        "stay_added",
        {"id": record["id"], "corrections": [c.model_dump(mode="json") for c in corrections]},
    )
    return StaysResponse(user_id=user_id, stays=resolved, corrections=corrections)


@app.delete("/stays/{user_id}/{stay_id}")
async def delete_stay(user_id: str, stay_id: str) -> Dict[str, str]:
    if not store.delete_stay(user_id, stay_id):
        raise HTTPException(status_code=404, detail="Stay not found")
    log_event(user_id, "stay_deleted", {"id": stay_id})
    return {"deleted": stay_id}


@app.post("/reconcile", response_model=ReconcileResponse)
async def reconcile(req: ReconcileRequest) -> ReconcileResponse:
    try:
        resolved = reconcile_all(req.stays)
        corrections = diff_corrections(req.stays, resolved)
    except (InvalidDateError, ValidationError) as exc:
        raise _unprocessable(exc) from exc
    return ReconcileResponse(stays=resolved, corrections=corrections)


@app.get("/visa-status/{user_id}", response_model=VisaStatusResponse)
async def visa_status(
    user_id: str,
    passport: Optional[str] = None,
    reference_date: Optional[date] = None,
) -> VisaStatusResponse:
    passport = (passport or DEFAULT_PASSPORT).upper()
    if rules.rules_for(passport) is None:
        raise HTTPException(status_code=404, detail=f"No visa rules for passport {passport}")
    reference = reference_date or date.today()
    stays = reconcile_all(store.list_stays(user_id))
    statuses = calculate_all_statuses(stays, rules, passport=passport, reference_date=reference)
    return VisaStatusResponse(user_id=user_id, passport=passport, reference_date=reference, statuses=statuses)


@app.get("/rules/{passport}", response_model=RuleTableResponse)
async def rule_table(passport: str) -> RuleTableResponse:
    table = rules.rules_for(passport)
    if table is None:
        raise HTTPException(status_code=404, detail=f"No visa rules for passport {passport.upper()}")
    return RuleTableResponse(passport=passport.upper(), rules=table)
