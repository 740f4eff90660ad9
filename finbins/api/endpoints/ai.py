from typing import Any, Dict

from fastapi import APIRouter, Body, Depends, HTTPException, Request

from finbins.api.endpoints.finance import get_store, parse_id
from finbins.chatbot.assistant import FinancialAssistant
from finbins.integrations.clients.mocks.demo_store import DemoDataStore
from finbins.integrations.contracts.interfaces import ChatResponse

router = APIRouter(tags=["AI"])


def get_assistant(request: Request) -> FinancialAssistant:
    return request.app.state.assistant


@router.get("/ai-analysis/recommendations/{user_id}")
async def recommendations(user_id: str, store: DemoDataStore = Depends(get_store)):
    parse_id(user_id)
    # Static list; not tailored to the user yet.
    return [r.to_wire() for r in store.list_recommendations()]


@router.get("/ai-analysis/income/{user_id}")
async def income_analysis(user_id: str, store: DemoDataStore = Depends(get_store)):
    parse_id(user_id)
    return store.income_analysis().to_wire()


@router.get("/ai-analysis/expenses/{user_id}")
async def expense_analysis(user_id: str, store: DemoDataStore = Depends(get_store)):
    parse_id(user_id)
    return store.expense_analysis().to_wire()


@router.get("/ai-analysis/summary/{user_id}")
async def analysis_summary(user_id: str, store: DemoDataStore = Depends(get_store)):
    parse_id(user_id)
    return store.analysis_summary().to_wire()


@router.post("/ai-chat/{user_id}")
async def ai_chat(
    user_id: str,
    payload: Dict[str, Any] = Body(...),
    assistant: FinancialAssistant = Depends(get_assistant),
):
    parse_id(user_id)
    question = payload.get("question")
    if not question or not str(question).strip():
        raise HTTPException(status_code=400, detail="Question is required")
    return ChatResponse(response=assistant.respond(str(question))).to_wire()
