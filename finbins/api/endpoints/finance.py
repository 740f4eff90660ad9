"""
Buckets, transactions and financial-summary endpoints of the demo backend.

Backed by the app's DemoDataStore. Unlike the client-side mock, the user id
here comes from the path (or the request body), and bad input is rejected
with 400/404 and a ``message`` body.
"""

from typing import Any, Dict, Optional

from fastapi import APIRouter, Body, Depends, HTTPException, Query, Request

from finbins.integrations.clients.mocks.demo_store import DemoDataStore

router = APIRouter(tags=["Finance"])


def get_store(request: Request) -> DemoDataStore:
    return request.app.state.store


def parse_id(raw: Any, label: str = "user ID") -> int:
    try:
        return int(str(raw).strip())
    except (TypeError, ValueError):
        raise HTTPException(status_code=400, detail=f"Invalid {label}")


def _missing(payload: Dict[str, Any], *keys: str) -> bool:
    # 0, "" and false count as missing
    return any(not payload.get(k) for k in keys)


# ---------------------------------------------------------------------------
# Buckets
# ---------------------------------------------------------------------------

@router.post("/buckets")
async def create_bucket(payload: Dict[str, Any] = Body(...), store: DemoDataStore = Depends(get_store)):
    if _missing(payload, "userId", "name", "targetAmount", "deadline"):
        raise HTTPException(status_code=400, detail="Missing required fields")
    bucket = store.create_bucket(parse_id(payload["userId"]), payload)
    return bucket.to_wire()


@router.get("/buckets/{user_id}")
async def list_buckets(user_id: str, store: DemoDataStore = Depends(get_store)):
    return [b.to_wire() for b in store.list_buckets(parse_id(user_id))]


@router.get("/buckets/{user_id}/{bucket_id}")
async def get_bucket(user_id: str, bucket_id: str, store: DemoDataStore = Depends(get_store)):
    result = store.get_bucket(parse_id(bucket_id, "bucket ID"), parse_id(user_id))
    if not result:
        raise HTTPException(status_code=404, detail=result.error.message)
    return result.value.to_wire()


@router.put("/buckets/{user_id}/{bucket_id}/priority")
async def update_priority(
    user_id: str,
    bucket_id: str,
    priority: Any = Body(None),
    store: DemoDataStore = Depends(get_store),
):
    result = store.update_priority(parse_id(bucket_id, "bucket ID"), parse_id(user_id), priority)
    if not result:
        raise HTTPException(status_code=result.error.status_code, detail=result.error.message)
    return {"success": True, "bucket": result.value.to_wire()}


@router.delete("/buckets/{user_id}/{bucket_id}")
async def delete_bucket(user_id: str, bucket_id: str, store: DemoDataStore = Depends(get_store)):
    result = store.delete_bucket(parse_id(bucket_id, "bucket ID"), parse_id(user_id))
    if not result:
        raise HTTPException(status_code=404, detail=result.error.message)
    return {"success": True}


# ---------------------------------------------------------------------------
# Transactions
# ---------------------------------------------------------------------------

@router.get("/transactions")
async def list_transactions(
    user_id: Optional[str] = Query(default=None, alias="userId"),
    store: DemoDataStore = Depends(get_store),
):
    if user_id is None:
        return [t.to_wire() for t in store.list_all_transactions()]
    return [t.to_wire() for t in store.list_transactions(parse_id(user_id))]


@router.get("/transactions/{user_id}")
async def list_user_transactions(user_id: str, store: DemoDataStore = Depends(get_store)):
    return [t.to_wire() for t in store.list_transactions(parse_id(user_id))]


@router.post("/transactions")
async def create_transaction(payload: Dict[str, Any] = Body(...), store: DemoDataStore = Depends(get_store)):
    if _missing(payload, "userId", "amount", "description", "transactionDate"):
        raise HTTPException(status_code=400, detail="Missing required fields")
    transaction = store.create_transaction(parse_id(payload["userId"]), payload)
    return transaction.to_wire()


# ---------------------------------------------------------------------------
# Financial summary
# ---------------------------------------------------------------------------

@router.get("/financial-summary/{user_id}")
async def get_financial_summary(user_id: str, store: DemoDataStore = Depends(get_store)):
    summary = store.find_financial_summary(parse_id(user_id))
    if summary is None:
        raise HTTPException(status_code=404, detail="Financial summary not found")
    return summary.to_wire()


@router.post("/financial-summary/add/{user_id}")
async def add_financial_summary(
    user_id: str,
    payload: Dict[str, Any] = Body(...),
    store: DemoDataStore = Depends(get_store),
):
    summary = store.save_financial_summary(parse_id(user_id), payload)
    return summary.to_wire()
