from fastapi import FastAPI, HTTPException
from pathlib import Path
from typing import Optional
import json
import os

app = FastAPI(title="Mock Ledger Server", version="1.0.0")
# Support both local development and Docker
DATA_DIR = Path("/ledger_stub") if os.path.exists("/ledger_stub") else Path(__file__).resolve().parent / "data"
PAGE_SIZE = 3


def _load(name: str) -> list:
    file = DATA_DIR / f"{name}.json"
    if not file.exists():
        raise HTTPException(status_code=404, detail=f"{name} not found")
    return json.loads(file.read_text())


def _paginate(documents: list, page: int) -> dict:
    total_pages = max(1, -(-len(documents) // PAGE_SIZE))
    if page < 1 or page > total_pages:
        raise HTTPException(status_code=400, detail="page out of range")
    start = (page - 1) * PAGE_SIZE
    return {
        "data": documents[start:start + PAGE_SIZE],
        "meta": {"pagination": {"total": len(documents), "current_page": page, "total_pages": total_pages}},
    }


@app.get("/health")
def health(): return {"status": "ok"}


@app.get("/api/v1/transactions")
def get_transactions(start: str, end: str, page: int = 1):
    documents = [
        doc for doc in _load("transactions")
        if any(start <= split["date"][:10] <= end for split in doc["attributes"]["transactions"])
    ]
    return _paginate(documents, page)


@app.get("/api/v1/bills")
def get_bills(page: int = 1):
    return _paginate(_load("bills"), page)


@app.get("/api/v1/budgets")
def get_budgets(page: int = 1):
    return _paginate(_load("budgets"), page)


@app.get("/api/v1/budget-limits")
def get_budget_limits(start: Optional[str] = None, end: Optional[str] = None, page: int = 1):
    documents = [
        doc for doc in _load("budget_limits")
        if (start is None or doc["attributes"]["start"] >= start)
        and (end is None or doc["attributes"]["end"] <= end)
    ]
    return _paginate(documents, page)
