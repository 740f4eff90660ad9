"""
FastAPI application - demo backend for the FinBins dashboard

Serves the dashboard API over in-memory state. Run with:
  uvicorn finbins.api.main:app --host 127.0.0.1 --port 8000
"""

from dotenv import load_dotenv

load_dotenv()

import logging
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError as FastAPIRequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from finbins.api.endpoints.ai import router as ai_router
from finbins.api.endpoints.auth import UserRegistry, router as auth_router
from finbins.api.endpoints.finance import router as finance_router
from finbins.api.endpoints.users import router as users_router
from finbins.chatbot.assistant import FinancialAssistant
from finbins.error_handler import ErrorHandler
from finbins.integrations.clients.mocks.demo_store import DemoDataStore

# Setup logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

API_PREFIX = "/api"

error_handler = ErrorHandler()


def create_app(
    store: Optional[DemoDataStore] = None,
    users: Optional[UserRegistry] = None,
    assistant: Optional[FinancialAssistant] = None,
) -> FastAPI:
    app = FastAPI(
        title="FinBins Demo API",
        description="Mock personal-finance backend: buckets, transactions, summaries and a keyword assistant",
        version="0.1.0",
    )

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],  # Configure appropriately for production
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.state.store = store or DemoDataStore()
    app.state.users = users or UserRegistry()
    app.state.assistant = assistant or FinancialAssistant()

    app.include_router(auth_router, prefix=API_PREFIX)
    app.include_router(finance_router, prefix=API_PREFIX)
    app.include_router(users_router, prefix=API_PREFIX)
    app.include_router(ai_router, prefix=API_PREFIX)

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        return JSONResponse(status_code=exc.status_code, content={"message": str(exc.detail)})

    @app.exception_handler(FastAPIRequestValidationError)
    async def validation_exception_handler(request: Request, exc: FastAPIRequestValidationError):
        logger.info("Rejected request to %s: %s", request.url.path, exc.errors())
        return JSONResponse(status_code=400, content={"message": "Invalid request body"})

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception):
        payload = error_handler.handle_exception(exc, context={"path": request.url.path})
        return JSONResponse(status_code=500, content={"message": payload["message"]})

    @app.get("/health")
    async def health():
        return {"status": "ok"}

    return app


app = create_app()
