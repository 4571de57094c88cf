"""Main FastAPI application."""

import asyncio
import logging
import sys
from functools import lru_cache

from fastapi import Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from dish_audit.config import CORS_ORIGINS, AuditSettings
from dish_audit.handler import DishAuditHandler

# -----------------------------------
# Application setup
# -----------------------------------

app = FastAPI()

logging.basicConfig(
    level=logging.INFO,
    stream=sys.stdout,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s"
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)


@lru_cache
def get_handler() -> DishAuditHandler:
    return DishAuditHandler(AuditSettings.from_env())


# -----------------------------------
# Technical endpoints
# -----------------------------------

@app.get("/health")
def health():
    return {"status": "ok"}


# -----------------------------------
# /api/audit-dish
# -----------------------------------

@app.post("/api/audit-dish")
async def audit_dish(request: Request, handler: DishAuditHandler = Depends(get_handler)):
    try:
        body = await request.json()
    except Exception as e:
        logging.exception("Error reading /api/audit-dish body")
        return JSONResponse(
            status_code=500,
            content={"status": "error", "message": "Internal Server Error", "debug": str(e)},
        )

    # Vision SDKs and requests are blocking
    status_code, content = await asyncio.to_thread(handler.handle, body)
    return JSONResponse(status_code=status_code, content=content)
