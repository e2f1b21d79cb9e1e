# main.py
"""
Main application file for the Botora debate-room API.
Sets up logging and CORS for the React dev server, wires routers,
and exposes a simple /healthz endpoint.
"""
import logging
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from core.database import init_db
from routers import auth, debate
from utils.config import get_cors_origins, get_log_level

logging.basicConfig(
    level=get_log_level(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

# Create tables in dev (migration tool recommended for prod)
init_db()

app = FastAPI(
    title="Botora Debate API",
    description="Debate rooms: create, join, argue round by round against people or AI, and vote.",
    version="1.0.0",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=get_cors_origins(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Routers
app.include_router(auth.router, prefix="/auth", tags=["auth"])
app.include_router(debate.router, prefix="/debate-rooms", tags=["debate-rooms"])
app.include_router(debate.ai_router, tags=["ai"])

# Health for dev/proxy/lb checks
@app.get("/healthz")
async def healthz():
    return {"ok": True}
