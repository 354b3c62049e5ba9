from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager
import logging

from settings import get_settings
from core.session_manager import get_session_manager
from api import sessions, rounds


@asynccontextmanager
async def lifespan(app: FastAPI):
    logging.basicConfig(level=get_settings().log_level)
    yield
    # Shutdown: 取消所有尚未執行的比對 timer
    get_session_manager().shutdown()


app = FastAPI(
    title="Hero Match API",
    description="Round economy and match-resolution engine for the Hero Match card game",
    version="1.0.0",
    lifespan=lifespan
)

# CORS configuration
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # Configure this properly in production
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(sessions.router)
app.include_router(rounds.router)


@app.get("/")
def root():
    return {"message": "Hero Match API", "status": "ok"}


@app.get("/health")
def health():
    return {"status": "healthy"}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
