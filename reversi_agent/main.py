"""FastAPI entry point for the Reversi agent API."""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

app = FastAPI(
    title="Reversi Agent API",
    version="0.1.0",
    description="Play Reversi positions and query the parallel MCTS engine",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Import and include routers
from reversi_agent.api.routes_game import router as game_router
from reversi_agent.api.routes_solver import router as solver_router

app.include_router(game_router, prefix="/api/games", tags=["games"])
app.include_router(solver_router, prefix="/api/games", tags=["solver"])


@app.get("/api/health")
async def health():
    return {"status": "ok"}
