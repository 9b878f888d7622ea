"""
FastAPI application entry point for the graph recommender API.
"""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from graphrec.api.config import get_api_host, get_api_port, get_log_file, get_log_level
from graphrec.api.routers import recommendations, movies, system
from graphrec.utils.logging_config import configure_api_logging

configure_api_logging(level=get_log_level(), log_file=get_log_file())

app = FastAPI(
    title="Graph Recommender API",
    description="Movie recommendations from content overlap and collaborative filtering over a movie graph",
    version="1.0.0",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(recommendations.router)
app.include_router(movies.router)
app.include_router(system.router)


@app.get("/")
def root():
    """Root endpoint."""
    return {
        "message": "Graph Recommender API",
        "docs": "/docs",
        "health": "/api/health",
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host=get_api_host(), port=get_api_port())
