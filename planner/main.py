"""Main FastAPI application for the planner recurrence engine."""
from fastapi import FastAPI

from planner import __version__
from planner.middleware.cors import add_cors_middleware
from planner.routers import events_router, recurrence_router, tasks_router

# Create FastAPI application
app = FastAPI(
    title="Planner Recurrence API",
    description="Expands recurring tasks and events into daily occurrences and reconciles them with stored records",
    version=__version__,
)

# Add CORS middleware
add_cors_middleware(app)


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "version": __version__}


@app.get("/")
async def root():
    """Root endpoint - API welcome message."""
    return {
        "message": "Planner recurrence engine",
        "version": __version__,
        "docs": "/docs",
        "health": "/health",
    }


app.include_router(recurrence_router, prefix="/api")  # /api/recurrence/occurs, /api/recurrence/next, /api/recurrence/validate
app.include_router(tasks_router, prefix="/api")  # /api/tasks/reconcile, /api/tasks/materialize, /api/tasks/skip, /api/tasks/end-series, /api/tasks/modify-instance
app.include_router(events_router, prefix="/api")  # /api/events/reconcile

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "planner.main:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
    )
