from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

import logging

from dinner.infra.Store import DataAccessError
from dinner.events.web_observers import start as start_event_observers

# Routers
from dinner.api.routes import meals, pantry, recipes, shopping, suggestions
from dinner.api.api_ai import router as ai_router

# Logging
logger = logging.getLogger("dinner_app")

# Initialize FastAPI app
app = FastAPI(title="What's with Dinner API")

# Include routers (import before recipes so /import/* is not taken as a recipe id)
app.include_router(ai_router)
app.include_router(recipes.router)
app.include_router(meals.router)
app.include_router(suggestions.router)
app.include_router(pantry.router)
app.include_router(shopping.router)


@app.on_event("startup")
def _startup_web_observers():
    """Register event bus subscribers for web alerts when the app starts."""
    start_event_observers()
    logger.info("Web observers for pantry events started")


@app.exception_handler(DataAccessError)
async def _data_access_error(request: Request, exc: DataAccessError):
    logger.error("Data access error on %s: %s", request.url.path, exc.message)
    return JSONResponse(status_code=500, content={"error": exc.message})


@app.get("/api/health")
def health():
    return {"ok": True}
