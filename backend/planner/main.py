import logging
from typing import Dict

from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .config import Settings, get_settings
from .debug_routes import router as debug_router
from .logging_config import configure_logging
from .plan_routes import router as plan_router
from .progress_routes import router as progress_router


configure_logging()
logger = logging.getLogger(__name__)
app = FastAPI(title="Homeschool Planner Backend", version="0.1.0")
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)
app.include_router(plan_router)
app.include_router(progress_router)
app.include_router(debug_router)

settings_snapshot = get_settings()
logger.info(
    "Planner starting with %.1f h/day default and %s as light day",
    settings_snapshot.default_hours_per_day,
    settings_snapshot.default_light_day,
)
logger.info("Debug endpoints enabled: %s", settings_snapshot.debug_endpoints)


@app.get("/healthz")
def health(settings: Settings = Depends(get_settings)) -> Dict[str, str]:
    return {"status": "ok", "mode": "planner"}
