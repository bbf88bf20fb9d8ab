import logging

from fastapi import FastAPI

from psn_auth.infra.routes import (
    auth,
    health
)
from psn_auth.utils.provider import get_settings

logging.basicConfig(
    level=get_settings().LOG_LEVEL.upper(),
    format="[%(asctime)s] %(levelname)s %(name)s %(message)s"
)

app = FastAPI(title="PSN Auth API")

app.include_router(health.router)
app.include_router(auth.router)
