from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from library_desk.api.v1.messages.router import router as messages_router
from library_desk.api.v1.receipts.router import router as receipts_router
from library_desk.core.config import settings
from library_desk.core.logging_config import configure_logging
from library_desk.db.session import init_db


@asynccontextmanager
async def lifespan(app: FastAPI):
    await init_db()
    yield


def create_app() -> FastAPI:
    configure_logging(settings.log_level)
    app = FastAPI(title="Library Desk", lifespan=lifespan)

    # CORS: the admin UI runs on a different origin
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["Content-Disposition", "X-Receipt-Number"],
    )

    # Routers
    app.include_router(receipts_router)
    app.include_router(messages_router)

    return app


app = create_app()
