from fastapi import FastAPI

from careerchat.api import chat, chat_history, health
from careerchat.core.logging import configure_logging
from careerchat.core.settings import get_settings


def create_app() -> FastAPI:
    settings = get_settings()
    configure_logging(settings)

    app = FastAPI(title=settings.app_name)

    # Same-origin path the browser client calls.
    app.include_router(chat.router, prefix="/api")
    app.include_router(chat_history.router, prefix="/api")

    app.include_router(health.router)

    return app


app = create_app()
