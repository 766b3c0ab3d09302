import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import PlainTextResponse

from clientpl.api import settings
from clientpl.api.routes import summaries


def create_app() -> FastAPI:
    app = FastAPI(title="clientpl API")

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials="*" not in settings.CORS_ORIGINS,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/", response_class=PlainTextResponse, tags=["health"])
    def root() -> str:
        return "Server is running!"

    @app.get("/health", tags=["health"])
    def health() -> dict[str, str]:
        return {"status": "ok"}

    app.include_router(summaries.router)
    return app


app = create_app()


if __name__ == "__main__":
    uvicorn.run("clientpl.api.main:app", host="0.0.0.0", port=settings.PORT)
