import uvicorn

from weatherlive.core.config import load_settings


def main() -> None:
    settings = load_settings()
    uvicorn.run(
        "weatherlive.main:app",
        host=settings.host,
        port=settings.port,
        reload=not settings.is_production,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
