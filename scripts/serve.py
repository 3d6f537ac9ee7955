"""Run the API with uvicorn using the configured host and port."""
import uvicorn

from swim_planner.config import get_settings


def main() -> None:
    settings = get_settings()
    uvicorn.run(
        "swim_planner.main:app",
        host=settings.app_host,
        port=settings.app_port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
