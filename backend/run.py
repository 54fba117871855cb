"""Start the site under uvicorn using the configured host and port"""
import sys
from pathlib import Path

BACKEND_DIR = Path(__file__).resolve().parent
sys.path.insert(0, str(BACKEND_DIR))


def main() -> None:
    import uvicorn

    # Settings load the project-root .env themselves
    from app.core.config import get_settings
    from app.main import app

    settings = get_settings()
    uvicorn.run(
        app,
        host=settings.api_host,
        port=settings.api_port,
        access_log=settings.log_uvicorn_access,
        log_config=None,  # keep LoggingConfig's handlers
    )


if __name__ == "__main__":
    main()
