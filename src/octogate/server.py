import uvicorn

from octogate.core.app import configure_logging, create_app
from octogate.core.settings import OctogateSettings


def main() -> None:
    settings = OctogateSettings()
    configure_logging(settings.log_level)
    app = create_app(settings)
    uvicorn.run(app, host=settings.host, port=settings.port, log_level=settings.log_level.lower())


if __name__ == "__main__":
    main()
