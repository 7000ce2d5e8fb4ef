import logging
import os

from dotenv import load_dotenv

from main import create_battlesnake_server


def configure_logging() -> int:
    level = getattr(logging, os.getenv("LOG_LEVEL", "INFO").upper(), None)
    if not isinstance(level, int):
        level = logging.INFO

    logging.basicConfig(level=level,
                        format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    # basicConfig is a no-op once the root logger has handlers
    logging.getLogger().setLevel(level)
    logging.getLogger("werkzeug").setLevel(logging.ERROR)
    return level


def load_settings() -> dict:
    """Server settings from the environment"""
    return {
        "host": os.getenv("HOST", "0.0.0.0"),
        "port": int(os.getenv("PORT", "8080")),
        "debug": os.getenv("FLASK_DEBUG", "").lower() in ("1", "true", "yes"),
    }


def main():
    load_dotenv()
    configure_logging()
    settings = load_settings()

    app = create_battlesnake_server()
    logging.getLogger(__name__).info("Battlesnake server listening on http://%s:%d",
                                     settings["host"], settings["port"])
    app.run(**settings)


if __name__ == "__main__":
    main()
