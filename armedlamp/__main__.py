import uvicorn

from .core.config import settings


def main() -> None:
    uvicorn.run("armedlamp.main:app", host=settings.host, port=settings.port)


if __name__ == "__main__":
    main()
