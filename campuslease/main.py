import uvicorn

from campuslease.core.config import PORT
from campuslease.factory import create_app

app = create_app()


def main():
    uvicorn.run(app, host="0.0.0.0", port=PORT)


if __name__ == "__main__":
    main()
