"""Simple entrypoint to serve the outfit closet API locally."""

import uvicorn


def main() -> None:
    uvicorn.run("server.api:get_app", factory=True, host="127.0.0.1", port=8080, reload=False)


if __name__ == "__main__":
    main()
