"""Run the MathSolve AI server with uvicorn."""

import uvicorn

from mathsolve_ai.server.core.config import settings


def main() -> None:
    uvicorn.run(
        "mathsolve_ai.server.main:app",
        host=settings.server_host,
        port=settings.server_port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
