"""python -m chat_core 启动 HTTP 服务。"""

import os

import uvicorn

from chat_core.infrastructure.logging.logger import logger


def main() -> None:
    host = os.getenv("HOST", "127.0.0.1")
    port = int(os.getenv("PORT", "8000"))
    logger.info("starting chat_core server", extra={"extra": {"host": host, "port": port}})
    uvicorn.run("chat_core.api.app:app", host=host, port=port, log_level="info")


if __name__ == "__main__":
    main()
