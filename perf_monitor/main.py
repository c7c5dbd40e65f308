"""
主程序入口

加载配置、初始化日志、获取单实例锁，然后启动 REST API 服务；
定时记录任务随 API 应用的生命周期启动和停止。
"""

import asyncio
import logging
import os
import sys
from pathlib import Path
from typing import Optional

import uvicorn
import yaml
from pydantic import ValidationError

from . import __version__
from .config import AppConfig, get_config


def setup_logging(config: AppConfig):
    """配置日志"""
    log_format = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    level = getattr(logging, config.logging.level.upper(), logging.INFO)

    logging.basicConfig(
        level=level,
        format=log_format,
        handlers=[logging.StreamHandler(sys.stdout)]
    )

    if config.logging.file:
        log_path = Path(config.logging.file)
        log_path.parent.mkdir(parents=True, exist_ok=True)

        file_handler = logging.FileHandler(str(log_path), encoding="utf-8")
        file_handler.setFormatter(logging.Formatter(log_format))
        logging.getLogger().addHandler(file_handler)

    # 降低第三方库日志级别
    logging.getLogger("uvicorn").setLevel(logging.INFO)
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)


def acquire_single_instance_lock(lock_path: Path):
    """
    防止多个进程同时写同一个历史文件。

    通过文件锁实现：同一路径下只能有一个进程持锁。
    """
    lock_path.parent.mkdir(parents=True, exist_ok=True)
    handle = open(lock_path, "a+b")
    try:
        handle.seek(0)
        if handle.read(1) == b"":
            handle.write(b"0")
            handle.flush()
        handle.seek(0)
    except OSError:
        pass

    try:
        if os.name == "nt":
            import msvcrt  # type: ignore

            msvcrt.locking(handle.fileno(), msvcrt.LK_NBLCK, 1)
        else:
            import fcntl  # type: ignore

            fcntl.flock(handle, fcntl.LOCK_EX | fcntl.LOCK_NB)
    except OSError as e:
        handle.close()
        raise RuntimeError(f"Another Perf Monitor instance is already running (lock: {lock_path})") from e

    return handle


async def run_api_server(config: AppConfig):
    """运行 API 服务器"""
    from .api.app import create_app

    app = create_app(config)

    server_config = uvicorn.Config(
        app=app,
        host=config.api.host,
        port=config.api.port,
        log_level="info",
        access_log=False
    )
    server = uvicorn.Server(server_config)
    await server.serve()


async def main(config: Optional[AppConfig] = None):
    """主函数"""
    logger = logging.getLogger(__name__)

    config = config or get_config()
    setup_logging(config)
    logger.info("=" * 60)
    logger.info(f"Perf Monitor v{__version__}")
    logger.info("=" * 60)
    logger.info(f"Config loaded: API={config.api.host}:{config.api.port}")
    logger.info(f"History: {config.history.path}")

    history_path = Path(config.history.path)
    lock_handle = acquire_single_instance_lock(
        history_path.with_name(history_path.name + ".lock")
    )

    try:
        await run_api_server(config)
    except asyncio.CancelledError:
        logger.info("Tasks cancelled, shutting down...")
    finally:
        lock_handle.close()


def cli():
    """命令行入口"""
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        print("\nShutdown requested, exiting...")
        sys.exit(0)
    except (FileNotFoundError, yaml.YAMLError, ValidationError, RuntimeError) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    cli()
