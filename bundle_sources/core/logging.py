# bundle_sources/core/logging.py
import logging
import sys

APP_LOGGER = "bundle_sources"


def setup_logging(level: str = "INFO") -> None:
    """
    统一日志：
    - 根 logger 只挂一个 stdout handler
    - 业务日志统一在 bundle_sources.* 命名空间下（product_repo / source_items / models ...）
    """
    lvl = level.upper()
    root = logging.getLogger()
    root.setLevel(lvl)

    for h in list(root.handlers):
        root.removeHandler(h)

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s %(message)s"))
    root.addHandler(handler)

    # 业务命名空间跟随配置级别，经根 handler 输出
    app_logger = logging.getLogger(APP_LOGGER)
    app_logger.setLevel(lvl)
    app_logger.propagate = True

    logging.getLogger("uvicorn.access").setLevel(logging.INFO)
    logging.getLogger("sqlalchemy.engine").setLevel(
        logging.INFO if lvl == "DEBUG" else logging.WARNING
    )
