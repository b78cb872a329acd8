"""
生产订单管理系统 (Production Order System)
Main Entry Point: starts the JSON API server for all departments.
"""

import logging
import sys
from pathlib import Path

# Add src to path
root_dir = Path(__file__).parent.absolute()
sys.path.insert(0, str(root_dir / "src"))

from config import APP_NAME, VERSION, HOST, PORT, DEPARTMENT_PAGES
from api.app import create_app
from utils.logger import setup_logger
from utils.network_helper import get_local_ip

logger = logging.getLogger(__name__)


def log_banner(port: int) -> None:
    """启动时打印本机与局域网访问地址、各部门入口"""
    ip = get_local_ip()
    logger.info("=" * 55)
    logger.info(f"  {APP_NAME} v{VERSION} 已启动！")
    logger.info("=" * 55)
    logger.info(f"  本机访问:   http://localhost:{port}")
    logger.info(f"  局域网访问: http://{ip}:{port}")
    logger.info("=" * 55)
    logger.info("  各部门入口:")
    for department, page in DEPARTMENT_PAGES:
        logger.info(f"  {department}: http://{ip}:{port}/{page}")
    logger.info("=" * 55)


def main(host: str = HOST, port: int = PORT, debug: bool = False) -> None:
    setup_logger()
    app = create_app()
    log_banner(port)
    app.run(host=host, port=port, debug=debug, threaded=True)


if __name__ == "__main__":
    main()
