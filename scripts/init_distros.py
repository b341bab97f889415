"""初始化 distro 目录

用法: python scripts/init_distros.py distros.json
未传参数时读取环境变量 CONTROLPLANE_DISTROS_FILE。
"""
import logging
import os
import sys

ROOT_DIR = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
sys.path.append(ROOT_DIR)

from controlplane.core.config import settings
from controlplane.core.logger import setup_logging
from controlplane.db.sqlite import SQLiteDB
from controlplane.services.distro_catalog import load_distros_file, seed_distros


def main(argv=None) -> int:
    setup_logging()
    logger = logging.getLogger(__name__)

    args = list(sys.argv[1:] if argv is None else argv)
    path = args[0] if args else os.environ.get("CONTROLPLANE_DISTROS_FILE", "")
    if not path:
        print("请指定 distro JSON 文件（参数或 CONTROLPLANE_DISTROS_FILE）")
        return 1

    db = SQLiteDB(settings.db_path)
    catalog = seed_distros(db, load_distros_file(path))
    logger.info("distro 目录初始化完成: %s", path)
    for distro in catalog:
        pool = f" (container pool {distro.container_pool})" if distro.container_pool else ""
        print(f"{distro.id}: {distro.arch}/{distro.provider}{pool}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
