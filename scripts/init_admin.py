"""初始化默认管理员"""
import os
import sys

ROOT_DIR = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
sys.path.append(ROOT_DIR)

from controlplane.core.auth import get_password_hash
from controlplane.core.config import settings
from controlplane.db.sqlite import SQLiteDB


def main():
    username = os.environ.get("CONTROLPLANE_ADMIN_USER", "admin")
    password = os.environ.get("CONTROLPLANE_ADMIN_PASSWORD", "admin")
    db = SQLiteDB(settings.db_path)

    exists = db.get_user_by_username(username)
    if exists:
        print(f"管理员已存在: {username}")
        return

    user_id = db.create_user(username=username, password_hash=get_password_hash(password), role="admin")
    print(f"管理员创建成功: id={user_id}, username={username}")


if __name__ == "__main__":
    main()
