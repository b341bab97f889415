"""测试共用的存储与配置构造工具。"""
from __future__ import annotations

from fastapi.testclient import TestClient

from controlplane.core.auth import get_current_active_user
from controlplane.db.sqlite import SQLiteDB
from controlplane.main import create_app
from controlplane.models.settings import AdminSettings

VALID_CSRF_KEY = "0123456789abcdef0123456789abcdef"


def make_db(tmp_path, name: str = "controlplane.db") -> SQLiteDB:
    return SQLiteDB(str(tmp_path / name))


def make_client(db: SQLiteDB, username: str = "user") -> TestClient:
    app = create_app(db)
    app.dependency_overrides[get_current_active_user] = lambda: {"id": 1, "username": username, "role": "admin"}
    return TestClient(app, raise_server_exceptions=False)


def seed_distros(db: SQLiteDB) -> None:
    db.upsert_distro({"id": "valid-distro", "arch": "linux_amd64", "provider": "docker"})
    db.upsert_distro(
        {"id": "invalid-distro", "arch": "linux_amd64", "provider": "docker", "container_pool": "test-pool-1"}
    )


def mock_admin_settings(**overrides) -> AdminSettings:
    data = {
        "api_url": "http://ci.example.net",
        "banner": "banner",
        "banner_theme": "important",
        "client_binaries_dir": "bin",
        "expansions": {"k2": "v2"},
        "keys": {"k3": "v3"},
        "log_path": "logpath",
        "plugins": {"k4": {"k5": "v5"}},
        "super_users": ["admin"],
        "alerts": {
            "smtp": {"server": "server", "port": 2285, "from_address": "from", "admin_email": ["email"]},
        },
        "amboy": {"name": "amboy", "db": "db", "pool_size_local": 10, "pool_size_remote": 20, "local_storage": 30},
        "api": {"http_listen_addr": "addr", "github_webhook_secret": "secret"},
        "auth": {
            "crowd": {"username": "crowduser", "password": "crowdpw", "url": "crowdurl"},
            "naive": {"users": [{"username": "user", "password": "pw"}]},
            "github": {"client_id": "ghclient", "client_secret": "ghsecret", "users": ["ghuser"], "organization": "ghorg"},
        },
        "container_pools": {"pools": [{"id": "test-pool-1", "distro": "valid-distro", "max_containers": 100}]},
        "hostinit": {"ssh_timeout_secs": 10},
        "jira": {"host": "host", "username": "username", "password": "password", "default_project": "proj"},
        "logger_config": {"buffer": {"duration_seconds": 1, "count": 2}, "default_level": "info", "threshold_level": "debug"},
        "notify": {
            "buffer_target_per_interval": 20,
            "buffer_interval_seconds": 60,
            "smtp": {"server": "server", "port": 2285, "from_address": "from", "admin_email": ["email"]},
        },
        "providers": {
            "aws": {"secret": "aws_secret", "id": "aws"},
            "docker": {"api_version": "docker_version"},
            "gce": {"client_email": "gce_email"},
            "openstack": {"identity_endpoint": "endpoint"},
            "vsphere": {"host": "vsphere_host"},
        },
        "repotracker": {"revs_to_fetch": 1, "max_revs_to_search": 2, "max_concurrent_requests": 3},
        "scheduler": {"task_finder": "legacy"},
        "service_flags": {"hostinit_disabled": True, "monitor_disabled": True},
        "slack": {"options": {"channel": "#channel"}, "level": "info"},
        "splunk": {"server_url": "server", "token": "token", "channel": "channel"},
        "ui": {
            "url": "url",
            "help_url": "helpurl",
            "http_listen_addr": "addr",
            "secret": "secret",
            "default_project": "mci",
            "cache_templates": True,
            "csrf_key": VALID_CSRF_KEY,
        },
    }
    data.update(overrides)
    return AdminSettings.model_validate(data)
