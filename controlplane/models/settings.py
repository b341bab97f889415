"""集群管理配置模型"""
from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, field_validator


class SMTPConfig(BaseModel):
    server: str = ""
    port: int = 25
    use_ssl: bool = False
    username: str = ""
    password: str = ""
    from_address: str = ""
    admin_email: List[str] = Field(default_factory=list)


class AlertsConfig(BaseModel):
    smtp: SMTPConfig = Field(default_factory=SMTPConfig)


class AmboyConfig(BaseModel):
    name: str = "evergreen"
    db: str = "amboy"
    pool_size_local: int = 2
    pool_size_remote: int = 10
    local_storage: int = 1024


class APIConfig(BaseModel):
    http_listen_addr: str = ""
    github_webhook_secret: str = ""


class CrowdConfig(BaseModel):
    username: str = ""
    password: str = ""
    url: str = ""


class NaiveUser(BaseModel):
    username: str
    display_name: str = ""
    password: str = ""
    email: str = ""


class NaiveAuthConfig(BaseModel):
    users: List[NaiveUser] = Field(default_factory=list)


class GithubAuthConfig(BaseModel):
    client_id: str = ""
    client_secret: str = ""
    users: List[str] = Field(default_factory=list)
    organization: str = ""


class AuthConfig(BaseModel):
    crowd: Optional[CrowdConfig] = None
    naive: Optional[NaiveAuthConfig] = None
    github: Optional[GithubAuthConfig] = None


class ContainerPool(BaseModel):
    id: str
    distro: str
    max_containers: int = 0

    @field_validator("id", "distro")
    @classmethod
    def normalize_text(cls, value: str) -> str:
        return str(value or "").strip()


class ContainerPoolsConfig(BaseModel):
    pools: List[ContainerPool] = Field(default_factory=list)


class HostInitConfig(BaseModel):
    ssh_timeout_secs: int = 120


class JiraConfig(BaseModel):
    host: str = ""
    username: str = ""
    password: str = ""
    default_project: str = ""


class LogBuffering(BaseModel):
    duration_seconds: int = 0
    count: int = 0


class LoggerConfig(BaseModel):
    buffer: LogBuffering = Field(default_factory=LogBuffering)
    default_level: str = "info"
    threshold_level: str = "debug"

    @field_validator("default_level", "threshold_level")
    @classmethod
    def normalize_level(cls, value: str) -> str:
        return str(value or "").strip().lower()


class NotifyConfig(BaseModel):
    buffer_target_per_interval: int = 0
    buffer_interval_seconds: int = 0
    smtp: SMTPConfig = Field(default_factory=SMTPConfig)


class AWSConfig(BaseModel):
    secret: str = ""
    id: str = ""


class DockerConfig(BaseModel):
    api_version: str = ""


class GCEConfig(BaseModel):
    client_email: str = ""
    private_key: str = ""
    private_key_id: str = ""
    token_uri: str = ""


class OpenStackConfig(BaseModel):
    identity_endpoint: str = ""
    username: str = ""
    password: str = ""
    domain_name: str = ""
    project_name: str = ""
    project_id: str = ""
    region: str = ""


class VSphereConfig(BaseModel):
    host: str = ""
    username: str = ""
    password: str = ""


class CloudProviders(BaseModel):
    aws: AWSConfig = Field(default_factory=AWSConfig)
    docker: DockerConfig = Field(default_factory=DockerConfig)
    gce: GCEConfig = Field(default_factory=GCEConfig)
    openstack: OpenStackConfig = Field(default_factory=OpenStackConfig)
    vsphere: VSphereConfig = Field(default_factory=VSphereConfig)


class RepoTrackerConfig(BaseModel):
    revs_to_fetch: int = 10
    max_revs_to_search: int = 50
    max_concurrent_requests: int = 10


class SchedulerConfig(BaseModel):
    task_finder: str = "legacy"

    @field_validator("task_finder")
    @classmethod
    def normalize_task_finder(cls, value: str) -> str:
        return str(value or "").strip().lower()


class ServiceFlags(BaseModel):
    task_dispatch_disabled: bool = False
    hostinit_disabled: bool = False
    monitor_disabled: bool = False
    alerts_disabled: bool = False
    agent_start_disabled: bool = False
    repotracker_disabled: bool = False
    scheduler_disabled: bool = False
    github_pr_testing_disabled: bool = False
    repotracker_push_event_disabled: bool = False
    cli_updates_disabled: bool = False
    event_processing_disabled: bool = False
    jira_notifications_disabled: bool = False
    slack_notifications_disabled: bool = False
    email_notifications_disabled: bool = False
    webhook_notifications_disabled: bool = False
    github_status_api_disabled: bool = False


class SlackOptions(BaseModel):
    channel: str = ""
    hostname: str = ""
    name: str = ""
    username: str = ""
    icon_url: str = ""


class SlackConfig(BaseModel):
    options: SlackOptions = Field(default_factory=SlackOptions)
    token: str = ""
    level: str = "warning"


class SplunkConfig(BaseModel):
    server_url: str = ""
    token: str = ""
    channel: str = ""


class UIConfig(BaseModel):
    url: str = ""
    help_url: str = ""
    http_listen_addr: str = ""
    secret: str = ""
    default_project: str = ""
    cache_templates: bool = False
    csrf_key: str = ""


class AdminSettings(BaseModel):
    api_url: str = ""
    banner: str = ""
    banner_theme: str = ""
    client_binaries_dir: str = ""
    expansions: Dict[str, str] = Field(default_factory=dict)
    keys: Dict[str, str] = Field(default_factory=dict)
    log_path: str = ""
    plugins: Dict[str, Dict[str, Any]] = Field(default_factory=dict)
    super_users: List[str] = Field(default_factory=list)

    alerts: AlertsConfig = Field(default_factory=AlertsConfig)
    amboy: AmboyConfig = Field(default_factory=AmboyConfig)
    api: APIConfig = Field(default_factory=APIConfig)
    auth: AuthConfig = Field(default_factory=AuthConfig)
    container_pools: ContainerPoolsConfig = Field(default_factory=ContainerPoolsConfig)
    hostinit: HostInitConfig = Field(default_factory=HostInitConfig)
    jira: JiraConfig = Field(default_factory=JiraConfig)
    logger_config: LoggerConfig = Field(default_factory=LoggerConfig)
    notify: NotifyConfig = Field(default_factory=NotifyConfig)
    providers: CloudProviders = Field(default_factory=CloudProviders)
    repotracker: RepoTrackerConfig = Field(default_factory=RepoTrackerConfig)
    scheduler: SchedulerConfig = Field(default_factory=SchedulerConfig)
    service_flags: ServiceFlags = Field(default_factory=ServiceFlags)
    slack: SlackConfig = Field(default_factory=SlackConfig)
    splunk: SplunkConfig = Field(default_factory=SplunkConfig)
    ui: UIConfig = Field(default_factory=UIConfig)

    @field_validator("api_url")
    @classmethod
    def normalize_api_url(cls, value: str) -> str:
        return str(value or "").strip()


class AdminSettingsEnvelope(BaseModel):
    data: AdminSettings
    updated_at: Optional[str] = None
    warnings: List[str] = Field(default_factory=list)
