from pydantic import BaseModel, Field
from typing import Literal


class IDEConfig(BaseModel):
    product: str = "RubyMine"
    config_dir: str | None = None


class InterpreterConfig(BaseModel):
    runtime: str = "Ruby"
    scope: str = "shadowenv"
    marker: str | None = None
    shadowenv_path: str | None = None


class RubyArgsConfig(BaseModel):
    workspace_file: str = ".idea/workspace.xml"
    include_paths: list[str] = ["lib", "test", "spec", "test/support"]


class DataSourceConfig(BaseModel):
    driver: Literal["mysql", "postgresql"] = "mysql"
    name: str | None = None
    database: str | None = None
    schemas: list[str] = ["development", "test"]
    host_env: str = "DB_HOST"
    port_env: str = "DB_PORT"
    user_env: str = "DB_USER"
    default_host: str = "127.0.0.1"
    default_port: str | None = None
    default_user: str = "root"
    descriptor_file: str = ".idea/dataSources.xml"
    local_file: str = ".idea/dataSources.local.xml"


class ConfiguratorConfig(BaseModel):
    ide: IDEConfig = Field(default_factory=IDEConfig)
    interpreter: InterpreterConfig = Field(default_factory=InterpreterConfig)
    test_args: RubyArgsConfig = Field(default_factory=RubyArgsConfig)
    datasource: DataSourceConfig = Field(default_factory=DataSourceConfig)
    log_level: Literal["debug", "info", "warn", "error"] = "info"
