#!filepath: swarm_timeline/config/app_config.py
import os

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, Field, ValidationError

from .log_config import LogConfig
from .stream_config import StreamConfig
from swarm_timeline.utils.errors import ConfigurationError
from swarm_timeline import logs


def package_root() -> str:
    """
    返回包根目录（基于当前文件位置推导）:
    swarm_timeline/config/app_config.py → swarm_timeline/config → swarm_timeline
    """
    return os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))


def default_config_path() -> str:
    return os.path.join(package_root(), "config", "base.yml")


# env 变量 → (section, key)
ENV_OVERRIDES = {
    "SWARM_TIMELINE_LOG_LEVEL": ("log", "level"),
    "SWARM_TIMELINE_LOG_DIR": ("log", "dir"),
}


class AppConfig(BaseModel):
    log: LogConfig = Field(default_factory=LogConfig)
    stream: StreamConfig = Field(default_factory=StreamConfig)

    @classmethod
    def load(cls, path: str | None = None, env_file: str | None = None) -> "AppConfig":
        """
        加载 YAML 配置 + .env
        - 默认使用包内的 config/base.yml
        - .env 默认从当前工作目录查找
        - 环境变量覆盖 YAML 中的 log.level / log.dir
        """
        # 1) 先加载 .env
        load_dotenv(env_file or os.path.join(os.getcwd(), ".env"))

        # 2) 决定配置文件路径
        if path is None:
            path = default_config_path()

        if not os.path.exists(path):
            raise FileNotFoundError(f"Config file not found: {path}")

        # 3) 读取 YAML
        with open(path, "r", encoding="utf-8") as f:
            try:
                raw = yaml.safe_load(f) or {}
            except yaml.YAMLError as e:
                raise ConfigurationError(f"YAML parse error in {path}: {e}") from e

        if not isinstance(raw, dict):
            raise ConfigurationError(f"Config root must be a mapping: {path}")

        # 4) env 覆盖
        for env_name, (section, key) in ENV_OVERRIDES.items():
            value = os.getenv(env_name)
            if value:
                if not isinstance(raw.get(section), dict):
                    raw[section] = {}
                raw[section][key] = value

        try:
            cfg = cls(**raw)
        except ValidationError as e:
            raise ConfigurationError(f"Invalid config {path}: {e}") from e

        logs.debug(f"[Config] loaded {path}")
        return cfg
