"""
运行配置
"""
import os
from dataclasses import dataclass, asdict, replace
from datetime import timedelta
from typing import Any, Dict, Mapping, Optional

from .exceptions import ConfigurationError
from .services.certificate_inspector import DEFAULT_TIMEOUT
from .services.expiry_calculator import DEFAULT_THRESHOLD_DAYS
from .services.scheduler import DEFAULT_CONCURRENCY

ENV_HOSTS_FILE = 'CERT_CHECK_HOSTS_FILE'
ENV_THRESHOLD_DAYS = 'CERT_CHECK_THRESHOLD_DAYS'
ENV_CONCURRENCY = 'CERT_CHECK_CONCURRENCY'
ENV_TIMEOUT = 'CERT_CHECK_TIMEOUT'
ENV_SNS_TOPIC_ARN = 'SNS_TOPIC_ARN'
ENV_LOG_LEVEL = 'LOG_LEVEL'
ENV_NO_COLOR = 'NO_COLOR'


@dataclass(frozen=True)
class CheckerConfig:
    """一次批量检查的配置"""
    hosts_file: Optional[str] = None
    threshold_days: int = DEFAULT_THRESHOLD_DAYS
    concurrency: int = DEFAULT_CONCURRENCY
    timeout: float = DEFAULT_TIMEOUT
    sns_topic_arn: Optional[str] = None
    log_level: str = 'INFO'
    color: Optional[bool] = None

    @property
    def threshold(self) -> timedelta:
        return timedelta(days=self.threshold_days)

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "CheckerConfig":
        """
        从环境变量读取配置

        Args:
            environ: 环境变量，默认为 os.environ

        Returns:
            CheckerConfig: 配置

        Raises:
            ConfigurationError: 数值型环境变量格式无效
        """
        if environ is None:
            environ = os.environ

        return cls(
            hosts_file=environ.get(ENV_HOSTS_FILE) or None,
            threshold_days=_env_number(environ, ENV_THRESHOLD_DAYS, int, DEFAULT_THRESHOLD_DAYS),
            concurrency=_env_number(environ, ENV_CONCURRENCY, int, DEFAULT_CONCURRENCY),
            timeout=_env_number(environ, ENV_TIMEOUT, float, DEFAULT_TIMEOUT),
            sns_topic_arn=environ.get(ENV_SNS_TOPIC_ARN) or None,
            log_level=environ.get(ENV_LOG_LEVEL) or 'INFO',
            color=False if ENV_NO_COLOR in environ else None
        )

    def with_overrides(self, **overrides: Any) -> "CheckerConfig":
        """用命令行参数覆盖配置，值为 None 的参数被忽略"""
        return replace(self, **{key: value for key, value in overrides.items() if value is not None})

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def _env_number(environ: Mapping[str, str], name: str, convert, default):
    value = environ.get(name)
    if value is None or not value.strip():
        return default
    try:
        return convert(value.strip())
    except ValueError as e:
        raise ConfigurationError(f"环境变量 {name} 格式无效: {value!r}") from e
