"""
服务接口定义
"""
from abc import ABC, abstractmethod
from datetime import timedelta
from typing import List

from .models import ProbeResult, CheckSummary


class HostListLoaderInterface(ABC):
    """主机列表加载器接口"""

    @abstractmethod
    def get_hosts(self) -> List[str]:
        """获取主机列表"""
        pass


class CertificateInspectorInterface(ABC):
    """证书检查器接口"""

    @abstractmethod
    def inspect(self, host: str, threshold: timedelta) -> ProbeResult:
        """检查单个主机的TLS证书"""
        pass


class ReporterInterface(ABC):
    """结果输出接口"""

    @abstractmethod
    def report(self, result: ProbeResult):
        """输出单个主机的检查结果"""
        pass


class LoggerServiceInterface(ABC):
    """日志服务接口"""

    @abstractmethod
    def log_check_start(self, host_count: int):
        """记录检查开始"""
        pass

    @abstractmethod
    def log_probe_result(self, result: ProbeResult):
        """记录单个探测结果"""
        pass

    @abstractmethod
    def log_check_end(self, summary: CheckSummary):
        """记录检查结束"""
        pass
