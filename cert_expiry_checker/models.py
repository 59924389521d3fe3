"""
数据模型定义
"""
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional, List


class ExpiryStatus(Enum):
    """证书检查分类"""
    EXPIRED = "expired"
    EXPIRING_SOON = "expiring_soon"
    HEALTHY = "healthy"
    ERROR = "error"


@dataclass(frozen=True)
class ProbeResult:
    """单个主机的探测结果"""
    host: str
    status: ExpiryStatus
    relative_time: str = ""
    error_message: Optional[str] = None
    expiry_date: Optional[datetime] = None

    @property
    def is_error(self) -> bool:
        return self.status is ExpiryStatus.ERROR

    @property
    def is_expired(self) -> bool:
        return self.status is ExpiryStatus.EXPIRED

    @property
    def is_expiring_soon(self) -> bool:
        return self.status is ExpiryStatus.EXPIRING_SOON

    @property
    def is_healthy(self) -> bool:
        return self.status is ExpiryStatus.HEALTHY


@dataclass
class CheckSummary:
    """检查结果统计"""
    total_hosts: int
    healthy_count: int
    expired_hosts: List[ProbeResult] = field(default_factory=list)
    expiring_hosts: List[ProbeResult] = field(default_factory=list)
    failed_hosts: List[ProbeResult] = field(default_factory=list)
    execution_time: float = 0.0

    @property
    def successful_checks(self) -> int:
        return self.total_hosts - len(self.failed_hosts)

    @property
    def needs_attention(self) -> bool:
        return bool(self.expired_hosts or self.expiring_hosts or self.failed_hosts)
