"""
证书过期计算服务
"""
from datetime import datetime, timezone, timedelta
from typing import List, Optional

import humanize

from ..models import ExpiryStatus, ProbeResult, CheckSummary

DEFAULT_THRESHOLD_DAYS = 7


def classify_expiry(now: datetime, not_after: datetime, threshold: timedelta) -> ExpiryStatus:
    """
    根据证书的过期时间进行分类

    not_after == now + threshold 时判定为健康（严格不等式）。

    Args:
        now: 当前时间
        not_after: 证书 "not valid after" 时间
        threshold: 提前警告时长

    Returns:
        ExpiryStatus: 分类结果
    """
    if now > not_after:
        return ExpiryStatus.EXPIRED
    if now + threshold > not_after:
        return ExpiryStatus.EXPIRING_SOON
    return ExpiryStatus.HEALTHY


class ExpiryCalculator:
    """证书过期计算器"""

    def __init__(self, threshold: Optional[timedelta] = None):
        """
        初始化过期计算器

        Args:
            threshold: 提前警告时长，默认7天
        """
        if threshold is None:
            threshold = timedelta(days=DEFAULT_THRESHOLD_DAYS)
        self.threshold = threshold

    @classmethod
    def from_days(cls, days: int) -> "ExpiryCalculator":
        return cls(timedelta(days=days))

    def classify(self, not_after: datetime, now: Optional[datetime] = None) -> ExpiryStatus:
        """
        判断证书状态

        Args:
            not_after: 证书过期时间
            now: 当前时间，默认为当前UTC时间

        Returns:
            ExpiryStatus: 分类结果
        """
        now = now or datetime.now(timezone.utc)
        return classify_expiry(now, not_after, self.threshold)

    def describe(self, not_after: datetime, now: Optional[datetime] = None) -> str:
        """
        生成相对时间描述，例如 "2 days from now" 或 "3 hours ago"

        Args:
            not_after: 证书过期时间
            now: 当前时间，默认为当前UTC时间

        Returns:
            str: 相对时间描述
        """
        now = now or datetime.now(timezone.utc)
        return humanize.naturaltime(not_after, when=now)

    def summarize(self, results: List[ProbeResult], execution_time: float = 0.0) -> CheckSummary:
        """
        汇总一次批量检查的结果

        Args:
            results: 所有主机的探测结果
            execution_time: 执行时间（秒）

        Returns:
            CheckSummary: 汇总结果
        """
        return CheckSummary(
            total_hosts=len(results),
            healthy_count=len([r for r in results if r.is_healthy]),
            expired_hosts=[r for r in results if r.is_expired],
            expiring_hosts=[r for r in results if r.is_expiring_soon],
            failed_hosts=[r for r in results if r.is_error],
            execution_time=execution_time
        )

    def get_expiry_summary(self, results: List[ProbeResult]) -> str:
        """
        获取过期状态摘要

        Args:
            results: 探测结果列表

        Returns:
            str: 摘要信息
        """
        summary = self.summarize(results)

        summary_parts = [
            f"总计: {summary.total_hosts} 个主机",
            f"成功: {summary.successful_checks} 个",
            f"失败: {len(summary.failed_hosts)} 个"
        ]

        if summary.expired_hosts:
            summary_parts.append(f"已过期: {len(summary.expired_hosts)} 个")

        if summary.expiring_hosts:
            summary_parts.append(
                f"即将过期({self.threshold.days}天内): {len(summary.expiring_hosts)} 个"
            )

        if summary.healthy_count:
            summary_parts.append(f"健康: {summary.healthy_count} 个")

        return ", ".join(summary_parts)
