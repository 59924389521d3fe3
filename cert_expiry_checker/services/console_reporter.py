"""
控制台输出服务
"""
import sys
import threading
from typing import Optional, TextIO

from ..interfaces import ReporterInterface
from ..models import ExpiryStatus, ProbeResult

RED = "\033[1;31m"
YELLOW = "\033[1;33m"
GREEN = "\033[1;32m"
RESET = "\033[0m"

STATUS_COLORS = {
    ExpiryStatus.EXPIRED: RED,
    ExpiryStatus.EXPIRING_SOON: YELLOW,
    ExpiryStatus.HEALTHY: GREEN,
    ExpiryStatus.ERROR: RED,
}


class ConsoleReporter(ReporterInterface):
    """按分类着色，每个主机输出一行"""

    def __init__(self, stream: Optional[TextIO] = None, color: Optional[bool] = None):
        """
        初始化控制台输出

        Args:
            stream: 输出流，默认为标准输出
            color: 是否着色，None 表示仅在终端中着色
        """
        self.stream = stream or sys.stdout
        if color is None:
            isatty = getattr(self.stream, 'isatty', None)
            color = bool(isatty and isatty())
        self.color = color
        self._lock = threading.Lock()

    def report(self, result: ProbeResult):
        line = f"{result.host}: {self._colorize(result.status, self.format_message(result))}"
        with self._lock:
            self.stream.write(line + "\n")
            self.stream.flush()

    def format_message(self, result: ProbeResult) -> str:
        """
        生成结果描述（不含主机名和颜色）

        Args:
            result: 探测结果

        Returns:
            str: 结果描述
        """
        if result.status is ExpiryStatus.EXPIRED:
            return f"expired ({result.relative_time})"
        if result.status is ExpiryStatus.EXPIRING_SOON:
            return f"expiring {result.relative_time}"
        if result.status is ExpiryStatus.HEALTHY:
            return f"ok (will expire {result.relative_time})"
        return result.error_message or "unknown error"

    def _colorize(self, status: ExpiryStatus, text: str) -> str:
        if not self.color:
            return text
        return f"{STATUS_COLORS[status]}{text}{RESET}"
