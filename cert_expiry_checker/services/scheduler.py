"""
并发探测调度服务
"""
import threading
from concurrent.futures import ThreadPoolExecutor
from datetime import timedelta
from typing import Iterable, List, Optional
import logging

from ..interfaces import CertificateInspectorInterface, ReporterInterface
from ..models import ExpiryStatus, ProbeResult
from .certificate_inspector import CertificateInspector
from .expiry_calculator import DEFAULT_THRESHOLD_DAYS

DEFAULT_CONCURRENCY = 4


class Scheduler:
    """
    有界并发调度器

    对输入序列中的每个主机启动一个探测任务，同时运行的任务不超过 max_concurrency 个。
    调度循环在获取并发许可之前会阻塞，所有任务完成后 run_all 才返回。
    """

    def __init__(self,
                 inspector: Optional[CertificateInspectorInterface] = None,
                 threshold: Optional[timedelta] = None,
                 max_concurrency: int = DEFAULT_CONCURRENCY):
        """
        初始化调度器

        Args:
            inspector: 证书检查器
            threshold: 提前警告时长，默认7天
            max_concurrency: 最大并发探测数，默认4
        """
        if max_concurrency < 1:
            raise ValueError(f"最大并发数必须大于0: {max_concurrency}")

        self.inspector = inspector or CertificateInspector()
        self.threshold = threshold if threshold is not None else timedelta(days=DEFAULT_THRESHOLD_DAYS)
        self.max_concurrency = max_concurrency
        self.logger = logging.getLogger(__name__)

    def run_all(self, hosts: Iterable[str], reporter: ReporterInterface) -> List[ProbeResult]:
        """
        探测所有主机

        每个主机的结果在完成时交给 reporter；返回值按输入顺序排列。

        Args:
            hosts: 主机地址序列
            reporter: 结果输出

        Returns:
            List[ProbeResult]: 每个主机恰好一个结果
        """
        limiter = threading.BoundedSemaphore(self.max_concurrency)
        futures = []

        with ThreadPoolExecutor(max_workers=self.max_concurrency,
                                thread_name_prefix="cert-probe") as executor:
            for host in hosts:
                limiter.acquire()
                try:
                    futures.append(executor.submit(self._probe, host, reporter, limiter))
                except BaseException:
                    limiter.release()
                    raise

        # 线程池退出时已等待所有任务完成
        results = [future.result() for future in futures]
        self.logger.debug(f"调度完成，共 {len(results)} 个结果")
        return results

    def _probe(self, host: str, reporter: ReporterInterface,
               limiter: threading.BoundedSemaphore) -> ProbeResult:
        """单个探测任务：检查、输出、释放许可"""
        try:
            try:
                result = self.inspector.inspect(host, self.threshold)
            except Exception as e:
                self.logger.exception(f"检查主机 {host} 时发生意外错误")
                result = ProbeResult(
                    host=host,
                    status=ExpiryStatus.ERROR,
                    error_message=f"{type(e).__name__}: {str(e)}"
                )

            try:
                reporter.report(result)
            except Exception:
                self.logger.exception(f"输出主机 {host} 的结果时发生错误")

            return result
        finally:
            limiter.release()
