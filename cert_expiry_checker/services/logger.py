"""
日志服务
"""
import os
import logging
from datetime import datetime, timezone
from typing import Dict, Any, Optional

from ..interfaces import LoggerServiceInterface
from ..models import CheckSummary, ProbeResult
from .error_handler import ProbeErrorHandler

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
# 摘要中最多列出的错误数量
MAX_LISTED_ERRORS = 5


class LoggerService(LoggerServiceInterface):
    """日志服务实现"""

    def __init__(self, logger_name: str = "cert_expiry_checker", log_level: Optional[str] = None):
        """
        初始化日志服务

        Args:
            logger_name: 日志器名称
            log_level: 日志级别，如果为None则从环境变量读取
        """
        self.logger_name = logger_name
        self.log_level = log_level or os.getenv('LOG_LEVEL', 'INFO')

        self.logger = logging.getLogger(logger_name)
        self._configure_logger()

        self.start_time: Optional[datetime] = None
        self.end_time: Optional[datetime] = None

    def _configure_logger(self):
        """配置日志器"""
        level = getattr(logging, self.log_level.upper(), logging.INFO)
        self.logger.setLevel(level)

        # 避免重复添加处理器
        if not self.logger.handlers:
            # 输出到标准错误，不与结果输出混在一起
            handler = logging.StreamHandler()
            handler.setLevel(level)
            handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt='%Y-%m-%d %H:%M:%S'))
            self.logger.addHandler(handler)

        self.logger.propagate = False

    def log_check_start(self, host_count: int):
        """
        记录检查开始

        Args:
            host_count: 要检查的主机数量
        """
        self.start_time = datetime.now(timezone.utc)
        self.logger.info(f"开始TLS证书检查，共 {host_count} 个主机")
        self.logger.debug(f"检查开始时间: {self.start_time.isoformat()}")

    def log_probe_result(self, result: ProbeResult):
        """
        记录单个探测结果

        Args:
            result: 探测结果
        """
        if result.is_error:
            self.logger.error(f"证书检查失败 - 主机: {result.host}, 错误: {result.error_message}")
        elif result.is_expired:
            self.logger.warning(f"证书已过期 - 主机: {result.host}, 过期时间: {result.relative_time}")
        elif result.is_expiring_soon:
            self.logger.warning(f"证书即将过期 - 主机: {result.host}, 过期时间: {result.relative_time}")
        else:
            self.logger.debug(f"证书正常 - 主机: {result.host}, 过期时间: {result.relative_time}")

    def log_check_end(self, summary: CheckSummary):
        """
        记录检查结束

        Args:
            summary: 检查结果汇总
        """
        self.end_time = datetime.now(timezone.utc)
        self.logger.info(
            f"TLS证书检查完成: 总计 {summary.total_hosts} 个主机, "
            f"健康 {summary.healthy_count} 个, "
            f"即将过期 {len(summary.expiring_hosts)} 个, "
            f"已过期 {len(summary.expired_hosts)} 个, "
            f"失败 {len(summary.failed_hosts)} 个, "
            f"耗时 {summary.execution_time:.2f} 秒"
        )

    def log_configuration_info(self, config: Dict[str, Any]):
        """
        记录配置信息

        Args:
            config: 配置信息字典
        """
        safe_config = self._sanitize_config(config)

        self.logger.info("系统配置信息:")
        for key, value in safe_config.items():
            self.logger.info(f"  {key}: {value}")

    def _sanitize_config(self, config: Dict[str, Any]) -> Dict[str, Any]:
        """
        隐藏配置中的敏感信息（SNS主题ARN只保留区域和主题名）

        Args:
            config: 原始配置

        Returns:
            Dict[str, Any]: 清理后的配置
        """
        safe_config = {}
        for key, value in config.items():
            if key.lower().endswith('topic_arn') and isinstance(value, str) and value:
                parts = value.split(':')
                if len(parts) >= 6:
                    value = f"{':'.join(parts[:3])}:{parts[3]}:***:{parts[-1]}"
                else:
                    value = "***"
            safe_config[key] = value
        return safe_config

    def get_execution_summary(self, summary: CheckSummary) -> Dict[str, Any]:
        """
        获取执行摘要

        Args:
            summary: 检查结果汇总

        Returns:
            Dict[str, Any]: 执行摘要信息
        """
        error_list = [
            {'error_type': (r.error_message or 'Unknown').split(':', 1)[0], 'host': r.host}
            for r in summary.failed_hosts
        ]
        error_statistics = ProbeErrorHandler().get_error_statistics(error_list)

        return {
            'start_time': self.start_time.isoformat() if self.start_time else None,
            'end_time': self.end_time.isoformat() if self.end_time else None,
            'duration_seconds': summary.execution_time,
            'total_hosts': summary.total_hosts,
            'successful_checks': summary.successful_checks,
            'failed_checks': len(summary.failed_hosts),
            'success_rate': (
                summary.successful_checks / summary.total_hosts
                if summary.total_hosts > 0 else 0
            ),
            'error_types': error_statistics['error_types'],
            'errors': [
                {'host': r.host, 'error_message': r.error_message}
                for r in summary.failed_hosts
            ]
        }

    def log_execution_summary(self, summary: CheckSummary):
        """记录执行摘要"""
        execution_summary = self.get_execution_summary(summary)

        self.logger.info("=" * 50)
        self.logger.info("执行摘要")
        self.logger.info("=" * 50)
        self.logger.info(f"执行时长: {execution_summary['duration_seconds']:.2f} 秒")
        self.logger.info(f"总主机数: {execution_summary['total_hosts']}")
        self.logger.info(f"成功检查: {execution_summary['successful_checks']}")
        self.logger.info(f"失败检查: {execution_summary['failed_checks']}")
        self.logger.info(f"成功率: {execution_summary['success_rate']:.1%}")

        errors = execution_summary['errors']
        if errors:
            for error_type, count in execution_summary['error_types'].items():
                self.logger.info(f"  {error_type}: {count} 个")
            for i, error in enumerate(errors[:MAX_LISTED_ERRORS], 1):
                self.logger.info(f"  错误 {i}: {error['host']} - {error['error_message']}")

            if len(errors) > MAX_LISTED_ERRORS:
                self.logger.info(f"  ... 还有 {len(errors) - MAX_LISTED_ERRORS} 个错误")

        self.logger.info("=" * 50)
