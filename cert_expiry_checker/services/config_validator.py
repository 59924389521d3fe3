"""
配置验证服务
"""
import logging
import re
from typing import Any, Dict

from ..config import CheckerConfig

# 超过这个天数的警告阈值大概率是配置错误
MAX_REASONABLE_THRESHOLD_DAYS = 365
SNS_TOPIC_ARN_PATTERN = re.compile(r'^arn:aws[a-z-]*:sns:[a-z0-9-]+:\d{12}:[a-zA-Z0-9_.-]+$')
LOG_LEVELS = {'CRITICAL', 'ERROR', 'WARNING', 'INFO', 'DEBUG'}


class ConfigValidator:
    """配置验证器"""

    def __init__(self):
        """初始化配置验证器"""
        self.logger = logging.getLogger(__name__)

    def validate(self, config: CheckerConfig) -> Dict[str, Any]:
        """
        验证所有配置

        Args:
            config: 待验证的配置

        Returns:
            Dict[str, Any]: 验证结果
        """
        validation_result = {
            'is_valid': True,
            'errors': [],
            'warnings': []
        }

        for check in (self.validate_hosts_file,
                      self.validate_threshold,
                      self.validate_probe_settings,
                      self.validate_sns_configuration,
                      self.validate_log_level):
            result = check(config)
            validation_result['errors'].extend(result['errors'])
            validation_result['warnings'].extend(result['warnings'])

        if validation_result['errors']:
            validation_result['is_valid'] = False

        for warning in validation_result['warnings']:
            self.logger.warning(warning)

        return validation_result

    def validate_hosts_file(self, config: CheckerConfig) -> Dict[str, Any]:
        """验证主机列表文件配置（文件是否可读在加载时检查）"""
        result = {'errors': [], 'warnings': []}
        if not config.hosts_file:
            result['errors'].append("未指定主机列表文件")
        return result

    def validate_threshold(self, config: CheckerConfig) -> Dict[str, Any]:
        """
        验证警告阈值

        Args:
            config: 配置

        Returns:
            Dict[str, Any]: 验证结果
        """
        result = {'errors': [], 'warnings': []}

        if config.threshold_days < 0:
            result['errors'].append(f"警告阈值不能为负数: {config.threshold_days}天")
        elif config.threshold_days > MAX_REASONABLE_THRESHOLD_DAYS:
            result['warnings'].append(
                f"警告阈值过大: {config.threshold_days}天，几乎所有证书都会被标记为即将过期"
            )

        return result

    def validate_probe_settings(self, config: CheckerConfig) -> Dict[str, Any]:
        """
        验证并发数和超时时间

        Args:
            config: 配置

        Returns:
            Dict[str, Any]: 验证结果
        """
        result = {'errors': [], 'warnings': []}

        if config.concurrency < 1:
            result['errors'].append(f"并发数必须大于0: {config.concurrency}")

        if config.timeout <= 0:
            result['errors'].append(f"超时时间必须大于0: {config.timeout}秒")

        return result

    def validate_sns_configuration(self, config: CheckerConfig) -> Dict[str, Any]:
        """
        验证SNS配置（未配置时不发送通知）

        Args:
            config: 配置

        Returns:
            Dict[str, Any]: 验证结果
        """
        result = {'errors': [], 'warnings': []}

        if config.sns_topic_arn and not SNS_TOPIC_ARN_PATTERN.match(config.sns_topic_arn):
            result['errors'].append(f"SNS主题ARN格式无效: {config.sns_topic_arn}")

        return result

    def validate_log_level(self, config: CheckerConfig) -> Dict[str, Any]:
        result = {'errors': [], 'warnings': []}
        if config.log_level.upper() not in LOG_LEVELS:
            result['warnings'].append(f"未知的日志级别: {config.log_level}，使用INFO")
        return result

    def get_configuration_summary(self, config: CheckerConfig) -> str:
        """
        获取配置摘要

        Args:
            config: 配置

        Returns:
            str: 配置摘要文本
        """
        validation_result = self.validate(config)

        lines = [
            "配置验证摘要",
            "=" * 30
        ]

        if validation_result['is_valid']:
            lines.append("配置验证通过")
        else:
            lines.append("配置验证失败")

        if validation_result['errors']:
            lines.append("\n错误:")
            for error in validation_result['errors']:
                lines.append(f"  • {error}")

        if validation_result['warnings']:
            lines.append("\n警告:")
            for warning in validation_result['warnings']:
                lines.append(f"  • {warning}")

        return "\n".join(lines)
