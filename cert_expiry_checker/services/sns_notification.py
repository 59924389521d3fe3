"""
SNS通知服务
"""
import os
from typing import List, Optional
import logging
from datetime import datetime, timezone

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from ..models import ProbeResult
from .expiry_calculator import ExpiryCalculator

DEFAULT_REGION = 'us-east-1'
# SNS 邮件主题的长度上限
MAX_SUBJECT_LENGTH = 100


class SNSNotificationService:
    """批量检查结束后发送一条汇总通知"""

    def __init__(self, topic_arn: Optional[str] = None, region_name: Optional[str] = None,
                 sns_client=None):
        """
        初始化SNS通知服务

        Args:
            topic_arn: SNS主题ARN，如果为None则从环境变量读取
            region_name: AWS区域名称，如果为None则从ARN或环境变量推断
            sns_client: 已创建的SNS客户端（测试时注入）
        """
        self.topic_arn = topic_arn or os.getenv('SNS_TOPIC_ARN')

        if region_name:
            self.region_name = region_name
        elif self.topic_arn and self.topic_arn.startswith('arn:aws:sns:'):
            # 从SNS ARN中提取区域
            self.region_name = self.topic_arn.split(':')[3]
        else:
            self.region_name = os.getenv('AWS_REGION', DEFAULT_REGION)

        self.logger = logging.getLogger(__name__)
        self.sns_client = sns_client or boto3.client('sns', region_name=self.region_name)

    def send_expiry_notification(self, results: List[ProbeResult]) -> bool:
        """
        发送证书状态汇总通知

        所有证书都健康时不发送。

        Args:
            results: 本次检查的所有结果

        Returns:
            bool: 发送是否成功（无需发送时也返回 True）
        """
        attention = [r for r in results if not r.is_healthy]
        if not attention:
            self.logger.info("所有证书状态正常，跳过通知发送")
            return True

        if not self.topic_arn:
            self.logger.error("SNS主题ARN未配置")
            return False

        subject = self._format_subject(attention)
        message = self.format_notification_content(attention)

        try:
            response = self.sns_client.publish(
                TopicArn=self.topic_arn,
                Subject=subject,
                Message=message
            )
        except ClientError as e:
            error_code = e.response['Error']['Code']
            error_message = e.response['Error']['Message']
            self.logger.error(f"SNS发送失败 - {error_code}: {error_message}")
            return False
        except BotoCoreError as e:
            self.logger.error(f"发送SNS通知时发生错误: {str(e)}")
            return False

        self.logger.info(f"SNS通知发送成功，MessageId: {response.get('MessageId')}")
        return True

    def format_notification_content(self, results: List[ProbeResult]) -> str:
        """
        格式化通知内容

        Args:
            results: 需要关注的结果

        Returns:
            str: 通知正文
        """
        summary = ExpiryCalculator().summarize(results)

        lines = [
            "TLS证书过期检查报告",
            "=" * 30,
            f"检查时间: {datetime.now(timezone.utc).strftime('%Y-%m-%d %H:%M:%S')} UTC",
            ""
        ]

        if summary.expired_hosts:
            lines.append("已过期证书:")
            for result in summary.expired_hosts:
                lines.append(f"• {result.host}")
                lines.append(f"  过期时间: {self._format_date(result)} ({result.relative_time})")
            lines.append("")

        if summary.expiring_hosts:
            lines.append("即将过期证书:")
            for result in summary.expiring_hosts:
                lines.append(f"• {result.host}")
                lines.append(f"  过期时间: {self._format_date(result)} ({result.relative_time})")
            lines.append("")

        if summary.failed_hosts:
            lines.append("检查失败:")
            for result in summary.failed_hosts:
                lines.append(f"• {result.host}")
                lines.append(f"  错误: {result.error_message}")
            lines.append("")

        lines.append("此消息由TLS证书过期检查工具自动发送。")
        return "\n".join(lines)

    def _format_subject(self, results: List[ProbeResult]) -> str:
        expired_count = len([r for r in results if r.is_expired])
        expiring_count = len([r for r in results if r.is_expiring_soon])
        failed_count = len([r for r in results if r.is_error])

        parts = []
        if expired_count:
            parts.append(f"{expired_count}个已过期")
        if expiring_count:
            parts.append(f"{expiring_count}个即将过期")
        if failed_count:
            parts.append(f"{failed_count}个检查失败")

        return f"TLS证书警报: {', '.join(parts)}"[:MAX_SUBJECT_LENGTH]

    def _format_date(self, result: ProbeResult) -> str:
        if result.expiry_date is None:
            return "未知"
        return result.expiry_date.strftime('%Y-%m-%d %H:%M:%S')
