"""
命令行入口
"""
import argparse
import sys
import time
from typing import List, Optional

from .config import CheckerConfig
from .exceptions import ConfigurationError, HostListError
from .interfaces import CertificateInspectorInterface, ReporterInterface
from .models import CheckSummary
from .services.certificate_inspector import CertificateInspector
from .services.config_validator import ConfigValidator
from .services.console_reporter import ConsoleReporter
from .services.expiry_calculator import ExpiryCalculator
from .services.host_loader import HostListLoader
from .services.logger import LoggerService
from .services.scheduler import Scheduler
from .services.sns_notification import SNSNotificationService

EXIT_OK = 0
EXIT_INPUT_ERROR = 1
EXIT_USAGE = 2


class CertificateExpiryChecker:
    """TLS证书过期检查主类"""

    def __init__(self,
                 config: CheckerConfig,
                 reporter: Optional[ReporterInterface] = None,
                 inspector: Optional[CertificateInspectorInterface] = None,
                 logger_service: Optional[LoggerService] = None,
                 notification_service: Optional[SNSNotificationService] = None):
        """
        初始化检查器

        Args:
            config: 运行配置
            reporter: 结果输出，默认输出到控制台
            inspector: 证书检查器
            logger_service: 日志服务
            notification_service: SNS通知服务，默认在配置了主题ARN时创建
        """
        self.config = config
        self.logger_service = logger_service or LoggerService(log_level=config.log_level)
        self.host_loader = HostListLoader(config.hosts_file)
        self.inspector = inspector or CertificateInspector(timeout=config.timeout)
        self.scheduler = Scheduler(self.inspector, config.threshold, config.concurrency)
        self.reporter = reporter or ConsoleReporter(color=config.color)
        self.expiry_calculator = ExpiryCalculator.from_days(config.threshold_days)

        self.notification_service = notification_service
        if self.notification_service is None and config.sns_topic_arn:
            self.notification_service = SNSNotificationService(topic_arn=config.sns_topic_arn)

    def execute(self) -> CheckSummary:
        """
        执行一次批量检查

        Returns:
            CheckSummary: 检查结果汇总

        Raises:
            HostListError: 主机列表无法读取，此时不会探测任何主机
        """
        self.logger_service.log_configuration_info(self.config.to_dict())

        hosts = self.host_loader.get_hosts()
        if not hosts:
            self.logger_service.logger.warning("没有找到要检查的主机")

        self.logger_service.log_check_start(len(hosts))
        start_time = time.monotonic()

        results = self.scheduler.run_all(hosts, self.reporter)

        summary = self.expiry_calculator.summarize(results, time.monotonic() - start_time)
        for result in results:
            self.logger_service.log_probe_result(result)
        self.logger_service.log_check_end(summary)
        self.logger_service.log_execution_summary(summary)

        if self.notification_service is not None and summary.needs_attention:
            sent = self.notification_service.send_expiry_notification(results)
            if not sent:
                self.logger_service.logger.error("SNS汇总通知发送失败")

        return summary


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='cert-expiry-checker',
        description='Check TLS certificates of a list of hosts for expiration.'
    )
    parser.add_argument('--urls', metavar='FILE',
                        help='path to file containing the hosts, one per line')
    parser.add_argument('-d', '--days', type=int, metavar='NUM',
                        help='warn of certificate expiration due in NUM days (default: 7)')
    parser.add_argument('-c', '--concurrency', type=int, metavar='N',
                        help='maximum number of concurrent probes (default: 4)')
    parser.add_argument('--timeout', type=float, metavar='SECONDS',
                        help='per-host connect and handshake deadline (default: 15)')
    parser.add_argument('--sns-topic-arn', metavar='ARN',
                        help='publish a summary of unhealthy hosts to this SNS topic')
    parser.add_argument('--log-level', metavar='LEVEL',
                        help='logging level (default: INFO)')
    parser.add_argument('--no-color', action='store_true',
                        help='disable colored output')
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """
    命令行入口

    Args:
        argv: 命令行参数，默认为 sys.argv[1:]

    Returns:
        int: 进程退出码
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        config = CheckerConfig.from_env().with_overrides(
            hosts_file=args.urls,
            threshold_days=args.days,
            concurrency=args.concurrency,
            timeout=args.timeout,
            sns_topic_arn=args.sns_topic_arn,
            log_level=args.log_level,
            color=False if args.no_color else None
        )
    except ConfigurationError as e:
        parser.print_usage(sys.stderr)
        print(f"{parser.prog}: error: {e}", file=sys.stderr)
        return EXIT_USAGE

    logger_service = LoggerService(log_level=config.log_level)

    validation = ConfigValidator().validate(config)
    if not validation['is_valid']:
        parser.print_usage(sys.stderr)
        for error in validation['errors']:
            print(f"{parser.prog}: error: {error}", file=sys.stderr)
        return EXIT_USAGE

    checker = CertificateExpiryChecker(config, logger_service=logger_service)
    try:
        checker.execute()
    except HostListError as e:
        logger_service.logger.error(str(e))
        return EXIT_INPUT_ERROR

    return EXIT_OK


if __name__ == '__main__':
    sys.exit(main())
