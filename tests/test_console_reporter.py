"""
控制台输出测试
"""
from io import StringIO

from cert_expiry_checker.services.console_reporter import ConsoleReporter, RED, YELLOW, GREEN, RESET
from cert_expiry_checker.models import ExpiryStatus, ProbeResult


class TestConsoleReporter:
    """控制台输出测试类"""

    def setup_method(self):
        """测试前准备"""
        self.stream = StringIO()
        self.reporter = ConsoleReporter(stream=self.stream, color=False)

    def test_healthy_line(self):
        """测试健康证书的输出"""
        self.reporter.report(ProbeResult(host="example.com", status=ExpiryStatus.HEALTHY,
                                         relative_time="3 months from now"))

        assert self.stream.getvalue() == "example.com: ok (will expire 3 months from now)\n"

    def test_expiring_line(self):
        """测试即将过期证书的输出"""
        self.reporter.report(ProbeResult(host="example.com", status=ExpiryStatus.EXPIRING_SOON,
                                         relative_time="2 days from now"))

        assert self.stream.getvalue() == "example.com: expiring 2 days from now\n"

    def test_expired_line(self):
        """测试已过期证书的输出"""
        self.reporter.report(ProbeResult(host="example.com", status=ExpiryStatus.EXPIRED,
                                         relative_time="a day ago"))

        assert self.stream.getvalue() == "example.com: expired (a day ago)\n"

    def test_error_line(self):
        """测试检查失败的输出"""
        self.reporter.report(ProbeResult(host="down.example", status=ExpiryStatus.ERROR,
                                         error_message="ConnectError: Connection refused"))

        assert self.stream.getvalue() == "down.example: ConnectError: Connection refused\n"

    def test_colored_output(self):
        """测试着色输出"""
        reporter = ConsoleReporter(stream=self.stream, color=True)

        reporter.report(ProbeResult(host="a.com", status=ExpiryStatus.EXPIRED, relative_time="a day ago"))
        reporter.report(ProbeResult(host="b.com", status=ExpiryStatus.EXPIRING_SOON, relative_time="2 days from now"))
        reporter.report(ProbeResult(host="c.com", status=ExpiryStatus.HEALTHY, relative_time="a year from now"))

        lines = self.stream.getvalue().splitlines()
        assert lines[0] == f"a.com: {RED}expired (a day ago){RESET}"
        assert lines[1] == f"b.com: {YELLOW}expiring 2 days from now{RESET}"
        assert lines[2] == f"c.com: {GREEN}ok (will expire a year from now){RESET}"

    def test_color_disabled_for_non_tty(self):
        """测试非终端输出默认不着色"""
        reporter = ConsoleReporter(stream=self.stream)

        assert reporter.color is False

    def test_no_ansi_codes_without_color(self):
        """测试关闭着色时没有控制字符"""
        self.reporter.report(ProbeResult(host="a.com", status=ExpiryStatus.ERROR, error_message="x"))

        assert "\033[" not in self.stream.getvalue()
