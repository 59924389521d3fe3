"""
错误处理服务测试
"""
import pytest
import socket
import ssl
from unittest.mock import MagicMock

from cert_expiry_checker.services.error_handler import ProbeErrorHandler
from cert_expiry_checker.exceptions import (
    ConnectError,
    HandshakeError,
    NoLeafCertificateError
)


class TestProbeErrorHandler:
    """探测错误处理器测试类"""

    def setup_method(self):
        """测试前准备"""
        self.handler = ProbeErrorHandler()

    def test_format_error_message(self):
        """测试错误描述格式"""
        error = ConnectError("example.com", ConnectionRefusedError("Connection refused"))

        assert self.handler.format_error_message(error) == "ConnectError: Connection refused"

    def test_no_leaf_message(self):
        """测试没有叶子证书的错误描述"""
        error = NoLeafCertificateError("example.com", message="no leaf certificate found")

        assert self.handler.format_error_message(error) == "NoLeafCertificateError: no leaf certificate found"

    def test_handle_probe_error(self):
        """测试错误处理结果"""
        cause = socket.gaierror(-2, "Name or service not known")
        error = ConnectError("nonexistent.invalid", cause)

        error_info = self.handler.handle_probe_error("nonexistent.invalid", error)

        assert error_info['host'] == "nonexistent.invalid"
        assert error_info['error_type'] == "ConnectError"
        assert error_info['cause_type'] == "gaierror"
        assert error_info['formatted_message'].startswith("ConnectError:")
        assert "DNS" in error_info['suggested_action']
        assert 'timestamp' in error_info

    def test_handle_probe_error_logs_warning(self):
        """测试记录警告日志"""
        self.handler.logger = MagicMock()
        error = ConnectError("example.com", ConnectionRefusedError("Connection refused"))

        self.handler.handle_probe_error("example.com", error)

        self.handler.logger.warning.assert_called_once()
        message = self.handler.logger.warning.call_args[0][0]
        assert "example.com" in message
        assert "Connection refused" in message

    @pytest.mark.parametrize("error, expected", [
        (ConnectError("h", socket.timeout("timed out")), "超时时间"),
        (HandshakeError("h", socket.timeout("timed out")), "TLS握手超时"),
        (ConnectError("h", ConnectionRefusedError("refused")), "端口是否正确"),
        (ConnectError("h", ValueError("无效的端口: 'abc'")), "端口必须为数字"),
        (HandshakeError("h", ssl.SSLError(1, "[SSL: WRONG_VERSION_NUMBER] wrong version number")), "不是TLS服务"),
        (HandshakeError("h", ssl.SSLError(1, "sslv3 alert handshake failure")), "SSL/TLS版本兼容性"),
        (NoLeafCertificateError("h", message="no leaf certificate found"), "证书配置"),
        (ConnectError("h", OSError("[Errno 101] Network is unreachable")), "网络不可达"),
    ])
    def test_suggested_action(self, error, expected):
        """测试建议的处理方案"""
        assert expected in self.handler._get_suggested_action(error)

    def test_probe_error_without_cause(self):
        """测试没有底层异常的探测错误"""
        error = ConnectError("example.com")

        assert str(error) == "未知错误"
        assert error.host == "example.com"
        assert error.cause is None

    def test_get_error_statistics(self):
        """测试错误统计"""
        error_list = [
            {'error_type': 'ConnectError'},
            {'error_type': 'ConnectError'},
            {'error_type': 'HandshakeError'},
        ]

        stats = self.handler.get_error_statistics(error_list)

        assert stats['total_errors'] == 3
        assert stats['error_types'] == {'ConnectError': 2, 'HandshakeError': 1}
        assert stats['most_common_error'] == 'ConnectError'
        assert stats['most_common_error_count'] == 2

    def test_get_error_statistics_empty(self):
        """测试空错误列表"""
        stats = self.handler.get_error_statistics([])

        assert stats['total_errors'] == 0
        assert stats['most_common_error'] is None
