"""
TLS证书检查服务
"""
import ssl
import socket
import time
from datetime import datetime, timedelta, timezone
from typing import List, Tuple
import logging

from cryptography import x509

from ..interfaces import CertificateInspectorInterface
from ..models import ExpiryStatus, ProbeResult
from ..exceptions import ProbeError, ConnectError, HandshakeError, NoLeafCertificateError
from .error_handler import ProbeErrorHandler
from .expiry_calculator import ExpiryCalculator

DEFAULT_PORT = 443
DEFAULT_TIMEOUT = 15


class CertificateInspector(CertificateInspectorInterface):
    """证书检查器实现"""

    def __init__(self, timeout: float = DEFAULT_TIMEOUT, default_port: int = DEFAULT_PORT):
        """
        初始化证书检查器

        Args:
            timeout: 单个主机的探测时限（秒），连接和握手共用
            default_port: 主机地址未指定端口时使用的端口，默认443
        """
        self.timeout = timeout
        self.default_port = default_port
        self.logger = logging.getLogger(__name__)
        self.error_handler = ProbeErrorHandler()

    def inspect(self, host: str, threshold: timedelta) -> ProbeResult:
        """
        检查单个主机的TLS证书

        Args:
            host: 主机地址，可带端口
            threshold: 提前警告时长

        Returns:
            ProbeResult: 探测结果，探测失败时分类为 ERROR
        """
        try:
            hostname, port = self.normalize_host(host)
            chain = self._fetch_peer_chain(host, hostname, port)
            leaf = self._select_leaf_certificate(host, chain)
        except ProbeError as e:
            error_info = self.error_handler.handle_probe_error(host, e)
            return ProbeResult(
                host=host,
                status=ExpiryStatus.ERROR,
                error_message=error_info['formatted_message']
            )

        now = datetime.now(timezone.utc)
        not_after = leaf.not_valid_after_utc
        calculator = ExpiryCalculator(threshold)
        status = calculator.classify(not_after, now)

        self.logger.debug(f"主机 {host} 证书过期时间: {not_after.isoformat()}, 分类: {status.value}")

        return ProbeResult(
            host=host,
            status=status,
            relative_time=calculator.describe(not_after, now),
            expiry_date=not_after
        )

    def normalize_host(self, host: str) -> Tuple[str, int]:
        """
        解析主机地址，未指定端口时补充默认端口

        支持 "example.com"、"example.com:8443"、"[::1]:8443" 和不带括号的IPv6地址。

        Args:
            host: 原始主机地址

        Returns:
            Tuple[str, int]: (主机名, 端口)

        Raises:
            ConnectError: 端口格式无效
        """
        address = host.strip()

        if address.startswith('['):
            end = address.find(']')
            if end == -1:
                raise ConnectError(host, ValueError(f"IPv6地址缺少右括号: {host}"))
            hostname = address[1:end]
            rest = address[end + 1:]
            if not rest:
                return hostname, self.default_port
            if not rest.startswith(':'):
                raise ConnectError(host, ValueError(f"无效的主机地址: {host}"))
            port_text = rest[1:]
        elif address.count(':') == 1:
            hostname, port_text = address.split(':')
        else:
            # 不含端口，或者是不带括号的IPv6地址
            return address, self.default_port

        try:
            port = int(port_text)
        except ValueError as e:
            raise ConnectError(host, ValueError(f"无效的端口: {port_text!r}")) from e

        if not 0 < port < 65536:
            raise ConnectError(host, ValueError(f"端口超出范围: {port}"))

        return hostname, port

    def _fetch_peer_chain(self, host: str, hostname: str, port: int) -> List[x509.Certificate]:
        """
        建立连接并完成TLS握手，读取对端证书链

        只读取证书，不验证证书链和主机名。

        Args:
            host: 原始主机地址（用于错误信息）
            hostname: 主机名
            port: 端口

        Returns:
            List[x509.Certificate]: 对端证书链

        Raises:
            ConnectError: TCP连接失败或主机名无法编码
            HandshakeError: TLS握手失败或超出探测时限
        """
        deadline = time.monotonic() + self.timeout

        context = ssl.create_default_context()
        context.check_hostname = False
        context.verify_mode = ssl.CERT_NONE

        self.logger.debug(f"正在连接 {hostname}:{port}")
        try:
            sock = socket.create_connection((hostname, port), timeout=self.timeout)
        except (OSError, UnicodeError) as e:
            raise ConnectError(host, e) from e

        with sock:
            remaining = deadline - time.monotonic()
            if remaining <= 0:
                raise HandshakeError(host, socket.timeout("探测时限已用尽"))
            sock.settimeout(remaining)

            try:
                with context.wrap_socket(sock, server_hostname=hostname) as ssock:
                    der_chain = self._read_der_chain(ssock)
            except (ssl.SSLError, OSError, ValueError) as e:
                raise HandshakeError(host, e) from e

        if time.monotonic() > deadline:
            raise HandshakeError(host, socket.timeout("TLS握手超出探测时限"))

        try:
            return [x509.load_der_x509_certificate(der) for der in der_chain]
        except ValueError as e:
            raise HandshakeError(host, e) from e

    def _read_der_chain(self, ssock: ssl.SSLSocket) -> List[bytes]:
        """
        读取DER格式的对端证书链

        Python 3.13 起 SSLSocket 提供 get_unverified_chain()；
        更早的版本只能取到叶子证书。
        """
        get_chain = getattr(ssock, 'get_unverified_chain', None)
        if get_chain is not None:
            der_chain = get_chain()
            if der_chain:
                return list(der_chain)

        leaf = ssock.getpeercert(binary_form=True)
        return [leaf] if leaf else []

    def _select_leaf_certificate(self, host: str, chain: List[x509.Certificate]) -> x509.Certificate:
        """
        选出链中第一个非CA证书

        Raises:
            NoLeafCertificateError: 链为空或全部为CA证书
        """
        for cert in chain:
            if not self._is_ca(cert):
                return cert

        raise NoLeafCertificateError(host, message="no leaf certificate found")

    def _is_ca(self, cert: x509.Certificate) -> bool:
        try:
            return cert.extensions.get_extension_for_class(x509.BasicConstraints).value.ca
        except x509.ExtensionNotFound:
            return False
