"""
测试公共工具：生成测试证书、启动本地TLS服务器
"""
import socket
import ssl
import threading
from datetime import datetime, timezone, timedelta
from typing import Optional

import pytest
from cryptography import x509
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import ec
from cryptography.x509.oid import NameOID


def build_certificate(not_after: datetime, is_ca: Optional[bool] = False, common_name: str = "localhost"):
    """
    生成自签名证书

    Args:
        not_after: 过期时间
        is_ca: BasicConstraints 的 ca 标志，None 表示不添加该扩展
        common_name: 证书CN

    Returns:
        (x509.Certificate, 私钥)
    """
    key = ec.generate_private_key(ec.SECP256R1())
    name = x509.Name([x509.NameAttribute(NameOID.COMMON_NAME, common_name)])

    builder = (
        x509.CertificateBuilder()
        .subject_name(name)
        .issuer_name(name)
        .public_key(key.public_key())
        .serial_number(x509.random_serial_number())
        .not_valid_before(not_after - timedelta(days=365))
        .not_valid_after(not_after)
    )
    if is_ca is not None:
        builder = builder.add_extension(x509.BasicConstraints(ca=is_ca, path_length=None), critical=True)

    return builder.sign(key, hashes.SHA256()), key


def to_der(cert: x509.Certificate) -> bytes:
    return cert.public_bytes(serialization.Encoding.DER)


class LocalTLSServer:
    """只完成TLS握手的本地服务器"""

    def __init__(self, cert, key, directory):
        certfile = directory / f"cert-{id(self)}.pem"
        keyfile = directory / f"key-{id(self)}.pem"
        certfile.write_bytes(cert.public_bytes(serialization.Encoding.PEM))
        keyfile.write_bytes(key.private_bytes(
            serialization.Encoding.PEM,
            serialization.PrivateFormat.PKCS8,
            serialization.NoEncryption()
        ))

        self.context = ssl.SSLContext(ssl.PROTOCOL_TLS_SERVER)
        self.context.load_cert_chain(str(certfile), str(keyfile))

        self.sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        self.sock.bind(('127.0.0.1', 0))
        self.sock.listen(16)
        self.port = self.sock.getsockname()[1]
        self._stopped = threading.Event()
        self.thread = threading.Thread(target=self._serve, daemon=True)
        self.thread.start()

    @property
    def address(self) -> str:
        return f"127.0.0.1:{self.port}"

    def _serve(self):
        while True:
            try:
                conn, _ = self.sock.accept()
            except OSError:
                return
            if self._stopped.is_set():
                conn.close()
                return
            conn.settimeout(5)
            try:
                with self.context.wrap_socket(conn, server_side=True):
                    pass
            except (ssl.SSLError, OSError):
                conn.close()

    def close(self):
        self._stopped.set()
        try:
            socket.create_connection(('127.0.0.1', self.port), timeout=1).close()
        except OSError:
            pass
        self.thread.join(timeout=5)
        self.sock.close()


@pytest.fixture
def tls_server_factory(tmp_path):
    """按过期时间启动本地TLS服务器，测试结束后关闭"""
    servers = []

    def factory(not_after: datetime, is_ca: Optional[bool] = False) -> LocalTLSServer:
        cert, key = build_certificate(not_after, is_ca=is_ca)
        server = LocalTLSServer(cert, key, tmp_path)
        servers.append(server)
        return server

    yield factory

    for server in servers:
        server.close()


@pytest.fixture
def closed_port_address() -> str:
    """一个没有服务监听的本地端口"""
    sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    sock.bind(('127.0.0.1', 0))
    port = sock.getsockname()[1]
    sock.close()
    return f"127.0.0.1:{port}"


def utc_now() -> datetime:
    return datetime.now(timezone.utc)
