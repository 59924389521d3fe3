"""
异常定义

启动阶段的错误（配置错误、主机列表无法读取）会直接中止整个运行；
单个主机的探测错误（ProbeError 及其子类）只影响该主机，
在检查器内部被转换为 ERROR 分类的 ProbeResult，不会跨越任务边界传播。
"""
from typing import Optional


class CertExpiryCheckerError(Exception):
    """所有自定义异常的基类"""
    pass


class ConfigurationError(CertExpiryCheckerError):
    """配置缺失或无效"""
    pass


class HostListError(CertExpiryCheckerError):
    """主机列表文件不存在或无法读取"""
    pass


class ProbeError(CertExpiryCheckerError):
    """
    单个主机探测失败

    Args:
        host: 主机地址
        cause: 底层异常
    """

    def __init__(self, host: str, cause: Optional[BaseException] = None, message: Optional[str] = None):
        self.host = host
        self.cause = cause
        if message is None:
            message = str(cause) if cause is not None else "未知错误"
        super().__init__(message)


class ConnectError(ProbeError):
    """TCP连接失败（包括DNS解析失败、连接超时、端口格式错误）"""
    pass


class HandshakeError(ProbeError):
    """TLS握手失败"""
    pass


class NoLeafCertificateError(ProbeError):
    """证书链中没有非CA证书"""
    pass
