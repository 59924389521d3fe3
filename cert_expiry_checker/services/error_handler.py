"""
错误处理服务
"""
import socket
import ssl
from typing import Any, Dict, List
from datetime import datetime, timezone
import logging

from ..exceptions import ProbeError, ConnectError, HandshakeError, NoLeafCertificateError


class ProbeErrorHandler:
    """探测错误处理器（不重试，只负责转换和记录）"""

    def __init__(self):
        """初始化探测错误处理器"""
        self.logger = logging.getLogger(__name__)

    def format_error_message(self, error: BaseException) -> str:
        """
        生成写入 ProbeResult 的错误描述

        Args:
            error: 异常对象

        Returns:
            str: 形如 "ConnectError: [Errno 111] Connection refused" 的描述
        """
        return f"{type(error).__name__}: {str(error)}"

    def handle_probe_error(self, host: str, error: BaseException) -> Dict[str, Any]:
        """
        处理单个主机的探测错误

        Args:
            host: 主机地址
            error: 异常对象

        Returns:
            Dict[str, Any]: 错误处理结果
        """
        cause = error.cause if isinstance(error, ProbeError) and error.cause is not None else error

        error_info = {
            'host': host,
            'error_type': type(error).__name__,
            'cause_type': type(cause).__name__,
            'error_message': str(error),
            'formatted_message': self.format_error_message(error),
            'timestamp': datetime.now(timezone.utc).isoformat(),
            'suggested_action': self._get_suggested_action(error)
        }

        self.logger.warning(
            f"主机 {host} 探测失败 ({error_info['error_type']}): {error_info['error_message']}，"
            f"建议: {error_info['suggested_action']}"
        )

        return error_info

    def _get_suggested_action(self, error: BaseException) -> str:
        """
        获取错误的建议处理方案

        Args:
            error: 异常对象

        Returns:
            str: 建议的处理方案
        """
        cause = error.cause if isinstance(error, ProbeError) and error.cause is not None else error
        error_message = str(cause).lower()

        if isinstance(error, NoLeafCertificateError):
            return "服务器只返回了CA证书，检查服务器的证书配置"
        elif isinstance(cause, socket.gaierror):
            return "检查主机名是否正确，DNS服务器是否可用"
        elif isinstance(cause, (socket.timeout, TimeoutError)):
            if isinstance(error, HandshakeError):
                return "TLS握手超时，检查目标端口是否为TLS服务"
            return "检查网络连接，考虑增加超时时间"
        elif isinstance(cause, ConnectionRefusedError):
            return "检查目标服务器是否运行，端口是否正确"
        elif isinstance(cause, ValueError):
            return "检查主机地址格式，端口必须为数字"
        elif isinstance(cause, ssl.SSLError):
            if 'wrong version number' in error_message:
                return "目标端口可能不是TLS服务"
            elif 'handshake failure' in error_message:
                return "SSL握手失败，检查SSL/TLS版本兼容性"
            else:
                return "SSL连接问题，检查服务器SSL配置"
        elif 'network is unreachable' in error_message:
            return "网络不可达，检查网络连接和路由"
        elif 'no route to host' in error_message:
            return "无法路由到主机，检查防火墙和网络配置"
        elif isinstance(error, ConnectError):
            return "检查网络连接和服务器状态"
        else:
            return "检查服务器状态"

    def get_error_statistics(self, error_list: List[Dict[str, Any]]) -> Dict[str, Any]:
        """
        获取错误统计信息

        Args:
            error_list: 错误信息列表

        Returns:
            Dict[str, Any]: 错误统计
        """
        if not error_list:
            return {
                'total_errors': 0,
                'error_types': {},
                'most_common_error': None,
                'most_common_error_count': 0
            }

        error_types = {}
        for error_info in error_list:
            error_type = error_info.get('error_type', 'Unknown')
            error_types[error_type] = error_types.get(error_type, 0) + 1

        most_common_error = max(error_types.items(), key=lambda x: x[1])

        return {
            'total_errors': len(error_list),
            'error_types': error_types,
            'most_common_error': most_common_error[0],
            'most_common_error_count': most_common_error[1]
        }
