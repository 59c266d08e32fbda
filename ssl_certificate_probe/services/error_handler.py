"""
错误处理服务
"""
import socket
import ssl
from typing import Any, Optional, Dict
from datetime import datetime, timezone
import logging


class ProbeError(Exception):
    """TLS连接或握手无法建立时抛出"""

    def __init__(self, message: str, host: Optional[str] = None, cause: Optional[Exception] = None):
        super().__init__(message)
        self.message = message
        self.host = host
        self.cause = cause


class ProbeErrorHandler:
    """探测错误处理器"""

    # 网络和TLS错误都是OSError的子类
    connection_errors = (OSError,)

    def __init__(self):
        """初始化探测错误处理器"""
        self.logger = logging.getLogger(__name__)

    def is_connection_error(self, error: Exception) -> bool:
        """
        判断是否是建立连接阶段的错误

        Args:
            error: 异常对象

        Returns:
            bool: 是否是网络/TLS错误
        """
        return isinstance(error, self.connection_errors)

    def describe(self, error: Exception) -> str:
        """
        生成可读的错误描述

        Args:
            error: 异常对象

        Returns:
            str: 错误描述，不会为空
        """
        if isinstance(error, ProbeError):
            return error.message

        if isinstance(error, socket.timeout):
            message = str(error) or "timed out"
            return f"Connection timed out ({message})"

        message = str(error).strip()
        return message or type(error).__name__

    def to_probe_error(self, host: str, error: Exception) -> ProbeError:
        """
        将底层异常转换为ProbeError

        Args:
            host: 主机名
            error: 底层异常

        Returns:
            ProbeError: 带描述信息的探测错误
        """
        if isinstance(error, ProbeError):
            return error

        return ProbeError(
            f"TLS connection failed: {self.describe(error)}",
            host=host,
            cause=error
        )

    def handle_probe_error(self, host: str, error: Exception) -> Dict[str, Any]:
        """
        处理探测错误

        Args:
            host: 主机名
            error: 异常对象

        Returns:
            Dict[str, Any]: 错误处理结果
        """
        cause = error.cause if isinstance(error, ProbeError) and error.cause else error

        error_info = {
            'host': host,
            'error_type': type(cause).__name__,
            'error_message': self.describe(error),
            'is_connection_error': self.is_connection_error(cause),
            'timestamp': datetime.now(timezone.utc).isoformat(),
            'suggested_action': self._get_suggested_action(cause)
        }

        if error_info['is_connection_error']:
            self.logger.warning(f"主机 {host} TLS连接失败: {error_info['error_message']}")
        else:
            self.logger.error(f"主机 {host} 探测时发生意外错误: {error_info['error_message']}")

        return error_info

    def _get_suggested_action(self, error: Exception) -> str:
        """
        获取错误的建议处理方案

        Args:
            error: 异常对象

        Returns:
            str: 建议的处理方案
        """
        error_message = str(error).lower()

        if isinstance(error, socket.timeout):
            return "检查目标主机是否可达，考虑增加超时时间"
        elif isinstance(error, socket.gaierror):
            return "检查主机名是否正确，DNS服务器是否可用"
        elif isinstance(error, ConnectionRefusedError):
            return "目标主机未在443端口提供服务"
        elif isinstance(error, ssl.SSLError):
            if 'handshake failure' in error_message:
                return "SSL握手失败，检查SSL/TLS版本兼容性"
            elif 'wrong version number' in error_message:
                return "目标端口可能不是TLS服务"
            else:
                return "SSL连接问题，检查服务器SSL配置"
        elif 'network is unreachable' in error_message:
            return "网络不可达，检查网络连接和路由"
        elif 'no route to host' in error_message:
            return "无法路由到主机，检查防火墙和网络配置"
        else:
            return "检查网络连接和服务器状态"
