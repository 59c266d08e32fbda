"""
主机名校验服务
"""
import os
import re
import socket
import ipaddress
from typing import Optional, List
import logging


MISSING_HOST_MESSAGE = 'Missing "host" parameter'
INVALID_HOST_MESSAGE = "Invalid host format"
BLOCKED_HOST_MESSAGE = "Host not allowed"


class HostValidator:
    """主机名校验器"""

    # 仅做字符集过滤，不保证主机名可解析
    host_pattern = re.compile(r'[a-zA-Z0-9.-]+')

    def __init__(self, block_private_hosts: Optional[bool] = None):
        """
        初始化主机名校验器

        Args:
            block_private_hosts: 是否拒绝解析到内网地址的主机，如果为None则从环境变量BLOCK_PRIVATE_HOSTS读取
        """
        if block_private_hosts is None:
            block_private_hosts = os.getenv('BLOCK_PRIVATE_HOSTS', 'false').strip().lower() in ('1', 'true', 'yes')

        self.block_private_hosts = block_private_hosts
        self.logger = logging.getLogger(__name__)

    def validate(self, host: Optional[str]) -> Optional[str]:
        """
        校验host参数

        Args:
            host: 查询参数中的主机名

        Returns:
            Optional[str]: 错误信息，校验通过时返回None
        """
        if not host:
            return MISSING_HOST_MESSAGE

        if not self.validate_host_format(host):
            self.logger.warning(f"拒绝格式无效的主机名: {host!r}")
            return INVALID_HOST_MESSAGE

        if self.block_private_hosts and self.is_private_host(host):
            self.logger.warning(f"拒绝解析到内网地址的主机名: {host}")
            return BLOCKED_HOST_MESSAGE

        return None

    def validate_host_format(self, host: str) -> bool:
        """
        验证主机名字符集

        Args:
            host: 主机名

        Returns:
            bool: 只包含字母、数字、点和连字符时为True
        """
        if not host or not isinstance(host, str):
            return False

        return bool(self.host_pattern.fullmatch(host))

    def is_private_host(self, host: str) -> bool:
        """
        判断主机名是否解析到回环、内网、链路本地或保留地址

        DNS解析失败时返回False，由探测步骤报告连接错误。

        Args:
            host: 主机名

        Returns:
            bool: 任一解析地址不是公网地址时为True
        """
        addresses = self._resolve(host)

        for address in addresses:
            try:
                ip_obj = ipaddress.ip_address(address)
            except ValueError:
                continue

            if (ip_obj.is_private or ip_obj.is_loopback or ip_obj.is_link_local or
                    ip_obj.is_reserved or ip_obj.is_multicast or ip_obj.is_unspecified):
                self.logger.info(f"主机 {host} 解析到非公网地址: {address}")
                return True

        return False

    def _resolve(self, host: str) -> List[str]:
        try:
            results = socket.getaddrinfo(host, 443, proto=socket.IPPROTO_TCP)
        except (socket.gaierror, UnicodeError) as e:
            self.logger.debug(f"主机 {host} DNS解析失败: {str(e)}")
            return []

        # IPv6地址可能带有%scope后缀
        return list({result[4][0].split('%')[0] for result in results})
