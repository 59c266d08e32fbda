"""
HTTP存活检查服务
"""
import os
import logging
from typing import Optional

import requests

from ..interfaces import LivenessCheckerInterface


DEFAULT_HTTP_CHECK_TIMEOUT = 5.0


class HTTPLivenessChecker(LivenessCheckerInterface):
    """HTTP存活检查器实现"""

    # 按顺序尝试的请求方法，HEAD失败后退回GET
    methods = ('HEAD', 'GET')

    def __init__(self, timeout: Optional[float] = None):
        """
        初始化HTTP存活检查器

        Args:
            timeout: 单次请求超时时间（秒），如果为None则从环境变量HTTP_CHECK_TIMEOUT读取，默认5秒
        """
        self.timeout = timeout if timeout is not None else self._read_timeout()
        self.logger = logging.getLogger(__name__)

    def _read_timeout(self) -> float:
        try:
            timeout = float(os.getenv('HTTP_CHECK_TIMEOUT', DEFAULT_HTTP_CHECK_TIMEOUT))
        except ValueError:
            return DEFAULT_HTTP_CHECK_TIMEOUT

        # requests不接受小于等于0的超时时间
        return timeout if timeout > 0 else DEFAULT_HTTP_CHECK_TIMEOUT

    def check(self, host: str) -> Optional[int]:
        """
        请求 https://<host>/ 判断站点是否响应

        Args:
            host: 主机名

        Returns:
            Optional[int]: HTTP状态码，HEAD和GET都失败时返回None
        """
        url = f"https://{host}/"

        for method in self.methods:
            try:
                response = requests.request(
                    method,
                    url,
                    timeout=self.timeout,
                    allow_redirects=True,
                    stream=True
                )
                # 只需要状态码，不读取响应体
                response.close()

                self.logger.debug(f"{method} {url} 返回 {response.status_code}")
                return response.status_code

            except requests.RequestException as e:
                self.logger.debug(f"{method} {url} 请求失败: {type(e).__name__}: {str(e)}")

        self.logger.info(f"主机 {host} HTTP存活检查失败，httpStatus将为空")
        return None
