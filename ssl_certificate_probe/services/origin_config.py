"""
CORS来源配置管理服务
"""
import os
import re
from typing import List, Optional
import logging

from ..interfaces import OriginPolicyInterface


DEFAULT_ALLOWED_ORIGINS = ["https://hglnd.se"]

# 来源格式：协议 + 主机名 + 可选端口，不含路径
ORIGIN_PATTERN = re.compile(r'https?://[a-zA-Z0-9](?:[a-zA-Z0-9.-]*[a-zA-Z0-9])?(?::\d{1,5})?')


class OriginConfigManager(OriginPolicyInterface):
    """CORS来源配置管理器实现"""

    def __init__(self, env_var_name: str = "ALLOWED_ORIGINS"):
        """
        初始化来源配置管理器，允许列表只在初始化时读取一次

        Args:
            env_var_name: 环境变量名称，默认为"ALLOWED_ORIGINS"
        """
        self.env_var_name = env_var_name
        self.logger = logging.getLogger(__name__)

        self.default_origins = list(DEFAULT_ALLOWED_ORIGINS)
        self._allowed_origins = tuple(self._load_origins())

    def _load_origins(self) -> List[str]:
        """
        从环境变量读取来源列表（逗号分隔）

        Returns:
            List[str]: 来源列表
        """
        origins_str = os.getenv(self.env_var_name, "")

        if not origins_str.strip():
            self.logger.info(f"环境变量 {self.env_var_name} 为空，使用默认来源列表")
            return self.default_origins.copy()

        valid_origins = []
        for origin in (item.strip() for item in origins_str.split(',')):
            if not origin:
                continue
            if self.validate_origin(origin):
                if origin not in valid_origins:
                    valid_origins.append(origin)
            else:
                self.logger.warning(f"跳过无效来源: {origin}")

        if not valid_origins:
            self.logger.warning("没有找到有效的来源，使用默认来源列表")
            return self.default_origins.copy()

        self.logger.info(f"成功加载 {len(valid_origins)} 个允许的来源")
        return valid_origins

    def validate_origin(self, origin: str) -> bool:
        """
        验证来源格式

        Args:
            origin: 来源，例如 https://example.com

        Returns:
            bool: 来源是否有效
        """
        if not origin or not isinstance(origin, str):
            return False

        return bool(ORIGIN_PATTERN.fullmatch(origin))

    def get_allowed_origins(self) -> List[str]:
        """获取允许的来源列表"""
        return list(self._allowed_origins)

    def is_origin_allowed(self, origin: Optional[str]) -> bool:
        """
        判断来源是否允许，要求完全匹配（区分大小写）

        Args:
            origin: 请求中的Origin头

        Returns:
            bool: 是否允许
        """
        if not origin:
            return False

        return origin in self._allowed_origins

    def validate_configuration(self) -> dict:
        """
        验证配置状态

        Returns:
            dict: 配置验证结果
        """
        env_value = os.getenv(self.env_var_name, "")

        return {
            'env_var_name': self.env_var_name,
            'env_var_exists': bool(env_value),
            'total_origins': len(self._allowed_origins),
            'allowed_origins': self.get_allowed_origins(),
            'using_defaults': list(self._allowed_origins) == self.default_origins
        }
