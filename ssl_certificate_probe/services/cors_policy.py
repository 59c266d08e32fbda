"""
CORS响应头服务
"""
from typing import Dict, Optional

from ..interfaces import OriginPolicyInterface


class CORSPolicy:
    """根据来源允许列表生成CORS响应头"""

    base_headers = {
        'Access-Control-Allow-Methods': 'GET, OPTIONS',
        'Access-Control-Allow-Headers': 'Content-Type',
        'Access-Control-Max-Age': '86400'
    }

    def __init__(self, origin_policy: OriginPolicyInterface):
        self.origin_policy = origin_policy

    def build_headers(self, origin: Optional[str]) -> Dict[str, str]:
        """
        生成CORS响应头

        Args:
            origin: 请求中的Origin头

        Returns:
            Dict[str, str]: 来源不在允许列表中时不包含Access-Control-Allow-Origin
        """
        headers = dict(self.base_headers)

        if self.origin_policy.is_origin_allowed(origin):
            headers['Access-Control-Allow-Origin'] = origin
            headers['Vary'] = 'Origin'

        return headers
