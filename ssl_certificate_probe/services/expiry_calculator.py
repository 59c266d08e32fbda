"""
证书过期计算服务
"""
from datetime import datetime, timezone
from typing import Optional


SECONDS_PER_DAY = 86400


class ExpiryCalculator:
    """证书过期计算器"""

    def __init__(self, warning_days: int = 30):
        """
        初始化过期计算器

        Args:
            warning_days: 提前警告天数，默认30天
        """
        self.warning_days = warning_days

    def calculate_days_remaining(self, valid_to: datetime, now: Optional[datetime] = None) -> int:
        """
        计算距离过期的天数

        Args:
            valid_to: 证书过期时间
            now: 当前时间，默认为UTC当前时间

        Returns:
            int: 剩余天数，向下取整（负数表示已过期）
        """
        now = now or datetime.now(timezone.utc)

        if valid_to.tzinfo is None:
            valid_to = valid_to.replace(tzinfo=timezone.utc)

        seconds = (valid_to - now).total_seconds()
        return int(seconds // SECONDS_PER_DAY)

    def is_valid(self, days_remaining: int) -> bool:
        """
        判断证书是否仍在有效期内

        Args:
            days_remaining: 剩余天数

        Returns:
            bool: 剩余天数大于0时为True
        """
        return days_remaining > 0

    def is_expiring_soon(self, days_remaining: int) -> bool:
        """判断证书是否即将过期（在警告期内）"""
        return 0 < days_remaining <= self.warning_days
