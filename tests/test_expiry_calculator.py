"""
证书过期计算器测试
"""
import pytest
from datetime import datetime, timezone, timedelta

from ssl_certificate_probe.services.expiry_calculator import ExpiryCalculator


class TestExpiryCalculator:
    """证书过期计算器测试类"""

    def setup_method(self):
        """测试前准备"""
        self.calculator = ExpiryCalculator(warning_days=30)
        self.now = datetime(2025, 6, 1, 12, 0, 0, tzinfo=timezone.utc)

    def test_days_remaining_future(self):
        """测试计算未来过期时间"""
        valid_to = self.now + timedelta(days=15, hours=6)
        assert self.calculator.calculate_days_remaining(valid_to, now=self.now) == 15

    def test_days_remaining_floor(self):
        """测试不足一天时向下取整"""
        valid_to = self.now + timedelta(hours=23, minutes=59)
        assert self.calculator.calculate_days_remaining(valid_to, now=self.now) == 0

    def test_days_remaining_past(self):
        """测试计算过去过期时间"""
        valid_to = self.now - timedelta(days=5)
        assert self.calculator.calculate_days_remaining(valid_to, now=self.now) == -5

    def test_days_remaining_just_expired(self):
        """测试刚过期一秒时为-1"""
        valid_to = self.now - timedelta(seconds=1)
        assert self.calculator.calculate_days_remaining(valid_to, now=self.now) == -1

    def test_days_remaining_naive_datetime(self):
        """测试不带时区的时间按UTC处理"""
        valid_to = datetime(2025, 6, 11, 12, 0, 0)
        assert self.calculator.calculate_days_remaining(valid_to, now=self.now) == 10

    def test_days_remaining_default_now(self):
        """测试默认使用当前时间"""
        valid_to = datetime.now(timezone.utc) + timedelta(days=30, minutes=5)
        assert self.calculator.calculate_days_remaining(valid_to) == 30

    def test_is_valid(self):
        """测试有效期判断"""
        assert self.calculator.is_valid(1) is True
        assert self.calculator.is_valid(365) is True
        assert self.calculator.is_valid(0) is False
        assert self.calculator.is_valid(-3) is False

    def test_is_expiring_soon(self):
        """测试即将过期判断"""
        assert self.calculator.is_expiring_soon(15) is True
        assert self.calculator.is_expiring_soon(30) is True
        assert self.calculator.is_expiring_soon(31) is False
        assert self.calculator.is_expiring_soon(0) is False
        assert self.calculator.is_expiring_soon(-5) is False

    def test_custom_warning_days(self):
        """测试自定义警告天数"""
        calculator = ExpiryCalculator(warning_days=7)

        assert calculator.is_expiring_soon(7) is True
        assert calculator.is_expiring_soon(8) is False
