"""
数据模型定义
"""
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional, Dict, Any


STATUS_ONLINE = "online"
STATUS_ERROR = "error"


def format_timestamp(value: datetime) -> str:
    """
    将时间格式化为ISO 8601字符串（UTC，毫秒精度，Z后缀）

    Args:
        value: 时间

    Returns:
        str: 例如 2025-01-31T23:59:59.000Z
    """
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)

    return value.astimezone(timezone.utc).isoformat(timespec='milliseconds').replace('+00:00', 'Z')


@dataclass(frozen=True)
class CertificateDetails:
    """叶子证书信息"""
    subject: str
    issuer: str
    valid_from: Optional[datetime]
    valid_to: datetime
    days_remaining: int
    is_valid: bool
    serial_number: str = "Unknown"

    @property
    def is_expired(self) -> bool:
        """判断是否已过期"""
        return self.days_remaining <= 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            'subject': self.subject,
            'issuer': self.issuer,
            'validFrom': format_timestamp(self.valid_from) if self.valid_from else None,
            'validTo': format_timestamp(self.valid_to),
            'daysRemaining': self.days_remaining,
            'isValid': self.is_valid,
            'serialNumber': self.serial_number
        }


@dataclass(frozen=True)
class TLSInfo:
    """TLS握手参数"""
    version: str = "Unknown"
    protocol: str = "http/1.1"

    def to_dict(self) -> Dict[str, Any]:
        return {
            'version': self.version,
            'protocol': self.protocol
        }


@dataclass(frozen=True)
class CertificateReport:
    """单次探测的结果报告"""
    host: str
    status: str
    response_time_ms: int
    checked_at: datetime
    http_status: Optional[int] = None
    certificate: Optional[CertificateDetails] = None
    tls: Optional[TLSInfo] = None
    error: Optional[str] = None

    @property
    def is_online(self) -> bool:
        """TLS握手是否成功"""
        return self.status == STATUS_ONLINE

    def to_dict(self) -> Dict[str, Any]:
        """
        转换为API响应结构（camelCase键名，缺失的可选字段不输出）

        Returns:
            Dict[str, Any]: 可直接JSON序列化的字典
        """
        data: Dict[str, Any] = {
            'host': self.host,
            'status': self.status
        }

        if self.http_status is not None:
            data['httpStatus'] = self.http_status
        if self.certificate is not None:
            data['certificate'] = self.certificate.to_dict()
        if self.tls is not None:
            data['tls'] = self.tls.to_dict()

        data['responseTimeMs'] = self.response_time_ms
        data['checkedAt'] = format_timestamp(self.checked_at)

        if self.error is not None:
            data['error'] = self.error

        return data
