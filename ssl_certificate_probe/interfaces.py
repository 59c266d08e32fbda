"""
服务接口定义
"""
from abc import ABC, abstractmethod
from typing import List, Optional
from .models import CertificateReport


class CertificateProbeInterface(ABC):
    """证书探测器接口"""

    @abstractmethod
    def probe(self, host: str) -> CertificateReport:
        """探测单个主机的TLS证书"""
        pass


class LivenessCheckerInterface(ABC):
    """HTTP存活检查接口"""

    @abstractmethod
    def check(self, host: str) -> Optional[int]:
        """返回HTTP状态码，检查失败时返回None"""
        pass


class OriginPolicyInterface(ABC):
    """CORS来源配置接口"""

    @abstractmethod
    def get_allowed_origins(self) -> List[str]:
        """获取允许的来源列表"""
        pass

    @abstractmethod
    def is_origin_allowed(self, origin: Optional[str]) -> bool:
        """判断来源是否在允许列表中"""
        pass


class LoggerServiceInterface(ABC):
    """日志服务接口"""

    @abstractmethod
    def log_probe_start(self, host: str):
        """记录探测开始"""
        pass

    @abstractmethod
    def log_report(self, report: CertificateReport):
        """记录探测结果"""
        pass

    @abstractmethod
    def log_error(self, host: str, error: Exception):
        """记录错误信息"""
        pass
