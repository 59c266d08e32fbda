"""
SSL证书探测服务
"""
import os
import ssl
import time
import socket
from datetime import datetime, timezone
from typing import List, Optional, Tuple
import logging

from cryptography import x509
from cryptography.x509.oid import NameOID

from ..interfaces import CertificateProbeInterface, LivenessCheckerInterface
from ..models import (
    CertificateDetails,
    CertificateReport,
    TLSInfo,
    STATUS_ERROR,
    STATUS_ONLINE
)
from .error_handler import ProbeError, ProbeErrorHandler
from .expiry_calculator import ExpiryCalculator
from .http_checker import HTTPLivenessChecker


DEFAULT_PROBE_TIMEOUT = 10.0


class SSLCertificateChecker(CertificateProbeInterface):
    """SSL证书探测器实现"""

    alpn_protocols = ['h2', 'http/1.1']

    def __init__(self, timeout: Optional[float] = None, port: int = 443,
                 liveness_checker: Optional[LivenessCheckerInterface] = None,
                 expiry_calculator: Optional[ExpiryCalculator] = None):
        """
        初始化SSL证书探测器

        Args:
            timeout: TLS连接超时时间（秒），如果为None则从环境变量PROBE_TIMEOUT读取，默认10秒
            port: SSL端口，固定为443
            liveness_checker: HTTP存活检查器
            expiry_calculator: 过期计算器
        """
        self.timeout = timeout if timeout is not None else self._read_timeout()
        self.port = port
        self.logger = logging.getLogger(__name__)
        self.error_handler = ProbeErrorHandler()
        self.liveness_checker = liveness_checker or HTTPLivenessChecker()
        self.expiry_calculator = expiry_calculator or ExpiryCalculator()

    def _read_timeout(self) -> float:
        try:
            timeout = float(os.getenv('PROBE_TIMEOUT', DEFAULT_PROBE_TIMEOUT))
        except ValueError:
            return DEFAULT_PROBE_TIMEOUT

        # 0会把套接字设为非阻塞模式
        return timeout if timeout > 0 else DEFAULT_PROBE_TIMEOUT

    def probe(self, host: str) -> CertificateReport:
        """
        探测主机的TLS证书和HTTP存活状态

        只有建立TLS会话失败才会抛出异常，其余步骤失败时使用默认值。

        Args:
            host: 已校验的主机名

        Returns:
            CertificateReport: status为online的探测报告

        Raises:
            ProbeError: DNS解析、TCP连接、TLS握手失败或超时
        """
        start_time = time.monotonic()

        try:
            der_cert, tls_version, alpn_protocol = self._get_tls_session(host)
        except (OSError, ValueError) as e:
            raise self.error_handler.to_probe_error(host, e) from e

        tls_info = TLSInfo(
            version=tls_version or "Unknown",
            protocol=alpn_protocol or "http/1.1"
        )
        certificate = self._parse_certificate(der_cert, host)

        # TLS连接已关闭，存活检查使用独立的HTTP请求
        http_status = self.liveness_checker.check(host)

        response_time_ms = self._elapsed_ms(start_time)

        return CertificateReport(
            host=host,
            status=STATUS_ONLINE,
            http_status=http_status,
            certificate=certificate,
            tls=tls_info,
            response_time_ms=response_time_ms,
            checked_at=datetime.now(timezone.utc)
        )

    def check_certificate(self, host: str) -> CertificateReport:
        """
        探测主机证书，失败时返回status为error的报告而不是抛出异常

        Args:
            host: 已校验的主机名

        Returns:
            CertificateReport: 探测报告
        """
        start_time = time.monotonic()

        try:
            return self.probe(host)

        except ProbeError as e:
            self.error_handler.handle_probe_error(host, e)
            message = e.message

        except Exception as e:
            self.error_handler.handle_probe_error(host, e)
            self.logger.error(f"检查主机 {host} 的证书时发生错误: {type(e).__name__}: {str(e)}")
            message = self.error_handler.describe(e)

        return CertificateReport(
            host=host,
            status=STATUS_ERROR,
            response_time_ms=self._elapsed_ms(start_time),
            checked_at=datetime.now(timezone.utc),
            error=message
        )

    def _get_tls_session(self, host: str) -> Tuple[Optional[bytes], Optional[str], Optional[str]]:
        """
        建立TLS会话并读取证书和握手参数，读取完毕后立即关闭连接

        Args:
            host: 主机名（同时作为SNI）

        Returns:
            Tuple: (DER格式的叶子证书, TLS版本, ALPN协议)

        Raises:
            OSError: 连接或握手失败
        """
        context = self._create_context()

        with socket.create_connection((host, self.port), timeout=self.timeout) as sock:
            with context.wrap_socket(sock, server_hostname=host) as ssock:
                der_cert = ssock.getpeercert(binary_form=True)
                tls_version = ssock.version()
                alpn_protocol = ssock.selected_alpn_protocol()

        return der_cert, tls_version, alpn_protocol

    def _create_context(self) -> ssl.SSLContext:
        """
        创建TLS上下文

        使用系统默认信任库，但不强制校验结果，过期或不受信任的证书仍然返回其信息。
        """
        context = ssl.create_default_context()
        context.check_hostname = False
        context.verify_mode = ssl.CERT_NONE
        context.set_alpn_protocols(self.alpn_protocols)
        return context

    def _parse_certificate(self, der_cert: Optional[bytes], host: str) -> Optional[CertificateDetails]:
        """
        解析叶子证书

        Args:
            der_cert: DER格式证书
            host: 主机名，主题缺失时作为默认值

        Returns:
            Optional[CertificateDetails]: 证书信息，无法解析或缺少过期时间时返回None
        """
        if not der_cert:
            self.logger.warning(f"主机 {host} 未返回证书")
            return None

        try:
            cert = x509.load_der_x509_certificate(der_cert)
        except ValueError as e:
            self.logger.warning(f"主机 {host} 的证书无法解析: {str(e)}")
            return None

        valid_to = self._parse_valid_to(cert)
        if valid_to is None:
            self.logger.warning(f"主机 {host} 的证书中未找到过期时间信息")
            return None

        days_remaining = self.expiry_calculator.calculate_days_remaining(valid_to)

        return CertificateDetails(
            subject=self._parse_subject(cert, host),
            issuer=self._parse_issuer(cert),
            valid_from=self._parse_valid_from(cert),
            valid_to=valid_to,
            days_remaining=days_remaining,
            is_valid=self.expiry_calculator.is_valid(days_remaining),
            serial_number=self._parse_serial_number(cert)
        )

    def _get_name_values(self, name: x509.Name, oid: x509.ObjectIdentifier) -> List[str]:
        try:
            return [str(attribute.value) for attribute in name.get_attributes_for_oid(oid)]
        except ValueError:
            return []

    def _parse_subject(self, cert: x509.Certificate, host: str) -> str:
        """
        解析证书主题（通用名称）

        Returns:
            str: 通用名称，缺失时返回主机名
        """
        try:
            subject = cert.subject
        except ValueError:
            return host

        common_names = self._get_name_values(subject, NameOID.COMMON_NAME)
        return common_names[0] if common_names else host

    def _parse_issuer(self, cert: x509.Certificate) -> str:
        """
        解析证书颁发者

        Returns:
            str: 组织名称，其次是通用名称，都缺失时返回Unknown
        """
        try:
            issuer = cert.issuer
        except ValueError:
            return "Unknown"

        # 优先使用组织名称
        for oid in (NameOID.ORGANIZATION_NAME, NameOID.COMMON_NAME):
            values = self._get_name_values(issuer, oid)
            if values:
                return values[0]

        return "Unknown"

    def _parse_valid_from(self, cert: x509.Certificate) -> Optional[datetime]:
        try:
            return cert.not_valid_before_utc
        except ValueError:
            return None

    def _parse_valid_to(self, cert: x509.Certificate) -> Optional[datetime]:
        try:
            return cert.not_valid_after_utc
        except ValueError:
            return None

    def _parse_serial_number(self, cert: x509.Certificate) -> str:
        """解析证书序列号（大写十六进制）"""
        try:
            return format(cert.serial_number, 'X')
        except ValueError:
            return "Unknown"

    def _elapsed_ms(self, start_time: float) -> int:
        return int((time.monotonic() - start_time) * 1000)
