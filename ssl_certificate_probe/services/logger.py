"""
日志服务
"""
import os
import logging
import traceback
from typing import Dict, Any, Optional
from ..interfaces import LoggerServiceInterface
from ..models import CertificateReport
from .expiry_calculator import ExpiryCalculator


class LoggerService(LoggerServiceInterface):
    """日志服务实现"""

    def __init__(self, logger_name: str = "ssl_certificate_probe", log_level: Optional[str] = None):
        """
        初始化日志服务

        Args:
            logger_name: 日志器名称
            log_level: 日志级别，如果为None则从环境变量读取
        """
        self.logger_name = logger_name
        self.log_level = log_level or os.getenv('LOG_LEVEL', 'INFO')
        self.expiry_calculator = ExpiryCalculator()

        # 配置日志器
        self.logger = logging.getLogger(logger_name)
        self._configure_logger()

    def _configure_logger(self):
        """配置日志器"""
        level = getattr(logging, self.log_level.upper(), logging.INFO)
        self.logger.setLevel(level)

        # 避免重复添加处理器
        if not self.logger.handlers:
            handler = logging.StreamHandler()
            handler.setLevel(level)

            formatter = logging.Formatter(
                '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
                datefmt='%Y-%m-%d %H:%M:%S'
            )
            handler.setFormatter(formatter)

            self.logger.addHandler(handler)

        # 防止日志传播到根日志器
        self.logger.propagate = False

    def log_request(self, method: str, host: Optional[str], origin: Optional[str]):
        """
        记录收到的请求

        Args:
            method: HTTP方法
            host: host查询参数
            origin: Origin请求头
        """
        self.logger.info(
            f"收到请求 - 方法: {method}, host: {host or '-'}, Origin: {origin or '-'}"
        )

    def log_probe_start(self, host: str):
        """
        记录探测开始

        Args:
            host: 要探测的主机名
        """
        self.logger.info(f"开始探测主机 {host} 的TLS证书")

    def log_report(self, report: CertificateReport):
        """
        记录探测结果

        Args:
            report: 探测报告
        """
        if not report.is_online:
            self.logger.error(
                f"探测失败 - 主机: {report.host}, "
                f"错误: {report.error}, "
                f"耗时: {report.response_time_ms} ms"
            )
            return

        http_status = report.http_status if report.http_status is not None else '无响应'
        cert = report.certificate

        if cert is None:
            self.logger.warning(
                f"TLS连接成功但未获取到证书信息 - 主机: {report.host}, "
                f"HTTP状态: {http_status}, 耗时: {report.response_time_ms} ms"
            )
        elif cert.is_expired:
            self.logger.warning(
                f"证书已过期 - 主机: {report.host}, "
                f"过期时间: {cert.valid_to.isoformat()}, "
                f"已过期: {abs(cert.days_remaining)} 天, "
                f"颁发者: {cert.issuer}"
            )
        elif self.expiry_calculator.is_expiring_soon(cert.days_remaining):
            self.logger.warning(
                f"证书即将过期 - 主机: {report.host}, "
                f"过期时间: {cert.valid_to.isoformat()}, "
                f"剩余天数: {cert.days_remaining} 天, "
                f"颁发者: {cert.issuer}"
            )
        else:
            self.logger.info(
                f"证书正常 - 主机: {report.host}, "
                f"过期时间: {cert.valid_to.isoformat()}, "
                f"剩余天数: {cert.days_remaining} 天, "
                f"颁发者: {cert.issuer}"
            )

        if report.tls is not None:
            self.logger.debug(
                f"主机 {report.host} TLS版本: {report.tls.version}, 协议: {report.tls.protocol}, "
                f"HTTP状态: {http_status}"
            )

    def log_error(self, host: str, error: Exception):
        """
        记录错误信息

        Args:
            host: 主机名
            error: 异常对象
        """
        self.logger.error(
            f"主机 {host} 处理时发生错误: {type(error).__name__}: {str(error)}"
        )

        # 记录详细的堆栈跟踪（调试级别）
        self.logger.debug(f"主机 {host} 错误堆栈跟踪:\n{traceback.format_exc()}")

    def log_response(self, status_code: int, duration_ms: int):
        """
        记录响应

        Args:
            status_code: HTTP状态码
            duration_ms: 请求处理耗时（毫秒）
        """
        if status_code >= 500:
            self.logger.error(f"响应 {status_code}，耗时 {duration_ms} ms")
        elif status_code >= 400:
            self.logger.warning(f"响应 {status_code}，耗时 {duration_ms} ms")
        else:
            self.logger.info(f"响应 {status_code}，耗时 {duration_ms} ms")

    def log_configuration_info(self, config: Dict[str, Any]):
        """
        记录配置信息

        Args:
            config: 配置信息字典
        """
        safe_config = self._sanitize_config(config)

        self.logger.info("系统配置信息:")
        for key, value in safe_config.items():
            self.logger.info(f"  {key}: {value}")

    def _sanitize_config(self, config: Dict[str, Any]) -> Dict[str, Any]:
        """
        清理配置信息中的敏感数据

        Args:
            config: 原始配置

        Returns:
            Dict[str, Any]: 清理后的配置
        """
        safe_config = {}
        for key, value in config.items():
            key_lower = key.lower()

            is_sensitive = (
                key_lower in {'password', 'secret', 'token', 'key', 'credential'} or
                key_lower.endswith('_key') or
                key_lower.endswith('_secret') or
                key_lower.endswith('_password') or
                key_lower.endswith('_token')
            )

            if is_sensitive and isinstance(value, str) and value:
                safe_config[key] = value[:3] + "***" if len(value) > 3 else "***"
            else:
                safe_config[key] = value

        return safe_config
