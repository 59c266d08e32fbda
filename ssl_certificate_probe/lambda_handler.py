"""
AWS Lambda函数入口点（API Gateway / Lambda Function URL）
"""
import json
import logging
import os
import time
from typing import Dict, Any, Optional
from datetime import datetime, timezone

from .services.ssl_checker import SSLCertificateChecker
from .services.http_checker import HTTPLivenessChecker
from .services.host_validator import HostValidator
from .services.origin_config import OriginConfigManager
from .services.cors_policy import CORSPolicy
from .services.config_validator import ConfigValidator
from .services.logger import LoggerService
from .models import CertificateReport, STATUS_ERROR


class SSLCertificateProbeAPI:
    """SSL证书探测API主类"""

    def __init__(self):
        """初始化API，所有配置只在冷启动时读取一次"""
        self.logger_service = LoggerService()
        self.origin_manager = OriginConfigManager()
        self.cors_policy = CORSPolicy(self.origin_manager)
        self.host_validator = HostValidator()
        self.ssl_checker = SSLCertificateChecker(liveness_checker=HTTPLivenessChecker())
        self.config_validator = ConfigValidator()

        self._log_configuration()

    def _log_configuration(self):
        """记录并验证系统配置信息"""
        origin_status = self.origin_manager.validate_configuration()
        config = {
            'allowed_origins': ', '.join(origin_status['allowed_origins']),
            'using_default_origins': origin_status['using_defaults'],
            'probe_timeout': self.ssl_checker.timeout,
            'http_check_timeout': getattr(self.ssl_checker.liveness_checker, 'timeout', 'unknown'),
            'block_private_hosts': self.host_validator.block_private_hosts,
            'log_level': self.logger_service.log_level,
            'lambda_function_name': os.getenv('AWS_LAMBDA_FUNCTION_NAME', 'unknown'),
            'lambda_memory_size': os.getenv('AWS_LAMBDA_FUNCTION_MEMORY_SIZE', 'unknown'),
            'lambda_timeout': os.getenv('AWS_LAMBDA_FUNCTION_TIMEOUT', 'unknown')
        }

        self.logger_service.log_configuration_info(config)

        validation = self.config_validator.validate_all_configurations()
        for error in validation['errors']:
            self.logger_service.logger.error(f"配置错误: {error}")

        self.logger_service.logger.debug(self.config_validator.get_configuration_summary(validation))

    def handle(self, event: Dict[str, Any]) -> Dict[str, Any]:
        """
        处理单个HTTP请求

        Args:
            event: API Gateway代理事件（v1或v2格式）

        Returns:
            dict: 代理响应（statusCode, headers, body）
        """
        start_time = time.monotonic()

        method = self._get_method(event)
        origin = self._get_header(event, 'Origin')
        host = self._get_query_parameter(event, 'host')
        cors_headers = self.cors_policy.build_headers(origin)

        self.logger_service.log_request(method, host, origin)

        # CORS预检请求
        if method == 'OPTIONS':
            response = self._empty_response(204, cors_headers)

        elif method != 'GET':
            response = self._json_response({'error': 'Method not allowed'}, 405, cors_headers)

        else:
            error_message = self.host_validator.validate(host)
            if error_message:
                response = self._json_response({'error': error_message}, 400, cors_headers)
            else:
                report = self._probe(host, start_time)
                response = self._json_response(report.to_dict(), 200, cors_headers)

        self.logger_service.log_response(response['statusCode'], self._elapsed_ms(start_time))
        return response

    def _probe(self, host: str, start_time: float) -> CertificateReport:
        """
        执行探测，探测失败以数据形式返回

        Args:
            host: 已校验的主机名
            start_time: 请求开始时间

        Returns:
            CertificateReport: 探测报告
        """
        self.logger_service.log_probe_start(host)

        try:
            report = self.ssl_checker.check_certificate(host)
        except Exception as e:
            self.logger_service.log_error(host, e)
            report = CertificateReport(
                host=host,
                status=STATUS_ERROR,
                response_time_ms=self._elapsed_ms(start_time),
                checked_at=datetime.now(timezone.utc),
                error=str(e) or "Unknown error"
            )

        self.logger_service.log_report(report)
        return report

    def _get_method(self, event: Dict[str, Any]) -> str:
        """读取请求方法，兼容REST API (v1) 和 HTTP API (v2) 事件格式"""
        method = event.get('httpMethod')

        if not method:
            request_context = event.get('requestContext') or {}
            method = (request_context.get('http') or {}).get('method')

        return (method or '').upper()

    def _get_header(self, event: Dict[str, Any], name: str) -> Optional[str]:
        """读取请求头（不区分大小写）"""
        headers = event.get('headers') or {}
        name_lower = name.lower()

        for key, value in headers.items():
            if key.lower() == name_lower:
                return value

        return None

    def _get_query_parameter(self, event: Dict[str, Any], name: str) -> Optional[str]:
        params = event.get('queryStringParameters') or {}
        return params.get(name)

    def _json_response(self, data: Dict[str, Any], status_code: int,
                       extra_headers: Dict[str, str]) -> Dict[str, Any]:
        """
        构建JSON响应

        Args:
            data: 响应数据
            status_code: HTTP状态码
            extra_headers: 额外的响应头（CORS）

        Returns:
            dict: 代理响应
        """
        headers = {'Content-Type': 'application/json'}
        headers.update(extra_headers)

        return {
            'statusCode': status_code,
            'headers': headers,
            'body': json.dumps(data, indent=2, ensure_ascii=False)
        }

    def _empty_response(self, status_code: int, extra_headers: Dict[str, str]) -> Dict[str, Any]:
        headers = {'Content-Type': 'application/json'}
        headers.update(extra_headers)

        return {
            'statusCode': status_code,
            'headers': headers,
            'body': ''
        }

    def _elapsed_ms(self, start_time: float) -> int:
        return int((time.monotonic() - start_time) * 1000)


_api: Optional[SSLCertificateProbeAPI] = None


def get_api() -> SSLCertificateProbeAPI:
    """
    获取API实例，冷启动时创建，之后在同一容器内复用

    Returns:
        SSLCertificateProbeAPI: API实例
    """
    global _api

    if _api is None:
        _api = SSLCertificateProbeAPI()

    return _api


def lambda_handler(event: Dict[str, Any], context: Any) -> Dict[str, Any]:
    """
    Lambda函数入口点

    Args:
        event: API Gateway代理事件
        context: Lambda运行时上下文

    Returns:
        dict: 代理响应
    """
    try:
        return get_api().handle(event or {})

    except Exception as e:
        # 处理未捕获的异常（例如事件格式错误）
        logging.getLogger("ssl_certificate_probe").exception(
            f"Lambda函数执行时发生严重错误: {type(e).__name__}: {str(e)}"
        )

        return {
            'statusCode': 500,
            'headers': {'Content-Type': 'application/json'},
            'body': json.dumps({'error': 'Internal server error'}, indent=2)
        }
