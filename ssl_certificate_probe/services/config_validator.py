"""
配置验证服务
"""
import os
from typing import Dict, Any, Optional
import logging

from .origin_config import ORIGIN_PATTERN
from .ssl_checker import DEFAULT_PROBE_TIMEOUT
from .http_checker import DEFAULT_HTTP_CHECK_TIMEOUT


VALID_LOG_LEVELS = {'DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'}
BOOLEAN_VALUES = {'1', '0', 'true', 'false', 'yes', 'no'}


class ConfigValidator:
    """配置验证器"""

    def __init__(self):
        """初始化配置验证器"""
        self.logger = logging.getLogger(__name__)

    def validate_all_configurations(self) -> Dict[str, Any]:
        """
        验证所有配置

        Returns:
            Dict[str, Any]: 验证结果
        """
        validation_result = {
            'is_valid': True,
            'errors': [],
            'warnings': [],
            'configurations': {}
        }

        validators = {
            'origins': self.validate_origins_configuration,
            'logging': self.validate_logging_configuration,
            'timeouts': self.validate_timeout_configuration,
            'security': self.validate_security_configuration,
            'lambda': self.validate_lambda_configuration
        }

        for name, validator in validators.items():
            result = validator()
            validation_result['configurations'][name] = result

            if not result['is_valid']:
                validation_result['is_valid'] = False
                validation_result['errors'].extend(result['errors'])

            validation_result['warnings'].extend(result['warnings'])

        return validation_result

    def validate_origins_configuration(self) -> Dict[str, Any]:
        """
        验证CORS来源配置

        Returns:
            Dict[str, Any]: 来源配置验证结果
        """
        result = {
            'is_valid': True,
            'errors': [],
            'warnings': [],
            'valid_origins': [],
            'invalid_origins': []
        }

        origins_str = os.getenv('ALLOWED_ORIGINS', '')

        if not origins_str.strip():
            result['warnings'].append("ALLOWED_ORIGINS未设置，使用默认来源列表")
            return result

        for origin in (item.strip() for item in origins_str.split(',')):
            if not origin:
                continue
            if ORIGIN_PATTERN.fullmatch(origin):
                result['valid_origins'].append(origin)
            else:
                result['invalid_origins'].append(origin)
                result['warnings'].append(f"来源格式无效: {origin}")

        if not result['valid_origins']:
            result['is_valid'] = False
            result['errors'].append("ALLOWED_ORIGINS中没有有效的来源")

        return result

    def validate_logging_configuration(self) -> Dict[str, Any]:
        """验证日志级别"""
        result = {
            'is_valid': True,
            'errors': [],
            'warnings': [],
            'log_level': os.getenv('LOG_LEVEL', 'INFO')
        }

        if result['log_level'].upper() not in VALID_LOG_LEVELS:
            result['warnings'].append(f"日志级别无效: {result['log_level']}，将使用INFO")

        return result

    def validate_timeout_configuration(self) -> Dict[str, Any]:
        """
        验证超时配置

        Returns:
            Dict[str, Any]: 超时配置验证结果
        """
        result = {
            'is_valid': True,
            'errors': [],
            'warnings': []
        }
        result['probe_timeout'] = self._parse_timeout('PROBE_TIMEOUT', DEFAULT_PROBE_TIMEOUT, result)
        result['http_check_timeout'] = self._parse_timeout('HTTP_CHECK_TIMEOUT', DEFAULT_HTTP_CHECK_TIMEOUT, result)

        lambda_timeout = self._get_lambda_timeout()
        if lambda_timeout is not None:
            # 最坏情况：TLS超时 + HEAD超时 + GET超时
            worst_case = result['probe_timeout'] + 2 * result['http_check_timeout']
            if worst_case >= lambda_timeout:
                result['warnings'].append(
                    f"探测最长耗时 {worst_case:.0f}秒 超过Lambda超时时间 {lambda_timeout}秒"
                )

        return result

    def _parse_timeout(self, var_name: str, default: float, result: Dict[str, Any]) -> float:
        value = os.getenv(var_name)
        if not value:
            return default

        try:
            timeout = float(value)
        except ValueError:
            result['warnings'].append(f"{var_name}格式无效: {value}，将使用默认值{default:g}秒")
            return default

        if timeout <= 0:
            result['is_valid'] = False
            result['errors'].append(f"{var_name}必须大于0: {value}")
            return default

        if timeout > 30:
            result['warnings'].append(f"{var_name}过长: {timeout:g}秒")

        return timeout

    def validate_security_configuration(self) -> Dict[str, Any]:
        """验证内网地址拦截配置"""
        result = {
            'is_valid': True,
            'errors': [],
            'warnings': [],
            'block_private_hosts': False
        }

        value = os.getenv('BLOCK_PRIVATE_HOSTS', 'false').strip().lower()

        if value not in BOOLEAN_VALUES:
            result['warnings'].append(f"BLOCK_PRIVATE_HOSTS格式无效: {value}，视为false")
        else:
            result['block_private_hosts'] = value in ('1', 'true', 'yes')

        if not result['block_private_hosts']:
            result['warnings'].append("未启用内网地址拦截，host参数可能指向内部网络")

        return result

    def validate_lambda_configuration(self) -> Dict[str, Any]:
        """
        验证Lambda配置

        Returns:
            Dict[str, Any]: Lambda配置验证结果
        """
        result = {
            'is_valid': True,
            'errors': [],
            'warnings': [],
            'function_name': None,
            'memory_size': None,
            'timeout': self._get_lambda_timeout()
        }

        function_name = os.getenv('AWS_LAMBDA_FUNCTION_NAME')
        if function_name:
            result['function_name'] = function_name
        else:
            result['warnings'].append("AWS_LAMBDA_FUNCTION_NAME未设置，可能不在Lambda环境中运行")

        memory_size = os.getenv('AWS_LAMBDA_FUNCTION_MEMORY_SIZE')
        if memory_size:
            try:
                result['memory_size'] = int(memory_size)
            except ValueError:
                result['warnings'].append(f"Lambda内存大小格式无效: {memory_size}")

        return result

    def _get_lambda_timeout(self) -> Optional[int]:
        timeout = os.getenv('AWS_LAMBDA_FUNCTION_TIMEOUT')
        if not timeout:
            return None

        try:
            return int(timeout)
        except ValueError:
            return None

    def get_configuration_summary(self, validation_result: Optional[Dict[str, Any]] = None) -> str:
        """
        获取配置摘要

        Args:
            validation_result: 已有的验证结果，如果为None则重新验证

        Returns:
            str: 配置摘要文本
        """
        if validation_result is None:
            validation_result = self.validate_all_configurations()

        lines = [
            "配置验证摘要",
            "=" * 30
        ]

        if validation_result['is_valid']:
            lines.append("✅ 配置验证通过")
        else:
            lines.append("❌ 配置验证失败")

        if validation_result['errors']:
            lines.append("\n错误:")
            for error in validation_result['errors']:
                lines.append(f"  • {error}")

        if validation_result['warnings']:
            lines.append("\n警告:")
            for warning in validation_result['warnings']:
                lines.append(f"  • {warning}")

        configurations = validation_result['configurations']
        lines.append("\n配置详情:")
        lines.append(f"  有效来源数量: {len(configurations['origins']['valid_origins'])}")
        lines.append(f"  日志级别: {configurations['logging']['log_level']}")
        lines.append(f"  TLS连接超时: {configurations['timeouts']['probe_timeout']:g}秒")
        lines.append(f"  HTTP检查超时: {configurations['timeouts']['http_check_timeout']:g}秒")
        lines.append(f"  内网地址拦截: {'开启' if configurations['security']['block_private_hosts'] else '关闭'}")

        return "\n".join(lines)
