"""
配置验证器测试
"""
import pytest
import os
from unittest.mock import patch

from ssl_certificate_probe.services.config_validator import ConfigValidator


class TestConfigValidator:
    """配置验证器测试类"""

    def setup_method(self):
        """测试前准备"""
        self.validator = ConfigValidator()

    @patch.dict(os.environ, {}, clear=True)
    def test_defaults_are_valid(self):
        """测试未设置任何环境变量时配置有效"""
        result = self.validator.validate_all_configurations()

        assert result['is_valid'] is True
        assert result['errors'] == []
        assert set(result['configurations'].keys()) == {'origins', 'logging', 'timeouts', 'security', 'lambda'}
        assert result['configurations']['timeouts']['probe_timeout'] == 10.0
        assert result['configurations']['timeouts']['http_check_timeout'] == 5.0

    @patch.dict(os.environ, {'ALLOWED_ORIGINS': 'https://a.example.com,bad-origin'})
    def test_origins_with_invalid_entry(self):
        """测试来源列表包含无效条目"""
        result = self.validator.validate_origins_configuration()

        assert result['is_valid'] is True
        assert result['valid_origins'] == ['https://a.example.com']
        assert result['invalid_origins'] == ['bad-origin']
        assert "来源格式无效: bad-origin" in result['warnings']

    @patch.dict(os.environ, {'ALLOWED_ORIGINS': 'bad-origin'})
    def test_origins_all_invalid(self):
        """测试来源列表全部无效"""
        result = self.validator.validate_origins_configuration()

        assert result['is_valid'] is False
        assert "ALLOWED_ORIGINS中没有有效的来源" in result['errors']

    @patch.dict(os.environ, {'LOG_LEVEL': 'LOUD'})
    def test_invalid_log_level(self):
        """测试无效日志级别"""
        result = self.validator.validate_logging_configuration()

        assert result['is_valid'] is True
        assert any("日志级别无效" in warning for warning in result['warnings'])

    @patch.dict(os.environ, {'PROBE_TIMEOUT': 'abc', 'HTTP_CHECK_TIMEOUT': '-1'})
    def test_invalid_timeouts(self):
        """测试无效的超时配置"""
        result = self.validator.validate_timeout_configuration()

        assert result['is_valid'] is False
        assert result['probe_timeout'] == 10.0
        assert result['http_check_timeout'] == 5.0
        assert any("PROBE_TIMEOUT格式无效" in warning for warning in result['warnings'])
        assert any("HTTP_CHECK_TIMEOUT必须大于0" in error for error in result['errors'])

    @patch.dict(os.environ, {'PROBE_TIMEOUT': '10', 'HTTP_CHECK_TIMEOUT': '5', 'AWS_LAMBDA_FUNCTION_TIMEOUT': '15'})
    def test_timeouts_exceed_lambda_timeout(self):
        """测试探测耗时超过Lambda超时时间"""
        result = self.validator.validate_timeout_configuration()

        assert any("超过Lambda超时时间" in warning for warning in result['warnings'])

    @patch.dict(os.environ, {'BLOCK_PRIVATE_HOSTS': 'yes'})
    def test_security_enabled(self):
        """测试开启内网地址拦截"""
        result = self.validator.validate_security_configuration()

        assert result['block_private_hosts'] is True
        assert result['warnings'] == []

    @patch.dict(os.environ, {'BLOCK_PRIVATE_HOSTS': 'maybe'})
    def test_security_invalid_value(self):
        """测试内网拦截配置值无效"""
        result = self.validator.validate_security_configuration()

        assert result['block_private_hosts'] is False
        assert any("BLOCK_PRIVATE_HOSTS格式无效" in warning for warning in result['warnings'])

    @patch.dict(os.environ, {
        'AWS_LAMBDA_FUNCTION_NAME': 'ssl-certificate-probe',
        'AWS_LAMBDA_FUNCTION_MEMORY_SIZE': '256',
        'AWS_LAMBDA_FUNCTION_TIMEOUT': '30'
    })
    def test_lambda_configuration(self):
        """测试Lambda配置"""
        result = self.validator.validate_lambda_configuration()

        assert result['function_name'] == 'ssl-certificate-probe'
        assert result['memory_size'] == 256
        assert result['timeout'] == 30
        assert result['warnings'] == []

    @patch.dict(os.environ, {}, clear=True)
    def test_lambda_configuration_missing(self):
        """测试不在Lambda环境中运行"""
        result = self.validator.validate_lambda_configuration()

        assert result['function_name'] is None
        assert any("AWS_LAMBDA_FUNCTION_NAME未设置" in warning for warning in result['warnings'])

    @patch.dict(os.environ, {'PROBE_TIMEOUT': '0'}, clear=True)
    def test_configuration_summary(self):
        """测试配置摘要"""
        summary = self.validator.get_configuration_summary()

        assert "配置验证摘要" in summary
        assert "❌ 配置验证失败" in summary
        assert "PROBE_TIMEOUT必须大于0" in summary
        assert "TLS连接超时: 10秒" in summary
        assert "内网地址拦截: 关闭" in summary

    @patch.dict(os.environ, {}, clear=True)
    def test_configuration_summary_reuses_result(self):
        """测试摘要可以复用已有的验证结果"""
        validation = self.validator.validate_all_configurations()

        with patch.object(self.validator, 'validate_all_configurations') as mock_validate:
            summary = self.validator.get_configuration_summary(validation)

        mock_validate.assert_not_called()
        assert "✅ 配置验证通过" in summary
        assert "HTTP检查超时: 5秒" in summary
