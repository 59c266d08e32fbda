"""
测试公共fixture
"""
import pytest
from datetime import datetime, timezone, timedelta
from unittest.mock import MagicMock

from cryptography import x509
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import ec
from cryptography.x509.oid import NameOID


def build_certificate(common_name="example.com", issuer_org="Test CA", issuer_cn="Test CA R1",
                      not_before=None, not_after=None, serial_number=0x0A1B2C3D):
    """生成自签名测试证书，返回DER字节"""
    now = datetime.now(timezone.utc)
    not_before = not_before or now - timedelta(days=30)
    not_after = not_after or now + timedelta(days=90)

    key = ec.generate_private_key(ec.SECP256R1())

    subject_attributes = []
    if common_name:
        subject_attributes.append(x509.NameAttribute(NameOID.COMMON_NAME, common_name))

    issuer_attributes = [x509.NameAttribute(NameOID.COUNTRY_NAME, "US")]
    if issuer_org:
        issuer_attributes.append(x509.NameAttribute(NameOID.ORGANIZATION_NAME, issuer_org))
    if issuer_cn:
        issuer_attributes.append(x509.NameAttribute(NameOID.COMMON_NAME, issuer_cn))

    cert = (
        x509.CertificateBuilder()
        .subject_name(x509.Name(subject_attributes))
        .issuer_name(x509.Name(issuer_attributes))
        .public_key(key.public_key())
        .serial_number(serial_number)
        .not_valid_before(not_before)
        .not_valid_after(not_after)
        .sign(key, hashes.SHA256())
    )

    return cert.public_bytes(serialization.Encoding.DER)


@pytest.fixture
def make_certificate():
    """证书生成器"""
    return build_certificate


@pytest.fixture
def valid_certificate():
    """有效期内的证书"""
    return build_certificate()


@pytest.fixture
def expired_certificate():
    """已过期的证书"""
    now = datetime.now(timezone.utc)
    return build_certificate(
        not_before=now - timedelta(days=400),
        not_after=now - timedelta(days=10)
    )


@pytest.fixture
def liveness_checker():
    """模拟HTTP存活检查器"""
    checker = MagicMock()
    checker.check.return_value = 200
    checker.timeout = 5.0
    return checker


def mock_tls_connection(mock_connection, mock_context, der_cert, version="TLSv1.3", alpn="h2"):
    """配置socket.create_connection和ssl.create_default_context的模拟对象，返回TLS socket"""
    mock_sock = MagicMock()
    mock_connection.return_value.__enter__.return_value = mock_sock

    mock_ssl_sock = MagicMock()
    mock_ssl_sock.getpeercert.return_value = der_cert
    mock_ssl_sock.version.return_value = version
    mock_ssl_sock.selected_alpn_protocol.return_value = alpn
    mock_context.return_value.wrap_socket.return_value.__enter__.return_value = mock_ssl_sock

    return mock_ssl_sock


@pytest.fixture
def tls_connection():
    """TLS连接模拟配置函数"""
    return mock_tls_connection
