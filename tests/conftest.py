import pytest
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import rsa

from app.main import app

def pytest_collection_modifyitems(config, items):
    for item in items:
        if "integration_tests" in item.nodeid:
            item.add_marker(pytest.mark.integration)
        elif "unit_tests" in item.nodeid:
            item.add_marker(pytest.mark.unit)

@pytest.fixture(autouse=True)
def reset_app_context():
    """Clear any service context a test installed on the app."""
    yield
    if hasattr(app.state, "context"):
        del app.state.context

@pytest.fixture(scope="session")
def rsa_private_key():
    """A real RSA key, generated once per test session."""
    return rsa.generate_private_key(public_exponent=65537, key_size=2048)

@pytest.fixture(scope="session")
def private_key_pem(rsa_private_key) -> str:
    """PKCS#1 PEM, the format stored in Secrets Manager."""
    return rsa_private_key.private_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PrivateFormat.TraditionalOpenSSL,
        encryption_algorithm=serialization.NoEncryption(),
    ).decode("utf-8")

@pytest.fixture(scope="session")
def public_key(rsa_private_key):
    return rsa_private_key.public_key()
