import pytest

from krypto.modules.rsa import generate_rsa_keypair


@pytest.fixture(scope="session")
def rsa_keypair():
    # 1024 bits keeps key generation fast
    return generate_rsa_keypair(1024)


@pytest.fixture
def feed_input(monkeypatch):
    """Replace builtins.input with a scripted sequence of answers."""

    def _feed(*answers):
        answers = iter(answers)

        def fake_input(prompt=""):
            try:
                return next(answers)
            except StopIteration:
                raise EOFError from None

        monkeypatch.setattr("builtins.input", fake_input)

    return _feed
