from scorecard_config import get_auth_token, get_grint_config


def test_grint_config_defaults(monkeypatch):
    monkeypatch.delenv('GRINT_BASE_URL', raising=False)
    monkeypatch.delenv('GRINT_TIMEOUT', raising=False)
    config = get_grint_config()
    assert config['base_url'] == 'https://www.thegrint.com'
    assert config['timeout'] == 15.0


def test_grint_config_from_environment(monkeypatch):
    monkeypatch.setenv('GRINT_BASE_URL', 'https://staging.grint.test/')
    monkeypatch.setenv('GRINT_TIMEOUT', '3.5')
    assert get_grint_config() == {'base_url': 'https://staging.grint.test', 'timeout': 3.5}


def test_bad_timeout_falls_back(monkeypatch):
    monkeypatch.setenv('GRINT_TIMEOUT', 'soon')
    assert get_grint_config()['timeout'] == 15.0


def test_auth_token(monkeypatch):
    monkeypatch.delenv('AUTH_TOKEN', raising=False)
    assert get_auth_token() == ''
    monkeypatch.setenv('AUTH_TOKEN', 'abc')
    assert get_auth_token() == 'abc'
