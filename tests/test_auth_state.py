import stat

from Client_module.auth_state import AuthContext, TokenStore


def test_init_without_persisted_token(tmp_path):
    auth = AuthContext(TokenStore(tmp_path / 'token'))
    assert auth.is_loading

    auth.init()

    assert not auth.is_loading
    assert not auth.is_authenticated
    assert auth.token is None


def test_login_persists_across_launches(tmp_path):
    path = tmp_path / 'nested' / 'token'
    AuthContext(TokenStore(path)).init().login('abc.def.ghi')

    relaunched = AuthContext(TokenStore(path)).init()

    assert relaunched.is_authenticated
    assert relaunched.token == 'abc.def.ghi'
    assert stat.S_IMODE(path.stat().st_mode) == 0o600


def test_logout_clears_token(tmp_path):
    path = tmp_path / 'token'
    auth = AuthContext(TokenStore(path)).init()
    auth.login('abc')

    auth.logout()
    auth.logout()

    assert not auth.is_authenticated
    assert not path.exists()


def test_blank_token_file_is_logged_out(tmp_path):
    path = tmp_path / 'token'
    path.write_text('  \n')

    assert not AuthContext(TokenStore(path)).init().is_authenticated
