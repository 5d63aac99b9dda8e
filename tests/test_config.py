import pathlib

import attr
import pytest

from gringotts.config import DEFAULT_CLIPBOARD, Config, default_root


def test_default_root_xdg(monkeypatch, tmp_path):
    monkeypatch.setenv('XDG_DATA_HOME', str(tmp_path))
    assert default_root() == tmp_path / 'gringotts'


def test_default_root_home(monkeypatch, tmp_path):
    monkeypatch.delenv('XDG_DATA_HOME', raising=False)
    monkeypatch.setenv('HOME', str(tmp_path))
    assert default_root() == tmp_path / '.local' / 'share' / 'gringotts'


def test_defaults(tmp_path):
    config = Config(root=str(tmp_path))
    assert config.root == pathlib.Path(tmp_path)
    assert config.length == 50
    assert config.clipboard == DEFAULT_CLIPBOARD


def test_clipboard_is_split(tmp_path):
    config = Config(root=tmp_path, clipboard="xsel --input --clipboard")
    assert config.clipboard == ('xsel', '--input', '--clipboard')


def test_recipient_and_tty(tmp_path):
    config = Config(root=tmp_path, recipient='key@example.invalid', tty='/dev/pts/9')
    assert config.recipient == 'key@example.invalid'
    assert config.tty == '/dev/pts/9'


@pytest.mark.parametrize('kwargs', [{'length': -1}, {'clipboard': ''}])
def test_invalid(tmp_path, kwargs):
    with pytest.raises(ValueError):
        Config(root=tmp_path, **kwargs)


def test_frozen(tmp_path):
    config = Config(root=tmp_path)
    with pytest.raises(attr.exceptions.FrozenInstanceError):
        config.length = 10
