from start_server import _port


def test_port_from_environment_value():
    assert _port("9001") == 9001


def test_invalid_port_falls_back_to_default(capsys):
    assert _port("eighty") == 8000
    assert "Ignoring invalid PORT" in capsys.readouterr().err
