import pytest

from shiftxfer.cipher import decipher, decipher_file, encipher, encipher_file


def test_encipher_shifts_each_byte_up():
    assert encipher(b"abc") == b"bcd"


def test_decipher_shifts_each_byte_down():
    assert decipher(b"bcd") == b"abc"


def test_encipher_wraps_highest_byte():
    assert encipher(b"\xff") == b"\x00"


def test_decipher_wraps_lowest_byte():
    assert decipher(b"\x00") == b"\xff"


def test_round_trip_all_byte_values():
    data = bytes(range(256))
    assert decipher(encipher(data)) == data
    assert encipher(decipher(data)) == data


def test_encipher_preserves_length_and_changes_every_byte():
    data = b"hello, world\n" * 10
    result = encipher(data)
    assert len(result) == len(data)
    assert all(a != b for a, b in zip(data, result))


def test_empty_input():
    assert encipher(b"") == b""
    assert decipher(b"") == b""


def test_accepts_bytearray():
    data = bytearray(b"xyz")
    assert decipher(encipher(data)) == b"xyz"


def test_file_round_trip(tmp_path):
    source = tmp_path / "plain.txt"
    enciphered = tmp_path / "enc.txt"
    restored = tmp_path / "restored.txt"
    content = b"line one\nline two\n\x00\xff binary tail"
    source.write_bytes(content)

    written = encipher_file(source, enciphered)
    assert written == len(content)
    assert enciphered.read_bytes() == encipher(content)

    written = decipher_file(enciphered, restored)
    assert written == len(content)
    assert restored.read_bytes() == content


def test_encipher_file_missing_source(tmp_path):
    with pytest.raises(FileNotFoundError):
        encipher_file(tmp_path / "missing.txt", tmp_path / "out.txt")
    assert not (tmp_path / "out.txt").exists()


def test_decipher_file_missing_source(tmp_path):
    with pytest.raises(FileNotFoundError):
        decipher_file(tmp_path / "missing.txt", tmp_path / "out.txt")