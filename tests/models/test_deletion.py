import pytest

from dispatch.models import ChangeDeletionFlags, decode_bitmask, encode_flags


@pytest.mark.parametrize("bitmask", range(16))
def test_roundtrip(bitmask):
    assert encode_flags(decode_bitmask(bitmask)) == bitmask


@pytest.mark.parametrize("bitmask", [0, 1, 2, 3, 4, 5, 6, 7, 8, 9, 12, 15, 16, 17, 31, 255])
def test_flags(bitmask):
    flags = decode_bitmask(bitmask)
    assert flags.bitmask == bitmask
    assert flags.content == bool(bitmask & 1)
    assert flags.comment == bool(bitmask & 2)
    assert flags.user == bool(bitmask & 4)
    assert flags.restricted == bool(bitmask & 8)


class test_high_bits:
    def test_preserved_on_decode(self):
        flags = decode_bitmask(16 | 4)
        assert flags.bitmask == 20
        assert flags == ChangeDeletionFlags(bitmask=20, content=False, comment=False, user=True, restricted=False)

    def test_not_set_on_encode(self):
        assert encode_flags(decode_bitmask(0b110101)) == 0b0101

    def test_encode_ignores_stored_bitmask(self):
        flags = ChangeDeletionFlags(bitmask=0, content=True, comment=False, user=False, restricted=True)
        assert encode_flags(flags) == 9


class test_from_api:
    def test_none(self):
        assert ChangeDeletionFlags.from_api(None) is None

    def test_int(self):
        assert ChangeDeletionFlags.from_api(6) == decode_bitmask(6)

    def test_dict(self):
        value = {"bitmask": 3, "content": True, "comment": True, "user": False, "restricted": False}
        assert ChangeDeletionFlags.from_api(value) == decode_bitmask(3)

    def test_dict_booleans_are_rederived(self):
        value = {"bitmask": 4, "content": True, "comment": False, "user": False, "restricted": False}
        flags = ChangeDeletionFlags.from_api(value)
        assert flags.user is True
        assert flags.content is False

    def test_bool_rejected(self):
        with pytest.raises(TypeError):
            ChangeDeletionFlags.from_api(True)

    @pytest.mark.parametrize("value", ["5", {"content": True}, [1]])
    def test_garbage(self, value):
        with pytest.raises(ValueError):
            ChangeDeletionFlags.from_api(value)


def test_to_api():
    assert decode_bitmask(13).to_api() == {
        "bitmask": 13,
        "content": True,
        "comment": False,
        "user": True,
        "restricted": True,
    }
