import json
import pytest
from authstate_core.codec import encode_value, decode_value
from authstate_core.models import AppStateSyncKeyData


def test_nested_bytes_roundtrip():
    value = {
        "keyPair": {"private": bytes(range(32)), "public": b"\x05" + b"\xff" * 32},
        "ids": [1, 2, 3],
        "blobs": [b"", b"\x00\x01", {"deep": b"abc"}],
        "flag": True,
        "none": None,
        "name": "émoji ✓",
    }
    assert decode_value(encode_value(value)) == value


def test_bytes_are_tagged():
    doc = json.loads(encode_value({"k": b"hi"}))
    assert doc == {"k": {"type": "Buffer", "data": "aGk="}}


def test_bytearray_and_memoryview_come_back_as_bytes():
    out = decode_value(encode_value([bytearray(b"ab"), memoryview(b"cd")]))
    assert out == [b"ab", b"cd"]
    assert all(isinstance(v, bytes) for v in out)


def test_decodes_byte_list_and_legacy_marker():
    assert decode_value('{"type":"Buffer","data":[1,2,3]}') == b"\x01\x02\x03"
    assert decode_value('{"buffer":true,"value":"aGk="}') == b"hi"


def test_plain_objects_untouched():
    assert decode_value('{"type":"session","data":"x"}') == {"type": "session", "data": "x"}


def test_to_dict_objects_encode():
    rec = AppStateSyncKeyData(key_data=b"\x01\x02", fingerprint={"rawId": 7}, timestamp=99)
    out = decode_value(encode_value(rec))
    assert out == {"keyData": b"\x01\x02", "fingerprint": {"rawId": 7}, "timestamp": 99}


def test_unserializable_leaf_raises():
    with pytest.raises(TypeError):
        encode_value({"bad": object()})


def test_corrupt_text_raises_value_error():
    with pytest.raises(ValueError):
        decode_value("{not json")


def test_lone_surrogates_are_escaped_and_roundtrip():
    value = {"name": "Ana \ud83d", "tail": "x\udc80", "ok": "émoji ✓"}
    text = encode_value(value)
    assert text.isascii()
    text.encode("utf-8")  # must be storable as UTF-8
    assert decode_value(text) == value


def test_marker_shaped_object_with_bad_payload_stays_a_dict():
    for obj in (
        {"type": "Buffer", "data": "hello world"},
        {"type": "Buffer", "data": "aGk"},
        {"type": "Buffer", "data": 5},
        {"type": "Buffer", "data": [1, 300]},
        {"buffer": True, "value": {"x": 1}},
    ):
        assert decode_value(encode_value(obj)) == obj
