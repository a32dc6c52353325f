from authstate_core.models import (
    AppStateSyncKeyData, KeyCategory, decoder_for, long_to_int,
)


def test_long_to_int_shapes():
    assert long_to_int(1700000000) == 1700000000
    assert long_to_int("1700000000") == 1700000000
    assert long_to_int({"low": 1700000000, "high": 0, "unsigned": False}) == 1700000000
    assert long_to_int({"low": 5, "high": 1, "unsigned": True}) == (1 << 32) + 5
    assert long_to_int({"low": -1, "high": -1, "unsigned": False}) == -1
    assert long_to_int({"low": -1, "high": -1, "unsigned": True}) == (1 << 64) - 1


def test_app_state_sync_key_accepts_long_timestamp():
    rec = AppStateSyncKeyData.from_dict({
        "keyData": b"\x01\x02",
        "fingerprint": {"rawId": 3},
        "timestamp": {"low": 1700000000, "high": 0, "unsigned": False},
    })
    assert rec == AppStateSyncKeyData(key_data=b"\x01\x02", fingerprint={"rawId": 3}, timestamp=1700000000)


def test_decoder_table():
    decode = decoder_for(KeyCategory.APP_STATE_SYNC_KEY)
    assert isinstance(decode({"keyData": b"k"}), AppStateSyncKeyData)
    same = {"v": 1}
    assert decoder_for(KeyCategory.SESSION)(same) is same
