import pytest

from burrow.utils.coord_codec import decode_coords, encode_coords, rle_decode, rle_encode


def test_encode_coords_sorted_deltas():
    assert encode_coords([(3, 4), (1, 2), (1, 5)]) == "D:1,2|0,3|2,-1"
    assert encode_coords([]) == ""


def test_decode_coords_inverse():
    coords = [(10, 3), (2, 9), (2, 8), (40, 1)]
    assert decode_coords(encode_coords(coords)) == sorted(coords)
    assert decode_coords("") == []


@pytest.mark.parametrize("payload", ["X:1,2", "D:1", "D:1,a", "D:1,2|3"])
def test_decode_coords_rejects_garbage(payload):
    with pytest.raises(ValueError):
        decode_coords(payload)


def test_rle():
    assert rle_encode("###..#") == "3#2.1#"
    assert rle_encode("") == ""
    row = "#" * 12 + "~~=" + " " * 4 + "#"
    assert rle_decode(rle_encode(row)) == row


@pytest.mark.parametrize("payload", ["#", "3#2"])
def test_rle_decode_rejects_garbage(payload):
    with pytest.raises(ValueError):
        rle_decode(payload)
