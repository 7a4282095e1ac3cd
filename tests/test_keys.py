import pytest

from tileoverlay.templates import ChunkKey, MalformedChunkKeyError, TileKey


def test_tile_key_is_zero_padded():
    assert str(TileKey(5, 47)) == "0005,0047"
    assert str(TileKey(-3, 12)) == "-0003,0012"


def test_chunk_key_string_and_prefix():
    key = ChunkKey(1231, 47, 183, 9)

    assert str(key) == "1231,0047,183,009"
    assert str(key).startswith(str(key.tile))
    assert key.tile == TileKey(1231, 47)
    assert key.offset == (183, 9)


def test_chunk_key_parse_round_trip():
    key = ChunkKey(375, 1846, 276, 188)

    assert ChunkKey.parse(str(key)) == key
    assert ChunkKey.parse("376,1846,000,188") == ChunkKey(376, 1846, 0, 188)


@pytest.mark.parametrize("bad", ["", "1,2,3", "1,2,3,4,5", "a,b,c,d", "1,2,-3,4"])
def test_chunk_key_parse_rejects_malformed(bad):
    with pytest.raises(MalformedChunkKeyError):
        ChunkKey.parse(bad)


def test_keys_are_ordered_and_hashable():
    keys = [TileKey(1, 0), TileKey(0, 5), TileKey(0, 1)]

    assert sorted(keys) == [TileKey(0, 1), TileKey(0, 5), TileKey(1, 0)]
    assert len({TileKey(2, 2), TileKey(2, 2)}) == 1
