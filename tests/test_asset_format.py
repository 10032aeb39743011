import pytest

from itfliesby.asset_format import (
    EXTENSION,
    IMAGE_DATA_OFFSET,
    INDEX_SIZE,
    VERIFICATION,
    VERIFICATION_SIZE,
    AssetFileHeader,
    AssetFileType,
    AssetIndex,
    classify_path,
    header_size,
    image_allocation_size_bytes,
    image_size_bytes,
)


@pytest.mark.parametrize(
    "path, expected",
    [
        ("sprites/connor.png", AssetFileType.IMAGE),
        ("models/ship.fbx", AssetFileType.MODEL),
        ("shaders/quad.vert", AssetFileType.TEXT),
        ("README", AssetFileType.TEXT),
        (".png", AssetFileType.TEXT),
        ("image.", AssetFileType.TEXT),
        ("image.PNG", AssetFileType.TEXT),
        ("archive.png.txt", AssetFileType.TEXT),
    ],
)
def test_classify_path(path, expected):
    assert classify_path(path) == expected


def test_file_type_labels():
    paths = ("notes.txt", "sprite.png", "ship.fbx")
    assert [classify_path(p).label for p in paths] == ["TEXT", "IMAGE", "MODEL"]


def test_header_size_grows_by_index_size():
    assert header_size(0) == VERIFICATION_SIZE
    for count in range(1, 5):
        assert header_size(count) - header_size(count - 1) == INDEX_SIZE


def test_header_size_rejects_negative():
    with pytest.raises(ValueError):
        header_size(-1)


def test_image_sizes():
    assert image_size_bytes(0, 10) == 0
    assert image_size_bytes(3, 5) == image_size_bytes(5, 3)
    assert image_size_bytes(2, 2) == 4 * image_size_bytes(1, 1)
    assert image_allocation_size_bytes(7, 9) - image_size_bytes(7, 9) == IMAGE_DATA_OFFSET


def test_image_size_rejects_negative():
    with pytest.raises(ValueError):
        image_size_bytes(-1, 4)


def test_pack_worked_example():
    header = AssetFileHeader([AssetIndex("a", 1, 2, 3)])
    expected = (
        b"IFB\x01\x00\x00\x00"
        + b"a"
        + b"\x00" * 31
        + b"\x01\x00\x00\x00\x02\x00\x00\x00\x03\x00\x00\x00"
    )
    assert header.pack() == expected


def test_pack_empty_header_starts_with_verification():
    packed = AssetFileHeader().pack()
    assert packed.startswith(VERIFICATION)
    assert len(packed) == VERIFICATION_SIZE
    assert VERIFICATION == EXTENSION.upper().encode()


def test_round_trip():
    header = AssetFileHeader(
        [
            AssetIndex("CONNOR", 100, 108, header_size(2)),
            AssetIndex("SHADER", 40, 41, header_size(2) + 108),
        ]
    )
    packed = header.pack()
    assert len(packed) == header.size
    assert AssetFileHeader.unpack(packed) == header


def test_unpack_ignores_trailing_data():
    header = AssetFileHeader([AssetIndex("X", 5, 6, 7)])
    assert AssetFileHeader.unpack(header.pack() + b"asset bytes") == header


def test_unpack_rejects_bad_verification():
    packed = bytearray(AssetFileHeader([AssetIndex("X")]).pack())
    packed[0:3] = b"XYZ"
    with pytest.raises(ValueError):
        AssetFileHeader.unpack(bytes(packed))


def test_unpack_rejects_truncated_data():
    packed = AssetFileHeader([AssetIndex("X"), AssetIndex("Y")]).pack()
    with pytest.raises(ValueError):
        AssetFileHeader.unpack(packed[:-1])
    with pytest.raises(ValueError):
        AssetFileHeader.unpack(packed[:2])


def test_index_round_trip_and_tag_limits():
    index = AssetIndex("t" * 31, 1, 2, 3)
    assert AssetIndex.unpack(index.pack()) == index
    with pytest.raises(ValueError):
        AssetIndex("t" * 32)
    with pytest.raises(ValueError):
        AssetIndex("a\x00b")


def test_index_rejects_out_of_range_fields():
    with pytest.raises(ValueError):
        AssetIndex("X", file_size=-1)
    with pytest.raises(ValueError):
        AssetIndex("X", offset=1 << 32)
    with pytest.raises(ValueError):
        AssetIndex.unpack(b"short")