import pytest

from spadecore.datastream import Color, DataStream, StreamError


def test_u16_is_little_endian():
    stream = DataStream(2)
    stream.write_u16(0x1234)
    assert stream.getvalue() == b"\x34\x12"


def test_float_wire_format():
    stream = DataStream(4)
    stream.write_float(1.0)
    assert stream.getvalue() == b"\x00\x00\x80\x3f"


@pytest.mark.parametrize("value", [0, 1, 255])
def test_u8_round_trip(value):
    stream = DataStream(1)
    stream.write_u8(value)
    stream.position = 0
    assert stream.read_u8() == value


@pytest.mark.parametrize("value", [0, 1, 0xABCD, 0xFFFF])
def test_u16_round_trip(value):
    stream = DataStream(2)
    stream.write_u16(value)
    assert DataStream(stream.getvalue()).read_u16() == value


@pytest.mark.parametrize("value", [0, 7, 0xDEADBEEF, 0xFFFFFFFF])
def test_u32_round_trip(value):
    stream = DataStream(4)
    stream.write_u32(value)
    assert DataStream(stream.getvalue()).read_u32() == value


def test_u8_truncates_like_a_byte():
    stream = DataStream(1)
    stream.write_u8(0x1FF)
    assert stream.getvalue() == bytes([0x1FF & 0xFF])


@pytest.mark.parametrize("value", [0.0, 1.5, -2.25, 64.0])
def test_float_round_trip(value):
    stream = DataStream(4)
    stream.write_float(value)
    assert DataStream(stream.getvalue()).read_float() == value


def test_color_rgb_wire_order_is_bgr():
    stream = DataStream(3)
    stream.write_color_rgb(Color(r=1, g=2, b=3))
    assert stream.getvalue() == bytes([3, 2, 1])


def test_color_rgb_round_trip_drops_alpha():
    stream = DataStream(3)
    stream.write_color_rgb(Color(r=10, g=20, b=30, a=40))
    assert DataStream(stream.getvalue()).read_color_rgb() == Color(r=10, g=20, b=30, a=0)


def test_color_argb_round_trip():
    color = Color(r=10, g=20, b=30, a=40)
    stream = DataStream(4)
    stream.write_color_argb(color)
    assert stream.getvalue() == bytes([30, 20, 10, 40])
    assert DataStream(stream.getvalue()).read_color_argb() == color


def test_color_raw_round_trip():
    color = Color(r=0x11, g=0x22, b=0x33, a=0x44)
    assert Color.from_raw(color.raw) == color
    assert color.raw & 0xFF == color.b


def test_vector3f_from_sequence_round_trip():
    stream = DataStream(12)
    stream.write_vector3f((1.0, 2.5, -3.0))
    reader = DataStream(stream.getvalue())
    assert [reader.read_float() for _ in range(3)] == [1.0, 2.5, -3.0]


def test_vector3f_from_attributes():
    class Vec:
        x, y, z = 4.0, 5.0, 6.0

    stream = DataStream(12)
    stream.write_vector3f(Vec())
    reader = DataStream(stream.getvalue())
    assert [reader.read_float() for _ in range(3)] == [4.0, 5.0, 6.0]


def test_bytes_round_trip():
    stream = DataStream(5)
    stream.write_bytes(b"hello")
    stream.position = 0
    assert stream.read_bytes(5) == b"hello"
    assert stream.left() == 0


def test_left_and_skip_clamp():
    stream = DataStream(b"abcdef")
    assert stream.left() == 6
    stream.skip(2)
    assert stream.left() == 4
    stream.skip(100)
    assert stream.position == 6
    assert stream.left() == 0


def test_read_past_end_raises_and_keeps_position():
    stream = DataStream(b"\x01\x02\x03")
    stream.skip(1)
    with pytest.raises(StreamError):
        stream.read_u32()
    assert stream.position == 1
    assert stream.read_u16() == 0x0302


def test_write_past_end_raises_and_leaves_buffer():
    stream = DataStream(3)
    with pytest.raises(StreamError):
        stream.write_u32(1)
    assert stream.getvalue() == bytes(3)
    assert stream.position == 0


def test_short_color_read_raises():
    with pytest.raises(StreamError):
        DataStream(b"\x01\x02").read_color_rgb()
    with pytest.raises(StreamError):
        DataStream(b"\x01\x02\x03").read_color_argb()


def test_negative_length_rejected():
    with pytest.raises(ValueError):
        DataStream(-1)


def test_sequential_packet():
    stream = DataStream(6)
    stream.write_u8(17)
    stream.write_u8(3)
    stream.write_u8(2)
    stream.write_bytes(b"hey")
    reader = DataStream(stream.getvalue())
    assert (reader.read_u8(), reader.read_u8(), reader.read_u8()) == (17, 3, 2)
    assert reader.read_bytes(3) == b"hey"