import dataclasses
import math
import struct
import wave
from datetime import timedelta
from pathlib import Path

import pytest

from wavparser import ReaderConfig, WaveDocument, WriterConfig
from wavparser.codec.header import FormatCode
from wavparser.codec.samples import normalize_int, quantize
from wavparser.errors import ErrorKind, ParsingError


def _write_test_wav(path: Path, sample_rate: int = 48_000, duration_sec: float = 0.1) -> None:
    num_frames = int(sample_rate * duration_sec)
    with wave.open(str(path), "wb") as wav:
        wav.setnchannels(2)
        wav.setsampwidth(2)
        wav.setframerate(sample_rate)
        frames = bytearray()
        for idx in range(num_frames):
            t = idx / sample_rate
            left = int(20000 * math.sin(2 * math.pi * 440 * t))
            right = int(15000 * math.sin(2 * math.pi * 880 * t))
            frames += int(left).to_bytes(2, "little", signed=True)
            frames += int(right).to_bytes(2, "little", signed=True)
        wav.writeframes(bytes(frames))


def _sine_document(bits: int, sample_rate: int = 44_100, count: int = 441, channels: int = 2) -> WaveDocument:
    samples = [
        [0.85 * math.sin(2 * math.pi * 441 * (idx / sample_rate) + ch) for idx in range(count)]
        for ch in range(channels)
    ]
    return WaveDocument(
        channels=samples,
        sample_rate=sample_rate,
        bits_per_sample=bits,
        block_align=channels * bits // 8,
    )


def _max_abs_diff(a: WaveDocument, b: WaveDocument) -> float:
    return max(abs(x - y) for ch_a, ch_b in zip(a.channels, b.channels) for x, y in zip(ch_a, ch_b))


def test_empty_document_defaults() -> None:
    document = WaveDocument()
    assert document.channel_count == 2
    assert document.sample_rate == 44_100
    assert document.bits_per_sample == 16
    assert document.block_align == 4
    assert document.audio_format.code is FormatCode.PCM
    assert document.samples_count == 0
    assert document.duration == timedelta(0)
    assert str(document) == "44100Hz 2 channels, 16 bits"


def test_unequal_channels_are_rejected() -> None:
    with pytest.raises(ValueError):
        WaveDocument(channels=[[0.0, 0.1], [0.0]])


def test_invalid_metadata_is_rejected() -> None:
    with pytest.raises(ValueError):
        WaveDocument(channels=[])
    with pytest.raises(ValueError):
        WaveDocument(sample_rate=0)
    with pytest.raises(ValueError):
        WaveDocument(bits_per_sample=12)


@pytest.mark.parametrize("bits", [8, 16, 24, 32, 64])
def test_round_trip_within_quantization(bits: int) -> None:
    document = _sine_document(bits)
    restored = WaveDocument.from_bytes(document.to_bytes())

    assert restored.channel_count == document.channel_count
    assert restored.sample_rate == document.sample_rate
    assert restored.bits_per_sample == bits
    assert restored.samples_count == document.samples_count
    tolerance = max(1 / 2 ** (bits - 1), 1e-12)
    assert _max_abs_diff(document, restored) <= tolerance


def test_reencoding_at_higher_depth_adds_no_coarser_error() -> None:
    source = WaveDocument.from_bytes(_sine_document(8).to_bytes())
    for bits in (16, 24):
        widened = dataclasses.replace(source, bits_per_sample=bits)
        restored = WaveDocument.from_bytes(widened.to_bytes())
        assert _max_abs_diff(source, restored) <= 1 / 2 ** (bits - 1)


@pytest.mark.parametrize("bits", [16, 24])
def test_widened_8bit_codes_requantize_exactly(bits: int) -> None:
    codes = list(range(-128, 128))
    source = WaveDocument(
        channels=[[normalize_int(code, 8) for code in codes]],
        bits_per_sample=bits,
        block_align=bits // 8,
    )
    restored = WaveDocument.from_bytes(source.to_bytes())

    assert restored.bits_per_sample == bits
    assert [quantize(sample, 8) for sample in restored.channels[0]] == codes


def test_reencoding_at_lower_depth_is_bounded_by_lower_step() -> None:
    source = WaveDocument.from_bytes(_sine_document(16).to_bytes())
    narrowed = dataclasses.replace(source, bits_per_sample=8)
    restored = WaveDocument.from_bytes(narrowed.to_bytes())
    assert _max_abs_diff(source, restored) <= 1 / 2**7


def test_square_wave_plus_six_db_saturates() -> None:
    square = [0.85 if (idx // 50) % 2 == 0 else -0.85 for idx in range(400)]
    document = WaveDocument(channels=[square], sample_rate=44_100, bits_per_sample=8, block_align=1)
    parsed = WaveDocument.from_bytes(document.to_bytes())
    assert parsed.samples_count == 400

    louder = parsed.change_volume(6)
    expected = min(0.85 * 10**0.3, 1.0)
    for sample in louder.channels[0]:
        assert abs(abs(sample) - expected) <= 1 / 128


def test_declared_data_overflow_is_an_error() -> None:
    raw = bytearray(_sine_document(16, count=10).to_bytes())
    data_at = raw.index(b"data")
    (size,) = struct.unpack_from("<I", raw, data_at + 4)
    struct.pack_into("<I", raw, data_at + 4, size + 64)

    with pytest.raises(ParsingError) as excinfo:
        WaveDocument.from_bytes(bytes(raw))
    assert excinfo.value.kind is ErrorKind.CHUNK_OVERFLOW


def test_load_stdlib_written_wav(tmp_path: Path) -> None:
    wav_path = tmp_path / "test.wav"
    _write_test_wav(wav_path)

    document = WaveDocument.from_path(wav_path)
    assert document.sample_rate == 48_000
    assert document.channel_count == 2
    assert document.bits_per_sample == 16
    assert document.samples_count == 4800
    assert document.duration == timedelta(milliseconds=100)
    assert document.start_data_offset == 44
    assert max(document.channels[0]) <= 1.0
    assert min(document.channels[1]) >= -1.0


def test_streamed_and_buffered_loads_agree(tmp_path: Path) -> None:
    wav_path = tmp_path / "stream.wav"
    _write_test_wav(wav_path, duration_sec=0.02)

    buffered = WaveDocument.from_path(wav_path)
    streamed = WaveDocument.from_path(wav_path, ReaderConfig(read_entire=False))
    assert buffered.channels == streamed.channels


def test_load_with_target_sample_rate(tmp_path: Path) -> None:
    wav_path = tmp_path / "a441.wav"
    _sine_document(16, count=400, channels=1).save(wav_path)

    document = WaveDocument.from_path(wav_path, ReaderConfig(target_sample_rate=48_000))
    assert document.sample_rate == 48_000
    assert document.samples_count == 436


def test_save_and_reload(tmp_path: Path) -> None:
    document = _sine_document(24, count=100)
    target = document.save(tmp_path / "out.wav", WriterConfig(software_tag="unit-test"))

    assert target.exists()
    assert b"unit-test\x00" in target.read_bytes()
    reloaded = WaveDocument.from_path(target)
    assert reloaded.bits_per_sample == 24
    assert _max_abs_diff(document, reloaded) <= 1 / 2**23


def test_sine_peak_and_mean() -> None:
    document = WaveDocument.from_bytes(_sine_document(16, count=44_100, channels=1).to_bytes())
    samples = document.channels[0]
    assert 0.85 / 1.00037 <= max(samples) <= 0.85 * 1.00037
    assert 0.85 / 1.00037 <= -min(samples) <= 0.85 * 1.00037
    assert abs(sum(samples) / len(samples)) <= 2e-5


def test_clone_does_not_alias_samples() -> None:
    document = _sine_document(16, count=10)
    copy = document.clone()
    copy.channels[0][0] = 0.5

    assert document.channels[0][0] == 0.0
    assert copy.sample_rate == document.sample_rate


def test_duration_rounds_half_to_even() -> None:
    assert WaveDocument(channels=[[0.0] * 44_100]).duration == timedelta(seconds=1)
    assert WaveDocument(channels=[[0.0]], sample_rate=48_000).duration == timedelta(microseconds=21)
    assert WaveDocument(channels=[[0.0]], sample_rate=2_000_000).duration == timedelta(0)
    assert WaveDocument(channels=[[0.0] * 3], sample_rate=2_000_000).duration == timedelta(microseconds=2)


def test_floor_samples_count() -> None:
    document = WaveDocument()
    assert document.floor_samples_count(timedelta(milliseconds=10)) == 441
    assert document.floor_samples_count(0.5) == 22_050
    assert document.floor_samples_count(1 / 44_100 * 0.99) == 0


def test_add_silence_is_non_destructive() -> None:
    document = WaveDocument(channels=[[0.5], [-0.5]], sample_rate=100)
    padded = document.add_silence(0.05)

    assert padded.channels == [[0.5, 0.0, 0.0, 0.0, 0.0, 0.0], [-0.5, 0.0, 0.0, 0.0, 0.0, 0.0]]
    assert document.samples_count == 1
    assert padded.add_silence(timedelta(seconds=0.02)).samples_count == 8

    with pytest.raises(ValueError):
        document.add_silence(-0.05)


def test_str_includes_duration() -> None:
    document = WaveDocument(channels=[[0.0] * 44_100], sample_rate=44_100, bits_per_sample=16, block_align=2)
    assert str(document) == "44100Hz 1 channels, 16 bits, duration: 0:00:01"
