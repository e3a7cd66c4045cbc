"""Tests for AudioProcessor decoding and resampling.

Covers decoding encoded WAV into a (channels, frames) float buffer,
rejection of empty and malformed input, and linear resampling.
"""

import numpy as np
import pytest

from speakika.core.exceptions import AudioDecodeError
from speakika.services.audio.processor import AudioProcessor, DecodedAudio


@pytest.fixture
def processor():
    """Create a default AudioProcessor (resamples to 16kHz)."""
    return AudioProcessor()


class TestDecode:
    """Verify decode() of encoded bytes."""

    def test_mono_wav(self, processor, sample_wav_bytes):
        """A mono 16kHz WAV decodes to one channel of 16000 frames."""
        audio = processor.decode(sample_wav_bytes)
        assert isinstance(audio, DecodedAudio)
        assert audio.channel_count == 1
        assert audio.frame_count == 16000
        assert audio.sample_rate == 16000
        assert audio.duration == pytest.approx(1.0)
        assert audio.samples.dtype == np.float32

    def test_samples_are_normalized(self, processor, sample_wav_bytes):
        """Decoded samples stay within [-1.0, 1.0] and carry the sine's peak."""
        audio = processor.decode(sample_wav_bytes)
        channel = audio.get_channel_data(0)
        assert channel.max() <= 1.0
        assert channel.min() >= -1.0
        assert channel.max() == pytest.approx(16000 / 32768, abs=1e-3)

    def test_stereo_wav(self, processor, stereo_wav_bytes):
        """Stereo input keeps both channels at the file's own rate."""
        audio = processor.decode(stereo_wav_bytes)
        assert audio.channel_count == 2
        assert audio.sample_rate == 44100
        np.testing.assert_allclose(audio.get_channel_data(0), audio.get_channel_data(1))

    def test_empty_bytes_raise(self, processor):
        """Empty input is rejected before any decoder runs."""
        with pytest.raises(AudioDecodeError, match="empty"):
            processor.decode(b"")

    def test_garbage_bytes_raise(self, processor):
        """Bytes that are not audio raise AudioDecodeError."""
        with pytest.raises(AudioDecodeError):
            processor.decode(b"definitely not an audio file" * 8)

    def test_header_without_frames_raises(self, processor, make_wav):
        """A valid WAV header with no frames is treated as undecodable."""
        with pytest.raises(AudioDecodeError):
            processor.decode(make_wav(b""))


class TestDecodedAudio:
    """Verify channel access and mixdown on DecodedAudio."""

    def test_channel_out_of_range(self, processor, sample_wav_bytes):
        """Asking for a channel past the last one raises IndexError."""
        audio = processor.decode(sample_wav_bytes)
        with pytest.raises(IndexError):
            audio.get_channel_data(1)

    def test_to_mono_averages_channels(self):
        """to_mono() averages channels into a 1-D float32 array."""
        samples = np.array([[1.0, 0.0, -1.0], [0.0, 0.0, 1.0]], dtype=np.float32)
        audio = DecodedAudio(samples=samples, sample_rate=8000)
        mono = audio.to_mono()
        assert mono.dtype == np.float32
        np.testing.assert_allclose(mono, [0.5, 0.0, 0.0])


class TestResample:
    """Verify linear resampling to the processor's rate."""

    def test_same_rate_is_identity(self, processor):
        audio = np.linspace(-1, 1, 100, dtype=np.float32)
        np.testing.assert_array_equal(processor.resample(audio, 16000), audio)

    def test_downsample_length(self, processor):
        """One second at 48kHz becomes 16000 samples."""
        audio = np.zeros(48000, dtype=np.float32)
        assert len(processor.resample(audio, 48000)) == 16000

    def test_upsample_preserves_endpoints(self, processor):
        audio = np.array([0.0, 1.0, 0.0, -1.0], dtype=np.float32)
        result = processor.resample(audio, 8000)
        assert len(result) == 8
        assert result[0] == pytest.approx(0.0)
        assert result[-1] == pytest.approx(-1.0)

    def test_target_rate_is_configurable(self):
        """A processor built for 8kHz halves a 16kHz clip."""
        audio = np.zeros(16000, dtype=np.float32)
        assert len(AudioProcessor(sample_rate=8000).resample(audio, 16000)) == 8000

