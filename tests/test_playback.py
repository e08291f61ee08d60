from unittest.mock import Mock, patch

import numpy as np
import pytest

from pyautodj.exceptions import NoOutputDeviceError
from pyautodj.playback import AudioSink, check_output_device
from pyautodj.repeating import repeat_with_count


def pull(sink: AudioSink, frames: int, channels: int = 1) -> np.ndarray:
    outdata = np.full((frames, channels), np.nan, dtype=np.float32)
    sink._callback(outdata, frames, None, None)
    return outdata


def test_append_opens_stream_in_source_format(make_audio):
    factory = Mock()
    sink = AudioSink(stream_factory=factory)
    sink.append(repeat_with_count(make_audio(frames=10, channels=2, rate=48000), 1))

    factory.assert_called_once()
    kwargs = factory.call_args.kwargs
    assert kwargs["samplerate"] == 48000
    assert kwargs["channels"] == 2
    assert kwargs["callback"] == sink._callback
    factory.return_value.start.assert_called_once()

    sink.append(repeat_with_count(make_audio(frames=10, channels=2, rate=48000), 1))
    factory.assert_called_once()
    assert len(sink) == 2


def test_callback_plays_sources_back_to_back(make_audio):
    sink = AudioSink(stream_factory=Mock())
    first = make_audio(frames=100)
    second = make_audio(frames=50)
    sink.append(repeat_with_count(first, 2))
    sink.append(repeat_with_count(second, 1))
    assert not sink.empty

    out = np.concatenate([pull(sink, 64) for _ in range(4)])

    expected = np.concatenate([first.playback_audio] * 2 + [second.playback_audio])
    np.testing.assert_array_equal(out[:250], expected)
    np.testing.assert_array_equal(out[250:], 0)
    assert sink.empty
    assert len(sink) == 0


def test_sleep_until_end_returns_once_drained(make_audio):
    sink = AudioSink(stream_factory=Mock())
    sink.sleep_until_end()

    sink.append(repeat_with_count(make_audio(frames=10), 1))
    pull(sink, 32)
    sink.sleep_until_end()
    assert sink.empty


def test_callback_outputs_silence_when_idle():
    sink = AudioSink(stream_factory=Mock())
    np.testing.assert_array_equal(pull(sink, 16, channels=2), 0)


def test_conform_adopts_first_format(make_audio):
    sink = AudioSink(stream_factory=Mock())
    audio = make_audio(channels=2, rate=22050)
    assert sink.conform(audio) is audio
    assert (sink.samplerate, sink.channels) == (22050, 2)
    assert sink.conform(make_audio(channels=2, rate=22050)).n_channels == 2


def test_conform_maps_channels(make_audio):
    sink = AudioSink(stream_factory=Mock())
    sink.conform(make_audio(channels=2))

    mono = make_audio(frames=20, channels=1)
    stereo = sink.conform(mono)
    assert stereo.playback_audio.shape == (20, 2)
    np.testing.assert_array_equal(stereo.playback_audio[:, 0], stereo.playback_audio[:, 1])

    mono_sink = AudioSink(stream_factory=Mock())
    mono_sink.conform(make_audio(channels=1))
    downmixed = mono_sink.conform(make_audio(frames=20, channels=2))
    assert downmixed.playback_audio.shape == (20, 1)


def test_conform_resamples(make_audio):
    sink = AudioSink(stream_factory=Mock())
    sink.conform(make_audio(rate=44100))

    with patch("pyautodj.playback.librosa") as librosa:
        librosa.resample.side_effect = lambda y, orig_sr, target_sr: np.zeros((y.shape[0], y.shape[1] * 2))
        resampled = sink.conform(make_audio(frames=100, rate=22050))

    librosa.resample.assert_called_once()
    assert librosa.resample.call_args.kwargs == {"orig_sr": 22050, "target_sr": 44100}
    assert resampled.rate == 44100
    assert resampled.length == 200


def test_close_stops_stream(make_audio):
    factory = Mock()
    sink = AudioSink(stream_factory=factory)
    sink.append(repeat_with_count(make_audio(), 1))
    sink.close()
    factory.return_value.stop.assert_called_once()
    factory.return_value.close.assert_called_once()
    assert sink.stream is None


def test_no_output_device():
    fake_sd = Mock()
    fake_sd.query_devices.side_effect = ValueError("No output device matching")
    with patch("pyautodj.playback.sd", return_value=fake_sd):
        with pytest.raises(NoOutputDeviceError):
            check_output_device()


def test_output_device_available():
    fake_sd = Mock()
    with patch("pyautodj.playback.sd", return_value=fake_sd):
        check_output_device("speakers")
    fake_sd.query_devices.assert_called_once_with("speakers", kind="output")
