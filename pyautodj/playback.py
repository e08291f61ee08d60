"""Module for queued playback through the default audio output device"""
import collections
import importlib
import logging
import threading

import lazy_loader as lazy
import numpy as np

from pyautodj.audio import SegmentAudio
from pyautodj.exceptions import NoOutputDeviceError
from pyautodj.repeating import RepeatingSource

librosa = lazy.load("librosa")

# Lazy-load sounddevice: call `sd()` to return the module.
# (We use this instead of `lazy-loader`, to get clearer error messages when
# sounddevice is missing dependencies like PortAudio.)
_sd = None
def sd():
    global _sd
    _sd = _sd or importlib.import_module("sounddevice")
    return _sd


def check_output_device(device=None) -> None:
    """Raises NoOutputDeviceError unless an output device can be opened."""
    try:
        sd().query_devices(device, kind="output")
    except Exception as e:
        # OSError when PortAudio is missing, PortAudioError or ValueError when no device matches
        raise NoOutputDeviceError() from e


class AudioSink:
    """Appendable queue of sources played back-to-back on one output stream.

    The output format is fixed by the first segment conformed to the sink;
    later segments are resampled and channel-mapped to match it.
    """

    def __init__(self, device=None, stream_factory=None) -> None:
        self.device = device
        self.samplerate: int | None = None
        self.channels: int | None = None
        self.stream = None
        self._stream_factory = stream_factory
        self._queue: collections.deque[RepeatingSource] = collections.deque()
        self._lock = threading.Lock()
        self._drained = threading.Event()
        self._drained.set()

    def conform(self, audio: SegmentAudio) -> SegmentAudio:
        """Returns ``audio`` in the sink's output format, adopting it if none is set yet."""
        if self.samplerate is None:
            self.samplerate = audio.rate
            self.channels = audio.n_channels
            return audio

        data = audio.playback_audio
        if audio.rate != self.samplerate:
            logging.info(f"Resampling {audio.name} from {audio.rate} Hz to {self.samplerate} Hz.")
            data = librosa.resample(data.T, orig_sr=audio.rate, target_sr=self.samplerate).T
        if data.shape[1] != self.channels:
            mono = data if data.shape[1] == 1 else data.mean(axis=1, keepdims=True)
            data = np.repeat(mono, self.channels, axis=1)
        if data is audio.playback_audio:
            return audio
        return SegmentAudio(data, self.samplerate, name=audio.name)

    def append(self, source: RepeatingSource) -> None:
        with self._lock:
            self._queue.append(source)
            self._drained.clear()
        if self.stream is None:
            self._start(source)

    def __len__(self) -> int:
        with self._lock:
            return len(self._queue)

    @property
    def empty(self) -> bool:
        return self._drained.is_set()

    def _start(self, source: RepeatingSource) -> None:
        if self.samplerate is None:
            self.samplerate = source.sample_rate
            self.channels = source.channels
        factory = self._stream_factory or sd().OutputStream
        self.stream = factory(
            samplerate=self.samplerate,
            channels=self.channels,
            device=self.device,
            dtype="float32",
            callback=self._callback,
        )
        self.stream.start()

    def _callback(self, outdata, frames, time, status):
        if status:
            logging.warning(f"Audio output: {status}")
        filled = 0
        with self._lock:
            while filled < frames and self._queue:
                chunk = self._queue[0].read(frames - filled)
                if len(chunk) == 0:
                    self._queue.popleft()
                    continue
                outdata[filled : filled + len(chunk)] = chunk
                filled += len(chunk)
            if not self._queue:
                self._drained.set()
        if filled < frames:
            outdata[filled:] = 0

    def sleep_until_end(self) -> None:
        """Blocks until every queued source has been played."""
        # Workaround for python issue on Windows
        # (threading.Event().wait() not interruptable with Ctrl-C on Windows): https://bugs.python.org/issue35935
        while not self._drained.wait(0.5):
            pass

    def close(self) -> None:
        if self.stream is not None:
            self.stream.stop()
            self.stream.close()
            self.stream = None
