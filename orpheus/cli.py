"""Command-line entry point: speak text or render it to a WAV file."""
from __future__ import annotations

import argparse
import logging
import sys
from typing import TYPE_CHECKING, List, Optional

from .config import SynthesisSettings
from .engine import SynthesizerEngine
from .errors import OrpheusError, OutputDeviceError
from .sinks import AudioSink, TeeSink, WavFileSink

if TYPE_CHECKING:
    from .playback import PyAudioSink

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="orpheus-tts",
        description="Formant speech synthesizer for English text",
    )
    parser.add_argument("text", nargs="+", help="Text to speak")
    parser.add_argument("--wav", type=str, default=None, help="Also write the audio to this WAV file")
    parser.add_argument("--no-play", action="store_true", help="Do not open the audio device")
    parser.add_argument("--layers", type=int, default=None, help="Noise layers per fricative")
    parser.add_argument("--config", type=str, default=None, help="JSON settings file")
    parser.add_argument("--seed", type=int, default=None, help="Seed for the noise generator")
    parser.add_argument("--phonemes", action="store_true", help="Print the phoneme sequence")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    return parser


def _load_settings(args: argparse.Namespace) -> SynthesisSettings:
    base = SynthesisSettings.from_file(args.config) if args.config else None
    settings = SynthesisSettings.from_env(base=base)
    if args.layers is not None:
        settings = settings.with_layers(args.layers)
    return settings


def _open_wav(path: str, sampleRate: int) -> WavFileSink:
    try:
        return WavFileSink(path, sampleRate)
    except OSError as error:
        raise OutputDeviceError(f"Cannot write WAV file {path}: {error}") from error


def _open_player(sampleRate: int) -> "PyAudioSink":
    try:
        from .playback import PyAudioSink
    except ImportError as error:
        raise OutputDeviceError(
            "PyAudio is not installed; install the 'playback' extra or pass --no-play"
        ) from error
    return PyAudioSink(sampleRate)


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    text = " ".join(args.text)

    try:
        settings = _load_settings(args)
        engine = SynthesizerEngine(settings=settings, seed=args.seed)
        if args.phonemes:
            print(" ".join(engine.phonemes(text)))

        sinks: List[AudioSink] = []
        player = _open_player(settings.sample_rate) if not args.no_play else None
        if player is not None:
            sinks.append(player)
        wav_sink = _open_wav(args.wav, settings.sample_rate) if args.wav else None
        if wav_sink is not None:
            sinks.append(wav_sink)
        if not sinks:
            logger.warning("Nothing to do: --no-play given without --wav")
            return 0

        try:
            engine.speak(text, sink=TeeSink(sinks))
        finally:
            if player is not None:
                player.close()
            if wav_sink is not None:
                wav_sink.close()
    except OrpheusError as error:
        logger.error("%s", error)
        return 1
    if args.wav:
        logger.info("Wrote %s", args.wav)
    return 0


if __name__ == "__main__":
    sys.exit(main())
