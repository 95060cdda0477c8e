#!/usr/bin/env python3
"""Replay a recorded route through the pyguia pipeline.

Feeds position fixes and resolved addresses into :class:`GuiaPipeline`
and prints what would be spoken, so threshold and text changes can be
checked without a device.

Usage
-----
::

    python scripts/replay_route.py                 # built-in demo route
    python scripts/replay_route.py route.json -v   # recorded route

A route file is a JSON list of steps::

    [
      {"position": {"coords": {"latitude": -18.60, "longitude": -43.38}, "timestamp": 0},
       "address": {"municipio": "Serro", "bairro": "Centro"}},
      ...
    ]

Options::

    --step-delay SECONDS   Pause between steps (default: 0.2)
    --speech-seconds S     Simulated utterance length (default: 0.05)
    --json                 Print every notification as JSON
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import Any

# Allow running from the repo root without installing the package.
_repo = Path(__file__).resolve().parent.parent
_src = _repo / "src"
if _src.is_dir():
    sys.path.insert(0, str(_src))

from pydantic import BaseModel  # noqa: E402

from pyguia import GuiaConfig, GuiaPipeline, VoiceDescriptor  # noqa: E402
from pyguia.speech.engine import UtteranceCallbacks, UtteranceConfig  # noqa: E402

_DEMO_ROUTE: list[dict[str, Any]] = [
    {
        "position": {"coords": {"latitude": -18.6040, "longitude": -43.3790, "accuracy": 8}, "timestamp": 0},
        "address": {"municipio": "Serro", "bairro": "Centro", "logradouro": "Rua Direita"},
    },
    {
        "position": {"coords": {"latitude": -18.6041, "longitude": -43.3790, "accuracy": 8}, "timestamp": 5_000},
    },
    {
        "position": {"coords": {"latitude": -18.6090, "longitude": -43.3810, "accuracy": 12}, "timestamp": 20_000},
        "address": {"municipio": "Serro", "bairro": "Centro", "logradouro": "Rua da Purificação"},
    },
    {
        "position": {"coords": {"latitude": -18.4520, "longitude": -43.4980, "accuracy": 20}, "timestamp": 900_000},
        "address": {"municipio": "Serro", "bairro": "Milho Verde", "logradouro": "Estrada Real"},
    },
    {
        "position": {"coords": {"latitude": -18.2440, "longitude": -43.6000, "accuracy": 9}, "timestamp": 2_400_000},
        "address": {"municipio": "Diamantina", "bairro": "Centro", "logradouro": "Rua da Quitanda"},
    },
]


class ConsoleEngine:
    """Speech engine that prints utterances and ends them after a fixed delay."""

    def __init__(self, speech_seconds: float) -> None:
        self._speech_seconds = speech_seconds
        self._pending: asyncio.TimerHandle | None = None

    def get_voices(self) -> list[VoiceDescriptor]:
        return [
            VoiceDescriptor(name="console-en", language_tag="en-US", is_local=True),
            VoiceDescriptor(name="console-pt", language_tag="pt-BR", is_local=True),
        ]

    def speak(self, config: UtteranceConfig, callbacks: UtteranceCallbacks) -> None:
        voice = config.voice.name if config.voice else "-"
        print(f"  [{voice} rate={config.rate} pitch={config.pitch}] {config.text}")
        loop = asyncio.get_running_loop()
        self._pending = loop.call_later(self._speech_seconds, callbacks.on_end)

    def cancel(self) -> None:
        if self._pending is not None:
            self._pending.cancel()
            self._pending = None

    def pause(self) -> None:
        pass

    def resume(self) -> None:
        pass


def _load_route(path: str | None) -> list[dict[str, Any]]:
    if path is None:
        return _DEMO_ROUTE
    data = json.loads(Path(path).read_text(encoding="utf-8"))
    if not isinstance(data, list):
        raise SystemExit(f"{path}: expected a JSON list of steps")
    return data


def _print_json(payload: BaseModel) -> None:
    print(json.dumps({"type": type(payload).__name__, **payload.model_dump(mode="json", exclude={"raw"})}))


async def main() -> None:
    parser = argparse.ArgumentParser(description="Replay a route through the pyguia pipeline.")
    parser.add_argument("route", nargs="?", help="JSON route file (default: built-in demo)")
    parser.add_argument("--step-delay", type=float, default=0.2, help="Pause between steps in seconds")
    parser.add_argument("--speech-seconds", type=float, default=0.05, help="Simulated utterance length")
    parser.add_argument("--json", action="store_true", dest="json_mode", help="Print notifications as JSON")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    args = parser.parse_args()

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")
    else:
        logging.basicConfig(level=logging.WARNING)

    route = _load_route(args.route)
    config = GuiaConfig.from_env(queue_timer_interval=0.1)

    async with GuiaPipeline(ConsoleEngine(args.speech_seconds), config) as guia:
        if args.json_mode:
            guia.subscribe_positions(_print_json)
            guia.subscribe_address_changes(_print_json)
        else:
            guia.subscribe_positions(lambda event: print(f"position: {event.kind}"))

        for index, step in enumerate(route, start=1):
            print(f"step {index}")
            position = step.get("position")
            if position is not None:
                event = guia.submit_position(position)
                if event is not None and not event.accepted:
                    continue
            address = step.get("address")
            if address is not None:
                guia.submit_address(address)
            await asyncio.sleep(args.step_delay)

        guia.announce_full_address()
        while guia.is_speaking() or guia.get_queue_size():
            await asyncio.sleep(args.speech_seconds)


if __name__ == "__main__":
    asyncio.run(main())
