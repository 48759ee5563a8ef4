from __future__ import annotations

import shutil
import subprocess
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable

EXAMPLES_ROOT = Path("examples/cli-options")
BASE_ARGS = ["--width", "320", "--height", "240", "--mode", "image"]


@dataclass
class Expected:
    path: Path
    is_dir: bool = False


@dataclass
class Example:
    name: str
    args: list[str]
    expected: list[Expected]
    clean: list[Path] | None = None

    def full_args(self) -> list[str]:
        return [sys.executable, "explore.py", *self.args]


def _single_image(name: str, filename: str, *args: str) -> Example:
    path = EXAMPLES_ROOT / name / filename
    return Example(
        name=name,
        args=[*BASE_ARGS, *args, "--output", str(path)],
        expected=[Expected(path)],
        clean=[EXAMPLES_ROOT / name],
    )


EXAMPLES: list[Example] = [
    _single_image("default", "default-view.png"),
    _single_image("grayscale", "grayscale.png", "--color-scheme", "grayscale"),
    _single_image("rainbow", "rainbow.png", "--color-scheme", "rainbow"),
    _single_image("max-iterations", "deep.png", "--max-iterations", "500"),
    _single_image("colormap", "twilight.png", "--colormap", "twilight_shifted"),
    _single_image("zoom-in", "zoomed.png", "--zoom-in", "--zoom-in"),
    _single_image("pan", "panned.png", "--pan", "left", "--pan", "left", "--pan", "up"),
    _single_image("select", "seahorse-valley.png", "--select", "130", "100", "170", "130"),
    _single_image("zoom-at", "elephant-valley.png", "--zoom-at", "232", "120", "8"),
    _single_image("show-coordinates", "annotated.png", "--show-coordinates", "--zoom-out"),
    Example(
        name="gif",
        args=[
            "--width", "320", "--height", "240",
            "--mode", "gif",
            "--double-click", "100", "120",
            "--double-click", "160", "120",
            "--wheel", "160", "120", "1",
            "--output", str(EXAMPLES_ROOT / "gif" / "gestures.gif"),
        ],
        expected=[Expected(EXAMPLES_ROOT / "gif" / "gestures.gif")],
        clean=[EXAMPLES_ROOT / "gif"],
    ),
    Example(
        name="both",
        args=["--width", "320", "--height", "240", "--mode", "gif", "--mode", "image",
              "--zoom-in", "--output", str(EXAMPLES_ROOT / "both")],
        expected=[
            Expected(EXAMPLES_ROOT / "both", is_dir=True),
            Expected(EXAMPLES_ROOT / "both" / "explore.gif"),
            Expected(EXAMPLES_ROOT / "both" / "mandelbrot.png"),
        ],
        clean=[EXAMPLES_ROOT / "both"],
    ),
]


def _ensure_clean(paths: Iterable[Path]) -> None:
    for path in paths:
        if path.exists():
            if path.is_dir():
                shutil.rmtree(path)
            else:
                path.unlink()


def _prepare(example: Example) -> None:
    _ensure_clean(example.clean or [])
    for expected in example.expected:
        target = expected.path if expected.is_dir else expected.path.parent
        target.mkdir(parents=True, exist_ok=True)


def _verify(example: Example) -> None:
    for expected in example.expected:
        if expected.is_dir:
            if not expected.path.is_dir():
                raise RuntimeError(f"Expected directory {expected.path} was not created")
            if not any(expected.path.iterdir()):
                raise RuntimeError(f"Directory {expected.path} is empty")
        elif not expected.path.is_file():
            raise RuntimeError(f"Expected file {expected.path} was not created")


def main() -> None:
    EXAMPLES_ROOT.mkdir(parents=True, exist_ok=True)
    for example in EXAMPLES:
        print(f"\n[cli-example] {example.name}")
        _prepare(example)
        subprocess.run(example.full_args(), check=True)
        _verify(example)
    print("\nAll CLI examples generated successfully.")


if __name__ == "__main__":
    main()
