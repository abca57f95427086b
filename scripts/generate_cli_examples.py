from __future__ import annotations

import shutil
import subprocess
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable

EXAMPLES_ROOT = Path("examples/cli-actions")
BASE_ARGS = ["--resolution", "200"]


@dataclass
class Expected:
    path: Path


@dataclass
class Example:
    name: str
    args: list[str]
    expected: list[Expected]

    @property
    def root(self) -> Path:
        return EXAMPLES_ROOT / self.name

    def full_args(self) -> list[str]:
        return [sys.executable, "explore.py", *self.args]


def _image(name: str, filename: str) -> str:
    return str(EXAMPLES_ROOT / name / filename)


EXAMPLES: list[Example] = [
    Example(
        name="initial",
        args=[*BASE_ARGS, "--output", _image("initial", "initial.png")],
        expected=[Expected(EXAMPLES_ROOT / "initial" / "initial.png")],
    ),
    Example(
        name="zoom",
        args=[*BASE_ARGS, "--action", "zoom 20 60 100 140", "--action", "overlay",
              "--output", _image("zoom", "seahorse.png")],
        expected=[Expected(EXAMPLES_ROOT / "zoom" / "seahorse.png")],
    ),
    Example(
        name="pan",
        args=[*BASE_ARGS, "--action", "pan 100 100 160 100", "--output", _image("pan", "shifted.png")],
        expected=[Expected(EXAMPLES_ROOT / "pan" / "shifted.png")],
    ),
    Example(
        name="theme",
        args=[*BASE_ARGS, "--action", "theme cyan", "--output", _image("theme", "cyan.png")],
        expected=[Expected(EXAMPLES_ROOT / "theme" / "cyan.png")],
    ),
    Example(
        name="iterations",
        args=[*BASE_ARGS, "--action", "zoom 20 60 100 140", "--action", "iterations 400",
              "--output", _image("iterations", "detailed.png")],
        expected=[Expected(EXAMPLES_ROOT / "iterations" / "detailed.png")],
    ),
    Example(
        name="undo-redo",
        args=[*BASE_ARGS, "--action", "zoom 20 60 100 140", "--action", "theme red", "--action", "undo",
              "--action", "undo", "--action", "redo", "--output", _image("undo-redo", "zoomed-grey.png")],
        expected=[Expected(EXAMPLES_ROOT / "undo-redo" / "zoomed-grey.png")],
    ),
    Example(
        name="format",
        args=[*BASE_ARGS, "--format", "webp", "--output", _image("format", "initial.webp")],
        expected=[Expected(EXAMPLES_ROOT / "format" / "initial.webp")],
    ),
    Example(
        name="save",
        args=[*BASE_ARGS, "--action", "zoom 20 60 100 140", "--action", "theme magenta",
              "--save", str(EXAMPLES_ROOT / "save" / "session")],
        expected=[Expected(EXAMPLES_ROOT / "save" / "session.txt")],
    ),
    Example(
        name="load",
        args=[*BASE_ARGS, "--load", str(EXAMPLES_ROOT / "save" / "session.txt"), "--action", "overlay",
              "--output", _image("load", "restored.png")],
        expected=[Expected(EXAMPLES_ROOT / "load" / "restored.png")],
    ),
    Example(
        name="gif",
        args=[*BASE_ARGS, "--action", "zoom 20 60 100 140", "--action", "zoom 50 50 150 150",
              "--action", "cycle-theme", "--gif", str(EXAMPLES_ROOT / "gif" / "tour.gif")],
        expected=[Expected(EXAMPLES_ROOT / "gif" / "tour.gif")],
    ),
]


def _ensure_clean(paths: Iterable[Path]) -> None:
    for path in paths:
        if path.is_dir():
            shutil.rmtree(path)
        elif path.exists():
            path.unlink()


def _verify(example: Example) -> None:
    for expected in example.expected:
        if not expected.path.is_file():
            raise RuntimeError(f"Expected file {expected.path} was not created")


def main() -> None:
    EXAMPLES_ROOT.mkdir(parents=True, exist_ok=True)
    for example in EXAMPLES:
        print(f"\n[cli-example] {example.name}")
        _ensure_clean([example.root])
        example.root.mkdir(parents=True, exist_ok=True)
        subprocess.run(example.full_args(), check=True)
        _verify(example)
    print("\nAll CLI examples generated successfully.")


if __name__ == "__main__":
    main()
