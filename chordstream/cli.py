"""Command-line interface for chordstream.

Provides commands for:
- listen: Recognize chords from a microphone in real time
- analyze: Recognize the chord progression of an audio file
- templates: Show the chord templates in match order
"""

import logging
import time
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from .core import RecognizerConfig, SourceUnavailableError
from .inference import format_progression

app = typer.Typer(
    name="chordstream",
    help="Real-time chord recognition from streaming audio",
    rich_markup_mode="markdown",
)
console = Console()


def _configure_logging(verbose: bool) -> None:
    """Route library logging through rich."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )


def _build_config(sample_rate: int, frame_size: int) -> RecognizerConfig:
    try:
        return RecognizerConfig(sample_rate=sample_rate, frame_size=frame_size)
    except ValueError as e:
        console.print(f"[red]Invalid configuration: {e}[/red]")
        raise typer.Exit(1)


@app.command()
def listen(
    duration: float = typer.Option(
        0.0, "-d", "--duration", help="Stop after this many seconds (0 = until Ctrl+C)"
    ),
    device: Optional[str] = typer.Option(
        None, "--device", help="Input device name or index"
    ),
    sample_rate: int = typer.Option(44100, "--sample-rate", help="Capture sample rate (Hz)"),
    frame_size: int = typer.Option(4096, "--frame-size", help="Samples per analysis frame"),
    poll: float = typer.Option(0.5, "--poll", help="Display refresh interval in seconds"),
    verbose: bool = typer.Option(False, "-v", "--verbose", help="Verbose output"),
):
    """Listen to an input device and print the chord progression as it forms.

    **Examples:**

        chordstream listen

        chordstream listen -d 30 --device 2
    """
    from .input import MicrophoneFrameSource
    from .recognizer import ChordRecognizer

    _configure_logging(verbose)
    config = _build_config(sample_rate, frame_size)

    if device is not None and device.isdigit():
        device = int(device)

    recognizer = ChordRecognizer(config)
    source = MicrophoneFrameSource(config.sample_rate, config.frame_size, device=device)

    # Surface setup errors before spawning the loop
    try:
        source.open()
    except SourceUnavailableError as e:
        console.print(f"[red]Error accessing microphone: {e}[/red]")
        raise typer.Exit(1)
    source.close()

    console.print("[green]Recording started... Play some music![/green] (Ctrl+C to stop)")
    thread = recognizer.start_in_background(source)
    started = time.time()
    shown = 0

    try:
        while thread.is_alive():
            time.sleep(poll)
            progression = recognizer.get_progression()
            if len(progression) < shown:
                shown = 0
            for chord in progression[shown:]:
                console.print(f"Detected: [bold cyan]{chord}[/bold cyan]")
            shown = len(progression)

            if duration > 0 and time.time() - started >= duration:
                break
    except KeyboardInterrupt:
        console.print("\n[yellow]Stopping...[/yellow]")
    finally:
        recognizer.stop()
        thread.join(timeout=max(1.0, 2 * config.frame_duration))

    _show_progression(recognizer.get_progression())


@app.command()
def analyze(
    input_file: Path = typer.Argument(..., help="Input audio file (WAV, MP3, FLAC, ...)"),
    sample_rate: int = typer.Option(44100, "--sample-rate", help="Analysis sample rate (Hz)"),
    frame_size: int = typer.Option(4096, "--frame-size", help="Samples per analysis frame"),
    offset: float = typer.Option(0.0, "--offset", help="Seconds to skip at the start of the file"),
    duration: Optional[float] = typer.Option(
        None, "-d", "--duration", help="Seconds to analyse after the offset"
    ),
    json_output: bool = typer.Option(
        False, "--json", help="Output results as JSON (for scripting)"
    ),
    verbose: bool = typer.Option(False, "-v", "--verbose", help="Verbose output"),
):
    """Recognize the chord progression of an audio file.

    **Examples:**

        chordstream analyze song.wav

        chordstream analyze song.mp3 --json

        chordstream analyze song.flac --offset 30 -d 15
    """
    from .input import FileFrameSource
    from .recognizer import ChordRecognizer

    _configure_logging(verbose)
    config = _build_config(sample_rate, frame_size)

    if not input_file.exists():
        console.print(f"[red]Error: File not found: {input_file}[/red]")
        raise typer.Exit(1)

    try:
        source = FileFrameSource(
            input_file,
            config.sample_rate,
            config.frame_size,
            offset=offset,
            duration=duration,
        )
    except ValueError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)

    recognizer = ChordRecognizer(config)

    if not json_output:
        console.print(f"[blue]Analyzing audio file:[/blue] {input_file}")

    try:
        stats = recognizer.start(source)
    except SourceUnavailableError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)

    progression = recognizer.get_progression()

    if json_output:
        console.print_json(data={
            "input": str(input_file),
            "sample_rate": config.sample_rate,
            "frame_size": config.frame_size,
            "progression": list(progression),
            "stats": stats.to_dict(),
        })
        return

    console.print(
        f"  Frames: {stats.frames_read} read, {stats.frames_silent} silent, "
        f"{stats.frames_skipped} skipped"
    )
    _show_progression(progression)


@app.command()
def templates():
    """Show the chord templates in the order they are matched."""
    from .inference import ChordMatcher

    matcher = ChordMatcher()
    table = Table(title="Chord Templates")
    table.add_column("#", style="dim")
    table.add_column("Chord", style="cyan")
    table.add_column("Notes", style="green")

    for i, symbol in enumerate(matcher.symbols, start=1):
        notes = ", ".join(sorted(matcher.get_chord_notes(symbol)))
        table.add_row(str(i), symbol, notes)

    console.print(table)


def _show_progression(progression):
    """Print the final chord progression."""
    console.print("\n[bold]Chord Progression:[/bold]")
    if progression:
        console.print(f"  {format_progression(progression)}")
    else:
        console.print("  [dim](no chords detected)[/dim]")


def main():
    """Entry point."""
    app()


if __name__ == "__main__":
    main()
