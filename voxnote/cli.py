"""Command-line interface for voxnote.

Provides commands for:
- transcribe: Replay an audio file through the live engine and record it
- listen: Turn live microphone input into notes
- compact: Remove long silences from a recorded session
- export: Write a session to MIDI
- chord: Show how a note is snapped and harmonized
- scales: List the available scales
"""

import logging
from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from .core import (
    DEFAULT_FRAME_SIZE,
    GAP_MAX,
    EngineConfig,
    RecordedNote,
    ScaleType,
    Session,
    midi_to_note_name,
    note_name_to_midi,
)
from .core.constants import DEFAULT_GLIDE, DEFAULT_MIC_BOOST, DEFAULT_TEMPO

app = typer.Typer(
    name="voxnote",
    help="Live voice and instrument to note transcription",
    rich_markup_mode="markdown",
)
console = Console()

# Gate thresholds on the boosted input RMS
SENSITIVITY_PRESETS = {
    "low": 0.03,
    "medium": 0.015,
    "high": 0.008,
}


def _setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )


def _build_config(
    sensitivity: str,
    boost: float,
    scale: ScaleType,
    harmonize: bool,
    bend: bool,
    glide: float,
) -> EngineConfig:
    """Build an EngineConfig from CLI options, exiting on bad values."""
    sensitivity_lower = sensitivity.lower()
    if sensitivity_lower not in SENSITIVITY_PRESETS:
        console.print(f"[yellow]Unknown sensitivity '{sensitivity}', using 'medium'[/yellow]")
        sensitivity_lower = "medium"

    try:
        return EngineConfig(
            sensitivity=SENSITIVITY_PRESETS[sensitivity_lower],
            mic_boost=boost,
            scale=scale,
            harmonize=harmonize,
            bend=bend,
            glide=glide,
        )
    except ValueError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)


def _load_session(session_file: Path) -> Session:
    try:
        return Session.load(session_file)
    except FileNotFoundError:
        console.print(f"[red]Error: File not found: {session_file}[/red]")
        raise typer.Exit(1)
    except (ValueError, KeyError) as e:
        console.print(f"[red]Error: Invalid session file {session_file}: {e}[/red]")
        raise typer.Exit(1)


@app.command()
def transcribe(
    input_file: Path = typer.Argument(..., help="Input audio file, WAV, MP3, FLAC"),
    output: Optional[Path] = typer.Option(
        None, "-o", "--output", help="Output session JSON path"
    ),
    midi: Optional[Path] = typer.Option(
        None, "--midi", "-m", help="Also export the session to this MIDI file"
    ),
    scale: ScaleType = typer.Option(
        ScaleType.MAJOR, "--scale", case_sensitive=False, help="Scale to snap notes to"
    ),
    sensitivity: str = typer.Option(
        "medium", "--sensitivity", "-s", help="Input gate sensitivity: low/medium/high"
    ),
    boost: float = typer.Option(
        DEFAULT_MIC_BOOST, "--boost", help="Input gain applied before gating"
    ),
    harmonize: bool = typer.Option(
        True, "--harmonize/--no-harmonize", help="Add scale chords to each note"
    ),
    bend: bool = typer.Option(True, "--bend/--no-bend", help="Follow pitch bends"),
    glide: float = typer.Option(DEFAULT_GLIDE, "--glide", help="Portamento in seconds"),
    skip_silences: bool = typer.Option(
        False, "--skip-silences", help="Compact long gaps in the exported notes"
    ),
    frame_size: int = typer.Option(
        DEFAULT_FRAME_SIZE, "--frame-size", help="Samples per analysis frame"
    ),
    bpm: float = typer.Option(DEFAULT_TEMPO, "--bpm", help="Session tempo"),
    instrument: str = typer.Option(
        "concert-grand", "--instrument", help="Instrument id stored with the session"
    ),
    json_output: bool = typer.Option(
        False, "--json", help="Output results as JSON (for scripting)"
    ),
    verbose: bool = typer.Option(False, "-v", "--verbose", help="Verbose output"),
):
    """Replay an audio file through the live engine and record the notes.

    **Examples:**

        voxnote transcribe humming.wav

        voxnote transcribe solo.wav --scale BLUES --midi solo.mid --skip-silences
    """
    from .input import AudioLoader
    from .output import MIDIExporter
    from .transcription import TranscriptionEngine

    _setup_logging(verbose)

    if not input_file.exists():
        console.print(f"[red]Error: File not found: {input_file}[/red]")
        raise typer.Exit(1)

    if output is None:
        output = input_file.with_suffix(".json")

    config = _build_config(sensitivity, boost, scale, harmonize, bend, glide)

    try:
        loader = AudioLoader(frame_size=frame_size)
        audio, sr = loader.load(str(input_file))
    except ValueError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)
    duration = loader.get_duration(audio, sr)

    if not json_output:
        console.print(f"[blue]Loading audio:[/blue] {input_file}")
        console.print(f"  Duration: {duration:.2f}s, Sample rate: {sr}Hz")
        console.print("[blue]Transcribing...[/blue]")

    engine = TranscriptionEngine(config)
    engine.start_recording(now=0.0)
    ticks = engine.run(loader.frames(audio, sr))
    notes = engine.stop_recording(now=max(duration, frame_size / sr))

    session = Session.create(notes, instrument_id=instrument, bpm=bpm, scale=scale)
    session.save(output)
    playback = session.playback_notes(skip_silences=skip_silences)

    if midi is not None:
        MIDIExporter(tempo=bpm).export_session(
            session, str(midi), skip_silences=skip_silences, harmonize=harmonize
        )

    if json_output:
        result = {
            "input": str(input_file),
            "output": str(output),
            "midi": str(midi) if midi else None,
            "frames": ticks,
            "duration": duration,
            "notes_count": len(notes),
            "notes": [n.to_dict() for n in playback],
        }
        console.print_json(data=result)
        return

    console.print(f"  Detected {len(notes)} notes in {ticks} frames")
    if playback:
        _show_notes_table(playback)
    console.print(f"[blue]Session saved to:[/blue] {output}")
    if midi is not None:
        console.print(f"[blue]MIDI exported to:[/blue] {midi}")
    console.print("[green]Transcription complete![/green]")


@app.command()
def listen(
    record: bool = typer.Option(False, "--record", "-r", help="Record a session"),
    output: Optional[Path] = typer.Option(
        None, "-o", "--output", help="Session JSON path (with --record)"
    ),
    device: Optional[int] = typer.Option(None, "--device", "-d", help="Input device index"),
    scale: ScaleType = typer.Option(
        ScaleType.MAJOR, "--scale", case_sensitive=False, help="Scale to snap notes to"
    ),
    sensitivity: str = typer.Option(
        "medium", "--sensitivity", "-s", help="Input gate sensitivity: low/medium/high"
    ),
    boost: float = typer.Option(DEFAULT_MIC_BOOST, "--boost", help="Input gain"),
    harmonize: bool = typer.Option(True, "--harmonize/--no-harmonize"),
    bend: bool = typer.Option(True, "--bend/--no-bend"),
    glide: float = typer.Option(DEFAULT_GLIDE, "--glide"),
    frame_size: int = typer.Option(DEFAULT_FRAME_SIZE, "--frame-size"),
    verbose: bool = typer.Option(False, "-v", "--verbose", help="Show every event"),
):
    """Listen to the microphone and print notes as they are detected.

    Press Ctrl+C to stop. With --record the performance is saved as a session.
    """
    from .input import MicrophoneSource
    from .transcription import EventType, TranscriptionEngine, WorkstationMode

    _setup_logging(verbose)
    config = _build_config(sensitivity, boost, scale, harmonize, bend, glide)

    engine = TranscriptionEngine(config)

    def print_event(event):
        if event.type is EventType.NOTE_ON:
            chord = f" [magenta]{event.chord}[/magenta]" if event.chord else ""
            console.print(f"{event.time:10.3f}  [cyan]{event.note}[/cyan]{chord}")
        elif event.type is EventType.RELEASE:
            console.print(f"{event.time:10.3f}  [dim]release[/dim]")
        elif verbose:
            console.print(f"{event.time:10.3f}  [dim]detune {event.cents:+.1f}c[/dim]")

    engine.add_listener(print_event)

    try:
        with MicrophoneSource(frame_size=frame_size, device=device) as source:
            if record:
                engine.start_recording()
            else:
                engine.set_mode(WorkstationMode.MIDI)

            console.print("[blue]Listening...[/blue] Press Ctrl+C to stop")
            try:
                engine.run(source)
            except KeyboardInterrupt:
                pass
    except RuntimeError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)

    notes: List[RecordedNote] = engine.stop_recording() if record else []
    engine.release()

    if record:
        session = Session.create(notes, scale=scale)
        path = output or Path(f"session_{session.id}.json")
        session.save(path)
        if notes:
            _show_notes_table(notes)
        console.print(f"[green]Saved {len(notes)} notes to {path}[/green]")


@app.command()
def compact(
    session_file: Path = typer.Argument(..., help="Session JSON file"),
    output: Optional[Path] = typer.Option(
        None, "-o", "--output", help="Write the compacted session here"
    ),
    max_gap: float = typer.Option(GAP_MAX, "--max-gap", help="Longest silence to keep"),
):
    """Remove long silences between the notes of a session."""
    from .processing import SilenceCompactor

    session = _load_session(session_file)
    try:
        compactor = SilenceCompactor(max_gap=max_gap)
    except ValueError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)

    notes, stats = compactor.compact(session.notes, return_stats=True)
    session.notes = notes

    console.print(
        f"  Clamped {stats.gaps_clamped} gaps: "
        f"{stats.original_span:.2f}s -> {stats.compacted_span:.2f}s"
    )
    if notes:
        _show_notes_table(notes)
    if output is not None:
        session.save(output)
        console.print(f"[blue]Session saved to:[/blue] {output}")


@app.command()
def export(
    session_file: Path = typer.Argument(..., help="Session JSON file"),
    output: Path = typer.Option(..., "-o", "--output", help="Output MIDI file path"),
    skip_silences: bool = typer.Option(
        False, "--skip-silences", help="Compact long gaps before export"
    ),
    harmonize: bool = typer.Option(
        True, "--harmonize/--no-harmonize", help="Add a harmony track"
    ),
):
    """Export a recorded session to MIDI."""
    from .output import MIDIExporter

    session = _load_session(session_file)
    MIDIExporter(tempo=session.bpm).export_session(
        session, str(output), skip_silences=skip_silences, harmonize=harmonize
    )
    console.print(f"[green]Exported {len(session.notes)} notes to {output}[/green]")


@app.command()
def chord(
    note: str = typer.Argument(..., help="Note name, e.g. C4 or F#3"),
    scale: ScaleType = typer.Option(
        ScaleType.MAJOR, "--scale", case_sensitive=False, help="Scale context"
    ),
):
    """Show the scale note and chord the harmonizer plays for a note."""
    from .inference import chord_for, snap_to_scale

    try:
        midi = note_name_to_midi(note)
        snapped = snap_to_scale(midi, scale)
        triad = chord_for(snapped, scale)
        names = triad.note_names
    except ValueError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)

    console.print(f"  Input: {note} ({midi})")
    console.print(f"  Snapped to {scale.value}: {midi_to_note_name(snapped)} ({snapped})")
    console.print(f"  Chord: [magenta]{triad.name}[/magenta] {' '.join(names)}")


@app.command()
def scales():
    """List the scales and their pitch classes."""
    from .core import PITCH_NAMES

    table = Table(title="Scales")
    table.add_column("Scale", style="cyan")
    table.add_column("Pitch classes", style="green")

    for scale_type in ScaleType:
        table.add_row(
            scale_type.value,
            " ".join(PITCH_NAMES[o] for o in scale_type.offsets),
        )

    console.print(table)


def _show_notes_table(notes):
    """Display notes in a table."""
    table = Table(title="Recorded Notes")
    table.add_column("Note", style="cyan")
    table.add_column("Time (s)", style="green")
    table.add_column("Duration (s)", style="yellow")

    for note in notes:
        table.add_row(
            note.note_name,
            f"{note.time:.3f}",
            f"{note.duration:.3f}",
        )

    console.print(table)


def main():
    """Entry point."""
    app()


if __name__ == "__main__":
    main()
