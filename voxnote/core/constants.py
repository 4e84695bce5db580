"""Global constants for voxnote."""

# Pitch names
PITCH_NAMES = ["C", "C#", "D", "D#", "E", "F", "F#", "G", "G#", "A", "A#", "B"]

# Reference pitch
A4_FREQ = 440.0
A4_MIDI = 69

# Audio processing defaults
DEFAULT_SR = 44100
DEFAULT_FRAME_SIZE = 2048
POLL_INTERVAL = 0.03  # seconds between engine ticks

# Input gate defaults
DEFAULT_SENSITIVITY = 0.015  # boosted RMS above which the gate opens
DEFAULT_MIC_BOOST = 3.0

# Estimator defaults
SILENCE_RMS = 0.01
CENTER_CLIP = 0.2
MIN_PEAK_RATIO = 0.3
PEAK_TOLERANCE = 0.9  # earlier peaks this close to the best win (octave errors)

# Segmentation defaults
MIN_NOTE_DURATION = 0.05  # seconds
DEFAULT_GLIDE = 0.05  # seconds of portamento, 0 = hard retrigger

# Playback defaults
GAP_MAX = 0.3  # longest silence kept by compaction
DEFAULT_TEMPO = 120.0

# MIDI ranges
MIDI_MIN = 0
MIDI_MAX = 127
