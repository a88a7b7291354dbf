"""Global constants for chordstream."""

# Pitch-class labels, indexed by semitone distance from A
PITCH_NAMES = ["A", "A#", "B", "C", "C#", "D", "D#", "E", "F", "F#", "G", "G#"]

# Chord symbol reported when no template matches
UNKNOWN_CHORD = "Unknown"

# Audio processing defaults
DEFAULT_SR = 44100
DEFAULT_FRAME_SIZE = 4096
CONCERT_A = 440.0

# Frame analysis defaults
DEFAULT_SIGNAL_SCALE = 1000.0
DEFAULT_MIN_SIGNAL_STRENGTH = 40.0
DEFAULT_PEAK_THRESHOLD_MULTIPLIER = 3.0
DEFAULT_MIN_PEAK_MAGNITUDE = 20.0
DEFAULT_PEAK_EDGE_BINS = 5
DEFAULT_PEAK_NEIGHBORHOOD = 2
DEFAULT_MAX_PEAKS = 8

# Frequency bounds (Hz)
MIN_FREQUENCY = 20.0
MAX_FREQUENCY = 5000.0
DEFAULT_MIN_PITCH_FREQUENCY = 60.0

# Debounce
DEFAULT_STABILITY_THRESHOLD = 3

# Separator used when rendering a progression
PROGRESSION_SEPARATOR = " → "
