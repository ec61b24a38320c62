# =========================
# CANALES
# =========================
NUM_CHANNELS = 5

# =========================
# CALIBRACIÓN POR DEFECTO (ADC crudo, pulgar → meñique)
# =========================
DEFAULT_BASELINES = (2700, 1650, 1850, 2110, 2125)   # dedos rectos
DEFAULT_MAXBENDS  = (2200, 1300, 1480, 1640, 1720)   # dedos doblados

DEGENERATE_RANGE = 1.0      # |baseline - maxbend| por debajo de esto → canal en 0
RAW_THRESHOLD = 2.0         # cualquier canal > 2 → muestra cruda (heurística ajustable)

# =========================
# ALFABETO
# =========================
SUPPORTED_LETTERS = "ABCDEFIKOSTUVWXY"   # 16 letras (sin G H J L M N P Q R Z)

# Patrones normalizados (0 = recto, 1 = doblado) del simulador de escritorio.
# El modelo se entrenó con datos derivados de estos valores.
ASL_PATTERNS = {
    "A": (0.00, 1.00, 0.90, 1.00, 1.00),
    "B": (0.74, 0.05, 0.06, 0.10, 0.13),
    "C": (0.00, 1.00, 0.85, 0.98, 0.86),
    "D": (0.09, 0.05, 0.85, 1.00, 0.79),
    "E": (0.88, 1.00, 0.97, 1.00, 0.97),
    "F": (0.04, 0.52, 0.11, 0.26, 0.28),
    "I": (0.83, 0.99, 0.85, 0.98, 0.20),
    "K": (0.04, 0.53, 0.21, 0.87, 0.50),
    "O": (0.02, 0.91, 0.81, 0.98, 0.78),
    "S": (0.57, 0.92, 0.87, 1.00, 0.96),
    "T": (0.07, 0.88, 0.88, 1.00, 1.00),
    "V": (0.55, 0.31, 0.19, 0.94, 0.81),
    "W": (0.72, 0.09, 0.03, 0.15, 0.90),
    "X": (0.48, 0.33, 0.77, 0.92, 0.91),
    "Y": (0.01, 0.98, 0.91, 0.95, 0.03),
}

# =========================
# HÁPTICA
# =========================
HAPTIC_SUCCESS_CONFIDENCE = 0.8
HAPTIC_WARNING_CONFIDENCE = 0.6
