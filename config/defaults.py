from config.schema import AppConfig, SaveConfig, StorageConfig


def default_app_config() -> AppConfig:
    """Standard-Konfiguration: Daten unter ./data_store, 300 ms Entprellung, 5 Versuche."""
    return AppConfig(
        display_name="Mein Stundenplan",
        storage=StorageConfig(),
        save=SaveConfig(debounce_ms=300, max_retries=5),
    )


# ─── KLINGELZEITEN ───
# Standard-Zeitraster eines typischen Gymnasiums (für das Demo-Profil).
#
# 1. Stunde  07:35 - 08:20
# 2. Stunde  08:25 - 09:10
#    ── Pause (20 min) ──
# 3. Stunde  09:30 - 10:15
# 4. Stunde  10:20 - 11:05
#    ── Pause (15 min) ──
# 5. Stunde  11:20 - 12:05
# 6. Stunde  12:10 - 12:55
#    ── Mittagspause (20 min) ──
# 7. Stunde  13:15 - 14:00

BELL_SCHEDULE: list[tuple[str, str]] = [
    ("07:35", "08:20"),
    ("08:25", "09:10"),
    ("09:30", "10:15"),
    ("10:20", "11:05"),
    ("11:20", "12:05"),
    ("12:10", "12:55"),
    ("13:15", "14:00"),
]

# Pausen: (nach Stunde, Beginn, Ende, Name, Kurzname)
PAUSES: list[tuple[int, str, str, str, str]] = [
    (2, "09:10", "09:30", "Pause", "P"),
    (4, "11:05", "11:20", "Pause", "P"),
    (6, "12:55", "13:15", "Mittagspause", "MP"),
]

# Trennlinie zwischen Vormittag und Nachmittag (Beginn Mittagspause)
DIVIDING_LINE_AT = "12:55"


# ─── FÄCHER ───
# Fach-ID → Anzeigedaten (Name, Kurzname, Lehrkraft)

SUBJECT_METADATA: dict[str, dict] = {
    "de": {"name": "Deutsch",     "short": "De", "teacher": "Müller"},
    "ma": {"name": "Mathematik",  "short": "Ma", "teacher": "Schmidt"},
    "en": {"name": "Englisch",    "short": "En", "teacher": "Weber"},
    "bi": {"name": "Biologie",    "short": "Bi", "teacher": "Becker"},
    "ek": {"name": "Erdkunde",    "short": "Ek", "teacher": "Becker"},
    "ge": {"name": "Geschichte",  "short": "Ge", "teacher": "Braun"},
    "ku": {"name": "Kunst",       "short": "Ku", "teacher": "Koch"},
    "mu": {"name": "Musik",       "short": "Mu", "teacher": "Koch"},
    "re": {"name": "Religion",    "short": "Re", "teacher": "Wolf"},
    "sp": {"name": "Sport",       "short": "Sp", "teacher": "Wagner"},
    "ph": {"name": "Physik",      "short": "Ph", "teacher": "Schmidt"},
    "la": {"name": "Latein",      "short": "La", "teacher": "Braun"},
}

# Wochentag → Fach-IDs der Stunden 1..7 (A-Woche). "" = Standard-Fach des Rasters.
WEEK_A: dict[int, list[str]] = {
    0: ["de", "de", "ma", "en", "bi", "ku", "sp"],
    1: ["ma", "ma", "en", "ge", "mu", "re", ""],
    2: ["en", "de", "ph", "ph", "ek", "la", ""],
    3: ["la", "ma", "de", "en", "sp", "sp", ""],
    4: ["ge", "re", "ma", "de", "en", "", ""],
}

# B-Woche: wie A-Woche, aber mit getauschten Nebenfächern
WEEK_B: dict[int, list[str]] = {
    0: ["de", "de", "ma", "en", "ek", "mu", "sp"],
    1: ["ma", "ma", "en", "bi", "ku", "re", ""],
    2: ["en", "de", "ph", "ph", "ge", "la", ""],
    3: ["la", "ma", "de", "en", "sp", "sp", ""],
    4: ["ek", "re", "ma", "de", "en", "", ""],
}

# Standard-Fach der Stunde im Zeitraster (Stundennummer → Fach-ID), greift bei ""
LESSON_DEFAULT_SUBJECTS: dict[int, str] = {
    6: "ku",
    7: "sp",
}
