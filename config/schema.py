from enum import Enum

from pydantic import BaseModel, Field, field_validator


class LogLevel(str, Enum):
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"


# ─── DATEIEN ───

class StorageConfig(BaseModel):
    """Ablageort der Profil- und Tagesplan-Dateien."""
    # Basisverzeichnis für alle Datendateien
    data_dir: str = Field("data_store",
        description="Basisverzeichnis der Datendateien")
    # Profil-Datei relativ zu data_dir
    profile_file: str = Field("profiles/scheduleEditor.profile.json",
        description="Profil-Datei (relativ zu data_dir)")
    # Tagesplan-Datei relativ zu data_dir
    today_file: str = Field("scheduleEditor.todayConfig.json",
        description="Tagesplan-Datei (relativ zu data_dir)")

    @field_validator("profile_file", "today_file")
    @classmethod
    def relative_only(cls, v: str) -> str:
        if v.startswith("/") or ".." in v.split("/"):
            raise ValueError(f"Pfad muss relativ zu data_dir sein: {v}")
        return v


# ─── SPEICHERN ───

class SaveConfig(BaseModel):
    """Verhalten beim Zurückschreiben von Änderungen."""
    # Wartezeit, in der mehrere Änderungen zu einem Schreibvorgang zusammengefasst werden
    debounce_ms: int = Field(300, ge=0, le=10_000,
        description="Entprellzeit für Profil-Speicherungen (ms)")
    # Anzahl Schreibversuche, bevor aufgegeben wird
    max_retries: int = Field(5, ge=1, le=20,
        description="Maximale Schreibversuche")


# ─── GESAMT-CONFIG ───

class AppConfig(BaseModel):
    """Gesamtkonfiguration der Anwendung."""
    # Anzeigename (z.B. Schule oder Klasse)
    display_name: str = Field("Mein Stundenplan",
        description="Anzeigename")
    # Log-Level der Konsolenausgabe
    log_level: LogLevel = Field(LogLevel.INFO)
    # Dateiablage
    storage: StorageConfig = Field(default_factory=StorageConfig)
    # Speicherverhalten
    save: SaveConfig = Field(default_factory=SaveConfig)
