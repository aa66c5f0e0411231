"""Internationalization (i18n) module for Tweak Launcher.

Supports English (default) and German.
"""

# Supported languages
LANGUAGES = {
    "en": "English",
    "de": "Deutsch",
}

# Default language
DEFAULT_LANGUAGE = "en"

# Current language (module-level state)
_current_language = DEFAULT_LANGUAGE


def set_language(lang: str) -> None:
    """Set the current language."""
    global _current_language
    if lang in LANGUAGES:
        _current_language = lang


def get_language() -> str:
    """Get the current language code."""
    return _current_language


def tr(key: str) -> str:
    """Translate a key to the current language.

    Returns the key itself if no translation is found.
    """
    translations = TRANSLATIONS.get(_current_language, TRANSLATIONS[DEFAULT_LANGUAGE])
    return translations.get(key, TRANSLATIONS[DEFAULT_LANGUAGE].get(key, key))


# Translation dictionaries
TRANSLATIONS = {
    "en": {
        # Main window
        "window_title": "Tweak Launcher",
        "refresh_tweaks": "Refresh Tweaks",
        "target": "Target:",
        "no_target": "None selected",
        "select_target": "Select Target",
        "launch_target": "Launch Target",
        "stop_target": "Stop",
        "launcher_log": "Launcher Log:",
        "target_output": "Server Output:",
        "no_tweaks": "No tweaks found",
        "select_target_title": "Select target application",

        # Launcher log
        "list_failed": "Failed to list patches: {error}",
        "no_target_selected": "No target selected.",
        "already_running": "Target is already running (pid {pid}).",
        "no_enabled_tweaks": "No enabled tweaks to inject.",
        "injecting": "Injecting dylibs: {libraries}",
        "launched": "Launched target at {path}",
        "launch_failed": "Failed to launch target: {error}",
        "target_selected": "Target set to {path}",
        "resolve_failed": "Executable not found: {error}",
        "target_stopped": "Sent stop signal to target (pid {pid}).",
        "target_not_running": "Target is not running.",
        "target_exited": "Target exited with code {code}.",
    },
    "de": {
        # Hauptfenster
        "window_title": "Tweak Launcher",
        "refresh_tweaks": "Tweaks aktualisieren",
        "target": "Ziel:",
        "no_target": "Nichts ausgewählt",
        "select_target": "Ziel auswählen",
        "launch_target": "Ziel starten",
        "stop_target": "Stoppen",
        "launcher_log": "Launcher-Protokoll:",
        "target_output": "Server-Ausgabe:",
        "no_tweaks": "Keine Tweaks gefunden",
        "select_target_title": "Zielanwendung auswählen",

        # Launcher-Protokoll
        "list_failed": "Patches konnten nicht gelesen werden: {error}",
        "no_target_selected": "Kein Ziel ausgewählt.",
        "already_running": "Ziel läuft bereits (PID {pid}).",
        "no_enabled_tweaks": "Keine aktivierten Tweaks zum Injizieren.",
        "injecting": "Injiziere Dylibs: {libraries}",
        "launched": "Ziel gestartet: {path}",
        "launch_failed": "Ziel konnte nicht gestartet werden: {error}",
        "target_selected": "Ziel gesetzt: {path}",
        "resolve_failed": "Programm nicht gefunden: {error}",
        "target_stopped": "Stoppsignal an Ziel gesendet (PID {pid}).",
        "target_not_running": "Ziel läuft nicht.",
        "target_exited": "Ziel beendet mit Code {code}.",
    },
}
