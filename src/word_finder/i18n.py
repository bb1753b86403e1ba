"""
Internationalization (i18n) module for the word finder system.

Provides translations for all user-facing CLI messages in English (en) and
German (de).
"""

from typing import Optional


# Supported languages
SUPPORTED_LANGUAGES = frozenset({"en", "de"})
DEFAULT_LANGUAGE = "en"


# Translation dictionary with all messages
# Structure: {message_key: {language_code: translated_message}}
TRANSLATIONS: dict[str, dict[str, str]] = {
    # Loading status
    "status.idle": {
        "en": "Not loaded",
        "de": "Nicht geladen",
    },
    "status.loading": {
        "en": "Loading",
        "de": "Wird geladen",
    },
    "status.loaded": {
        "en": "Loaded from source",
        "de": "Von der Quelle geladen",
    },
    "status.cached": {
        "en": "Loaded from cache",
        "de": "Aus dem Cache geladen",
    },
    "status.error": {
        "en": "Error",
        "de": "Fehler",
    },

    # Dictionary error categories
    "error.network": {
        "en": "Network error while downloading the dictionary",
        "de": "Netzwerkfehler beim Herunterladen des Wörterbuchs",
    },
    "error.validation": {
        "en": "The dictionary content or configuration is invalid",
        "de": "Der Wörterbuchinhalt oder die Konfiguration ist ungültig",
    },
    "error.storage": {
        "en": "The local cache could not be accessed",
        "de": "Auf den lokalen Cache konnte nicht zugegriffen werden",
    },
    "error.size": {
        "en": "The dictionary exceeds the maximum size",
        "de": "Das Wörterbuch überschreitet die maximale Größe",
    },
    "error.processing": {
        "en": "Unexpected error while processing the dictionary",
        "de": "Unerwarteter Fehler bei der Verarbeitung des Wörterbuchs",
    },
    "error.retry_hint": {
        "en": "Try again later or run 'refresh'",
        "de": "Später erneut versuchen oder 'refresh' ausführen",
    },

    # CLI messages
    "cli.loading_dictionary": {
        "en": "Loading dictionary from {source}...",
        "de": "Lade Wörterbuch von {source}...",
    },
    "cli.dictionary_ready": {
        "en": "Dictionary ready: {count} words ({status})",
        "de": "Wörterbuch bereit: {count} Wörter ({status})",
    },
    "cli.load_failed": {
        "en": "Dictionary could not be loaded: {message}",
        "de": "Wörterbuch konnte nicht geladen werden: {message}",
    },
    "cli.invalid_segment": {
        "en": "Invalid segment '{value}': expected LETTERS:LENGTH",
        "de": "Ungültiges Segment '{value}': erwartet BUCHSTABEN:LÄNGE",
    },
    "cli.no_segments": {
        "en": "At least one --segment is required",
        "de": "Mindestens ein --segment ist erforderlich",
    },
    "cli.matches_found": {
        "en": "{count} matching word(s)",
        "de": "{count} passende(s) Wort/Wörter",
    },
    "cli.no_matches": {
        "en": "No matching words",
        "de": "Keine passenden Wörter",
    },
    "cli.filter_error": {
        "en": "Filter error: {message}",
        "de": "Filterfehler: {message}",
    },
    "cli.suggestion": {
        "en": "Suggestion: {suggestion}",
        "de": "Vorschlag: {suggestion}",
    },
    "cli.word_found": {
        "en": "'{word}' is in the dictionary",
        "de": "'{word}' ist im Wörterbuch",
    },
    "cli.word_not_found": {
        "en": "'{word}' is not in the dictionary",
        "de": "'{word}' ist nicht im Wörterbuch",
    },
    "cli.refreshing": {
        "en": "Refreshing dictionary...",
        "de": "Aktualisiere Wörterbuch...",
    },
    "cli.cache_cleared": {
        "en": "Dictionary cache cleared",
        "de": "Wörterbuch-Cache geleert",
    },
    "cli.cache_clear_failed": {
        "en": "Could not clear the dictionary cache: {message}",
        "de": "Wörterbuch-Cache konnte nicht geleert werden: {message}",
    },
    "cli.config_error": {
        "en": "Configuration error: {message}",
        "de": "Konfigurationsfehler: {message}",
    },

    # Statistics
    "stats.title": {
        "en": "Dictionary statistics",
        "de": "Wörterbuch-Statistik",
    },
    "stats.word_count": {
        "en": "Words",
        "de": "Wörter",
    },
    "stats.status": {
        "en": "Status",
        "de": "Status",
    },
    "stats.cache_size": {
        "en": "Cache size",
        "de": "Cache-Größe",
    },
    "stats.last_loaded": {
        "en": "Last loaded",
        "de": "Zuletzt geladen",
    },
    "stats.source": {
        "en": "Source",
        "de": "Quelle",
    },
    "stats.never": {
        "en": "never",
        "de": "nie",
    },

    # Configuration management
    "config.not_found": {
        "en": "No configuration found at: {path}",
        "de": "Keine Konfiguration gefunden unter: {path}",
    },
    "config.init_hint": {
        "en": "Use 'config init' to create a default configuration.",
        "de": "Mit 'config init' eine Standardkonfiguration anlegen.",
    },
    "config.exists": {
        "en": "Configuration already exists at: {path}",
        "de": "Konfiguration existiert bereits unter: {path}",
    },
    "config.force_hint": {
        "en": "Use --force to overwrite.",
        "de": "Mit --force überschreiben.",
    },
    "config.created": {
        "en": "Configuration created at: {path}",
        "de": "Konfiguration angelegt unter: {path}",
    },
    "config.valid": {
        "en": "Configuration at {path} is valid.",
        "de": "Konfiguration unter {path} ist gültig.",
    },
    "config.invalid": {
        "en": "Configuration at {path} is invalid:",
        "de": "Konfiguration unter {path} ist ungültig:",
    },
}


def get_message(
    key: str,
    language: Optional[str] = None,
    **kwargs,
) -> str:
    """
    Get a translated message by key.

    Args:
        key: The message key (e.g., 'cli.word_found')
        language: Language code ('en' or 'de'). Defaults to DEFAULT_LANGUAGE.
        **kwargs: Format arguments for the message template

    Returns:
        The translated and formatted message string.
        If the key is not found, returns the key itself.
        If the language is not found, falls back to DEFAULT_LANGUAGE.

    Examples:
        >>> get_message('status.cached', 'en')
        'Loaded from cache'
        >>> get_message('cli.word_found', 'de', word='kat')
        "'kat' ist im Wörterbuch"
    """
    if language is None or language not in SUPPORTED_LANGUAGES:
        language = DEFAULT_LANGUAGE

    translations = TRANSLATIONS.get(key)
    if translations is None:
        return key

    message = translations.get(language) or translations.get(DEFAULT_LANGUAGE)
    if message is None:
        return key

    if kwargs:
        try:
            message = message.format(**kwargs)
        except KeyError:
            # Missing placeholder values leave the template unformatted
            pass

    return message


def get_all_message_keys() -> set[str]:
    """Get all available message keys."""
    return set(TRANSLATIONS.keys())


def has_translation(key: str, language: str) -> bool:
    """
    Check if a translation exists for a key and language.

    Args:
        key: The message key
        language: The language code

    Returns:
        True if translation exists, False otherwise.
    """
    translations = TRANSLATIONS.get(key)
    if translations is None:
        return False
    return language in translations


def get_missing_translations(language: str) -> set[str]:
    """Get all message keys that have no translation for a language."""
    return {
        key for key, translations in TRANSLATIONS.items()
        if language not in translations
    }


def validate_translations() -> dict[str, set[str]]:
    """
    Validate that all languages have all translations.

    Returns:
        Dictionary mapping language codes to sets of missing message keys.
        Empty sets indicate complete translations.
    """
    return {
        language: get_missing_translations(language)
        for language in SUPPORTED_LANGUAGES
    }
