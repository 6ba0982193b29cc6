"""Textos de la interfaz por idioma."""

LANGUAGES = ("tr", "en")
DEFAULT_LANGUAGE = "en"

TRANSLATIONS = {
    "tr": {
        "app_name": "Hesap Makinesi",
        "close": "Kapat",
        "error": "Hata",
        "history": "Geçmiş",
        "history_title": "Son İşlemler",
        "clear_all": "Tümünü Temizle",
        "no_records": "Kayıt Bulunamadı",
        "confirm_delete_title": "Emin misiniz?",
        "confirm_delete_desc": "Tüm işlem geçmişi kalıcı olarak silinecek.",
        "settings": "Ayarlar",
        "dark_mode": "Koyu Mod",
        "language": "Dil",
        "num_btn_color": "Sayı Tuşu Rengi",
        "scientific": "Bilimsel",
        "standard": "Standart",
    },
    "en": {
        "app_name": "Calculator",
        "close": "Close",
        "error": "Error",
        "history": "History",
        "history_title": "Recent Calculations",
        "clear_all": "Clear All",
        "no_records": "No Records Found",
        "confirm_delete_title": "Are you sure?",
        "confirm_delete_desc": "All calculation history will be permanently deleted.",
        "settings": "Settings",
        "dark_mode": "Dark Mode",
        "language": "Language",
        "num_btn_color": "Number Button Color",
        "scientific": "Scientific",
        "standard": "Standard",
    },
}


def strings_for(language: str) -> dict:
    """Textos del idioma pedido; cae al idioma por defecto si no existe."""
    return TRANSLATIONS.get(language, TRANSLATIONS[DEFAULT_LANGUAGE])
